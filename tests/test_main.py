import logging

import pytest

import main as main_module


def test_invalid_port_is_fatal(monkeypatch, caplog):
    monkeypatch.delenv("PORT", raising=False)

    with caplog.at_level(logging.CRITICAL, logger="main"):
        with pytest.raises(SystemExit) as excinfo:
            main_module.main(["--port", "not-a-port"])

    assert excinfo.value.code == 1
    assert "Invalid port" in caplog.text


def test_main_runs_resolved_config(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(main_module, "run", calls.append)
    monkeypatch.setenv("PORT", "9090")

    main_module.main([str(tmp_path)])

    assert len(calls) == 1
    config = calls[0]
    assert config.root_dir == str(tmp_path)
    assert config.port == 9090
    assert config.port_source == "env"


def test_request_logging_is_silenced(monkeypatch):
    monkeypatch.setattr(main_module, "run", lambda config: None)
    monkeypatch.delenv("PORT", raising=False)

    main_module.main([])

    assert logging.getLogger("werkzeug").level == logging.WARNING
