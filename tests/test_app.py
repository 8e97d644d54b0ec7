import os

from app import create_app
from config import ServerConfig


def test_root_is_resolved_against_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    app = create_app(ServerConfig(root_dir="./public", port=8080))

    assert os.path.isabs(app.config["ROOT_DIR"])
    assert os.path.realpath(app.config["ROOT_DIR"]) == os.path.realpath(tmp_path / "public")


def test_each_app_has_its_own_root(tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    for root in (first, second):
        root.mkdir()
        (root / "name.txt").write_text(root.name)

    apps = [create_app(ServerConfig(root_dir=str(root), port=0)) for root in (first, second)]

    assert [app.test_client().get("/name.txt").data for app in apps] == [b"one", b"two"]


def test_static_route_is_not_registered(root_dir):
    (root_dir / "static").mkdir()
    (root_dir / "static" / "style.css").write_text("body {}")
    app = create_app(ServerConfig(root_dir=str(root_dir), port=0))

    response = app.test_client().get("/static/style.css")

    assert response.status_code == 200
    assert response.data == b"body {}"
    assert "static" not in app.view_functions
