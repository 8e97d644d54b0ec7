import pytest

from app import create_app
from config import ServerConfig


@pytest.fixture
def root_dir(tmp_path):
    """An empty document root with a sibling file that must never be served."""
    root = tmp_path / "public"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def make_client():
    def _make_client(root):
        app = create_app(ServerConfig(root_dir=str(root), port=0))
        app.testing = True
        return app.test_client()
    return _make_client


@pytest.fixture
def client(root_dir, make_client):
    return make_client(root_dir)
