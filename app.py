import os
import logging
from flask import Flask

from config import ServerConfig
from file_routes import files_bp

# Configure logging
logger = logging.getLogger(__name__)


def create_app(config: ServerConfig) -> Flask:
    """Create a Flask app serving ``config.root_dir`` on every path.

    Each call returns a fresh application, so several servers can run in one
    process with different roots.
    """
    # The blueprint owns every path, so the built-in /static route is disabled
    app = Flask(__name__, static_folder=None)
    # Relative roots resolve against the working directory at startup
    app.config["ROOT_DIR"] = os.path.abspath(config.root_dir)
    app.config["SERVER_CONFIG"] = config
    app.register_blueprint(files_bp)

    if not os.path.isdir(app.config["ROOT_DIR"]):
        logger.warning(f"Root directory {app.config['ROOT_DIR']} does not exist yet; requests will return 404")

    return app
