"""
Main application entry point

This module serves as the entry point for the static file server,
resolving the configuration and starting the HTTP server.
"""
import os
import sys
import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from config import ConfigError, build_parser, config_from_args
from server import run

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # Werkzeug logs every request at INFO
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = config_from_args(args, os.environ)
    except ConfigError as e:
        logger.critical(str(e))
        sys.exit(1)

    run(config)


if __name__ == "__main__":
    main()
