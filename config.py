"""
Server Configuration

This module resolves the static file server configuration from presets,
command-line arguments and the environment.
"""
import os
import logging
import argparse
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
PORT_ENV_VAR = "PORT"


class ConfigError(Exception):
    """Raised when the server configuration cannot be resolved."""


class Preset(BaseModel):
    """Default root directory and port for one deployment layout."""
    model_config = ConfigDict(frozen=True)

    root_dir: str
    port: int


PRESETS: Dict[str, Preset] = {
    "public": Preset(root_dir="./public", port=8080),
    "parent": Preset(root_dir="../public", port=8080),
    "tor": Preset(root_dir=".", port=80),
}
DEFAULT_PRESET = "public"


class ServerConfig(BaseModel):
    """Immutable configuration for a static file server process."""
    model_config = ConfigDict(frozen=True)

    root_dir: str = Field(..., description="Directory served as the document root")
    port: int = Field(..., ge=0, le=65535, description="TCP port to bind; 0 picks a free port")
    host: str = Field(DEFAULT_HOST, description="Interface to bind, all interfaces by default")
    port_source: Literal["literal", "arg", "env"] = Field(
        "literal", description="Where the port value came from"
    )
    preset: str = Field(DEFAULT_PRESET, description="Preset the defaults were taken from")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve a directory over HTTP.")
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to serve (default: taken from the preset)",
    )
    parser.add_argument(
        "--port",
        default=None,
        help=f"Port to listen on (default: ${PORT_ENV_VAR}, then the preset's port)",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Host to bind the server to (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=DEFAULT_PRESET,
        help=f"Default directory and port layout (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def resolve_config(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """Build a ServerConfig from command-line arguments and the environment.

    The port is taken from ``--port`` first, then the ``PORT`` environment
    variable, then the preset. The root directory is not checked here: a
    missing root only shows up as 404 responses once the server is running.

    Raises:
        ConfigError: if the resolved values do not form a valid configuration
    """
    args = build_parser().parse_args(argv)
    return config_from_args(args, os.environ if environ is None else environ)


def config_from_args(args: argparse.Namespace, environ: Mapping[str, str]) -> ServerConfig:
    preset = PRESETS[args.preset]
    root_dir = args.directory if args.directory else preset.root_dir

    env_port = environ.get(PORT_ENV_VAR, "").strip()
    if args.port is not None:
        port, port_source = args.port, "arg"
    elif env_port:
        port, port_source = env_port, "env"
    else:
        port, port_source = preset.port, "literal"

    try:
        config = ServerConfig(
            root_dir=root_dir,
            port=port,
            host=args.host,
            port_source=port_source,
            preset=args.preset,
        )
    except ValidationError as e:
        logger.debug(f"Rejected configuration: {e}")
        raise ConfigError(f"Invalid port {port!r} (from {port_source})") from e

    logger.debug(f"Resolved configuration: {config}")
    return config
