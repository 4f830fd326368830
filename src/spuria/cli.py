"""Command-line interface for the spuria gateway.

Flags override values from the YAML config file and the environment.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Every gateway flag defaults to None so that only flags given on the
    command line override the config file.
    """
    parser = argparse.ArgumentParser(
        prog="spuria",
        description="Run pre-registered shell commands on HTTP GET requests",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/spuria.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("--port", type=int, default=None, help="port to listen on (default: 4870)")
    parser.add_argument("--ip", default=None, help="which ip to listen on (default: 127.0.0.1)")
    parser.add_argument(
        "--allowedips", default=None,
        help='which ips to respond to in a comma-sep list, e.g. "1.1.1.1,3.3.3.3" '
             '(set to "" to disable, default: 127.0.0.1)',
    )
    parser.add_argument(
        "--routes", default=None,
        help="bash commands file to load, e.g. ./routes.csv",
    )
    parser.add_argument(
        "--log", default=None,
        help="where to log to, e.g. ./spuria.log (default: stdout)",
    )
    parser.add_argument(
        "--cmd", default=None,
        help="static command to execute for /do; if set no routes file is loaded",
    )
    parser.add_argument(
        "--returnresult", action="store_const", const=True, default=None,
        help="return the command output in the http response instead of OK/ERR",
    )
    parser.add_argument(
        "--maxratelimit", type=int, default=None,
        help="requests allowed per URL per minute, 0 = infinite (default: 10)",
    )
    parser.add_argument(
        "--replaceparam", action="store_const", const=True, default=None,
        help="replace GET parameters starting with $ inside the bash command",
    )
    parser.add_argument(
        "--replaceregex", default=None,
        help="regex for allowed GET parameter values (default: ^[ a-zA-Z0-9/-]*$)",
    )
    parser.add_argument(
        "--nostop", action="store_const", const=True, default=None,
        help="do not stop when a GET parameter fails validation, skip it instead",
    )
    return parser.parse_args(argv)


def overrides_from_args(args: argparse.Namespace) -> dict[str, dict[str, Any]]:
    """Map given CLI flags onto settings sections."""
    mapping = {
        "ip": ("server", "host"),
        "port": ("server", "port"),
        "allowedips": ("access", "allowed_ips"),
        "routes": ("routes", "file"),
        "cmd": ("routes", "static_command"),
        "log": ("logging", "file"),
        "returnresult": ("dispatch", "return_result"),
        "maxratelimit": ("dispatch", "rate_limit"),
        "replaceparam": ("dispatch", "replace_params"),
        "replaceregex": ("dispatch", "replace_regex"),
        "nostop": ("dispatch", "continue_on_error"),
    }
    overrides: dict[str, dict[str, Any]] = {}
    for flag, (section, field) in mapping.items():
        value = getattr(args, flag)
        if value is not None:
            overrides.setdefault(section, {})[field] = value
    if args.verbose:
        overrides.setdefault("logging", {})["level"] = "DEBUG"
    return overrides


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the spuria CLI."""
    start = time.monotonic()
    args = parse_args(argv)

    from spuria.config.settings import load_settings
    from spuria.errors import ConfigurationError
    from spuria.gateway.dispatcher import Dispatcher
    from spuria.routes import load_routes
    from spuria.utils.logging import setup_logging

    try:
        settings = load_settings(args.config, overrides_from_args(args))
        setup_logging(settings.logging)
        routes = load_routes(settings.routes)
    except (ConfigurationError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    dispatcher = Dispatcher.from_settings(settings, routes)

    from spuria.server import serve

    logger.info(
        "Startup finished (timetaken=%.3fs ip=%s port=%d routes=%s allowed_ips=%s log=%s)",
        time.monotonic() - start,
        settings.server.host,
        settings.server.port,
        settings.routes.file or f"static {settings.routes.static_path}",
        sorted(settings.access.allowed_ips) if settings.access.whitelist_enabled else "disabled",
        settings.logging.file,
    )
    print(f"Listening on {settings.server.host}:{settings.server.port}")
    serve(settings, dispatcher)


if __name__ == "__main__":
    main()
