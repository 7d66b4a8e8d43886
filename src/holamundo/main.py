# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Entry point that validates the configuration and starts the gunicorn web server."""

import argparse
import logging
import os
import sys

from holamundo.app_state import AppState
from holamundo.constants import SERVICE_NAME
from holamundo.exceptions import ConfigInvalidError
from holamundo.webserver import GunicornWebserver

logger = logging.getLogger(__name__)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    """Parse the command line arguments.

    Args:
        argv: command line arguments, defaults to sys.argv.

    Returns:
        The parsed arguments.
    """
    parser = argparse.ArgumentParser(prog=SERVICE_NAME, description="Serve the greeting.")
    parser.add_argument(
        "--check",
        action="store_true",
        help="validate the configuration and exit without serving",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level, default INFO",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Validate the configuration and replace the process with the gunicorn web server.

    Args:
        argv: command line arguments, defaults to sys.argv.

    Returns:
        The process exit code. Only returns when not serving.
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app_state = AppState.from_environ(os.environ)
        webserver = GunicornWebserver(app_state)
        webserver.update_config(app_state.flask_environment())
    except ConfigInvalidError as exc:
        logger.error("%s", exc.msg)
        return 1
    if args.check:
        logger.info("configuration is valid")
        return 0
    command = webserver.command
    logger.info("starting %s on port %s", SERVICE_NAME, app_state.port)
    os.execvpe(command[0], command, {**os.environ, **app_state.flask_environment()})
    return 0  # pragma: nocover


if __name__ == "__main__":  # pragma: nocover
    sys.exit(main())
