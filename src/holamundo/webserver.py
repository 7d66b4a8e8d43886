# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Provide the GunicornWebserver class to represent the gunicorn server."""
import datetime
import logging
import os
import pathlib
import subprocess  # nosec B404
import sys
import typing

from holamundo.app_state import AppState
from holamundo.exceptions import ConfigInvalidError

logger = logging.getLogger(__name__)


class GunicornWebserver:
    """A class representing a Gunicorn web server.

    Attrs:
        command: the command to start the Gunicorn web server.
        config_path: the path to the Gunicorn configuration file.
    """

    def __init__(self, app_state: AppState):
        """Initialize a new instance of the GunicornWebserver class.

        Args:
            app_state: The state of the service that the GunicornWebserver instance belongs to.
        """
        self._app_state = app_state

    @property
    def config(self) -> str:
        """Generate the content of the Gunicorn configuration file based on the service state.

        Returns:
            The content of the Gunicorn configuration file.
        """
        config_entries = []
        for setting, setting_value in self._app_state.webserver_config.items():
            setting_value = typing.cast(None | int | datetime.timedelta, setting_value)
            if setting_value is None:
                continue
            setting_value = (
                setting_value
                if isinstance(setting_value, int)
                else int(setting_value.total_seconds())
            )
            config_entries.append(f"{setting} = {setting_value}")
        if self._app_state.statsd_host is not None:
            config_entries.append(f"statsd_host = {repr(self._app_state.statsd_host)}")
        new_line = "\n"
        config = f"""\
bind = ['0.0.0.0:{self._app_state.port}']
chdir = {repr(str(self._app_state.base_dir.absolute()))}
accesslog = {repr(self._app_state.access_log)}
errorlog = {repr(self._app_state.error_log)}
{new_line.join(config_entries)}"""
        return config

    @property
    def config_path(self) -> pathlib.Path:
        """Gets the path to the Gunicorn configuration file.

        Returns:
            The path to the web server configuration file.
        """
        return self._app_state.base_dir / "gunicorn.conf.py"

    @property
    def command(self) -> list[str]:
        """Get the command to start the Gunicorn web server.

        Returns:
            The command to start the Gunicorn web server.
        """
        return [
            sys.executable,
            "-m",
            "gunicorn",
            "-c",
            str(self.config_path),
            self._app_state.wsgi_app_path,
        ]

    @property
    def _check_config_command(self) -> list[str]:
        """Returns the command to check the Gunicorn configuration.

        Returns:
            The command to check the Gunicorn configuration.
        """
        return self.command + ["--check-config"]

    def update_config(self, environment: dict[str, str]) -> None:
        """Write and validate the configuration file of the web server.

        The check runs on every call since the WSGI path and the environment are not part of
        the file. A configuration that fails the check is removed.

        Args:
            environment: Environment variables used to run the application.

        Raises:
            ConfigInvalidError: if the web server configuration is not valid.
        """
        self._app_state.base_dir.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(self.config, encoding="utf-8")
        try:
            subprocess.run(  # nosec B603
                self._check_config_command,
                env={**os.environ, **environment},
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            logger.error(
                "webserver configuration check failed, stdout: %s, stderr: %s",
                exc.stdout,
                exc.stderr,
            )
            self.config_path.unlink(missing_ok=True)
            raise ConfigInvalidError(
                "Webserver configuration check failed, please review your configuration"
            ) from exc
        logger.info("gunicorn config written to %s", self.config_path)
