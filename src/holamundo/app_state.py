# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""This module defines the AppState class which represents the state of the greeting service."""

import datetime
import itertools
import json
import pathlib
import typing

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from holamundo.constants import (
    DEFAULT_BASE_DIR,
    DEFAULT_PORT,
    DEFAULT_WSGI_APP_PATH,
    ENV_CONFIG_PREFIX,
    WEBSERVER_ENV_PREFIX,
)
from holamundo.exceptions import ConfigInvalidError

WEBSERVER_INT_SETTINGS = ("workers", "threads", "keepalive", "timeout", "port")


class WebserverConfig(typing.TypedDict):
    """Represent the configuration values for a web server.

    Attributes:
        workers: The number of workers to use for the web server, or None if not specified.
        threads: The number of threads per worker to use for the web server,
            or None if not specified.
        keepalive: The time to wait for requests on a Keep-Alive connection,
            or None if not specified.
        timeout: The request silence timeout for the web server, or None if not specified.
    """

    workers: int | None
    threads: int | None
    keepalive: datetime.timedelta | None
    timeout: datetime.timedelta | None


class FlaskConfig(BaseModel):
    """Represent Flask builtin configuration values.

    Attrs:
        env: what environment the Flask app is running in.
        debug: whether Flask debug mode is enabled.
        secret_key: a secret key used for securely signing the session cookie.
        permanent_session_lifetime: set the cookie's expiration to this number of seconds in
            the Flask application permanent sessions.
        application_root: inform the Flask application what path it is mounted under by the
            web server.
        session_cookie_secure: set the secure attribute in the Flask application cookies.
        preferred_url_scheme: use this scheme for generating external URLs when not in a request
            context in the Flask application.
    """

    model_config = ConfigDict(extra="allow")

    env: str | None = Field(None, min_length=1)
    debug: bool | None = Field(None)
    secret_key: str | None = Field(None, min_length=1)
    permanent_session_lifetime: int | None = Field(None, gt=0)
    application_root: str | None = Field(None, min_length=1)
    session_cookie_secure: bool | None = Field(None)
    preferred_url_scheme: str | None = Field(None, pattern="(?i)^(HTTP|HTTPS)$")

    @field_validator("preferred_url_scheme")
    @classmethod
    def to_upper(cls, value: str | None) -> str | None:
        """Convert the string field to uppercase.

        Args:
            value: the input value.

        Returns:
            The string converted to uppercase.
        """
        return value.upper() if value is not None else None


def _parse_int_settings(settings: dict[str, str]) -> dict[str, int]:
    """Parse the integer web server settings.

    Args:
        settings: web server settings keyed by their name without prefix.

    Returns:
        The integer settings that are present.

    Raises:
        ConfigInvalidError: if any of the settings is not a positive integer.
    """
    parsed = {}
    invalid = []
    for name in WEBSERVER_INT_SETTINGS:
        if name not in settings:
            continue
        try:
            value = int(settings[name])
        except ValueError:
            invalid.append(name)
            continue
        if value <= 0:
            invalid.append(name)
            continue
        parsed[name] = value
    if invalid:
        error_field_str = " ".join(f"{WEBSERVER_ENV_PREFIX}{f.upper()}" for f in invalid)
        raise ConfigInvalidError(f"invalid configuration: {error_field_str}")
    return parsed


def _encode_flask_value(name: str, value: typing.Any) -> str:
    """Encode a Flask setting for Flask.config.from_prefixed_env.

    Args:
        name: the setting name without prefix.
        value: the validated setting value.

    Returns:
        The environment variable value.
    """
    if not isinstance(value, str):
        return json.dumps(value)
    if name not in FlaskConfig.model_fields:
        return value
    try:
        decoded = json.loads(value)
    except ValueError:
        return value
    return value if isinstance(decoded, str) else json.dumps(value)


# too-many-instance-attributes is okay since we use a factory function to construct the AppState
class AppState:  # pylint: disable=too-many-instance-attributes
    """Represents the state of the greeting service.

    Attrs:
        webserver_config: the web server configuration for the service.
        flask_config: the validated Flask builtin and user-defined configuration.
        base_dir: the directory holding the web server configuration file.
        wsgi_app_path: the WSGI application in pattern $(MODULE_NAME):$(VARIABLE_NAME).
        port: the port number to use for the web server.
        access_log: the file path for the access log.
        error_log: the file path for the error log.
        statsd_host: the statsd server host for web server metrics.
    """

    def __init__(
        self,
        *,
        flask_config: dict[str, typing.Any] | None = None,
        webserver_workers: int | None = None,
        webserver_threads: int | None = None,
        webserver_keepalive: int | None = None,
        webserver_timeout: int | None = None,
        webserver_wsgi_path: str | None = None,
        port: int | None = None,
        base_dir: pathlib.Path | None = None,
        access_log: str | None = None,
        error_log: str | None = None,
        statsd_host: str | None = None,
    ):
        """Initialize a new instance of the AppState class.

        Args:
            flask_config: The validated Flask configuration.
            webserver_workers: The number of workers to use for the web server,
                or None if not specified.
            webserver_threads: The number of threads per worker to use for the web server,
                or None if not specified.
            webserver_keepalive: The time to wait for requests on a Keep-Alive connection,
                or None if not specified.
            webserver_timeout: The request silence timeout for the web server,
                or None if not specified.
            webserver_wsgi_path: The WSGI application path, or None if not specified.
            port: The port to bind, or None for the default.
            base_dir: The directory for the web server configuration file.
            access_log: The access log path, "-" meaning standard output.
            error_log: The error log path, "-" meaning standard error.
            statsd_host: The statsd server host, or None to disable metrics.
        """
        self._flask_config = flask_config if flask_config is not None else {}
        self._webserver_workers = webserver_workers
        self._webserver_threads = webserver_threads
        self._webserver_keepalive = webserver_keepalive
        self._webserver_timeout = webserver_timeout
        self._webserver_wsgi_path = (
            webserver_wsgi_path if webserver_wsgi_path is not None else DEFAULT_WSGI_APP_PATH
        )
        self._port = port if port is not None else DEFAULT_PORT
        self._base_dir = base_dir if base_dir is not None else DEFAULT_BASE_DIR
        self._access_log = access_log if access_log is not None else "-"
        self._error_log = error_log if error_log is not None else "-"
        self._statsd_host = statsd_host

    @classmethod
    def from_environ(cls, environ: typing.Mapping[str, str]) -> "AppState":
        """Initialize a new instance of the AppState class from environment variables.

        Args:
            environ: The environment variables, usually os.environ.

        Return:
            The AppState instance created from the provided environment.

        Raises:
            ConfigInvalidError: if the configuration is invalid.
        """
        flask_config = {
            k.removeprefix(ENV_CONFIG_PREFIX).lower(): v
            for k, v in environ.items()
            if k.startswith(ENV_CONFIG_PREFIX) and k != ENV_CONFIG_PREFIX
        }
        webserver_settings = {
            k.removeprefix(WEBSERVER_ENV_PREFIX).lower(): v
            for k, v in environ.items()
            if k.startswith(WEBSERVER_ENV_PREFIX)
        }
        try:
            valid_flask_config = FlaskConfig(**flask_config)
        except ValidationError as exc:
            error_fields = set(
                itertools.chain.from_iterable(error["loc"] for error in exc.errors())
            )
            error_field_str = " ".join(
                f"{ENV_CONFIG_PREFIX}{str(f).upper()}" for f in sorted(error_fields, key=str)
            )
            raise ConfigInvalidError(f"invalid configuration: {error_field_str}") from exc
        int_settings = _parse_int_settings(webserver_settings)
        base_dir = webserver_settings.get("base_dir")
        return cls(
            flask_config=valid_flask_config.model_dump(exclude_unset=True, exclude_none=True),
            webserver_workers=int_settings.get("workers"),
            webserver_threads=int_settings.get("threads"),
            webserver_keepalive=int_settings.get("keepalive"),
            webserver_timeout=int_settings.get("timeout"),
            webserver_wsgi_path=webserver_settings.get("wsgi_path"),
            port=int_settings.get("port"),
            base_dir=pathlib.Path(base_dir) if base_dir else None,
            access_log=webserver_settings.get("access_log"),
            error_log=webserver_settings.get("error_log"),
            statsd_host=webserver_settings.get("statsd_host"),
        )

    @property
    def webserver_config(self) -> WebserverConfig:
        """Get the web server configuration for the service.

        Returns:
            The web server configuration for the service.
        """
        return WebserverConfig(
            workers=self._webserver_workers,
            threads=self._webserver_threads,
            keepalive=datetime.timedelta(seconds=int(self._webserver_keepalive))
            if self._webserver_keepalive is not None
            else None,
            timeout=datetime.timedelta(seconds=int(self._webserver_timeout))
            if self._webserver_timeout is not None
            else None,
        )

    @property
    def flask_config(self) -> dict[str, typing.Any]:
        """Get the validated Flask configuration.

        Returns:
            The validated Flask configuration.
        """
        return self._flask_config.copy()

    def flask_environment(self) -> dict[str, str]:
        """Generate the Flask environment dictionary for the served application.

        Flask.config.from_prefixed_env decodes every value as JSON where it can, so the
        encoding follows these rules:
            1. Non-string values are JSON encoded.
            2. Builtin string settings that would decode to something other than a string,
                like a numeric secret key, are JSON encoded to keep them strings.
            3. Other strings, including user-defined settings, are passed through as set.

        Returns:
            A dictionary representing the Flask environment variables.
        """
        return {
            f"{ENV_CONFIG_PREFIX}{k.upper()}": _encode_flask_value(k, v)
            for k, v in self._flask_config.items()
        }

    @property
    def base_dir(self) -> pathlib.Path:
        """Get the directory holding the web server configuration file.

        Returns:
            The directory holding the web server configuration file.
        """
        return self._base_dir

    @property
    def wsgi_app_path(self) -> str:
        """Gets the WSGI application in pattern $(MODULE_NAME):$(VARIABLE_NAME).

        Returns:
            The path to the WSGI application.
        """
        return self._webserver_wsgi_path

    @property
    def port(self) -> int:
        """Gets the port number to use for the web server.

        Returns:
            The port number to use for the web server.
        """
        return self._port

    @property
    def access_log(self) -> str:
        """Returns the file path for the access log.

        Returns:
            The file path for the access log.
        """
        return self._access_log

    @property
    def error_log(self) -> str:
        """Returns the file path for the error log.

        Returns:
            The file path for the error log.
        """
        return self._error_log

    @property
    def statsd_host(self) -> str | None:
        """Returns the statsd server host for web server metrics.

        Returns:
            The statsd server host, or None if metrics are disabled.
        """
        return self._statsd_host
