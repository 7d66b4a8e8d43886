# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""This module defines constants used throughout the greeting service."""

import pathlib
import tempfile

GREETING = "Hola Mundo desde Github!"
GREETING_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
SERVICE_NAME = "holamundo"
ENV_CONFIG_PREFIX = "FLASK_"
WEBSERVER_ENV_PREFIX = "WEBSERVER_"
DEFAULT_PORT = 8000
DEFAULT_WSGI_APP_PATH = "holamundo.app:app"
DEFAULT_BASE_DIR = pathlib.Path(tempfile.gettempdir()) / "holamundo"
