# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""pytest fixtures for the unit test."""

import pathlib
import typing

import pytest
from flask import Flask
from flask.testing import FlaskClient

from holamundo.app import create_app


@pytest.fixture(name="flask_app")
def flask_app_fixture() -> Flask:
    """Greeting Flask application fixture."""
    flask_app = create_app()
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture(name="client")
def client_fixture(flask_app: Flask) -> typing.Generator[FlaskClient, None, None]:
    """Flask test client fixture."""
    with flask_app.test_client() as client:
        yield client


@pytest.fixture(name="base_dir")
def base_dir_fixture(
    tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> pathlib.Path:
    """Point the web server base directory to a temporary path."""
    monkeypatch.setenv("WEBSERVER_BASE_DIR", str(tmp_path))
    return tmp_path
