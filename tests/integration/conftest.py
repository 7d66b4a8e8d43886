# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Fixtures for greeting service integration tests."""

import threading
import typing

import pytest
from werkzeug.serving import make_server

from holamundo.app import create_app


@pytest.fixture(scope="module", name="base_url")
def base_url_fixture() -> typing.Generator[str, None, None]:
    """Serve the greeting application on an ephemeral port and return its base URL."""
    server = make_server("127.0.0.1", 0, create_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join(timeout=10)
