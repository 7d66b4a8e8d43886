# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Flask application serving the greeting."""

from flask import Flask, Response

from holamundo.constants import ENV_CONFIG_PREFIX, GREETING, GREETING_METHODS


def create_app() -> Flask:
    """Create the Flask application with the greeting route registered.

    Returns:
        The Flask application.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_prefixed_env(prefix=ENV_CONFIG_PREFIX.rstrip("_"))
    flask_app.add_url_rule("/", "hello", hello, methods=list(GREETING_METHODS))
    return flask_app


def hello() -> Response:
    """Return the greeting as plain text, whatever the request method."""
    return Response(GREETING, mimetype="text/plain")


app = create_app()
