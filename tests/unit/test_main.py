# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Greeting service entry point unit tests."""

import os
import pathlib
import subprocess  # nosec B404
import unittest.mock

import pytest

import holamundo
from holamundo.main import main


@pytest.mark.usefixtures("base_dir")
def test_main_check(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    arrange: stub the gunicorn config check and the process replacement.
    act: run the entry point with --check.
    assert: it should exit 0 without starting the web server.
    """
    monkeypatch.setattr(subprocess, "run", unittest.mock.MagicMock())
    execvpe_mock = unittest.mock.MagicMock()
    monkeypatch.setattr(os, "execvpe", execvpe_mock)
    assert main(["--check"]) == 0
    execvpe_mock.assert_not_called()


def test_main_serve(base_dir: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    arrange: stub the gunicorn config check and the process replacement.
    act: run the entry point.
    assert: the process should be replaced by gunicorn with the Flask environment.
    """
    monkeypatch.setenv("FLASK_DEBUG", "true")
    monkeypatch.setattr(subprocess, "run", unittest.mock.MagicMock())
    execvpe_mock = unittest.mock.MagicMock()
    monkeypatch.setattr(os, "execvpe", execvpe_mock)
    main([])
    execvpe_mock.assert_called_once()
    file, args, env = execvpe_mock.call_args.args
    assert file == args[0]
    assert args[1:] == [
        "-m",
        "gunicorn",
        "-c",
        str(base_dir / "gunicorn.conf.py"),
        "holamundo.app:app",
    ]
    assert env["FLASK_DEBUG"] == "true"
    assert (base_dir / "gunicorn.conf.py").exists()


@pytest.mark.usefixtures("base_dir")
def test_main_invalid_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    arrange: set an invalid Flask configuration.
    act: run the entry point.
    assert: it should exit 1 without starting the web server.
    """
    monkeypatch.setenv("FLASK_PREFERRED_URL_SCHEME", "tls")
    execvpe_mock = unittest.mock.MagicMock()
    monkeypatch.setattr(os, "execvpe", execvpe_mock)
    assert main([]) == 1
    execvpe_mock.assert_not_called()


def test_main_invalid_log_level(capsys: pytest.CaptureFixture) -> None:
    """
    arrange: none.
    act: run the entry point with an unknown logging level.
    assert: argparse should reject it with a usage error.
    """
    with pytest.raises(SystemExit) as exc:
        main(["--check", "--log-level", "chatty"])
    assert exc.value.code == 2
    assert "--log-level" in capsys.readouterr().err


@pytest.fixture(name="importable_holamundo")
def importable_holamundo_fixture(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make holamundo importable from the gunicorn working directory."""
    monkeypatch.setenv("PYTHONPATH", str(pathlib.Path(holamundo.__file__).parents[1]))


@pytest.mark.usefixtures("base_dir", "importable_holamundo")
def test_main_check_gunicorn() -> None:
    """
    arrange: use the default WSGI path.
    act: run the entry point with --check against the real gunicorn.
    assert: the configuration check should pass.
    """
    assert main(["--check"]) == 0


@pytest.mark.usefixtures("importable_holamundo")
def test_main_check_gunicorn_invalid_wsgi_path(
    base_dir: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """
    arrange: set a WSGI path that cannot be imported.
    act: run the entry point with --check twice against the real gunicorn.
    assert: both runs should fail and no configuration file should be left behind.
    """
    monkeypatch.setenv("WEBSERVER_WSGI_PATH", "no_such_module_xyz:app")
    assert [main(["--check"]), main(["--check"])] == [1, 1]
    assert not (base_dir / "gunicorn.conf.py").exists()
