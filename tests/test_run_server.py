"""Tests for the server launcher's startup gate."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import run_server
from astrotasks.config import Settings
from astrotasks.db.database import Database
from astrotasks.db.schema import SchemaInitializer
from astrotasks.errors import StartupError


class TestRunServer(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.settings = Settings(DATA_DIR=Path(self.tmpdir.name), STATIC_DIR=self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def _patched(self, run_side_effect=None):
        return (
            patch("astrotasks.config.get_settings", return_value=self.settings),
            patch("astrotasks.logging_setup.setup_logging"),
            patch.object(SchemaInitializer, "run", side_effect=run_side_effect),
            patch.object(Database, "close"),
            patch("uvicorn.run"),
        )

    def test_exits_with_status_one_when_schema_init_fails(self):
        settings_p, logging_p, init_p, close_p, uvicorn_p = self._patched(
            StartupError("Database initialization failed after 5 attempts")
        )
        with settings_p, logging_p, init_p as init_run, close_p as close, uvicorn_p as serve:
            self.assertEqual(run_server.main(), 1)
        init_run.assert_called_once()
        serve.assert_not_called()
        close.assert_called_once()

    def test_serves_after_schema_is_ready(self):
        settings_p, logging_p, init_p, close_p, uvicorn_p = self._patched()
        with settings_p, logging_p, init_p, close_p as close, uvicorn_p as serve:
            self.assertEqual(run_server.main(), 0)
        serve.assert_called_once()
        _, kwargs = serve.call_args
        self.assertEqual(kwargs["host"], self.settings.HOST)
        self.assertEqual(kwargs["port"], self.settings.PORT)
        close.assert_not_called()


if __name__ == "__main__":
    unittest.main()
