"""Tests for the typer command line."""

import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fakes import SHOW_OUTPUT, FakeRunner
from typer.testing import CliRunner

from systemd_commander import __version__
from systemd_commander.cli import EchoReporter, app
from systemd_commander.models import AppOptions


class FakeRunnerFactory:
    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.runners = []

    def __call__(self, reporter):
        runner = FakeRunner(reporter, self.outputs)
        self.runners.append(runner)
        return runner


class CliTests(unittest.TestCase):
    def setUp(self):
        self.cli = CliRunner()

    def tearDown(self):
        pkg_log = logging.getLogger("systemd_commander")
        for handler in list(pkg_log.handlers):
            if isinstance(handler, logging.FileHandler):
                pkg_log.removeHandler(handler)
                handler.close()
        pkg_log.setLevel(logging.NOTSET)

    def test_version(self):
        result = self.cli.invoke(app, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.strip(), __version__)

    def test_ps_lists_units(self):
        factory = FakeRunnerFactory(SHOW_OUTPUT)
        with patch("systemd_commander.cli.CommandRunner", factory):
            result = self.cli.invoke(app, ["ps"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(
            result.stdout.splitlines(),
            ["foo.service\tactive\trunning", "bar.service\tinactive\tdead"],
        )

    def test_ps_passes_options_to_query(self):
        factory = FakeRunnerFactory(SHOW_OUTPUT)
        with patch("systemd_commander.cli.CommandRunner", factory):
            result = self.cli.invoke(app, ["--filter", "nginx", "--props", "all", "--user", "ps"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(factory.runners[0].calls, [("systemctl", "--user show -t service *nginx*")])

    def test_ps_json(self):
        factory = FakeRunnerFactory(SHOW_OUTPUT)
        with patch("systemd_commander.cli.CommandRunner", factory):
            result = self.cli.invoke(app, ["ps", "--json"])
        self.assertEqual(result.exit_code, 0)
        rows = [json.loads(line) for line in result.stdout.splitlines()]
        self.assertEqual(rows[0], {"Names": "foo.service", "ActiveState": "active", "SubState": "running"})
        self.assertEqual(len(rows), 2)

    def test_ps_fails_when_query_fails(self):
        factory = FakeRunnerFactory(None)
        with patch("systemd_commander.cli.CommandRunner", factory):
            result = self.cli.invoke(app, ["ps"])
        self.assertEqual(result.exit_code, 1)

    def test_root_opens_dashboard_with_options(self):
        with patch("systemd_commander.dash.app.run_dash") as run_dash:
            result = self.cli.invoke(
                app, ["--filter", "ssh", "--props", "MainPID", "--journal-lines", "20"]
            )
        self.assertEqual(result.exit_code, 0)
        run_dash.assert_called_once_with(
            AppOptions(filter="ssh", properties="MainPID", user=False, journal_lines=20)
        )

    def test_log_file(self):
        factory = FakeRunnerFactory(SHOW_OUTPUT)
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "commander.log"
            with patch("systemd_commander.cli.CommandRunner", factory):
                result = self.cli.invoke(app, ["--log-file", str(log_path), "-v", "ps"])
            self.assertEqual(result.exit_code, 0)
            self.tearDown()
            self.assertIn("catalog now holds 2 units", log_path.read_text())


class EchoReporterTests(unittest.TestCase):
    def test_error_marks_failure(self):
        reporter = EchoReporter()
        reporter.report_success("systemctl show\n")
        self.assertFalse(reporter.failed)
        reporter.report_error("systemctl show\nboom")
        self.assertTrue(reporter.failed)


if __name__ == "__main__":
    unittest.main()
