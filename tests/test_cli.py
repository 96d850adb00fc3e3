"""Tests for the Typer CLI."""

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from git_repo_status.cli import app
from git_repo_status.git import run_git


class CliWithoutRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "missing"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_status_reports_empty(self) -> None:
        result = self.runner.invoke(app, ["status", str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No repository found", result.output)

    def test_status_json_for_empty(self) -> None:
        result = self.runner.invoke(app, ["status", str(self.path), "--json"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)["name"], "")

    def test_checkout_requires_repository(self) -> None:
        result = self.runner.invoke(app, ["checkout", "main", "--repo", str(self.path)])

        self.assertEqual(result.exit_code, 1)

    def test_invalid_setting_fails(self) -> None:
        result = self.runner.invoke(
            app, ["status", str(self.path)], env={"GIT_REPO_STATUS_READ_ATTEMPTS": "nope"}
        )

        self.assertEqual(result.exit_code, 1)


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class CliWithRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.work = Path(self._tmp.name).resolve() / "demo"
        run_git(["init", str(self.work)])
        for args in (
            ["symbolic-ref", "HEAD", "refs/heads/main"],
            ["config", "user.email", "dev@example.com"],
            ["config", "user.name", "Dev"],
            ["config", "commit.gpgsign", "false"],
            ["commit", "--allow-empty", "-m", "initial"],
            ["branch", "develop"],
            ["remote", "add", "origin", "git@example.com:team/demo.git"],
        ):
            run_git(args, cwd=self.work)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_status_json(self) -> None:
        result = self.runner.invoke(app, ["status", str(self.work), "--json"])

        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["name"], "demo")
        self.assertEqual(data["current_branch"], "main")
        self.assertIsNone(data["ahead_by"])
        self.assertEqual(data["all_branches"], ["develop (l)", "main (l)"])

    def test_urls(self) -> None:
        result = self.runner.invoke(app, ["urls", str(self.work)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            result.output.splitlines(),
            ["https://example.com/team/demo/-/commits/main", "https://example.com/team/demo/-/branches/all"],
        )

    def test_checkout_unknown_branch_fails(self) -> None:
        result = self.runner.invoke(app, ["checkout", "nope", "--repo", str(self.work)])

        self.assertEqual(result.exit_code, 1)

    def test_checkout_local_branch(self) -> None:
        result = self.runner.invoke(app, ["checkout", "develop", "--repo", str(self.work)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Switched to develop", result.output)


if __name__ == "__main__":
    unittest.main()
