import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

import vc_changelog.cli as cli
from vc_changelog.render.markdown import format_release_date
from vc_changelog.vcs.git_client import GitError, RawCommit


def raw(hash, subject, timestamp="2024-01-02T10:00:00+00:00"):
    return RawCommit(hash=hash, subject=subject, body="", timestamp=timestamp)


class DummyGitClient:
    def __init__(self, root):
        self.root = root
        self.tag = None
        self.commits = []
        self.error = None
        self.since_calls = []

    def get_latest_tag(self):
        return self.tag

    def get_commits(self, since=None):
        self.since_calls.append(since)
        if self.error:
            raise self.error
        return self.commits


class TestCLI(unittest.TestCase):
    def invoke(self, args, dummy):
        runner = CliRunner()
        with runner.isolated_filesystem():
            root = Path.cwd()
            with patch.object(cli, "detect_repo", return_value=root):
                with patch.object(cli, "GitClient", return_value=dummy):
                    result = runner.invoke(cli.main, args)
            changelog = root / "CHANGELOG.md"
            content = changelog.read_text(encoding="utf-8") if changelog.exists() else None
        return result, content

    def test_generates_changelog(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [
            raw("aaa1111", "feat: add login"),
            raw("bbb2222", "fix!: crash on start"),
            raw("ccc3333", "chore: bump deps"),
        ]
        result, content = self.invoke(["2.0.0"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIsNotNone(content)
        today = format_release_date(datetime.now())
        self.assertTrue(content.startswith(f"# Changelog\n\n## [2.0.0] - {today}\n\n"))
        self.assertIn("### ⚠ BREAKING CHANGES\n\n- crash on start ([bbb2222])\n", content)
        self.assertIn("### Features\n\n- add login ([aaa1111])\n", content)
        self.assertNotIn("Chores", content)
        self.assertIn("Changelog generated for version 2.0.0", result.output)
        self.assertIn("Building changelog section", result.output)
        self.assertEqual(dummy.since_calls, [None])

    def test_version_argument_is_not_the_version_flag(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [raw("aaa1111", "feat: add login")]
        result, content = self.invoke(["1.0.0"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertNotIn("--version", result.output)
        self.assertTrue(content.startswith("# Changelog\n\n## [1.0.0] - "))

    def test_version_flag_prints_tool_version(self) -> None:
        result = CliRunner().invoke(cli.main, ["--version"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn(cli.__version__, result.output)

    def test_help_shows_version_metavar(self) -> None:
        result = CliRunner().invoke(cli.main, ["--help"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("VERSION", result.output)

    def test_missing_version_is_usage_error(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [raw("aaa1111", "feat: add login")]
        result, content = self.invoke([], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_INVALID_USAGE)
        self.assertIn("Missing argument", result.output)
        self.assertIsNone(content)
        self.assertEqual(dummy.since_calls, [])

    def test_since_option_is_passed_through(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.tag = "v1.0.0"
        result, _ = self.invoke(["1.1.0", "--since", "abc1234"], dummy)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.since_calls, ["abc1234"])

    def test_dry_run_prints_without_writing(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [raw("aaa1111", "feat: add login")]
        result, content = self.invoke(["1.0.0", "--dry-run"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIsNone(content)
        self.assertIn("- add login ([aaa1111])", result.output)

    def test_git_failure(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.error = GitError("fatal: your current branch does not have any commits yet")
        result, content = self.invoke(["1.0.0"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)
        self.assertIsNone(content)

    def test_malformed_timestamp(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [raw("aaa1111", "feat: add login", timestamp="not-a-date")]
        result, content = self.invoke(["1.0.0"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_BAD_COMMIT_DATA)
        self.assertIsNone(content)

    def test_config_error(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        result, content = self.invoke(["1.0.0", "--config", "missing.json"], dummy)

        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertIsNone(content)

    def test_output_option(self) -> None:
        dummy = DummyGitClient(Path("/repo"))
        dummy.commits = [raw("aaa1111", "docs: explain config")]
        runner = CliRunner()
        with runner.isolated_filesystem():
            root = Path.cwd()
            with patch.object(cli, "detect_repo", return_value=root):
                with patch.object(cli, "GitClient", return_value=dummy):
                    result = runner.invoke(cli.main, ["1.0.0", "--output", "notes/CHANGES.md"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            self.assertIn("### Documentation", (root / "notes" / "CHANGES.md").read_text(encoding="utf-8"))
            self.assertFalse((root / "CHANGELOG.md").exists())

    def test_no_repository(self) -> None:
        runner = CliRunner()
        with patch.object(cli.GitClient, "find_repo_root", return_value=None):
            result = runner.invoke(cli.main, ["1.0.0"])
        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)


class TestResolveOutputPath(unittest.TestCase):
    def test_configured_path_is_relative_to_repo_root(self) -> None:
        from vc_changelog.config.loader import ChangelogConfig

        path = cli.resolve_output_path(Path("/repo"), ChangelogConfig(), None)
        self.assertEqual(path, Path("/repo") / "CHANGELOG.md")

    def test_explicit_output_wins(self) -> None:
        from vc_changelog.config.loader import ChangelogConfig

        path = cli.resolve_output_path(Path("/repo"), ChangelogConfig(), Path("/tmp/out.md"))
        self.assertEqual(path, Path("/tmp/out.md"))


if __name__ == "__main__":
    unittest.main()
