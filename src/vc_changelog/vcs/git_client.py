"""
Git client implementation for vc_changelog.

This module wraps the few Git operations the changelog generator needs:
finding the latest release tag and listing the commits made since then.
All subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ASCII unit and record separators. Commit bodies are free text and may
# contain "|" or newlines, but never these control characters.
FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = "%h%x1f%s%x1f%b%x1f%aI%x1e"


@dataclass(frozen=True)
class RawCommit:
    """A single commit as reported by ``git log``."""

    hash: str
    subject: str
    body: str
    timestamp: str  # ISO-8601, e.g. 2024-01-05T10:00:00+01:00


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading commit history from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If ``git`` cannot be executed, or the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError("git executable not found on PATH") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def get_latest_tag(self) -> Optional[str]:
        """Return the most recent tag reachable from HEAD.

        A repository without tags (or without commits) has no previous
        release; that is reported as ``None`` rather than an error.
        """
        try:
            result = self._run(["describe", "--tags", "--abbrev=0"], check=False)
        except GitError as exc:
            logger.debug("Could not look up latest tag: %s", exc)
            return None
        if result.returncode != 0:
            logger.debug("No release tag found: %s", result.stderr.strip())
            return None
        tag = result.stdout.strip()
        return tag or None

    def get_commits(self, since: Optional[str] = None) -> List[RawCommit]:
        """List the commits after ``since`` up to HEAD, newest first.

        Parameters
        ----------
        since : str, optional
            Boundary ref (usually the previous release tag), excluded from
            the result. When ``None`` the full history is returned.

        Raises
        ------
        GitError
            If the log command fails.
        """
        args = ["log"]
        if since:
            args.append(f"{since}..HEAD")
        args.append(f"--pretty=format:{LOG_FORMAT}")
        result = self._run(args, check=True)
        return parse_log_output(result.stdout)


def parse_log_output(output: str) -> List[RawCommit]:
    """Split ``git log`` output produced with :data:`LOG_FORMAT` into records."""
    commits = []
    for chunk in output.split(RECORD_SEPARATOR):
        # git puts a newline between records
        chunk = chunk.lstrip("\n")
        if not chunk.strip():
            continue
        parts = chunk.split(FIELD_SEPARATOR)
        if len(parts) != 4:
            raise GitError(f"Unexpected git log record: {chunk!r}")
        commit_hash, subject, body, timestamp = parts
        commits.append(
            RawCommit(
                hash=commit_hash.strip(),
                subject=subject,
                body=body.strip("\n"),
                timestamp=timestamp.strip(),
            )
        )
    return commits
