"""
Parsing and grouping logic for commit entries.

This package turns raw commit records into typed Conventional Commit
entries and groups them into changelog sections. See
:mod:`vc_changelog.grouping.commit_parser` and
:mod:`vc_changelog.grouping.grouper` for details.
"""

from .commit_model import CommitEntry  # noqa: F401
from .commit_parser import CommitParseError, parse_commit  # noqa: F401
from .grouper import group_commits  # noqa: F401
