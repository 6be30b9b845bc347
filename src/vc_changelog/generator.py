"""
Changelog generation pipeline.

Ties the pieces together: the Git client supplies raw commits since the
last release, the parser and grouper classify them, the renderer builds a
markdown section and the store prepends it to the changelog file. The
file is written once, after the whole section has been rendered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from vc_changelog.config.loader import ChangelogConfig
from vc_changelog.grouping.commit_model import BreakingList, CategoryGroups
from vc_changelog.grouping.commit_parser import parse_commit
from vc_changelog.grouping.grouper import group_commits
from vc_changelog.render.markdown import render_changelog
from vc_changelog.store.changelog_file import ChangelogFile
from vc_changelog.vcs.git_client import GitClient, RawCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass
class ChangelogResult:
    """Outcome of a generation run, used for reporting."""

    version: str
    since: Optional[str]
    total_commits: int
    groups: CategoryGroups
    breaking: BreakingList
    fragment: str
    path: Optional[Path] = None
    written: bool = False

    @property
    def included_count(self) -> int:
        return sum(len(entries) for entries in self.groups.values())


def build_changelog_entry(
    records: Iterable[RawCommit],
    version: str,
    config: Optional[ChangelogConfig] = None,
    now: Optional[datetime] = None,
) -> ChangelogResult:
    """Parse, group and render ``records`` without touching the filesystem."""
    config = config or ChangelogConfig()
    now = now or datetime.now()
    records = list(records)

    entries = [parse_commit(record, config) for record in records]
    groups, breaking = group_commits(entries, config)
    fragment = render_changelog(groups, breaking, version, now, config)

    logger.debug(
        "Parsed %d commits into %d sections (%d breaking)",
        len(records),
        len(groups),
        len(breaking),
    )
    return ChangelogResult(
        version=version,
        since=None,
        total_commits=len(records),
        groups=groups,
        breaking=breaking,
        fragment=fragment,
    )


def generate_changelog(
    version: str,
    client: GitClient,
    store: ChangelogFile,
    config: Optional[ChangelogConfig] = None,
    since: Optional[str] = None,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> ChangelogResult:
    """Generate the changelog section for ``version`` and prepend it to ``store``.

    Parameters
    ----------
    version : str
        Label of the new release.
    client : GitClient
        Commit source.
    store : ChangelogFile
        Target document.
    config : ChangelogConfig, optional
        Settings; defaults are used if omitted.
    since : str, optional
        Boundary ref. When omitted the latest tag is used, and the full
        history when there is no tag.
    now : datetime, optional
        Release date; defaults to the current local time.
    dry_run : bool
        Render only; do not write the document.

    Raises
    ------
    GitError
        If the commit history cannot be read.
    CommitParseError
        If a commit carries a malformed timestamp.
    """
    boundary = since if since is not None else client.get_latest_tag()
    if boundary:
        logger.info("Collecting commits since %s", boundary)
    else:
        logger.info("No previous release found; using full history")

    records: List[RawCommit] = client.get_commits(boundary)
    result = build_changelog_entry(records, version, config, now)
    result.since = boundary
    result.path = store.path

    if dry_run:
        logger.debug("Dry run; not writing %s", store.path)
        return result

    store.prepend(result.fragment)
    result.written = True
    logger.info("Changelog generated for version %s", version)
    return result
