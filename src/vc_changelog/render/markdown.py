"""
Markdown renderer for a single changelog version section.

The output has a fixed shape::

    ## [1.4.0] - January 5, 2024

    ### ⚠ BREAKING CHANGES

    - drop v1 endpoints ([a1b2c3d])

    ### Features

    - add login ([d4e5f6a])

The breaking changes section, when present, always comes first. The
category sections follow in the order their buckets were created during
grouping. Rendering performs no I/O and depends only on its arguments.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from vc_changelog.config.loader import ChangelogConfig
from vc_changelog.grouping.commit_model import BreakingList, CategoryGroups, CommitEntry


BREAKING_CHANGES_HEADING = "### ⚠ BREAKING CHANGES"


def format_release_date(now: datetime, config: Optional[ChangelogConfig] = None) -> str:
    """Format the release date, e.g. ``January 5, 2024``."""
    config = config or ChangelogConfig()
    return config.date_format.format(date=now)


def _format_entry(entry: CommitEntry) -> str:
    return f"- {entry.message} ([{entry.hash}])"


def _section(heading: str, entries: Iterable[CommitEntry]) -> List[str]:
    lines = [heading, ""]
    lines.extend(_format_entry(entry) for entry in entries)
    lines.append("")
    return lines


def render_changelog(
    groups: CategoryGroups,
    breaking: BreakingList,
    version: str,
    now: datetime,
    config: Optional[ChangelogConfig] = None,
) -> str:
    """Render a version section as markdown.

    Parameters
    ----------
    groups : CategoryGroups
        Section label to entries, as produced by
        :func:`vc_changelog.grouping.grouper.group_commits`.
    breaking : BreakingList
        Breaking change entries.
    version : str
        Version label for the header.
    now : datetime
        Release date shown in the header.
    config : ChangelogConfig, optional
        Supplies the date format.

    Returns
    -------
    str
        The markdown fragment, ending with a blank line.
    """
    lines = [f"## [{version}] - {format_release_date(now, config)}", ""]

    if breaking:
        lines.extend(_section(BREAKING_CHANGES_HEADING, breaking))

    for label, entries in groups.items():
        if not entries:
            continue
        lines.extend(_section(f"### {label}", entries))

    return "\n".join(lines) + "\n"
