"""
Grouping of parsed commits into changelog sections.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Iterable, Optional, Tuple

from vc_changelog.config.loader import ChangelogConfig
from vc_changelog.grouping.commit_model import BreakingList, CategoryGroups, CommitEntry


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def group_commits(
    entries: Iterable[Optional[CommitEntry]],
    config: Optional[ChangelogConfig] = None,
) -> Tuple[CategoryGroups, BreakingList]:
    """Partition entries into category buckets and a breaking change list.

    ``None`` entries (unclassifiable commits) are skipped. Breaking entries
    are always listed as breaking, even when their type is excluded;
    excluded types are kept out of the category buckets. Buckets are keyed
    by section label and appear in the order they were first seen.
    """
    config = config or ChangelogConfig()
    groups: CategoryGroups = OrderedDict()
    breaking: BreakingList = []

    for entry in entries:
        if entry is None:
            continue

        if entry.is_breaking:
            breaking.append(entry)

        if config.is_excluded(entry.type):
            logger.debug("Excluding %s commit %s from sections", entry.type, entry.hash)
            continue

        groups.setdefault(config.label_for(entry.type), []).append(entry)

    return groups, breaking
