"""
Data models for changelog entries.

A :class:`CommitEntry` is a commit whose subject follows the Conventional
Commits format. Entries are collected into ordered category buckets and a
separate list of breaking changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, OrderedDict


@dataclass(frozen=True)
class CommitEntry:
    """Representation of a classified commit.

    Attributes
    ----------
    hash : str
        Short commit hash.
    type : str
        The Conventional Commit type (feat, fix, docs, etc.).
    message : str
        Subject text after the ``type(scope)!:`` prefix.
    body : str
        Commit body, unchanged.
    date : datetime
        Author date of the commit.
    is_breaking : bool
        Whether the subject carries the breaking change indicator.
    scope : str, optional
        Text between the parentheses of the prefix, if any.
    """

    hash: str
    type: str
    message: str
    body: str
    date: datetime
    is_breaking: bool = False
    scope: Optional[str] = None


# Section label -> entries, in the order each label was first seen.
CategoryGroups = OrderedDict[str, List[CommitEntry]]
BreakingList = List[CommitEntry]
