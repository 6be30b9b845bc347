"""
Parsing of commit subjects in the Conventional Commits format.

A subject such as ``feat(api)!: drop v1 endpoints`` yields the type
``feat``, the scope ``api``, the message ``drop v1 endpoints`` and a
breaking flag. Subjects that do not start with a lowercase type followed
by an optional scope, an optional ``!`` and a colon are not classifiable;
:func:`parse_commit` returns ``None`` for them and they are left out of
the changelog.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

from vc_changelog.config.loader import ChangelogConfig
from vc_changelog.grouping.commit_model import CommitEntry
from vc_changelog.vcs.git_client import RawCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SUBJECT_PATTERN = re.compile(r"^([a-z]+)(\(([^)]*)\))?!?:")


class CommitParseError(ValueError):
    """Raised when a commit record holds corrupt data, e.g. a bad timestamp."""

    pass


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 instant as emitted by ``git log --format=%aI``."""
    text = value.strip()
    if text.endswith("Z"):
        # fromisoformat only accepts "Z" from Python 3.11 on
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_commit(raw: RawCommit, config: Optional[ChangelogConfig] = None) -> Optional[CommitEntry]:
    """Convert a raw commit record into a :class:`CommitEntry`.

    Parameters
    ----------
    raw : RawCommit
        Record supplied by the commit source.
    config : ChangelogConfig, optional
        Provides the breaking change indicator; defaults are used if omitted.

    Returns
    -------
    Optional[CommitEntry]
        The parsed entry, or ``None`` if the subject is not a
        Conventional Commit.

    Raises
    ------
    CommitParseError
        If the timestamp of a classifiable commit cannot be parsed.

    Notes
    -----
    The breaking flag is a substring check over the whole subject, so an
    indicator inside the free-text message also marks the commit as
    breaking.
    """
    config = config or ChangelogConfig()
    match = SUBJECT_PATTERN.match(raw.subject)
    if not match:
        logger.debug("Skipping non-conventional commit %s: %r", raw.hash, raw.subject)
        return None

    commit_type = match.group(1)
    scope = match.group(3)
    message = raw.subject[match.end():].strip()
    is_breaking = config.breaking_change_indicator in raw.subject

    try:
        date = parse_timestamp(raw.timestamp)
    except ValueError as exc:
        raise CommitParseError(
            f"Commit {raw.hash} has an invalid timestamp {raw.timestamp!r}: {exc}"
        ) from exc

    return CommitEntry(
        hash=raw.hash,
        type=commit_type,
        message=message,
        body=raw.body,
        date=date,
        is_breaking=is_breaking,
        scope=scope,
    )
