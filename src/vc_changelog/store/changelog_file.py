"""
Changelog document storage.

The changelog is a markdown file starting with a ``# Changelog`` heading
and a blank line. New version sections are inserted straight after that
preamble, so the newest release is always on top. Existing sections are
never parsed or rewritten.
"""

from __future__ import annotations

import logging
from pathlib import Path


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


PREAMBLE = "# Changelog\n\n"


def merge_changelog(existing: str, fragment: str, preamble: str = PREAMBLE) -> str:
    """Insert ``fragment`` immediately after the first ``preamble``.

    Everything after the preamble is kept byte for byte. A document that
    lacks the preamble gets a new one, followed by the fragment, in front
    of its current content.
    """
    index = existing.find(preamble)
    if index < 0:
        logger.warning("Changelog has no %r heading; adding one at the top", preamble.strip())
        return preamble + fragment + existing
    cut = index + len(preamble)
    return existing[:cut] + fragment + existing[cut:]


class ChangelogFile:
    """A changelog document on disk."""

    def __init__(self, path: Path, preamble: str = PREAMBLE) -> None:
        self.path = path
        self.preamble = preamble

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> str:
        """Return the document text, or just the preamble if it does not exist yet."""
        if not self.path.exists():
            logger.debug("Changelog %s does not exist yet", self.path)
            return self.preamble
        # newline="" keeps existing line endings byte for byte
        with self.path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()

    def write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        logger.debug("Wrote %d characters to %s", len(content), self.path)

    def prepend(self, fragment: str) -> str:
        """Merge ``fragment`` into the document and write it. Returns the new content."""
        content = merge_changelog(self.read(), fragment, self.preamble)
        self.write(content)
        return content
