"""
Persistence of the changelog document.
"""

from .changelog_file import PREAMBLE, ChangelogFile, merge_changelog  # noqa: F401
