"""
Markdown rendering of changelog entries.
"""

from .markdown import format_release_date, render_changelog  # noqa: F401
