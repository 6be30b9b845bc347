"""
Version control system (VCS) integration.

Contains the Git client that supplies commit records to the changelog
pipeline: locating the repository root, finding the most recent release
tag, and listing commits since that tag.
"""

from .git_client import GitClient, GitError, RawCommit  # noqa: F401
