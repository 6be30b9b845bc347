"""
Top-level package for vc_changelog.

Generates Conventional Commits changelog sections from Git history. The
CLI entry point lives in :mod:`vc_changelog.cli`; the pipeline is
available as :func:`vc_changelog.generator.generate_changelog`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
