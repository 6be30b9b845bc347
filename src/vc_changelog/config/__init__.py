"""
Configuration for vc_changelog.

Provides the immutable :class:`ChangelogConfig` value and a loader for
optional per-repository overrides. See :mod:`vc_changelog.config.loader`
for implementation details.
"""

from .loader import ChangelogConfig, ConfigError, load_config  # noqa: F401
