"""
Configuration loader for vc_changelog.

The defaults live in :class:`ChangelogConfig`. A repository may override
them with a JSON file named ``.changelog.json`` placed in the repository
root, for example::

    {
        "output_file": "docs/CHANGELOG.md",
        "types": {"feat": "New Features", "deps": "Dependencies"},
        "exclude_types": ["chore", "ci", "test"]
    }

``types`` is merged on top of the default mapping; every other key
replaces the default value. A missing default file is not an error. An
explicitly requested file that is missing, malformed, or holds keys of
the wrong type raises :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = ".changelog.json"

DEFAULT_TYPE_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "feat": "Features",
        "fix": "Bug Fixes",
        "docs": "Documentation",
        "style": "Styles",
        "refactor": "Code Refactoring",
        "perf": "Performance",
        "test": "Tests",
        "build": "Build System",
        "ci": "CI",
        "chore": "Chores",
    }
)

# str.format template; ``date`` is the release datetime.
DEFAULT_DATE_FORMAT = "{date:%B} {date.day}, {date:%Y}"
_SAMPLE_DATE = datetime(2024, 1, 5)


class ConfigError(Exception):
    """Raised when a changelog configuration file is missing or invalid."""

    pass


@dataclass(frozen=True)
class ChangelogConfig:
    """Static settings shared by the parser, grouper, renderer and store.

    Attributes
    ----------
    output_file : str
        Path of the changelog document, relative to the repository root.
    types : Mapping[str, str]
        Commit type tag to section label. Unknown tags are rendered verbatim.
    breaking_change_indicator : str
        Character marking a breaking change in a commit subject.
    exclude_types : FrozenSet[str]
        Types that never get a category section of their own.
    date_format : str
        ``str.format`` template applied to the release date as ``date``.
    """

    output_file: str = "CHANGELOG.md"
    types: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TYPE_LABELS)
    breaking_change_indicator: str = "!"
    exclude_types: FrozenSet[str] = frozenset({"chore", "ci"})
    date_format: str = DEFAULT_DATE_FORMAT

    def label_for(self, commit_type: str) -> str:
        """Return the section label for ``commit_type``."""
        return self.types.get(commit_type, commit_type)

    def is_excluded(self, commit_type: str) -> bool:
        return commit_type in self.exclude_types


def _validate(data: Dict[str, Any], source: Path) -> None:
    known = {"output_file", "types", "breaking_change_indicator", "exclude_types", "date_format"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {source.name}: {', '.join(unknown)}")

    if "output_file" in data and not (isinstance(data["output_file"], str) and data["output_file"]):
        raise ConfigError("'output_file' must be a non-empty string")
    if "types" in data:
        types = data["types"]
        if not isinstance(types, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in types.items()
        ):
            raise ConfigError("'types' must be an object mapping strings to strings")
    if "breaking_change_indicator" in data:
        indicator = data["breaking_change_indicator"]
        if not isinstance(indicator, str) or len(indicator) != 1:
            raise ConfigError("'breaking_change_indicator' must be a single character")
    if "exclude_types" in data:
        excluded = data["exclude_types"]
        if not isinstance(excluded, list) or not all(isinstance(t, str) for t in excluded):
            raise ConfigError("'exclude_types' must be a list of strings")
    if "date_format" in data:
        if not isinstance(data["date_format"], str):
            raise ConfigError("'date_format' must be a string")
        try:
            data["date_format"].format(date=_SAMPLE_DATE)
        except (KeyError, IndexError, AttributeError, ValueError) as exc:
            raise ConfigError(f"'date_format' is not a valid template: {exc}") from exc


def load_config(repo_root: Optional[Path] = None, path: Optional[Path] = None) -> ChangelogConfig:
    """Load the changelog configuration and return it.

    Args:
        repo_root: Repository root searched for ``.changelog.json``. When
                   ``None`` the current working directory is used.
        path: Explicit configuration file. Unlike the default file it
              must exist.

    Returns:
        A :class:`ChangelogConfig` with any overrides applied.

    Raises:
        ConfigError: If the configuration file is missing (explicit path
                     only), malformed, or invalid.
    """
    if path is None:
        config_path = (repo_root or Path.cwd()) / CONFIG_FILE_NAME
        if not config_path.exists():
            logger.debug("No configuration file at %s; using defaults", config_path)
            return ChangelogConfig()
    else:
        config_path = path
        if not config_path.exists():
            logger.error("Configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing changelog configuration file: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    _validate(data, config_path)

    overrides: Dict[str, Any] = {}
    if "output_file" in data:
        overrides["output_file"] = data["output_file"]
    if "types" in data:
        merged = dict(DEFAULT_TYPE_LABELS)
        merged.update(data["types"])
        overrides["types"] = MappingProxyType(merged)
    if "breaking_change_indicator" in data:
        overrides["breaking_change_indicator"] = data["breaking_change_indicator"]
    if "exclude_types" in data:
        overrides["exclude_types"] = frozenset(data["exclude_types"])
    if "date_format" in data:
        overrides["date_format"] = data["date_format"]

    logger.debug("Loaded changelog configuration from: %s", config_path)
    logger.debug("Configuration overrides: %s", overrides)
    return replace(ChangelogConfig(), **overrides)
