"""
Command line interface for the vc_changelog tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``changelog`` command. It locates the
repository, loads the configuration, collects the commits since the last
release and prepends the rendered section to the changelog file. Exit
codes are listed below.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import click

from vc_changelog import __version__
from vc_changelog.config.loader import ChangelogConfig, ConfigError, load_config
from vc_changelog.generator import ChangelogResult, generate_changelog
from vc_changelog.grouping.commit_parser import CommitParseError
from vc_changelog.store.changelog_file import ChangelogFile
from vc_changelog.vcs.git_client import GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 4
EXIT_VCS_FAILURE = 5
EXIT_BAD_COMMIT_DATA = 6


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Prints a message when a step starts and the elapsed time when it ends."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def detect_repo(start_dir: Path) -> Path:
    """Return the Git repository root containing ``start_dir``.

    Raises
    ------
    SystemExit
        With code EXIT_NO_REPO if no repository is found.
    """
    repo_root = GitClient.find_repo_root(start_dir)
    if repo_root is None:
        print_error("No Git repository found in current directory or parent directories.")
        raise SystemExit(EXIT_NO_REPO)
    print_success(f"Found Git repository at: {repo_root}")
    return repo_root


def resolve_output_path(repo_root: Path, config: ChangelogConfig, output: Optional[Path]) -> Path:
    """Return the changelog path.

    An explicit ``--output`` is used as given; the configured file name is
    taken relative to the repository root.
    """
    if output is not None:
        return output
    path = Path(config.output_file)
    if not path.is_absolute():
        path = repo_root / path
    return path


def print_result(result: ChangelogResult):
    """Print a short summary of the generated section."""
    if result.breaking:
        print_warning(f"{_plural(len(result.breaking), 'breaking change')}", indent=1)
    for label, entries in result.groups.items():
        print_info(f"{label}: {len(entries)}", indent=1)
    skipped = result.total_commits - result.included_count
    if skipped:
        print_info(f"{_plural(skipped, 'commit')} not listed in a section", indent=1)


@click.command()
@click.argument("release_version", metavar="VERSION")
@click.option("--since", help="Ref to start from (exclusive). Defaults to the latest tag.")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Changelog file to update. Defaults to CHANGELOG.md in the repository root.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON configuration file. Defaults to .changelog.json in the repository root.",
)
@click.option("--dry-run", is_flag=True, help="Print the generated section without writing it.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog")
def main(
    release_version: str,
    since: Optional[str],
    output: Optional[Path],
    config_path: Optional[Path],
    dry_run: bool,
    verbose: bool,
) -> None:
    """📝 Generate a changelog section for VERSION from Conventional Commits.

    Commits made since the latest tag are grouped by type and the new
    section is added to the top of the changelog.
    """
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    ctx = click.get_current_context(silent=True)

    total_steps = 3
    current_step = 0

    try:
        # Step 1: Detect repository
        current_step += 1
        print_step(current_step, total_steps, "Detecting Repository")

        try:
            repo_root = detect_repo(Path.cwd())
        except SystemExit:
            raise click.exceptions.Exit(EXIT_NO_REPO)

        # Step 2: Load configuration
        current_step += 1
        print_step(current_step, total_steps, "Loading Configuration")

        try:
            config = load_config(repo_root, config_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        changelog_path = resolve_output_path(repo_root, config, output)
        print_success("Configuration loaded successfully")
        print_info(f"Output file: {changelog_path}", indent=1)
        print_info(f"Excluded types: {', '.join(sorted(config.exclude_types)) or 'none'}", indent=1)

        # Step 3: Generate changelog
        current_step += 1
        print_step(current_step, total_steps, f"Generating Changelog for {release_version}")

        client = GitClient(repo_root)
        store = ChangelogFile(changelog_path)
        try:
            with ProgressIndicator("Building changelog section"):
                result = generate_changelog(
                    release_version,
                    client,
                    store,
                    config=config,
                    since=since,
                    dry_run=dry_run,
                )
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except CommitParseError as exc:
            print_error(f"Malformed commit data: {exc}")
            raise click.exceptions.Exit(EXIT_BAD_COMMIT_DATA)

        if result.since:
            print_info(f"Commits since: {result.since}", indent=1)
        else:
            print_info("No previous release tag; scanned full history", indent=1)
        print_success(f"Processed {_plural(result.total_commits, 'commit')}")
        print_result(result)

        if dry_run:
            click.echo("")
            click.echo(result.fragment, nl=False)
            print_info("Dry run: changelog not written")
        else:
            print_success(f"Changelog generated for version {release_version}: {changelog_path}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
