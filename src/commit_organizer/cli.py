"""
Command line interface for the commit_organizer tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``organize-commits`` command. It orchestrates
repository detection, policy loading, change detection, sensitive-path
filtering, grouping, confirmation and the actual commits. Each failure
mode maps onto one of the exit codes below.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import click

from commit_organizer import __version__
from commit_organizer.config.loader import ConfigError, load_policy
from commit_organizer.filtering.sensitive_filter import ExcludedRecord
from commit_organizer.grouping.group_model import CommitPlan
from commit_organizer.organizer import NothingToCommit, build_plan
from commit_organizer.reader.change_reader import RepositoryUnavailable, open_repository, read_changes
from commit_organizer.sequencing.commit_sequencer import CommitRejected, CommitResult, CommitSequencer

# Module-level logger with a null handler and propagation disabled, so
# that nothing is emitted until the CLI configures logging itself.
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
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_COMMIT_REJECTED = 6
EXIT_DECLINED = 7

TOTAL_STEPS = 6


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Prints a task line on entry and its duration on exit."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            click.echo(f"  ✓ Done ({time.time() - self.start_time:.1f}s)")
        return False


def print_step(step_num: int, message: str):
    click.echo(f"\n{'=' * 60}")
    click.echo(f"Step {step_num}/{TOTAL_STEPS}: {message}")
    click.echo(f"{'=' * 60}")


def print_info(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}ℹ {message}")


def print_success(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✓ {message}")


def print_warning(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}⚠ {message}")


def print_error(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✗ {message}", err=True)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def print_excluded(excluded: List[ExcludedRecord]) -> None:
    if not excluded:
        print_success("No sensitive paths found")
        return
    print_warning(f"Excluded {_plural(len(excluded), 'path')} from every commit:")
    for item in excluded:
        print_info(f"{item.path} ({item.reason})", indent=1)


def print_plan(plan: CommitPlan) -> None:
    """Show every planned commit with its message and files."""
    for idx, (paths, message) in enumerate(CommitSequencer.preview(plan), start=1):
        group = plan.groups[idx - 1]
        click.echo(f"\n{'─' * 60}")
        click.echo(f"📦 Commit {idx}/{len(plan)} [{click.style(group.category.value, fg='cyan', bold=True)}]")
        click.echo(f"{'─' * 60}")
        for line in str(message).splitlines():
            click.echo(f"   │ {line}")
        click.echo(f"\n   📄 Files ({len(paths)}):")
        for path in paths:
            click.echo(f"   • {path}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

@click.command()
@click.option(
    "--repo",
    "repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository to organize (defaults to the current directory).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file extending the built-in exclusion policy.",
)
@click.option("--dry-run", is_flag=True, help="Show the commit plan without committing.")
@click.option("--yes", "yes", is_flag=True, help="Create the planned commits without asking.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="organize-commits")
def main(repo: Optional[Path], config_path: Optional[Path], dry_run: bool, yes: bool, verbose: bool) -> None:
    """Split uncommitted changes into cohesive, atomic commits.

    Changes are grouped into configuration, refactoring, feature, fix,
    test, documentation and formatting commits, which are created in
    that order. Secrets and build artifacts are never committed.
    """
    # force=True so that repeated invocations (tests) reconfigure handlers
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    ctx = click.get_current_context(silent=True)

    try:
        start = repo if repo is not None else Path.cwd()

        print_step(1, "Detecting Repository")
        try:
            with ProgressIndicator("Looking for a Git repository"):
                client = open_repository(start)
        except RepositoryUnavailable as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_NO_REPO)
        print_success(f"Found Git repository at: {client.repo_root}")

        print_step(2, "Loading Configuration")
        try:
            policy = load_policy(config_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        source = config_path if config_path is not None else "built-in defaults"
        print_success(f"Exclusion policy loaded from {source}")
        print_info(
            f"{_plural(len(policy.path_patterns), 'path rule')}, "
            f"{_plural(len(policy.secret_patterns), 'secret rule')}",
            indent=1,
        )

        print_step(3, "Reading Changes")
        try:
            with ProgressIndicator("Scanning the working tree"):
                records = read_changes(client)
        except RepositoryUnavailable as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_NO_REPO)
        print_success(f"Found {_plural(len(records), 'changed file')}")
        for record in records[:5]:
            print_info(f"{record.status.value:<9} {record.path}", indent=1)
        if len(records) > 5:
            print_info(f"... and {len(records) - 5} more", indent=1)

        print_step(4, "Planning Commits")
        try:
            outcome = build_plan(records, policy)
        except NothingToCommit as exc:
            print_excluded(exc.excluded)
            print_warning(str(exc))
            raise click.exceptions.Exit(EXIT_NO_CHANGES)
        print_excluded(outcome.excluded)
        print_success(f"Planned {_plural(len(outcome.plan), 'commit')}")

        print_step(5, "Review")
        print_plan(outcome.plan)
        if dry_run:
            click.echo("\n🔍 Dry run: no commits were created.\n")
            raise click.exceptions.Exit(EXIT_SUCCESS)
        if not yes:
            click.echo("")
            if not click.confirm(f"   Create {_plural(len(outcome.plan), 'commit')}?", default=True):
                print_warning("Plan declined; no changes committed.")
                raise click.exceptions.Exit(EXIT_DECLINED)

        print_step(6, "Committing")

        def report(index: int, result: CommitResult) -> None:
            print_success(f"[{index + 1}/{len(outcome.plan)}] {result.sha[:7]} {result.message.subject}")

        try:
            commits = CommitSequencer(client).run(outcome.plan, on_commit=report)
        except CommitRejected as exc:
            print_error(f"Commit {exc.failed_index + 1} [{exc.group.category.value}] was rejected: {exc.reason}")
            for path in exc.group.paths:
                print_info(path, indent=1)
            print_info(
                f"{_plural(len(exc.committed), 'commit')} created before the failure; "
                "resolve the problem and run again to continue.",
                indent=1,
            )
            raise click.exceptions.Exit(EXIT_COMMIT_REJECTED)

        click.echo(f"\n✨ Created {_plural(len(commits), 'commit')}.\n")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
