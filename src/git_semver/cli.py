"""
Command line interface for the git_semver tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``git-semver`` command. It resolves the
configuration, locates the repository, runs the version calculation and
surfaces the results on stdout and, inside GitHub Actions, in the
``GITHUB_OUTPUT`` file. Diagnostics go to stderr so stdout stays
machine readable.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

import click

from git_semver import __version__
from git_semver.calculator import VersionCalculator, VersionResult
from git_semver.config.loader import CONFIG_FILE_NAME, ConfigError, load_config
from git_semver.vcs.git_client import AmbiguousRefError, GitClient, GitError
from git_semver.versioning.tag_parser import ParseError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 4
EXIT_PARSE_ERROR = 5
EXIT_VCS_FAILURE = 6


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Output surface
# ---------------------------------------------------------------------------

def write_github_output(path: Path, outputs: Dict[str, str]) -> None:
    """Append ``outputs`` to a GitHub Actions output file."""
    with open(path, "a", encoding="utf-8") as handle:
        for key, value in outputs.items():
            handle.write(f"{key}={value}\n")


def emit_outputs(
    result: VersionResult,
    branch: str,
    as_json: bool = False,
    github_output: Optional[Path] = None,
) -> None:
    """Surface the calculated version to the caller."""
    outputs = result.outputs()

    print_success(f"Version is {result.formatted.version}")
    repository = os.environ.get("GITHUB_REPOSITORY")
    if repository:
        target = branch.split("/")[-1]
        print_info(
            "To create a release for this version, go to "
            f"https://github.com/{repository}/releases/new?tag={result.formatted.tag}&target={target}"
        )

    if as_json:
        click.echo(json.dumps(outputs, indent=2))
    else:
        for key, value in outputs.items():
            click.echo(f"{key}={value}")

    if github_output is not None:
        write_github_output(github_output, outputs)
        logger.debug("Wrote outputs to %s", github_output)


def _option(name: str, help_text: str):
    return click.option(
        f"--{name.replace('_', '-')}",
        name,
        envvar=f"INPUT_{name.upper()}",
        default=None,
        help=help_text,
    )


@click.command()
@_option("branch", "Branch (or ref) to compute the version for.")
@_option("tag_prefix", "Prefix of version tags, e.g. 'v'.")
@_option("major_pattern", "Commit message substring that triggers a major bump.")
@_option("minor_pattern", "Commit message substring that triggers a minor bump.")
@_option("main_format", "Template for the main version, e.g. '${major}.${minor}.${patch}'.")
@_option("increment_format", "Template for the increment, e.g. '${increment}'.")
@_option("increment_delimiter", "Separator between the main version and the increment.")
@_option("change_path", "Only report 'changed' when files under this path changed.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"JSON configuration file (default: {CONFIG_FILE_NAME} in the repository root).",
)
@click.option(
    "--repo",
    "repo_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory inside the repository (default: current directory).",
)
@click.option("--json", "as_json", is_flag=True, help="Print outputs as a JSON object.")
@click.option(
    "--github-output",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITHUB_OUTPUT",
    help="Append outputs to this file (defaults to $GITHUB_OUTPUT).",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="git-semver")
def main(
    branch: Optional[str],
    tag_prefix: Optional[str],
    major_pattern: Optional[str],
    minor_pattern: Optional[str],
    main_format: Optional[str],
    increment_format: Optional[str],
    increment_delimiter: Optional[str],
    change_path: Optional[str],
    config_path: Optional[Path],
    repo_dir: Optional[Path],
    as_json: bool,
    github_output: Optional[Path],
    verbose: bool,
) -> None:
    """Compute a semantic version for a Git branch from its tags and commits."""
    # Use force=True to ensure handlers are reconfigured on subsequent
    # invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    ctx = click.get_current_context(silent=True)

    try:
        start = repo_dir or Path.cwd()
        repo_root = GitClient.find_repo_root(start)

        # Configuration is validated before any Git command runs.
        if config_path is None and repo_root is not None:
            default_path = repo_root / CONFIG_FILE_NAME
            config_path = default_path if default_path.exists() else None
        overrides = {
            "branch": branch,
            "tag_prefix": tag_prefix,
            "major_pattern": major_pattern,
            "minor_pattern": minor_pattern,
            "main_format": main_format,
            "increment_format": increment_format,
            "increment_delimiter": increment_delimiter,
            "change_path": change_path,
        }
        try:
            config = load_config(config_path, {k: v or None for k, v in overrides.items()})
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        if repo_root is None:
            print_error(f"No Git repository found at or above {start}.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        calculator = VersionCalculator(GitClient(repo_root), config)
        try:
            result = calculator.calculate()
        except ParseError as exc:
            print_error(f"Tag parse error: {exc}")
            raise click.exceptions.Exit(EXIT_PARSE_ERROR)
        except AmbiguousRefError as exc:
            print_error(f"Cannot resolve branch '{config.branch}': {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        emit_outputs(result, config.branch, as_json=as_json, github_output=github_output)
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
