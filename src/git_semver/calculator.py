"""
Version calculation for a branch.

:class:`VersionCalculator` ties the Git queries to the pure versioning
functions. The steps are:

1. Pick the tag nearest to the branch (by commit graph) as the current tag.
2. Resolve the root as the merge base of that tag and the branch.
3. Classify the commit subjects after the root.
4. Compute and render the next version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from git_semver.config.loader import VersionConfig
from git_semver.vcs.git_client import GitClient
from git_semver.versioning.bump_engine import next_version
from git_semver.versioning.classifier import classify
from git_semver.versioning.formatter import format_version
from git_semver.versioning.model import FormattedVersion, ParsedTag, VersionState
from git_semver.versioning.tag_parser import is_release_tag, parse_tag


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class VersionResult:
    """Outcome of a version calculation."""

    state: VersionState
    formatted: FormattedVersion
    tag_prefix: str
    changed: bool = True
    current_tag: Optional[str] = None
    release_tag: Optional[str] = None
    history_length: int = 0

    def outputs(self) -> Dict[str, str]:
        """Return the named outputs surfaced to the calling pipeline."""
        return {
            "version": self.formatted.version,
            "tag": self.formatted.tag,
            "release_version": self.formatted.release_version,
            "release_tag": self.formatted.release_tag,
            "major": str(self.state.major),
            "minor": str(self.state.minor),
            "patch": str(self.state.patch),
            "increment": str(self.state.increment if self.state.increment is not None else 0),
            "tag_prefix": self.tag_prefix,
            "changed": str(self.changed).lower(),
        }


def normalize_branch(branch: str, remote_exists: bool) -> str:
    """Map a CI ref to the remote-tracking ref that exists in a clone.

    Only applied when a remote is configured; local refs are kept as is.
    """
    if not remote_exists:
        return branch
    if "refs/pull/" in branch:
        return branch.replace("refs/pull/", "refs/remotes/pull/")
    if "refs/heads/" in branch:
        return branch.replace("refs/heads/", "refs/remotes/origin/")
    return branch


class VersionCalculator:
    """Compute the version of a branch from its tags and history."""

    def __init__(self, client: GitClient, config: VersionConfig) -> None:
        self.client = client
        self.config = config

    def _format(self, state: VersionState) -> FormattedVersion:
        return format_version(
            state,
            self.config.main_format,
            self.config.increment_format,
            self.config.increment_delimiter,
            self.config.tag_prefix,
        )

    def find_tags(self, branch: str) -> Tuple[Optional[ParsedTag], Optional[ParsedTag]]:
        """Return the current tag and, for development tags, the preceding release.

        Tags are searched from the parent of the branch tip, and tags on
        the tip commit are skipped, so the tip never becomes its own root.
        """
        parent = f"{branch}~1"
        if self.client.resolve_ref(parent) is None:
            return None, None
        tip = self.client.require_ref(branch)

        prefix = self.config.tag_prefix
        delimiter = self.config.increment_delimiter
        tags: List[str] = self.client.list_tags(
            f"{prefix}*", branch=parent, exclude_commit=tip
        )
        if not tags:
            return None, None

        current = parse_tag(tags[0], prefix, delimiter)
        if current.is_release:
            return current, None

        for name in tags[1:]:
            if name != current.name and is_release_tag(name, prefix, delimiter):
                return current, parse_tag(name, prefix, delimiter)
        return current, None

    def calculate(self) -> VersionResult:
        """Run the calculation.

        Raises
        ------
        AmbiguousRefError
            If the configured branch does not resolve.
        ParseError
            If the current (or competing release) tag is malformed.
        GitError
            If any other Git query fails.
        """
        config = self.config

        if not self.client.has_any_commit():
            logger.info("Repository has no commits; using the initial version")
            state = VersionState(0, 0, 0, 0)
            return VersionResult(state, self._format(state), config.tag_prefix)

        remote_exists = self.client.has_remote()
        branch = normalize_branch(config.branch, remote_exists)
        self.client.require_ref(branch)

        current, release = self.find_tags(branch)
        if current is None:
            if remote_exists:
                logger.warning(
                    "No tags are present for this repository. If this is unexpected, "
                    "check to ensure that tags have been pulled from the remote."
                )
            root = ""
        else:
            logger.info("Current tag: %s", current.name)
            if release is not None:
                logger.info("Preceding release tag: %s", release.name)
            root = self.client.merge_base(current.name, branch)

        history = self.client.commit_subjects(root, branch)
        logger.debug("Found %d commit(s) since %s", len(history), root or "the first commit")

        changed = True
        if config.change_path:
            changed = bool(self.client.changed_paths(root, branch, config.change_path))

        classification = classify(history, config.major_pattern, config.minor_pattern)
        state = next_version(
            current.state if current else None,
            classification,
            len(history),
            release.state if release else None,
        )
        return VersionResult(
            state=state,
            formatted=self._format(state),
            tag_prefix=config.tag_prefix,
            changed=changed,
            current_tag=current.name if current else None,
            release_tag=release.name if release else None,
            history_length=len(history),
        )
