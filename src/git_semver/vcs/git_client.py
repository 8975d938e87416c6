"""
Git client implementation for git_semver.

This module wraps the read-only Git queries used to derive a version.
All subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily. Nothing here creates or moves refs.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class AmbiguousRefError(GitError):
    """Raised when a reference cannot be resolved to a commit."""

    pass


class GitClient:
    """Client for querying a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached. ``.git`` may be a file for worktrees.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError(f"Git is not installed or not on PATH: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Repository state
    # ------------------------------------------------------------------
    def has_any_commit(self) -> bool:
        """Return True if any ref in the repository points at a commit."""
        result = self._run(["rev-list", "-n1", "--all"], check=False)
        return bool(result.stdout.strip())

    def has_remote(self) -> bool:
        """Return True if the repository has at least one remote configured."""
        result = self._run(["remote"], check=False)
        return bool(result.stdout.strip())

    def resolve_ref(self, ref: str) -> Optional[str]:
        """Return the commit SHA ``ref`` points at, or None if it does not exist."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], check=False)
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            return None
        return sha

    def require_ref(self, ref: str) -> str:
        """Like :meth:`resolve_ref` but raise :class:`AmbiguousRefError` on failure."""
        sha = self.resolve_ref(ref)
        if sha is None:
            raise AmbiguousRefError(f"Unknown or ambiguous reference: {ref}")
        return sha

    def merge_base(self, first: str, second: str) -> str:
        """Return the best common ancestor of two refs.

        Raises
        ------
        GitError
            If either ref is unknown or the two histories are unrelated.
        """
        result = self._run(["merge-base", first, second], check=False)
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            raise GitError(f"No common ancestor between {first} and {second}")
        return sha

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def _tag_commits(self, pattern: str) -> List[Tuple[str, str]]:
        """Return ``(tag, commit)`` pairs, highest version first.

        Annotated tags are peeled to the commit they point at.
        """
        result = self._run(
            [
                "tag",
                "--list",
                pattern,
                "--sort=-v:refname",
                "--format=%(refname:short) %(objectname) %(*objectname)",
            ],
            check=True,
        )
        pairs = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 2:
                pairs.append((parts[0], parts[-1]))
        return pairs

    def _merged_tags(self, pattern: str, branch: str) -> Set[str]:
        result = self._run(["tag", "--list", pattern, "--merged", branch], check=True)
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    def list_tags(
        self,
        pattern: str = "*",
        branch: Optional[str] = None,
        exclude_commit: Optional[str] = None,
    ) -> List[str]:
        """List tags matching the glob ``pattern``.

        Without ``branch`` tags are returned highest version first. With
        ``branch`` they are ordered by commit-graph proximity to it,
        nearest first; the tag creation time plays no role. Tags sharing
        no history with ``branch`` are dropped, as are tags pointing at
        ``exclude_commit``.

        Distances are computed once per tagged commit. Tags already
        merged into ``branch`` need no ``merge-base`` call.
        """
        pairs = self._tag_commits(pattern)
        if exclude_commit is not None:
            pairs = [(tag, commit) for tag, commit in pairs if commit != exclude_commit]
        if branch is None:
            return [tag for tag, _ in pairs]

        merged = self._merged_tags(pattern, branch)
        bases: Dict[str, Optional[str]] = {}
        counts: Dict[str, int] = {}
        ranked: List[Tuple[int, int, str]] = []
        for position, (tag, commit) in enumerate(pairs):
            if commit not in bases:
                if tag in merged:
                    bases[commit] = commit
                else:
                    try:
                        bases[commit] = self.merge_base(commit, branch)
                    except GitError:
                        bases[commit] = None
            base = bases[commit]
            if base is None:
                logger.debug("Skipping tag %s: unrelated to %s", tag, branch)
                continue
            if base not in counts:
                result = self._run(["rev-list", "--count", f"{base}..{branch}"], check=True)
                counts[base] = int(result.stdout.strip() or 0)
            ranked.append((counts[base], position, tag))
        ranked.sort()
        return [tag for _, _, tag in ranked]

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def commit_subjects(self, root: str, branch_tip: str) -> List[str]:
        """Return subject lines of commits in ``root..branch_tip``, oldest first.

        An empty ``root`` selects the whole history of ``branch_tip``.
        """
        revision = f"{root}..{branch_tip}" if root else branch_tip
        result = self._run(
            ["log", "--pretty=format:%s", "--author-date-order", revision], check=True
        )
        subjects = [line for line in result.stdout.splitlines() if line.strip()]
        subjects.reverse()
        return subjects

    def changed_paths(self, root: str, branch_tip: str, path_filter: str) -> Set[str]:
        """Return paths under ``path_filter`` changed between ``root`` and ``branch_tip``."""
        if root:
            args = ["diff", "--name-only", root, branch_tip, "--", path_filter]
        else:
            args = ["log", "--pretty=format:", "--name-only", branch_tip, "--", path_filter]
        result = self._run(args, check=True)
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}
