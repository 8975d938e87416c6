"""
Version control integration.

This package wraps the ``git`` binary with the handful of queries the
version calculator needs: tags, merge bases, commit subjects and
changed paths.
"""

from .git_client import AmbiguousRefError, GitClient, GitError  # noqa: F401
