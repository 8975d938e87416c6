"""
Version derivation logic for git_semver.

This package holds the pure parts of the tool: parsing tags, classifying
commit messages, computing the next version and rendering it. Nothing in
here talks to Git; see :mod:`git_semver.calculator` for the glue.
"""

from .bump_engine import next_version  # noqa: F401
from .classifier import classify  # noqa: F401
from .formatter import format_version  # noqa: F401
from .model import Classification, FormattedVersion, ParsedTag, VersionState  # noqa: F401
from .tag_parser import ParseError, is_release_tag, parse_tag  # noqa: F401
