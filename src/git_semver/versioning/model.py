"""
Data models for version derivation.

The :class:`VersionState` is the (major, minor, patch, increment) tuple
that flows from the tag parser through the bump engine into the
formatter. An ``increment`` of ``None`` marks a release version, i.e. a
tag that carried no increment suffix.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class VersionState:
    """A version tuple.

    Attributes
    ----------
    major, minor, patch : int
        Main version components.
    increment : Optional[int]
        Development counter. ``None`` when the version is a pure release.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    increment: Optional[int] = None

    @property
    def is_release(self) -> bool:
        return self.increment is None

    def with_increment(self, increment: Optional[int]) -> "VersionState":
        return replace(self, increment=increment)

    def main(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class ParsedTag:
    """A tag name together with the version it encodes."""

    name: str
    state: VersionState

    @property
    def is_release(self) -> bool:
        return self.state.is_release


@dataclass(frozen=True)
class Classification:
    """First indices of the major and minor markers in a history.

    ``None`` means no commit in the history matched the pattern.
    """

    major_index: Optional[int] = None
    minor_index: Optional[int] = None


@dataclass(frozen=True)
class FormattedVersion:
    """Rendered version strings."""

    version: str
    tag: str
    release_version: str
    release_tag: str
