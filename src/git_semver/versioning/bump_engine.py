"""
Next-version computation.

Given the version of the most recent tag, the classified history since
that tag and, optionally, a competing release tag, compute the next
version. The increment counts the commits that follow the commit which
defined the version, so it is 0 on the triggering commit itself.
"""

from __future__ import annotations

import logging
from typing import Optional

from .model import Classification, VersionState


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _commits_after(history_length: int, index: int) -> int:
    return max(history_length - (index + 1), 0)


def regular_bump(
    current: VersionState, classification: Classification, history_length: int
) -> VersionState:
    """Bump ``current`` according to the markers found in the history.

    A major marker always wins over a minor marker, regardless of their
    order in the history.
    """
    if classification.major_index is not None:
        logger.debug("Major marker at commit %d", classification.major_index)
        return VersionState(
            current.major + 1,
            0,
            0,
            _commits_after(history_length, classification.major_index),
        )
    if classification.minor_index is not None:
        logger.debug("Minor marker at commit %d", classification.minor_index)
        return VersionState(
            current.major,
            current.minor + 1,
            0,
            _commits_after(history_length, classification.minor_index),
        )
    return VersionState(
        current.major,
        current.minor,
        current.patch + 1,
        _commits_after(history_length, 0),
    )


def race_aware_bump(
    current: VersionState,
    release: VersionState,
    classification: Classification,
    history_length: int,
) -> VersionState:
    """Reconcile a development version against a release tagged elsewhere.

    ``current`` comes from a development tag; ``release`` is the nearest
    release tag preceding it. If the release has caught up with (or
    passed) the working version on the axis the history asks to bump,
    the regular bump is applied on top of the release. Otherwise this
    branch is already ahead and only the development counter advances.
    Equal tuples count as caught up.
    """
    major_ok = release.major >= current.major
    minor_ok = major_ok and release.minor >= current.minor

    if classification.major_index is not None and major_ok:
        return regular_bump(release, classification, history_length)
    if classification.minor_index is not None and minor_ok:
        return regular_bump(release, classification, history_length)
    if minor_ok and release.patch >= current.patch:
        return regular_bump(release, classification, history_length)

    logger.debug(
        "Release %s is behind working version %s; advancing increment only",
        release.main(),
        current.main(),
    )
    return current.with_increment((current.increment or 0) + 1)


def next_version(
    current: Optional[VersionState],
    classification: Classification,
    history_length: int,
    release: Optional[VersionState] = None,
) -> VersionState:
    """Compute the next version.

    Parameters
    ----------
    current : Optional[VersionState]
        Version of the most recent tag, or ``None`` when no tag exists.
    classification : Classification
        Marker indices for the history since that tag.
    history_length : int
        Number of commits in that history.
    release : Optional[VersionState]
        Nearest preceding release tag when ``current`` is a development
        version. Ignored otherwise.
    """
    if current is None:
        return regular_bump(VersionState(), classification, history_length)
    if release is not None and not current.is_release:
        return race_aware_bump(current, release, classification, history_length)
    return regular_bump(current, classification, history_length)
