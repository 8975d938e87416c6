"""
Tag parsing for git_semver.

Tags look like ``<prefix><major>[.<minor>[.<patch>]][<delimiter><increment>]``
and may be qualified by a ref namespace (``refs/tags/v1.2.3`` or
``release/v1.2.3``). Only the last path segment is considered.
"""

from __future__ import annotations

from typing import List

from .model import ParsedTag, VersionState


class ParseError(ValueError):
    """Raised when a tag does not encode a numeric version."""

    pass


def _strip(tag: str, prefix: str) -> str:
    name = tag.split("/")[-1]
    if prefix and name.startswith(prefix):
        name = name[len(prefix):]
    return name


def _to_int(tag: str, value: str) -> int:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ParseError(f"Invalid tag {tag}: '{value}' is not a number")
    return int(value)


def is_release_tag(tag: str, prefix: str, delimiter: str) -> bool:
    """Return True if ``tag`` carries no increment suffix."""
    return delimiter not in _strip(tag, prefix)


def parse_tag(tag: str, prefix: str, delimiter: str) -> ParsedTag:
    """Parse ``tag`` into a :class:`ParsedTag`.

    Parameters
    ----------
    tag : str
        Tag name, optionally namespaced with ``/``.
    prefix : str
        Tag prefix to strip, e.g. ``"v"``. May be empty.
    delimiter : str
        Separator between the main version and the increment.

    Returns
    -------
    ParsedTag
        Absent minor/patch components default to 0. The increment is
        ``None`` when the tag has no (or an empty) increment suffix.

    Raises
    ------
    ParseError
        If any version component is not a non-negative integer.
    """
    remainder = _strip(tag, prefix)
    segments: List[str] = remainder.split(delimiter, 1) if delimiter else [remainder]

    # Components past patch are ignored.
    main = segments[0].split(".")[:3]
    numbers = [_to_int(tag, part) for part in main] + [0] * (3 - len(main))

    increment = None
    if len(segments) > 1 and segments[1] != "":
        increment = _to_int(tag, segments[1])

    return ParsedTag(
        name=tag,
        state=VersionState(numbers[0], numbers[1], numbers[2], increment),
    )
