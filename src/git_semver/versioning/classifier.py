"""
Commit message classification.

The classifier looks for the oldest commit carrying a major or minor
marker. Matching is a plain case-insensitive substring test; commit
message grammar is not validated.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .model import Classification


def first_match(history: Sequence[str], pattern: str) -> Optional[int]:
    """Return the index of the first message containing ``pattern``."""
    needle = pattern.casefold()
    for index, message in enumerate(history):
        if needle in message.casefold():
            return index
    return None


def classify(history: Sequence[str], major_pattern: str, minor_pattern: str) -> Classification:
    """Classify a history, oldest commit first.

    Both indices are computed independently, so a single message may
    match both patterns.
    """
    return Classification(
        major_index=first_match(history, major_pattern),
        minor_index=first_match(history, minor_pattern),
    )
