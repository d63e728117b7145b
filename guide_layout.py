from __future__ import annotations

import re

from guide_models import Token

_SAME_LINE_TOLERANCE = 5
_BELOW_LINE_WINDOW = 20
_BELOW_LINE_X_WINDOW = 100
DEFAULT_MAX_DISTANCE = 300


def _compile(pattern: str | re.Pattern) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE)


def find_label(tokens: list[Token], pattern: str | re.Pattern) -> Token | None:
    """Return the first token in *tokens* whose text matches *pattern*, or None.

    String patterns are compiled case-insensitively.
    """
    regex = _compile(pattern)
    for token in tokens:
        if regex.search(token.text):
            return token
    return None


def same_line_right(
    tokens: list[Token],
    label: Token,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> list[Token]:
    """Tokens on the label's line, strictly to its right and within *max_distance*."""
    return [
        t
        for t in tokens
        if abs(t.y - label.y) < _SAME_LINE_TOLERANCE
        and t.x > label.x
        and (t.x - label.x) < max_distance
    ]


def value_after_label(
    tokens: list[Token],
    label: Token,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> str:
    """Return the text that belongs to *label*.

    Prefers the rest of the label's own line (left to right); otherwise takes
    what sits just underneath it, roughly aligned with its left edge.
    """
    right = same_line_right(tokens, label, max_distance)
    if right:
        right.sort(key=lambda t: t.x)
        return " ".join(t.text for t in right).strip()

    below = [
        t
        for t in tokens
        if t.y < label.y
        and (label.y - t.y) < _BELOW_LINE_WINDOW
        and abs(t.x - label.x) < _BELOW_LINE_X_WINDOW
    ]
    if below:
        return " ".join(t.text for t in below).strip()

    return ""


def value_for_labels(
    tokens: list[Token],
    patterns: list[str],
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> str:
    """Try each label pattern in priority order; first non-empty value wins."""
    for pattern in patterns:
        label = find_label(tokens, pattern)
        if label is None:
            continue
        value = value_after_label(tokens, label, max_distance)
        if value:
            return value
    return ""
