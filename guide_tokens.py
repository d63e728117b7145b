from __future__ import annotations

import logging
from functools import cmp_to_key
from pathlib import Path

import pdfplumber

from guide_models import GuideParseError, Token

logger = logging.getLogger(__name__)

_LINE_TOLERANCE = 4
_BASELINE_TOLERANCE = 2.0
_MIN_GAP = 4.0
_WORD_SPACE_RATIO = 0.25


def _make_token(text: str, x0: float, x1: float, y: float, height: float) -> Token | None:
    text = text.rstrip()
    if not text:
        return None
    return Token(text=text, x=x0, y=y, width=x1 - x0, height=height)


def chars_to_tokens(chars: list[dict]) -> list[Token]:
    """Rebuild text runs from pdfplumber's page.chars, in content-stream order.

    Consecutive characters sharing a baseline are joined into one run, single
    spaces included, so multi-word labels like "Dirección Destino" stay in one
    token. A run is split when the baseline changes, when the next character
    jumps backwards or further right than 1.5 average character widths, or on
    a double space (forms often pad columns with spaces instead of moving the
    cursor). A small jump with no space glyph, wider than a quarter of the
    average character width, is read as a word break and becomes one space.

    ``y`` is pdfplumber's ``y0``, measured from the bottom of the page.
    """
    tokens: list[Token] = []
    current_text = ""
    current_x0 = 0.0
    current_x1 = 0.0
    current_y = 0.0
    current_height = 0.0

    for c in chars:
        ch = c["text"]

        if current_text:
            gap = c["x0"] - current_x1
            avg_char_width = (current_x1 - current_x0) / len(current_text)
            new_line = abs(c["y0"] - current_y) > _BASELINE_TOLERANCE
            is_gap = gap > max(avg_char_width * 1.5, _MIN_GAP) or gap < -avg_char_width
            double_space = ch == " " and current_text.endswith(" ")

            if new_line or is_gap or double_space:
                token = _make_token(current_text, current_x0, current_x1, current_y, current_height)
                if token is not None:
                    tokens.append(token)
                current_text = ""
            elif (
                gap > avg_char_width * _WORD_SPACE_RATIO
                and ch != " "
                and not current_text.endswith(" ")
            ):
                # word break drawn as a cursor move, no space glyph
                current_text += " "

        if not current_text:
            if ch.isspace():
                continue
            current_x0 = c["x0"]
            current_y = c["y0"]
            current_height = 0.0

        current_text += ch
        current_x1 = c["x1"]
        current_height = max(current_height, c.get("height", 0.0))

    if current_text:
        token = _make_token(current_text, current_x0, current_x1, current_y, current_height)
        if token is not None:
            tokens.append(token)

    return tokens


def load_page_tokens(pdf_path: str | Path, page_number: int = 1) -> list[Token]:
    """Open *pdf_path* and return the tokens of one (1-based) page.

    Any failure to read the document is reported as a single GuideParseError
    wrapping the underlying cause.
    """
    path = Path(pdf_path)
    if page_number < 1:
        raise GuideParseError(f"invalid page number {page_number} for {path}")

    try:
        with pdfplumber.open(path) as pdf:
            page = pdf.pages[page_number - 1]
            chars = page.chars
    except Exception as exc:
        logger.error("could not read page %d of %s: %s", page_number, path, exc)
        raise GuideParseError(f"could not read page {page_number} of {path}: {exc}") from exc

    tokens = chars_to_tokens(chars)
    logger.debug("page %d of %s: %d chars -> %d tokens", page_number, path, len(chars), len(tokens))
    return tokens


def _compare_reading_order(a: Token, b: Token) -> float:
    y_diff = b.y - a.y
    if abs(y_diff) > _LINE_TOLERANCE:
        return y_diff
    return a.x - b.x


def reading_order(tokens: list[Token]) -> list[Token]:
    """Return *tokens* top to bottom, then left to right within a 4-unit line band.

    The band comparison is not transitive for chains of near-threshold
    deltas; the sort is stable, so the result is still deterministic.
    """
    return sorted(tokens, key=cmp_to_key(_compare_reading_order))
