"""Item table reconstruction.

The table has no ruling we can rely on, so rows are rebuilt from the column
geometry of the header line: a number in the CANTIDAD column opens a row,
and text between that column and the price/total column on the same line is
its description. The walk stops at the first footer label.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace

from guide_layout import find_label
from guide_models import LineItem, Token
from guide_tokens import reading_order

logger = logging.getLogger(__name__)

_QUANTITY_HEADER_RE = re.compile(r"CANTIDAD", re.IGNORECASE)
_DESCRIPTION_HEADER_RE = re.compile(r"DESCRIPCI.N", re.IGNORECASE)
_PRICE_HEADER_RE = re.compile(r"P\.?\s*UNIT|PRECIO", re.IGNORECASE)
_TOTAL_HEADER_RE = re.compile(r"VALOR\s*TOTAL|TOTAL", re.IGNORECASE)
_STOP_WORD_RE = re.compile(
    r"TOTAL|OBSERVACIONES|RECIBIDO|FIRMA|RUT Transportista|Tipo Traslado|Comuna Destino",
    re.IGNORECASE,
)
_QUANTITY_RE = re.compile(r"^[\d.,]+$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

_QUANTITY_BAND = 50
_HEADER_LINE_TOLERANCE = 20
_HEADER_SKIP = 10
_RIGHT_MARGIN = 10
_ROW_TOLERANCE = 5


@dataclass(frozen=True)
class TableColumns:
    """x-geometry of the item table, taken from its header line."""

    header_y: float
    quantity_x: float
    description_max_x: float = math.inf

    def in_quantity_band(self, token: Token) -> bool:
        return abs(token.x - self.quantity_x) < _QUANTITY_BAND

    def in_description(self, token: Token) -> bool:
        return self.quantity_x + _QUANTITY_BAND < token.x < self.description_max_x


@dataclass(frozen=True)
class OpenRow:
    """A row whose quantity has been seen; description still accumulating."""

    sequence_label: str
    quantity: str
    anchor_y: float
    description: str = ""

    def to_item(self) -> LineItem:
        return LineItem(
            sequence_label=self.sequence_label,
            quantity=self.quantity,
            description=self.description.strip(),
        )


@dataclass(frozen=True)
class TableState:
    rows: tuple[LineItem, ...] = ()
    current: OpenRow | None = None
    counter: int = 1
    stopped: bool = False

    def committed(self) -> TableState:
        """Move the open row, if any, into rows."""
        if self.current is None:
            return self
        return replace(self, rows=self.rows + (self.current.to_item(),), current=None)


def find_columns(tokens: list[Token]) -> TableColumns | None:
    """Locate the table header; None when CANTIDAD or DESCRIPCIÓN is missing."""
    quantity = find_label(tokens, _QUANTITY_HEADER_RE)
    description = find_label(tokens, _DESCRIPTION_HEADER_RE)
    if quantity is None or description is None:
        logger.debug("no item table: quantity=%s description=%s", quantity, description)
        return None

    max_x = math.inf
    for pattern in (_PRICE_HEADER_RE, _TOTAL_HEADER_RE):
        bound = find_label(tokens, pattern)
        if bound is not None and abs(bound.y - quantity.y) < _HEADER_LINE_TOLERANCE:
            max_x = bound.x - _RIGHT_MARGIN
            break

    return TableColumns(header_y=quantity.y, quantity_x=quantity.x, description_max_x=max_x)


def step(state: TableState, token: Token, columns: TableColumns) -> TableState:
    """Advance the row walk by one token."""
    if state.stopped:
        return state

    text = token.text.strip()

    if _STOP_WORD_RE.search(token.text):
        logger.debug("item table ends at %r (y=%.1f)", token.text, token.y)
        return replace(state, stopped=True)

    if columns.in_quantity_band(token) and _QUANTITY_RE.match(text):
        state = state.committed()
        row = OpenRow(sequence_label=str(state.counter), quantity=token.text, anchor_y=token.y)
        return replace(state, current=row, counter=state.counter + 1)

    row = state.current
    if (
        row is not None
        and columns.in_description(token)
        and abs(token.y - row.anchor_y) < _ROW_TOLERANCE
        and text
    ):
        description = f"{row.description} {text}" if row.description else text
        return replace(state, current=replace(row, description=description))

    return state


def reconstruct_items(tokens: list[Token]) -> list[LineItem]:
    """Rebuild the item rows below the table header, in table order."""
    columns = find_columns(tokens)
    if columns is None:
        return []

    candidates = reading_order([t for t in tokens if t.y < columns.header_y - _HEADER_SKIP])

    state = TableState()
    for token in candidates:
        state = step(state, token, columns)
        if state.stopped:
            break

    rows = list(state.committed().rows)
    logger.debug("item table: %d rows", len(rows))
    return rows


def normalize_quantity(text: str) -> str:
    """Whole-unit quantity, zero-padded to two digits: "7" -> "07", "43,00" -> "43".

    Text with no leading integer is kept, upper-cased.
    """
    m = _LEADING_INT_RE.match(text.replace(",", "."))
    if m is None:
        return text.upper()
    return str(int(m.group(1))).zfill(2)
