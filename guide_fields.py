"""Header field extraction for shipping guides.

Each field is resolved by an ordered list of strategies. A strategy is a pure
function of the page that returns the field's text, or "" when its anchor is
missing; the first non-empty result wins. Labels are those printed on the
Chilean "guía de despacho" forms this is tuned for.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from guide_layout import DEFAULT_MAX_DISTANCE, find_label, same_line_right, value_after_label, value_for_labels
from guide_models import FieldRecord, Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuidePage:
    """Tokens of one page in reading order plus their space-joined text."""

    tokens: list[Token]
    full_text: str
    max_distance: float = DEFAULT_MAX_DISTANCE

    @classmethod
    def from_tokens(cls, tokens: list[Token], max_distance: float = DEFAULT_MAX_DISTANCE) -> GuidePage:
        return cls(tokens=tokens, full_text=" ".join(t.text for t in tokens), max_distance=max_distance)


Strategy = Callable[[GuidePage], str]


# ---------------------------------------------------------------------------
# Pattern fields
# ---------------------------------------------------------------------------

_DATE_RE = re.compile(r"\d{2}[-/]\d{2}[-/]\d{4}")
_PLATE_RE = re.compile(r"\b([A-Z]{4}-?\d{2}|[A-Z]{2}-?\d{4})\b")
_DOCUMENT_NUMBER_RE = re.compile(r"N[º°]\s*:\s*0*(\d+)", re.IGNORECASE)


def extract_date(page: GuidePage) -> str:
    m = _DATE_RE.search(page.full_text)
    return m.group().replace("/", "-") if m else ""


def extract_plate(page: GuidePage) -> str:
    m = _PLATE_RE.search(page.full_text)
    return m.group().replace("-", "") if m else ""


def extract_document_number(page: GuidePage) -> str:
    """Folio after a bare "Nº:" (so "Nº Contrato" is skipped), without leading zeros."""
    m = _DOCUMENT_NUMBER_RE.search(page.full_text)
    return m.group(1) if m else ""


# ---------------------------------------------------------------------------
# Label-anchored fields
# ---------------------------------------------------------------------------

_LEADING_COLON_RE = re.compile(r"^:\s*")


def _cleaned(value: str, trailing: str | None = None) -> str:
    """Drop a leading ": " and cut at the next column's label caught by the line scan."""
    value = _LEADING_COLON_RE.sub("", value)
    if trailing is not None:
        value = re.sub(trailing + ".*$", "", value, flags=re.IGNORECASE)
    return value.strip()


def _labelled(patterns: list[str], trailing: str | None = None) -> Strategy:
    def strategy(page: GuidePage) -> str:
        value = value_for_labels(page.tokens, patterns, page.max_distance)
        return _cleaned(value, trailing) if value else ""

    return strategy


_ADDRESS_LABEL_RE = re.compile(r"DIRECCI.N", re.IGNORECASE)
_DESTINATION_RE = re.compile(r"DESTINO", re.IGNORECASE)
_ORIGIN_TRAILING = r"N. DOC. INTERNO"


def extract_origin_address(page: GuidePage) -> str:
    """Value of the first address label that is not the destination address.

    Falls back to the recipient label only when the address label is missing
    or has nothing next to it; a value that cleans down to "" stays empty.
    """
    label = next(
        (
            t
            for t in page.tokens
            if _ADDRESS_LABEL_RE.search(t.text) and not _DESTINATION_RE.search(t.text)
        ),
        None,
    )
    value = value_after_label(page.tokens, label, page.max_distance) if label is not None else ""
    if not value:
        value = value_for_labels(page.tokens, [r"Se.or\s*\(es\)"], page.max_distance)
    return _cleaned(value, _ORIGIN_TRAILING) if value else ""


# ---------------------------------------------------------------------------
# National ID (RUN / RUT)
# ---------------------------------------------------------------------------

_RUN_RE = re.compile(r"\d{1,2}\.?\d{3}\.?\d{3}-[\dkK]")
_RUN_LABELS = [r"RUT Chofer", r"RUT Transportista", r"RUT\s*Transport"]
_RUN_LABEL_DISTANCE = 200
_INDIVIDUAL_PREFIX_LIMIT = 50


def run_prefix(run: str) -> int:
    """Leading numeric group of a RUN: "12.345.678-9" -> 12, "7654321-0" -> 7."""
    digits = re.sub(r"\D", "", run.split("-", 1)[0])
    return int(digits[:-6] or "0")


def _labelled_run(page: GuidePage) -> str:
    for pattern in _RUN_LABELS:
        label = find_label(page.tokens, pattern)
        if label is None:
            continue
        for t in same_line_right(page.tokens, label, _RUN_LABEL_DISTANCE):
            m = _RUN_RE.search(t.text)
            if m:
                return m.group()
    return ""


def _fallback_run(page: GuidePage) -> str:
    """Pick among every RUN on the page, preferring people over companies.

    Company RUTs start at 50 million and up; when several personal RUNs are
    present the last one wins, as the signature block comes last.
    """
    runs = _RUN_RE.findall(page.full_text)
    if not runs:
        return ""
    individuals = [r for r in runs if run_prefix(r) < _INDIVIDUAL_PREFIX_LIMIT]
    logger.debug("RUN fallback: %d candidates, %d individual", len(runs), len(individuals))
    if individuals:
        return individuals[-1]
    return runs[-1]


# ---------------------------------------------------------------------------
# Strategy table
# ---------------------------------------------------------------------------

FIELD_STRATEGIES: list[tuple[str, list[Strategy]]] = [
    ("date", [extract_date]),
    ("plate", [extract_plate]),
    (
        "destination",
        [_labelled([r"Direcci.n Destino", r"Lugar de Destino"], trailing=r"Comuna Destino")],
    ),
    ("origin", [extract_origin_address]),
    ("document_number", [extract_document_number]),
    ("driver", [_labelled([r"Nombre Chofer", r"Chofer"], trailing=r"RUT Chofer")]),
    ("coordinator", [_labelled([r"Nombre Coordinador"])]),
    ("national_id", [_labelled_run, _fallback_run]),
    ("vehicle_type", [_labelled([r"Tipo\s*(de\s*)?Veh.culo"])]),
    ("contract_number", [_labelled([r"N[º°]?\s*(de\s*)?Contrato"])]),
]


def extract_fields(page: GuidePage) -> FieldRecord:
    """Run every field's strategies against *page*."""
    record = FieldRecord()
    for name, strategies in FIELD_STRATEGIES:
        for strategy in strategies:
            value = strategy(page)
            if value:
                setattr(record, name, value)
                break
        else:
            logger.debug("field %s not found", name)
    return record
