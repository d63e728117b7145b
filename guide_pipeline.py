from __future__ import annotations

import logging
import warnings
from dataclasses import fields, replace
from pathlib import Path

from guide_fields import GuidePage, extract_fields
from guide_layout import DEFAULT_MAX_DISTANCE
from guide_models import FieldRecord, GuideRecord, LineItem, Token
from guide_table import normalize_quantity, reconstruct_items
from guide_tokens import load_page_tokens, reading_order

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")

logger = logging.getLogger(__name__)


def normalize_record(record: GuideRecord) -> GuideRecord:
    """Upper-case and trim every string; quantities become two-digit integers."""
    normalized = FieldRecord(
        **{f.name: getattr(record.fields, f.name).strip().upper() for f in fields(FieldRecord)}
    )
    items = [
        LineItem(
            sequence_label=item.sequence_label.strip().upper(),
            quantity=normalize_quantity(item.quantity.strip()),
            description=item.description.strip().upper(),
            reference=item.reference.strip().upper(),
        )
        for item in record.items
    ]
    return GuideRecord(fields=normalized, items=items)


def extract_guide(tokens: list[Token], max_distance: float = DEFAULT_MAX_DISTANCE) -> GuideRecord:
    """Build the guide record from one page's tokens, in any order.

    Pure and deterministic: the same tokens always give the same record, and
    anything that cannot be found is left empty.
    """
    ordered = reading_order(tokens)
    page = GuidePage.from_tokens(ordered, max_distance=max_distance)
    record = GuideRecord(fields=extract_fields(page), items=reconstruct_items(ordered))
    return normalize_record(record)


def parse_guide_pdf(
    pdf_path: str | Path,
    page_number: int = 1,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> GuideRecord:
    """Read one page of a guide PDF and extract its record.

    Raises GuideParseError when the page cannot be read.
    """
    tokens = load_page_tokens(pdf_path, page_number)
    record = extract_guide(tokens, max_distance)
    logger.info(
        "%s: %d tokens, %d fields, %d items",
        pdf_path,
        len(tokens),
        sum(1 for f in fields(FieldRecord) if getattr(record.fields, f.name)),
        len(record.items),
    )
    return record


def merge_guide(current: GuideRecord, extracted: GuideRecord) -> GuideRecord:
    """Overlay an extracted record onto a form the user may already have filled.

    Non-empty extracted fields win; empty ones keep the current value. The
    item list is always replaced by the extracted one.
    """
    updates = {
        f.name: getattr(extracted.fields, f.name)
        for f in fields(FieldRecord)
        if getattr(extracted.fields, f.name)
    }
    return GuideRecord(fields=replace(current.fields, **updates), items=list(extracted.items))


_FIELD_LABELS = {
    "origin": "Origin",
    "destination": "Destination",
    "vehicle_type": "Vehicle type",
    "driver": "Driver",
    "contract_number": "Contract Nº",
    "document_number": "Document Nº",
    "date": "Date",
    "plate": "Plate",
    "national_id": "RUN",
    "coordinator": "Coordinator",
}


def print_report(record: GuideRecord, source: str = "") -> None:
    print("=" * 64)
    print(f"GUIDE{f'  ({source})' if source else ''}")
    print("=" * 64)
    print()
    for name, label in _FIELD_LABELS.items():
        value = getattr(record.fields, name)
        print(f"  {label + ':':<14} {value if value else '-'}")

    print()
    if not record.items:
        print("No items found in the document.")
        print()
        return

    print(f"Items ({len(record.items)}):\n")
    for item in record.items:
        print(f"  {item.sequence_label:>3}  {item.quantity:>6}  {item.description}")
    print()
