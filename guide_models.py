from __future__ import annotations

from dataclasses import asdict, dataclass, field


class GuideParseError(Exception):
    """The PDF could not be turned into a token list (missing, corrupt, bad page)."""


@dataclass(frozen=True)
class Token:
    """A positioned run of text on a PDF page (PDF space: larger y is higher)."""

    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass
class FieldRecord:
    """Header fields of a shipping guide. Unresolved fields stay empty."""

    origin: str = ""
    destination: str = ""
    vehicle_type: str = ""
    driver: str = ""
    contract_number: str = ""
    document_number: str = ""
    date: str = ""
    plate: str = ""
    national_id: str = ""
    coordinator: str = ""


@dataclass
class LineItem:
    """One row of the guide's item table."""

    sequence_label: str
    quantity: str
    description: str
    reference: str = ""


@dataclass
class GuideRecord:
    """Header fields plus the ordered item rows."""

    fields: FieldRecord = field(default_factory=FieldRecord)
    items: list[LineItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "fields": asdict(self.fields),
            "items": [asdict(item) for item in self.items],
        }
