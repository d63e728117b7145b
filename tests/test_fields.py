import pytest

from guide_fields import (
    FIELD_STRATEGIES,
    GuidePage,
    extract_date,
    extract_document_number,
    extract_fields,
    extract_origin_address,
    extract_plate,
    run_prefix,
)
from guide_models import FieldRecord, Token
from guide_tokens import reading_order


def _page(*tokens):
    return GuidePage.from_tokens(reading_order(list(tokens)))


def _text_page(text):
    return _page(Token(text, 50, 700))


class TestPatternFields:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Fecha: 17/02/2026", "17-02-2026"),
            ("Fecha: 05-11-2025", "05-11-2025"),
            ("Fecha: 5/11/2025", ""),
        ],
    )
    def test_date(self, text, expected):
        assert extract_date(_text_page(text)) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Patente: ABCD-12", "ABCD12"),
            ("Patente: AB1234", "AB1234"),
            ("Patente: abcd12", ""),
            ("Sin patente", ""),
        ],
    )
    def test_plate(self, text, expected):
        assert extract_plate(_text_page(text)) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Nº: 00023349", "23349"),
            ("N°:45", "45"),
            ("nº : 007", "7"),
            ("Nº Contrato: 999", ""),
        ],
    )
    def test_document_number(self, text, expected):
        assert extract_document_number(_text_page(text)) == expected

    def test_document_number_skips_contract(self):
        page = _page(Token("Nº Contrato: 20000", 50, 700), Token("Nº: 0012", 300, 650))
        assert extract_document_number(page) == "12"


class TestOrigin:
    def test_first_non_destination_address(self):
        page = _page(
            Token("Dirección Destino:", 50, 720),
            Token("RANCAGUA", 200, 720),
            Token("Dirección:", 50, 700),
            Token("Av. Matta 10", 150, 700),
            Token("Nº DOC. INTERNO 55", 320, 700),
        )
        assert extract_origin_address(page) == "Av. Matta 10"

    def test_falls_back_to_recipient(self):
        page = _page(Token("Señor(es):", 50, 700), Token(": Obras Norte", 150, 700))
        assert extract_fields(page).origin == "Obras Norte"

    def test_address_cleaned_to_nothing_does_not_fall_back(self):
        page = _page(
            Token("Dirección:", 50, 700),
            Token(":", 150, 700),
            Token("Señor(es):", 50, 650),
            Token("Obras Norte", 150, 650),
        )
        assert extract_fields(page).origin == ""

    def test_address_without_value_falls_back_to_recipient(self):
        page = _page(
            Token("Dirección:", 50, 700),
            Token("Señor(es):", 50, 650),
            Token("Obras Norte", 150, 650),
        )
        assert extract_fields(page).origin == "Obras Norte"

    def test_no_labels(self):
        assert extract_fields(_page(Token("nothing", 0, 0))).origin == ""


class TestNationalId:
    def test_prefers_individual_over_entity(self):
        page = _page(Token("RUT: 12.345.678-9", 50, 700), Token("RUT: 76.543.210-K", 50, 600))
        assert extract_fields(page).national_id == "12.345.678-9"

    def test_last_individual_wins(self):
        page = _page(
            Token("9.876.543-2", 50, 700),
            Token("76.543.210-K", 50, 650),
            Token("15.111.222-3", 50, 600),
        )
        assert extract_fields(page).national_id == "15.111.222-3"

    def test_only_entities_takes_last(self):
        page = _page(Token("76.543.210-K", 50, 700), Token("96.000.111-1", 50, 600))
        assert extract_fields(page).national_id == "96.000.111-1"

    def test_none(self):
        assert extract_fields(_page(Token("sin rut", 50, 700))).national_id == ""

    def test_label_beats_fallback(self):
        page = _page(
            Token("RUT Transportista:", 50, 700),
            Token("76.543.210-K", 200, 700),
            Token("12.345.678-9", 50, 600),
        )
        assert extract_fields(page).national_id == "76.543.210-K"

    def test_label_value_too_far_falls_back(self):
        page = _page(
            Token("RUT Chofer:", 50, 700),
            Token("76.543.210-K", 300, 700),
            Token("12.345.678-9", 50, 600),
        )
        assert extract_fields(page).national_id == "12.345.678-9"

    @pytest.mark.parametrize(
        "run, prefix",
        [
            ("12.345.678-9", 12),
            ("76543210-K", 76),
            ("9876543-2", 9),
            ("9.876.543-2", 9),
            ("12345.678-9", 12),
            ("12.345678-9", 12),
        ],
    )
    def test_run_prefix(self, run, prefix):
        assert run_prefix(run) == prefix


def test_strategy_table_covers_every_field():
    names = [name for name, _ in FIELD_STRATEGIES]
    assert sorted(names) == sorted(FieldRecord.__dataclass_fields__)


def test_extract_fields_on_full_page(guide_page_tokens):
    record = extract_fields(GuidePage.from_tokens(reading_order(guide_page_tokens)))
    assert record == FieldRecord(
        origin="Av. Los Leones 1234",
        destination="Camino a Melipilla 500",
        vehicle_type="Camion",
        driver="Juan Perez",
        contract_number="20000",
        document_number="23349",
        date="17-02-2026",
        plate="ABCD12",
        national_id="12.345.678-k",
        coordinator="Maria Soto",
    )


def test_missing_labels_leave_fields_empty():
    assert extract_fields(_page()) == FieldRecord()
