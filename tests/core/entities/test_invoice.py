"""Tests for invoice entities."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from facturacion.core.entities import (
    DEFAULT_PAGE_SIZE,
    Invoice,
    InvoiceChanges,
    InvoiceDraft,
    InvoiceListParams,
    SortOrder,
    parse_date,
    to_money,
)
from facturacion.core.entities.invoice import normalize_search, parse_positive_int
from facturacion.core.exceptions import ValidationError


class TestToMoney:
    def test_integer_string(self):
        assert to_money("100") == Decimal("100.00")

    def test_rounds_half_up(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(2.675) == Decimal("2.68")

    def test_keeps_cents_exact(self):
        assert to_money("0.1") + to_money("0.2") == Decimal("0.30")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True, None])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(ValueError):
            to_money(value)


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2024-03-01") == date(2024, 3, 1)

    def test_day_first(self):
        assert parse_date("01/03/2024") == date(2024, 3, 1)

    def test_timestamp(self):
        assert parse_date("2024-03-01T10:30:00Z") == date(2024, 3, 1)

    def test_blank_is_none(self):
        assert parse_date("   ") is None
        assert parse_date(None) is None

    def test_date_passthrough(self):
        assert parse_date(date(2023, 12, 31)) == date(2023, 12, 31)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_date("yesterday")


class TestInvoice:
    def test_coerces_fields(self):
        invoice = Invoice(usuario_id=1, fecha_emision="01/03/2024", importe="99.999")
        assert invoice.fecha_emision == date(2024, 3, 1)
        assert invoice.importe == Decimal("100.00")
        assert invoice.estado is False
        assert invoice.archivo_url is None

    def test_invalid_amount_rejected(self):
        with pytest.raises(PydanticValidationError):
            Invoice(usuario_id=1, fecha_emision="2024-03-01", importe="lots")


class TestInvoiceDraft:
    def _draft(self, **overrides):
        fields = {
            "cliente_id": 5,
            "fecha_emision": "2024-03-01",
            "importe": "100",
            "estado": False,
        }
        fields.update(overrides)
        return InvoiceDraft(**fields)

    def test_complete_draft_is_valid(self):
        self._draft().validate_required()

    def test_false_status_counts_as_present(self):
        invoice = self._draft(estado=False).to_invoice(owner_id=1)
        assert invoice.estado is False

    @pytest.mark.parametrize("missing", ["cliente_id", "fecha_emision", "importe", "estado"])
    def test_missing_required_field(self, missing):
        draft = self._draft(**{missing: None})
        with pytest.raises(ValidationError) as exc_info:
            draft.validate_required()
        assert missing in exc_info.value.field

    def test_zero_client_is_missing(self):
        with pytest.raises(ValidationError):
            self._draft(cliente_id=0).validate_required()

    def test_to_invoice(self):
        invoice = self._draft(numero="", descripcion="Consulting").to_invoice(
            owner_id=3, archivo="1-a.pdf"
        )
        assert invoice.usuario_id == 3
        assert invoice.importe == Decimal("100.00")
        assert invoice.numero is None
        assert invoice.descripcion == "Consulting"
        assert invoice.archivo == "1-a.pdf"


class TestInvoiceChanges:
    def test_nothing_sent(self):
        assert InvoiceChanges().resolved() == {}

    def test_false_status_overwrites(self):
        assert InvoiceChanges(estado=False).resolved() == {"estado": False}

    def test_explicit_null_status_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            InvoiceChanges(estado=None).resolved()
        assert exc_info.value.field == "estado"

    def test_zero_amount_keeps_previous(self):
        assert InvoiceChanges(importe="0").resolved() == {}

    def test_empty_client_and_date_keep_previous(self):
        assert InvoiceChanges(cliente_id=None, fecha_emision="").resolved() == {}

    def test_empty_number_clears(self):
        assert InvoiceChanges(numero="", descripcion="").resolved() == {
            "numero": None,
            "descripcion": None,
        }

    def test_apply_to(self, sample_invoice):
        changes = InvoiceChanges(estado=True, numero="INV-9", importe="0")
        updated = changes.apply_to(sample_invoice)

        assert updated.estado is True
        assert updated.numero == "INV-9"
        assert updated.importe == Decimal("100.00")
        assert updated.cliente_id == sample_invoice.cliente_id
        # Original left untouched
        assert sample_invoice.estado is False


class TestParsePositiveInt:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, 7),
            ("3", 3),
            ("3abc", 3),
            ("abc", 7),
            ("0", 7),
            ("-2", 7),
            (4, 4),
        ],
    )
    def test_values(self, value, expected):
        assert parse_positive_int(value, 7) == expected


class TestNormalizeSearch:
    def test_lowercases_and_strips_whitespace(self):
        assert normalize_search("  INV 00 1 ") == "inv001"

    def test_empty(self):
        assert normalize_search(None) == ""
        assert normalize_search("   ") == ""


class TestInvoiceListParams:
    def test_defaults(self):
        params = InvoiceListParams.from_query()
        assert params.page == 1
        assert params.limit == DEFAULT_PAGE_SIZE
        assert params.sort_field == "fecha_emision"
        assert params.sort_order is SortOrder.DESC
        assert params.search_pattern is None

    def test_offset(self):
        params = InvoiceListParams.from_query(page="3", limit="10")
        assert params.offset == 20

    def test_invalid_paging_falls_back(self):
        params = InvoiceListParams.from_query(page="x", limit="-1")
        assert params.page == 1
        assert params.limit == DEFAULT_PAGE_SIZE

    @pytest.mark.parametrize("order", ["asc", "ASC", "1"])
    def test_ascending(self, order):
        assert InvoiceListParams.from_query(sort_order=order).sort_order is SortOrder.ASC

    @pytest.mark.parametrize("order", ["desc", "-1", "sideways", ""])
    def test_anything_else_descends(self, order):
        assert InvoiceListParams.from_query(sort_order=order).sort_order is SortOrder.DESC

    def test_unknown_sort_field_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            InvoiceListParams.from_query(sort_field="importe; DROP TABLE facturas")
        assert exc_info.value.field == "sortField"

    def test_search_pattern(self):
        params = InvoiceListParams.from_query(search="INV 1")
        assert params.search == "inv1"
        assert params.search_pattern == "%inv1%"
