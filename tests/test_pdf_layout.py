from datetime import date
from decimal import Decimal
import pytest
from exports import pdf_layout as layout


@pytest.mark.parametrize("status, color", [
    ("paid", layout.STATUS_GREEN),
    ("approved", layout.STATUS_GREEN),
    ("delivered", layout.STATUS_GREEN),
    ("unpaid", layout.STATUS_BLUE),
    ("sent", layout.STATUS_BLUE),
    ("pending", layout.STATUS_BLUE),
    ("cancelled", layout.STATUS_RED),
    ("rejected", layout.STATUS_RED),
    ("Payé", layout.STATUS_GREEN),
    ("non payé", layout.STATUS_BLUE),
    ("ANNULÉ", layout.STATUS_RED),
])
def test_status_colors(status, color):
    assert layout.status_color(status) == color


@pytest.mark.parametrize("status", ["draft", "credited", "something-new", "", None])
def test_unknown_status_is_gray(status):
    assert layout.status_color(status) == layout.STATUS_GRAY


def test_status_label_falls_back_to_upper_case():
    assert layout.status_label("paid") == "PAYÉE"
    assert layout.status_label("archived") == "ARCHIVED"
    assert layout.status_label(None) == "N/A"


def test_company_lines_fallbacks():
    lines = layout.company_lines(None)
    assert lines[0] == "YOUR COMPANY NAME"
    assert lines[1] == "Company Address"
    assert lines[2] == "NIF: N/A | RC: N/A"
    assert lines[3] == "Tél: N/A | Email: info@company.com"


def test_company_lines_use_profile():
    lines = layout.company_lines({"business_name": "Atlas", "taxid": "123", "email": ""})
    assert lines[0] == "Atlas"
    assert lines[2].startswith("NIF: 123")
    assert lines[3].endswith("info@company.com")


def test_format_money():
    assert layout.format_money(Decimal("1234.5")) == "1 234,50 DZD"
    assert layout.format_money("abc", "EUR") == "0,00 EUR"
    assert layout.format_money(12, None) == "12,00"


def test_format_date():
    assert layout.format_date(date(2024, 3, 7)) == "07/03/2024"
    assert layout.format_date("2024-03-07") == "07/03/2024"
    assert layout.format_date(None) == ""
    assert layout.format_date("not a date") == "not a date"


def test_document_filename():
    assert layout.document_filename("invoice", "FAC-2024-0001") == "Invoice_FAC-2024-0001.pdf"
    assert layout.document_filename("proforma", "PRO-2024-0002") == "Proforma_PRO-2024-0002.pdf"
    assert layout.document_filename("delivery", "BL-2024-0003") == "DeliveryNote_BL-2024-0003.pdf"


def test_company_extra_lines_skip_blank_fields():
    assert layout.company_extra_lines(None) == []
    company = {"nis": "0016", "ai": "", "website": "www.atlas.dz", "bank_name": "BNA", "bank_account": "001-22"}
    assert layout.company_extra_lines(company) == ["NIS: 0016", "www.atlas.dz", "Banque: BNA | Compte: 001-22"]
