from decimal import Decimal
from io import BytesIO
import pandas as pd
import pytest
from src.extensions import db
from clients.client import Client
from invoices.invoice_service import InvoiceService
from reports.etat104_export import export_etat104_excel, export_etat104_pdf
from reports.etat104_service import Etat104Report, Etat104Service, ClientSummary


@pytest.fixture
def march_invoices(customer, product):
    other = Client(name="Babor Distribution", taxid="000025009876543")
    db.session.add(other)
    db.session.commit()

    items = [{"product_id": product.id, "quantity": 3, "discount": 10}]
    InvoiceService.create_document("invoice", customer.id, items, issue_date="2024-03-05")
    InvoiceService.create_document("invoice", customer.id, items, issue_date="2024-03-20")
    InvoiceService.create_document("invoice", other.id, items, issue_date="2024-03-28")
    cancelled = InvoiceService.create_document("invoice", other.id, items, issue_date="2024-03-29")
    InvoiceService.update_status("invoice", cancelled.id, "cancelled")
    # outside the period
    InvoiceService.create_document("invoice", customer.id, items, issue_date="2024-04-01")
    # proformas are never declared
    InvoiceService.create_document("proforma", customer.id, items, issue_date="2024-03-10")
    return customer, other


def test_summaries_group_by_client(march_invoices):
    customer, other = march_invoices
    summaries = Etat104Service.summarise_by_client(2024, 3)

    assert [s.client_name for s in summaries] == ["Babor Distribution", "Sarl Atlas"]
    babor, atlas = summaries
    assert atlas.client_id == customer.id
    assert atlas.subtotal == Decimal("540.00")
    assert atlas.tax_total == Decimal("102.60")
    assert atlas.total == Decimal("642.60")
    assert babor.total == Decimal("321.30")


def test_report_totals_and_vat_split(march_invoices):
    report = Etat104Service.build_report(2024, 3)
    assert report.total_excl == Decimal("810.00")
    assert report.total_tax == Decimal("153.90")
    assert report.grand_total == Decimal("963.90")
    assert report.vat_franchise == Decimal("46.17")
    assert report.vat_due == Decimal("107.73")


def test_empty_period(app):
    report = Etat104Service.build_report(2020, 1)
    assert report.summaries == []
    assert report.grand_total == Decimal("0.00")


def test_invalid_month(app):
    with pytest.raises(ValueError):
        Etat104Service.summarise_by_client(2024, 13)


def _report():
    summaries = [ClientSummary(1, "Sarl Atlas", "000016001234567", Decimal("540.00"), Decimal("102.60"),
                               Decimal("642.60"))]
    return Etat104Report(2024, 3, summaries, company={"business_name": "Entreprise Test"})


def test_pdf_export():
    result = export_etat104_pdf(_report())
    assert result.filename == "Etat104_03_2024.pdf"
    assert result.content.startswith(b"%PDF")


def test_excel_export_has_data_and_summary_sheets():
    result = export_etat104_excel(_report())
    assert result.filename == "Etat104_03_2024.xlsx"

    sheets = pd.read_excel(BytesIO(result.content), sheet_name=None)
    assert list(sheets) == ["État 104", "Résumé"]

    data = sheets["État 104"]
    assert list(data.columns) == ["Client", "NIF", "Montant (Excl.)", "TVA", "Total"]
    assert data.iloc[-1]["Client"] == "TOTALS:"
    assert data.iloc[-1]["Total"] == pytest.approx(642.60)

    summary = sheets["Résumé"]
    assert "TVA Due" in summary["Rubrique"].tolist()
