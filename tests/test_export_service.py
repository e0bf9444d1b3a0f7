from conftest import hydrated
from exports import export_service
from exports.export_service import export_document, render_document
from invoices.invoice_service import InvoiceService
from pdf_templates.template_repository import SqlTemplateRepository, Template, TemplateRepository


class EmptyRepository(TemplateRepository):
    def get(self, document_type):
        return None


class BrokenRepository(TemplateRepository):
    def get(self, document_type):
        raise RuntimeError("template store offline")


def test_export_without_template_falls_back_to_default_renderer(customer, sample_items, company):
    invoice = InvoiceService.create_document("invoice", customer.id, sample_items)

    result = export_document("invoice", invoice.id, template_repository=EmptyRepository())

    assert result is not None
    assert result.filename == f"Invoice_{invoice.number}.pdf"
    assert result.mimetype == "application/pdf"
    assert result.content.startswith(b"%PDF")


def test_export_with_sql_repository_and_no_rows(customer, sample_items):
    proforma = InvoiceService.create_document("proforma", customer.id, sample_items)
    result = export_document("proforma", proforma.id)
    assert result.filename.startswith("Proforma_PRO-")


def test_export_uses_stored_template(customer, sample_items, monkeypatch):
    invoice = InvoiceService.create_document("invoice", customer.id, sample_items)
    SqlTemplateRepository().save("tpl-1", Template("tpl-1", "Mon modèle", "invoice", {"objects": [
        {"type": "text", "left": 40, "top": 40, "text": "{{number}}"},
    ]}))

    used = []
    original = export_service.TemplateRenderer.render

    def spy(self, template, document):
        used.append(template.id)
        return original(self, template, document)

    monkeypatch.setattr(export_service.TemplateRenderer, "render", spy)
    result = export_document("invoice", invoice.id)

    assert used == ["tpl-1"]
    assert result.content.startswith(b"%PDF")


def test_failing_template_falls_back(monkeypatch):
    def explode(self, template, document):
        raise ValueError("bad layout")

    monkeypatch.setattr(export_service.TemplateRenderer, "render", explode)

    class OneTemplate(TemplateRepository):
        def get(self, document_type):
            return Template("x", "x", document_type, {"objects": []})

    content = render_document(hydrated(), template_repository=OneTemplate())
    assert content.startswith(b"%PDF")


def test_repository_failure_counts_as_missing_template():
    content = render_document(hydrated(), template_repository=BrokenRepository())
    assert content.startswith(b"%PDF")


def test_export_of_missing_document_returns_none(app):
    assert export_document("invoice", 424242, template_repository=EmptyRepository()) is None


def test_export_failure_returns_none(customer, sample_items, monkeypatch):
    invoice = InvoiceService.create_document("invoice", customer.id, sample_items)

    def explode(self, document):
        raise RuntimeError("disk full")

    monkeypatch.setattr(export_service.DocumentRenderer, "render", explode)
    assert export_document("invoice", invoice.id, template_repository=EmptyRepository()) is None
