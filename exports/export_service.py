"""
Export entry point used by the routes: load a document, pick the renderer
and hand back the PDF bytes with a filename.

Export failures never propagate. They are logged and the caller receives
None, which the routes turn into an error payload.
"""
import logging
from collections import namedtuple
from invoices.document_base import DocumentKind
from invoices.invoice_service import InvoiceService
from settings.company_settings import get_company_info
from exports import pdf_layout as layout
from exports.document_renderer import DocumentRenderer
from pdf_templates.template_renderer import TemplateRenderer
from pdf_templates.template_repository import SqlTemplateRepository

logger = logging.getLogger("ExportService")

PDF_MIMETYPE = "application/pdf"

ExportResult = namedtuple("ExportResult", ["filename", "content", "mimetype"])


def _find_template(repository, kind):
    try:
        return repository.get(kind.value)
    except Exception as e:
        logger.warning("Template lookup for %s failed, using default layout: %s", kind, str(e))
        return None


def render_document(document, company=None, template_repository=None):
    """
    PDF bytes for a hydrated document. A stored template for the document's
    kind takes precedence; without one (or if it cannot be drawn) the
    default band layout is used.
    """
    kind = DocumentKind(document["kind"])
    template = _find_template(template_repository, kind) if template_repository else None

    if template is not None:
        try:
            return TemplateRenderer(company=company).render(template, document)
        except Exception as e:
            logger.warning("Template '%s' failed for %s, falling back to default layout: %s",
                           template.name, document.get("number"), str(e))

    return DocumentRenderer(company=company).render(document)


def export_document(kind, document_id, template_repository=None):
    """Returns an ExportResult, or None if anything went wrong."""
    try:
        kind = DocumentKind(kind)
        document = InvoiceService.get_detailed_document(kind, document_id)
        repository = template_repository if template_repository is not None else SqlTemplateRepository()

        content = render_document(document, get_company_info(), repository)
        filename = layout.document_filename(kind, document["number"])
        logger.info("Exported %s (%d bytes)", filename, len(content))
        return ExportResult(filename, content, PDF_MIMETYPE)
    except Exception:
        logger.exception("Export of %s %s failed", kind, document_id)
        return None
