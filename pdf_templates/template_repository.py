import logging
from collections import namedtuple
from sqlalchemy.exc import SQLAlchemyError
from src.extensions import db
from invoices.document_base import DocumentKind
from pdf_templates.pdf_template import PdfTemplate

logger = logging.getLogger("TemplateRepository")

Template = namedtuple("Template", ["id", "name", "document_type", "layout_data"])


class TemplateRepository:
    """Where designer layouts live. ``get`` returns None when nothing is stored."""

    def get(self, document_type):
        raise NotImplementedError

    def save(self, template_id, template):
        raise NotImplementedError

    def list(self):
        raise NotImplementedError


class SqlTemplateRepository(TemplateRepository):
    def get(self, document_type):
        document_type = DocumentKind(document_type).value
        row = (PdfTemplate.query
               .filter_by(document_type=document_type)
               .order_by(PdfTemplate.updated_at.desc())
               .first())
        if not row:
            return None
        return Template(row.id, row.name, row.document_type, row.layout_data)

    def save(self, template_id, template):
        try:
            document_type = DocumentKind(template.document_type).value
            row = db.session.get(PdfTemplate, template_id)
            if row is None:
                row = PdfTemplate(id=template_id)
                db.session.add(row)
            row.name = template.name or "Unnamed Template"
            row.document_type = document_type
            row.layout_data = template.layout_data or {}
            db.session.commit()
            return True
        except (ValueError, SQLAlchemyError) as e:
            db.session.rollback()
            logger.error("Failed to save template %s: %s", template_id, str(e))
            return False

    def list(self):
        return [Template(row.id, row.name, row.document_type, row.layout_data)
                for row in PdfTemplate.query.order_by(PdfTemplate.name).all()]
