from datetime import datetime
from src.extensions import db


class PdfTemplate(db.Model):
    __tablename__ = "pdf_templates"

    id = db.Column(db.String(100), primary_key=True)
    name = db.Column(db.String(255), nullable=False, default="Unnamed Template")
    document_type = db.Column(db.String(20), nullable=False, index=True)  # invoice / proforma / delivery / report
    layout_data = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
