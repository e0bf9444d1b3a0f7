from src.extensions import db
from invoices.document_base import DocumentHeaderMixin


class ProformaInvoice(DocumentHeaderMixin, db.Model):
    __tablename__ = "proforma_invoices"

    due_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default="draft")  # draft / sent / approved / rejected
    payment_type = db.Column(db.String(30), nullable=True)
    stamp_tax = db.Column(db.Numeric(12, 2), default=0)
    bc = db.Column(db.String(100), nullable=True)  # purchase order reference

    items = db.relationship(
        "LineItem",
        primaryjoin="ProformaInvoice.id == LineItem.proforma_id",
        order_by="LineItem.position",
        cascade="all, delete-orphan",
    )
