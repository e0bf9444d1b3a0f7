from datetime import datetime, date
from enum import Enum
from sqlalchemy.orm import declared_attr
from src.extensions import db


class DocumentKind(str, Enum):
    PROFORMA = "proforma"
    INVOICE = "invoice"
    DELIVERY_NOTE = "delivery"
    REPORT = "report"


PROFORMA_STATUSES = ("draft", "sent", "approved", "rejected")
INVOICE_STATUSES = ("unpaid", "paid", "cancelled", "credited")
DELIVERY_STATUSES = ("pending", "delivered", "cancelled")

ALLOWED_STATUSES = {
    DocumentKind.PROFORMA: PROFORMA_STATUSES,
    DocumentKind.INVOICE: INVOICE_STATUSES,
    DocumentKind.DELIVERY_NOTE: DELIVERY_STATUSES,
}

# Once a document reaches one of these its line items are frozen
TERMINAL_STATUSES = {"paid", "cancelled", "delivered", "approved", "rejected", "credited"}

PAYMENT_TYPES = ("cash", "bank_transfer", "check", "card", "other")


class DocumentHeaderMixin:
    """Columns shared by proforma, final invoice and delivery note headers."""

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(50), unique=True, nullable=False)
    issue_date = db.Column(db.Date, default=date.today, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    # Aggregates, always recomputed from the line items
    subtotal = db.Column(db.Numeric(14, 2), default=0)
    tax_total = db.Column(db.Numeric(14, 2), default=0)
    total = db.Column(db.Numeric(14, 2), default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    @declared_attr
    def client_id(cls):
        return db.Column(db.Integer, db.ForeignKey("clients.id"), nullable=False)

    @declared_attr
    def client(cls):
        return db.relationship("Client")

    @property
    def is_locked(self):
        return self.status in TERMINAL_STATUSES
