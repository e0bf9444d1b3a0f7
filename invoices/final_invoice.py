from src.extensions import db
from invoices.document_base import DocumentHeaderMixin


class FinalInvoice(DocumentHeaderMixin, db.Model):
    __tablename__ = "final_invoices"

    due_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default="unpaid")  # unpaid / paid / cancelled / credited
    payment_type = db.Column(db.String(30), nullable=True)
    stamp_tax = db.Column(db.Numeric(12, 2), default=0)
    bc = db.Column(db.String(100), nullable=True)

    # Payment state
    amount_paid = db.Column(db.Numeric(14, 2), default=0)
    client_debt = db.Column(db.Numeric(14, 2), default=0)
    payment_date = db.Column(db.Date, nullable=True)

    # Originating proforma, set at conversion time only
    proforma_id = db.Column(db.Integer, db.ForeignKey("proforma_invoices.id"), nullable=True)

    items = db.relationship(
        "LineItem",
        primaryjoin="FinalInvoice.id == LineItem.final_invoice_id",
        order_by="LineItem.position",
        cascade="all, delete-orphan",
    )
    payments = db.relationship(
        "Payment",
        back_populates="invoice",
        order_by="Payment.payment_date",
        cascade="all, delete-orphan",
    )
