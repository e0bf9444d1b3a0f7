from datetime import date, datetime
from decimal import Decimal
from src.extensions import db


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.Integer, db.ForeignKey("final_invoices.id"), nullable=False)
    amount = db.Column(db.Numeric(14, 2), nullable=False)
    payment_date = db.Column(db.Date, default=date.today, nullable=False)
    payment_method = db.Column(db.String(30), nullable=False)  # cash / bank_transfer / check / card / other
    reference = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    invoice = db.relationship("FinalInvoice", back_populates="payments")

    def to_dict(self):
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "amount": Decimal(self.amount or 0),
            "payment_date": self.payment_date,
            "payment_method": self.payment_method,
            "reference": self.reference,
            "notes": self.notes,
        }
