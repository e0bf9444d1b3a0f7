from src.extensions import db
from invoices.document_base import DocumentHeaderMixin


class DeliveryNote(DocumentHeaderMixin, db.Model):
    __tablename__ = "delivery_notes"

    delivery_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default="pending")  # pending / delivered / cancelled

    final_invoice_id = db.Column(db.Integer, db.ForeignKey("final_invoices.id"), nullable=True)

    # Transportation
    driver_name = db.Column(db.String(255), nullable=True)
    truck_id = db.Column(db.String(50), nullable=True)
    delivery_company = db.Column(db.String(255), nullable=True)
    driver_phone = db.Column(db.String(50), nullable=True)
    driver_license = db.Column(db.String(100), nullable=True)

    items = db.relationship(
        "LineItem",
        primaryjoin="DeliveryNote.id == LineItem.delivery_note_id",
        order_by="LineItem.position",
        cascade="all, delete-orphan",
    )
