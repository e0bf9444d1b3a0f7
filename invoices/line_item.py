from decimal import Decimal
from src.extensions import db
from invoices.totals import compute_line_totals


class LineItem(db.Model):
    __tablename__ = "line_items"

    id = db.Column(db.Integer, primary_key=True)

    # Owning document, exactly one of these is set
    proforma_id = db.Column(db.Integer, db.ForeignKey("proforma_invoices.id"), nullable=True)
    final_invoice_id = db.Column(db.Integer, db.ForeignKey("final_invoices.id"), nullable=True)
    delivery_note_id = db.Column(db.Integer, db.ForeignKey("delivery_notes.id"), nullable=True)

    position = db.Column(db.Integer, nullable=False, default=0)

    # Product snapshot copied at time of use
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True)
    product_code = db.Column(db.String(100), nullable=True)
    product_name = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    unit = db.Column(db.String(50), nullable=True, default="")
    unit_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    tax_rate = db.Column(db.Numeric(5, 2), nullable=False, default=0)

    quantity = db.Column(db.Integer, nullable=False, default=1)
    discount = db.Column(db.Numeric(5, 2), default=0)  # percentage

    # Derived, persisted
    total_excl = db.Column(db.Numeric(14, 2), default=0)
    total_tax = db.Column(db.Numeric(14, 2), default=0)
    total = db.Column(db.Numeric(14, 2), default=0)

    product = db.relationship("Product")

    def recalculate(self):
        """Refresh the derived totals from quantity, price, discount and tax rate."""
        totals = compute_line_totals(self.quantity, self.unit_price, self.discount, self.tax_rate)
        self.total_excl = totals.total_excl
        self.total_tax = totals.total_tax
        self.total = totals.total
        return totals

    def copy(self):
        return LineItem(
            position=self.position,
            product_id=self.product_id,
            product_code=self.product_code,
            product_name=self.product_name,
            description=self.description,
            unit=self.unit,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            quantity=self.quantity,
            discount=self.discount,
            total_excl=self.total_excl,
            total_tax=self.total_tax,
            total=self.total,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_code": self.product_code or "",
            "product_name": self.product_name or "",
            "description": self.description or "",
            "unit": self.unit or "",
            "quantity": self.quantity,
            "unit_price": Decimal(self.unit_price or 0),
            "tax_rate": Decimal(self.tax_rate or 0),
            "discount": Decimal(self.discount or 0),
            "total_excl": Decimal(self.total_excl or 0),
            "total_tax": Decimal(self.total_tax or 0),
            "total": Decimal(self.total or 0),
        }
