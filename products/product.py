from datetime import datetime
from decimal import Decimal
from src.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)

    # Product code / SKU
    code = db.Column(db.String(100), unique=True, nullable=False)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Unit price (excl. tax)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    # Tax rate in percent (e.g. 19.00)
    tax_rate = db.Column(db.Numeric(5, 2), nullable=False, default=0)

    stock_quantity = db.Column(db.Integer, default=0, nullable=False)

    # Unit of measure (Piece, Kg, Litre, etc.)
    unit = db.Column(db.String(50), nullable=True, default="")

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "unit_price": Decimal(self.unit_price or 0),
            "tax_rate": Decimal(self.tax_rate or 0),
            "stock_quantity": self.stock_quantity,
            "unit": self.unit or "",
        }
