from datetime import datetime
from src.extensions import db


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)

    # Client / company name
    name = db.Column(db.String(255), nullable=False)

    # Tax identification number (NIF)
    taxid = db.Column(db.String(50), nullable=True)

    # Commerce registration number (RC)
    commerce_reg_number = db.Column(db.String(50), nullable=True)

    address = db.Column(db.Text, nullable=True)
    city = db.Column(db.String(100), nullable=True)
    country = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "taxid": self.taxid,
            "commerce_reg_number": self.commerce_reg_number,
            "address": self.address,
            "city": self.city,
            "country": self.country,
            "phone": self.phone,
            "email": self.email,
        }
