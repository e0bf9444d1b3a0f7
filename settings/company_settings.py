from datetime import datetime
from src.extensions import db


class Settings(db.Model):
    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)

    # Business Information
    business_name = db.Column(db.String(255), nullable=True)
    taxid = db.Column(db.String(50), nullable=True)  # NIF
    commerce_reg_number = db.Column(db.String(100), nullable=True)  # RC
    nis = db.Column(db.String(50), nullable=True)
    ai = db.Column(db.String(50), nullable=True)

    # Logo & Branding
    logo_path = db.Column(db.String(500), nullable=True)

    # Contact Details
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    website = db.Column(db.String(255), nullable=True)

    # Address Information
    address = db.Column(db.Text, nullable=True)

    # Bank Details
    bank_name = db.Column(db.String(255), nullable=True)
    bank_account = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "business_name": self.business_name,
            "address": self.address,
            "taxid": self.taxid,
            "commerce_reg_number": self.commerce_reg_number,
            "nis": self.nis,
            "ai": self.ai,
            "phone": self.phone,
            "email": self.email,
            "website": self.website,
            "logo_path": self.logo_path,
            "bank_name": self.bank_name,
            "bank_account": self.bank_account,
        }


def get_company_info():
    """Company info for document headers, or None when nothing is configured."""
    settings = Settings.query.first()
    return settings.to_dict() if settings else None
