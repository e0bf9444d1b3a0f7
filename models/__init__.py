from src.extensions import db

# Import all models so migrations can detect them
from clients.client import Client
from products.product import Product
from invoices.line_item import LineItem
from invoices.proforma import ProformaInvoice
from invoices.final_invoice import FinalInvoice
from delivery.delivery_note import DeliveryNote
from payments.payment import Payment
from settings.company_settings import Settings
from pdf_templates.pdf_template import PdfTemplate


__all__ = [
    "db",
    "Client",
    "Product",
    "LineItem",
    "ProformaInvoice",
    "FinalInvoice",
    "DeliveryNote",
    "Payment",
    "Settings",
    "PdfTemplate",
]
