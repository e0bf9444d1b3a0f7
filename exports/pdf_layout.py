"""
Shared layout constants and formatting helpers for the PDF exports.
"""
from datetime import date, datetime
from flask import current_app, has_app_context
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from src.config import Config
from invoices.document_base import DocumentKind
from invoices.totals import parse_amount, round_money

# Page dimensions
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_LEFT = 14 * mm
MARGIN_RIGHT = 14 * mm
MARGIN_TOP = 14 * mm
MARGIN_BOTTOM = 18 * mm
CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT
BANNER_HEIGHT = 8 * mm

# Colors
TABLE_HEADER = colors.Color(41 / 255, 128 / 255, 185 / 255)
TABLE_FOOTER = colors.Color(52 / 255, 73 / 255, 94 / 255)
ROW_ALT = colors.Color(0.97, 0.97, 0.98)
GRID = colors.Color(0.82, 0.84, 0.86)
TEXT_MUTED = colors.Color(0.42, 0.45, 0.5)

STATUS_GREEN = colors.HexColor("#22C55E")
STATUS_BLUE = colors.HexColor("#3B82F6")
STATUS_RED = colors.HexColor("#EF4444")
STATUS_GRAY = colors.HexColor("#6B7280")

STATUS_COLORS = {
    "paid": STATUS_GREEN,
    "approved": STATUS_GREEN,
    "delivered": STATUS_GREEN,
    "unpaid": STATUS_BLUE,
    "sent": STATUS_BLUE,
    "pending": STATUS_BLUE,
    "cancelled": STATUS_RED,
    "rejected": STATUS_RED,
}

# Labels stored by older data
STATUS_ALIASES = {
    "payé": "paid",
    "paye": "paid",
    "nonpayé": "unpaid",
    "nonpaye": "unpaid",
    "annulé": "cancelled",
    "annule": "cancelled",
    "canceled": "cancelled",
}

STATUS_LABELS = {
    "draft": "BROUILLON",
    "sent": "ENVOYÉE",
    "approved": "APPROUVÉE",
    "rejected": "REJETÉE",
    "unpaid": "NON PAYÉE",
    "paid": "PAYÉE",
    "cancelled": "ANNULÉE",
    "credited": "AVOIR",
    "pending": "EN ATTENTE",
    "delivered": "LIVRÉ",
}

DOCUMENT_TITLES = {
    DocumentKind.PROFORMA: "FACTURE PROFORMA",
    DocumentKind.INVOICE: "FACTURE",
    DocumentKind.DELIVERY_NOTE: "BON DE LIVRAISON",
}

FILENAME_PREFIXES = {
    DocumentKind.PROFORMA: "Proforma",
    DocumentKind.INVOICE: "Invoice",
    DocumentKind.DELIVERY_NOTE: "DeliveryNote",
}

PAYMENT_METHOD_LABELS = {
    "cash": "Espèces",
    "bank_transfer": "Virement bancaire",
    "check": "Chèque",
    "card": "Carte",
    "other": "Autre",
}

# Fallback strings for a missing company profile
COMPANY_FALLBACKS = {
    "business_name": "YOUR COMPANY NAME",
    "address": "Company Address",
    "taxid": "N/A",
    "commerce_reg_number": "N/A",
    "phone": "N/A",
    "email": "info@company.com",
}


def setting(name):
    """App config value when running inside Flask, class default otherwise."""
    if has_app_context():
        return current_app.config.get(name, getattr(Config, name))
    return getattr(Config, name)


def normalize_status(status):
    key = str(status or "").strip().lower().replace(" ", "")
    return STATUS_ALIASES.get(key, key)


def status_color(status):
    return STATUS_COLORS.get(normalize_status(status), STATUS_GRAY)


def status_label(status):
    key = normalize_status(status)
    return STATUS_LABELS.get(key, key.upper() or "N/A")


def company_field(company, key):
    value = (company or {}).get(key)
    return value if value else COMPANY_FALLBACKS[key]


def company_lines(company):
    """Name, address, registration line and contact line, never blank."""
    return [
        company_field(company, "business_name"),
        company_field(company, "address"),
        f"NIF: {company_field(company, 'taxid')} | RC: {company_field(company, 'commerce_reg_number')}",
        f"Tél: {company_field(company, 'phone')} | Email: {company_field(company, 'email')}",
    ]


# Printed only when filled in
OPTIONAL_COMPANY_FIELDS = ("nis", "ai", "website", "bank_name", "bank_account")


def company_extra_lines(company):
    """NIS/AI, website and bank lines, skipping whatever is not configured."""
    company = company or {}

    def joined(*pairs):
        return " | ".join(f"{label}: {company[key]}" for label, key in pairs if company.get(key))

    lines = [
        joined(("NIS", "nis"), ("AI", "ai")),
        company.get("website") or "",
        joined(("Banque", "bank_name"), ("Compte", "bank_account")),
    ]
    return [line for line in lines if line]


def format_money(value, currency="DZD"):
    amount = round_money(parse_amount(value))
    text = f"{amount:,.2f}".replace(",", " ").replace(".", ",")
    return f"{text} {currency}" if currency else text


def format_percent(value):
    amount = parse_amount(value).normalize()
    return f"{amount:f}".replace(".", ",") + " %"


def format_date(value):
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    return str(value)


def payment_method_label(method):
    return PAYMENT_METHOD_LABELS.get(method, method or "")


def document_filename(kind, number):
    return f"{FILENAME_PREFIXES[DocumentKind(kind)]}_{number}.pdf"
