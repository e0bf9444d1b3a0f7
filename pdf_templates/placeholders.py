import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from exports.amount_words import amount_in_words
from exports import pdf_layout as layout
from pdf_templates.field_path import FieldPath

TOKEN_RE = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")

# Tokens the designer drops inside the items-table group
ITEMS_TABLE_TOKENS = ("items_table", "items-table")

# Line fields holding a rate, printed as "19 %" rather than an amount
PERCENT_KEYS = ("tax_rate", "discount")


class PlaceholderKind(str, Enum):
    CLIENT_INFO = "client-info"
    INVOICE_DETAILS = "invoice-details"
    ITEMS_TABLE = "items-table"
    TOTALS_SECTION = "totals-section"

    @classmethod
    def from_field(cls, value):
        """The named placeholder for a node's dataField, or None."""
        if not value:
            return None
        try:
            return cls(str(value).strip().lower().replace("_", "-"))
        except ValueError:
            return None


def build_context(document, company=None, currency="DZD"):
    """
    Lookup root for ``{{path}}`` tokens: the document itself plus the
    company profile and a few derived values used by the designer.
    """
    context = dict(document)
    context["company"] = {key: layout.company_field(company, key) for key in layout.COMPANY_FALLBACKS}
    context["company"].update({key: (company or {}).get(key) for key in layout.OPTIONAL_COMPANY_FIELDS})
    context["date"] = document.get("issue_date")
    context["duedate"] = document.get("due_date")
    context["taxTotal"] = document.get("tax_total")
    context["status_label"] = layout.status_label(document.get("status"))
    context["payment_method"] = layout.payment_method_label(document.get("payment_type"))
    context["total_in_words"] = amount_in_words(document.get("amount_payable", document.get("total")))
    context["_currency"] = currency
    return context


def format_value(value, currency=None, key=None):
    if isinstance(value, bool):
        return "Oui" if value else "Non"
    if key in PERCENT_KEYS and isinstance(value, (Decimal, int, float)):
        return layout.format_percent(value)
    if isinstance(value, Decimal):
        return layout.format_money(value, currency)
    if isinstance(value, (date, datetime)):
        return layout.format_date(value)
    if isinstance(value, float):
        return layout.format_money(value, currency)
    return str(value)


def substitute_tokens(text, context):
    """
    Replace every ``{{path}}`` that resolves against ``context``; tokens
    that don't resolve are left exactly as written.
    """
    currency = context.get("_currency") if isinstance(context, dict) else None

    def _replace(match):
        path = match.group(1)
        resolution = FieldPath(path).resolve(context)
        if not resolution.found or isinstance(resolution.value, (dict, list)):
            return match.group(0)
        return format_value(resolution.value, currency, key=path.rsplit(".", 1)[-1])

    return TOKEN_RE.sub(_replace, text)


def has_tokens(text):
    return bool(TOKEN_RE.search(text or ""))


def is_items_table_token(text):
    match = TOKEN_RE.fullmatch((text or "").strip())
    return bool(match) and match.group(1) in ITEMS_TABLE_TOKENS


# --------------------------------------------------------------------------- #
# Named placeholder routines
# --------------------------------------------------------------------------- #

def client_info_text(context):
    client = context.get("client") or {}
    city = ", ".join(part for part in (client.get("city"), client.get("country")) if part)
    lines = [
        client.get("name") or "N/A",
        client.get("address") or "",
        city,
        f"NIF: {client.get('taxid') or 'N/A'}",
        client.get("phone") or "",
    ]
    return "\n".join(line for line in lines if line)


def invoice_details_text(context):
    lines = [f"Numéro: {context.get('number') or ''}", f"Date: {layout.format_date(context.get('issue_date'))}"]
    if context.get("due_date"):
        lines.append(f"Échéance: {layout.format_date(context['due_date'])}")
    if context.get("delivery_date"):
        lines.append(f"Livraison: {layout.format_date(context['delivery_date'])}")
    if context.get("payment_type"):
        lines.append(f"Paiement: {layout.payment_method_label(context['payment_type'])}")
    return "\n".join(lines)


def totals_section_text(context):
    currency = context.get("_currency")
    lines = [
        f"Total HT: {layout.format_money(context.get('subtotal'), currency)}",
        f"TVA: {layout.format_money(context.get('tax_total'), currency)}",
    ]
    if context.get("amount_payable") is not None and context.get("amount_payable") != context.get("total"):
        lines.append(f"Droit de timbre: {layout.format_money(context.get('stamp_tax'), currency)}")
    lines.append(f"Total TTC: {layout.format_money(context.get('amount_payable', context.get('total')), currency)}")
    return "\n".join(lines)


def scoped_context(kind, context):
    """Context for a named placeholder: its own fields become top-level too."""
    if kind == PlaceholderKind.CLIENT_INFO:
        scoped = dict(context)
        scoped.update(context.get("client") or {})
        return scoped
    return context


NAMED_ROUTINES = {
    PlaceholderKind.CLIENT_INFO: client_info_text,
    PlaceholderKind.INVOICE_DETAILS: invoice_details_text,
    PlaceholderKind.TOTALS_SECTION: totals_section_text,
}
