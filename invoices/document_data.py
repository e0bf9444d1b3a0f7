from decimal import Decimal
from invoices.document_base import DocumentKind
from invoices.totals import DocumentTotals, amount_payable


def _money(value):
    return Decimal(value or 0)


def hydrate_document(document, kind):
    """
    Flatten a document row into the dict consumed by the renderers:
    header fields, resolved client, items with their product snapshot,
    payments and transport details where they apply.
    """
    kind = DocumentKind(kind)
    totals = DocumentTotals(_money(document.subtotal), _money(document.tax_total), _money(document.total))

    data = {
        "kind": kind.value,
        "id": document.id,
        "number": document.number,
        "status": document.status,
        "issue_date": document.issue_date,
        "notes": document.notes or "",
        "subtotal": totals.subtotal,
        "tax_total": totals.tax_total,
        "total": totals.total,
        "client": document.client.to_dict() if document.client else {},
        "items": [item.to_dict() for item in document.items],
    }

    if kind in (DocumentKind.PROFORMA, DocumentKind.INVOICE):
        data.update({
            "due_date": document.due_date,
            "payment_type": document.payment_type,
            "stamp_tax": _money(document.stamp_tax),
            "bc": document.bc,
            "amount_payable": amount_payable(totals, document.payment_type, document.stamp_tax),
        })

    if kind == DocumentKind.INVOICE:
        data.update({
            "proforma_id": document.proforma_id,
            "amount_paid": _money(document.amount_paid),
            "client_debt": _money(document.client_debt),
            "payment_date": document.payment_date,
            "payments": [payment.to_dict() for payment in document.payments],
        })

    if kind == DocumentKind.DELIVERY_NOTE:
        data.update({
            "delivery_date": document.delivery_date,
            "final_invoice_id": document.final_invoice_id,
            "transport": {
                "driver_name": document.driver_name,
                "truck_id": document.truck_id,
                "delivery_company": document.delivery_company,
                "driver_phone": document.driver_phone,
                "driver_license": document.driver_license,
            },
        })

    return data
