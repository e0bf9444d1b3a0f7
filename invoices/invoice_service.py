import logging
from datetime import date
from decimal import Decimal
from src.extensions import db, transaction
from src.exceptions import DocumentLockedException, ResourceNotFoundException
from src.serialization import parse_date
from clients.client import Client
from products.product import Product
from invoices.document_base import ALLOWED_STATUSES, PAYMENT_TYPES, DocumentKind
from invoices.document_data import hydrate_document
from invoices.final_invoice import FinalInvoice
from invoices.line_item import LineItem
from invoices.proforma import ProformaInvoice
from invoices.totals import amount_payable, compute_document_totals, parse_amount, parse_quantity, round_money

logger = logging.getLogger("InvoiceService")

NUMBER_PREFIXES = {
    DocumentKind.PROFORMA: "PRO",
    DocumentKind.INVOICE: "FAC",
    DocumentKind.DELIVERY_NOTE: "BL",
}

HEADER_FIELDS = ("issue_date", "due_date", "delivery_date", "payment_type", "stamp_tax", "bc", "notes",
                 "driver_name", "truck_id", "delivery_company", "driver_phone", "driver_license")
DATE_FIELDS = ("issue_date", "due_date", "delivery_date")


def model_for(kind):
    from delivery.delivery_note import DeliveryNote
    return {
        DocumentKind.PROFORMA: ProformaInvoice,
        DocumentKind.INVOICE: FinalInvoice,
        DocumentKind.DELIVERY_NOTE: DeliveryNote,
    }[DocumentKind(kind)]


class InvoiceService:
    @staticmethod
    def generate_number(kind, year=None):
        # Format: PREFIX-YYYY-NNNN, sequence restarts every year
        kind = DocumentKind(kind)
        model = model_for(kind)
        year = year or date.today().year
        prefix = f"{NUMBER_PREFIXES[kind]}-{year}-"
        numbers = (db.session.query(model.number)
                   .filter(model.number.like(f"{prefix}%"))
                   .all())
        # compared as integers, FAC-2024-10000 sorts below FAC-2024-9999 as text
        sequences = [int(number[len(prefix):]) for (number,) in numbers if number[len(prefix):].isdigit()]
        return f"{prefix}{max(sequences, default=0) + 1:04d}"

    @staticmethod
    def build_line_items(items):
        """
        items: list of dicts [{product_id, quantity, discount(optional),
        unit_price(optional), tax_rate(optional), description(optional)}]

        Price, tax rate and unit are copied from the product unless the
        payload overrides them. Derived totals are always recomputed.
        """
        if not items or not isinstance(items, list):
            raise ValueError("items list is required")

        line_items = []
        for position, it in enumerate(items):
            if not isinstance(it, dict) or "product_id" not in it:
                raise ValueError(f"Invalid item format: {it}")

            product = db.session.get(Product, it["product_id"])
            if not product:
                raise ValueError(f"Product id {it['product_id']} not found")

            line = LineItem(
                position=position,
                product_id=product.id,
                product_code=product.code,
                product_name=product.name,
                description=it.get("description", product.description),
                unit=it.get("unit", product.unit) or "",
                unit_price=parse_amount(it.get("unit_price", product.unit_price)),
                tax_rate=parse_amount(it.get("tax_rate", product.tax_rate)),
                quantity=parse_quantity(it.get("quantity", 1)),
                discount=parse_amount(it.get("discount", 0)),
            )
            line.recalculate()
            line_items.append(line)
        return line_items

    @staticmethod
    def apply_totals(document):
        totals = compute_document_totals(document.items)
        document.subtotal = totals.subtotal
        document.tax_total = totals.tax_total
        document.total = totals.total
        if isinstance(document, FinalInvoice):
            InvoiceService.refresh_payment_state(document)
        return totals

    @staticmethod
    def refresh_payment_state(invoice):
        """Recompute amount paid, outstanding debt and paid/unpaid status."""
        totals = compute_document_totals(invoice.items)
        payable = amount_payable(totals, invoice.payment_type, invoice.stamp_tax)
        paid = sum((Decimal(p.amount) for p in invoice.payments), Decimal("0"))

        invoice.amount_paid = round_money(paid)
        invoice.client_debt = max(round_money(payable - paid), Decimal("0.00"))

        if invoice.status in ("cancelled", "credited"):
            return
        if invoice.payments and invoice.client_debt == 0:
            invoice.status = "paid"
            invoice.payment_date = max(p.payment_date for p in invoice.payments)
        else:
            invoice.status = "unpaid"
            invoice.payment_date = None

    @staticmethod
    def _check_client(client_id):
        if not client_id or not db.session.get(Client, client_id):
            raise ValueError(f"Client id {client_id} not found")

    @staticmethod
    def _apply_header(document, fields):
        for key in HEADER_FIELDS:
            if key in fields and hasattr(document, key):
                value = fields[key]
                if key in DATE_FIELDS:
                    value = parse_date(value)
                    if value is None and key == "issue_date":
                        continue
                if key == "stamp_tax":
                    value = round_money(parse_amount(value))
                if key == "payment_type" and value and value not in PAYMENT_TYPES:
                    raise ValueError(f"Unknown payment type: {value}")
                setattr(document, key, value)

    @staticmethod
    def create_document(kind, client_id, items, **fields):
        """
        Create a proforma or final invoice with its line items in one
        transaction. Delivery notes go through DeliveryService.
        """
        kind = DocumentKind(kind)
        if kind not in (DocumentKind.PROFORMA, DocumentKind.INVOICE):
            raise ValueError(f"Unsupported document kind: {kind.value}")

        model = model_for(kind)
        with transaction():
            InvoiceService._check_client(client_id)
            document = model(client_id=client_id, number=InvoiceService.generate_number(kind))
            InvoiceService._apply_header(document, fields)
            document.items = InvoiceService.build_line_items(items)
            InvoiceService.apply_totals(document)
            db.session.add(document)

        logger.info("Created %s %s (total %s)", kind.value, document.number, document.total)
        return document

    @staticmethod
    def get_document(kind, document_id):
        model = model_for(kind)
        document = db.session.get(model, document_id)
        if not document:
            raise ResourceNotFoundException(f"{DocumentKind(kind).value} {document_id} not found")
        return document

    @staticmethod
    def get_detailed_document(kind, document_id):
        return hydrate_document(InvoiceService.get_document(kind, document_id), kind)

    @staticmethod
    def list_documents(kind, status=None):
        model = model_for(kind)
        query = model.query
        if status:
            query = query.filter(model.status == status)
        return query.order_by(model.issue_date.desc(), model.id.desc()).all()

    @staticmethod
    def update_document(kind, document_id, items=None, client_id=None, **fields):
        document = InvoiceService.get_document(kind, document_id)
        if document.is_locked:
            raise DocumentLockedException(
                f"{document.number} is {document.status} and can no longer be edited"
            )

        with transaction():
            if client_id is not None:
                InvoiceService._check_client(client_id)
                document.client_id = client_id
            InvoiceService._apply_header(document, fields)
            if items is not None:
                document.items = InvoiceService.build_line_items(items)
            InvoiceService.apply_totals(document)

        logger.info("Updated %s %s", DocumentKind(kind).value, document.number)
        return document

    @staticmethod
    def update_status(kind, document_id, status):
        kind = DocumentKind(kind)
        if status not in ALLOWED_STATUSES[kind]:
            raise ValueError(f"Invalid status '{status}' for {kind.value}")

        document = InvoiceService.get_document(kind, document_id)
        document.status = status
        if kind == DocumentKind.INVOICE and status == "paid" and not document.payment_date:
            document.payment_date = date.today()
        db.session.commit()
        return document

    @staticmethod
    def delete_document(kind, document_id):
        document = InvoiceService.get_document(kind, document_id)
        with transaction():
            db.session.delete(document)
        logger.info("Deleted %s %s", DocumentKind(kind).value, document.number)

    @staticmethod
    def convert_proforma_to_final(proforma_id):
        """
        Create a final invoice from a proforma: header, items and totals are
        copied, the invoice keeps a reference to the proforma, and the
        proforma becomes approved. All or nothing.
        """
        proforma = InvoiceService.get_document(DocumentKind.PROFORMA, proforma_id)
        if proforma.status in ("approved", "rejected"):
            raise ValueError(f"Proforma {proforma.number} is already {proforma.status}")

        with transaction():
            invoice = FinalInvoice(
                client_id=proforma.client_id,
                proforma_id=proforma.id,
                number=InvoiceService.generate_number(DocumentKind.INVOICE),
                issue_date=proforma.issue_date,
                due_date=proforma.due_date,
                notes=proforma.notes,
                bc=proforma.bc,
                payment_type=proforma.payment_type,
                stamp_tax=proforma.stamp_tax,
                status="unpaid",
            )
            invoice.items = [item.copy() for item in proforma.items]
            InvoiceService.apply_totals(invoice)
            db.session.add(invoice)
            proforma.status = "approved"

        logger.info("Converted proforma %s into invoice %s", proforma.number, invoice.number)
        return proforma, invoice
