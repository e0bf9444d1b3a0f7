import logging
from src.extensions import db, transaction
from invoices.document_base import DocumentKind
from invoices.invoice_service import InvoiceService
from delivery.delivery_note import DeliveryNote

logger = logging.getLogger("DeliveryService")


class DeliveryService:
    @staticmethod
    def create_delivery_note(client_id, items, **fields):
        with transaction():
            InvoiceService._check_client(client_id)
            note = DeliveryNote(
                client_id=client_id,
                number=InvoiceService.generate_number(DocumentKind.DELIVERY_NOTE),
            )
            InvoiceService._apply_header(note, fields)
            note.items = InvoiceService.build_line_items(items)
            InvoiceService.apply_totals(note)
            db.session.add(note)

        logger.info("Created delivery note %s", note.number)
        return note

    @staticmethod
    def create_from_invoice(invoice_id, **fields):
        """Delivery note carrying the client and items of a final invoice."""
        invoice = InvoiceService.get_document(DocumentKind.INVOICE, invoice_id)
        if invoice.status == "cancelled":
            raise ValueError(f"Invoice {invoice.number} is cancelled")

        with transaction():
            note = DeliveryNote(
                client_id=invoice.client_id,
                final_invoice_id=invoice.id,
                number=InvoiceService.generate_number(DocumentKind.DELIVERY_NOTE),
                notes=invoice.notes,
            )
            InvoiceService._apply_header(note, fields)
            note.items = [item.copy() for item in invoice.items]
            InvoiceService.apply_totals(note)
            db.session.add(note)

        logger.info("Created delivery note %s from invoice %s", note.number, invoice.number)
        return note
