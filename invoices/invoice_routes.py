from flask import Blueprint, request, jsonify, send_file
from src.exceptions import DocumentLockedException, ResourceNotFoundException
from src.serialization import serialize_for_json
from invoices.document_base import DocumentKind
from invoices.document_data import hydrate_document
from invoices.invoice_service import HEADER_FIELDS, InvoiceService
import pandas as pd
import io

bp = Blueprint("invoices", __name__)
proforma_bp = Blueprint("proformas", __name__)


def error_response(e):
    if isinstance(e, ResourceNotFoundException):
        return jsonify({"error": str(e)}), 404
    if isinstance(e, DocumentLockedException):
        return jsonify({"error": str(e)}), 409
    if isinstance(e, ValueError):
        return jsonify({"error": str(e)}), 400
    return jsonify({"error": str(e)}), 500


def _document_json(document, kind, status=200):
    return jsonify(serialize_for_json(hydrate_document(document, kind))), status


def document_summary(document):
    return {
        "id": document.id,
        "number": document.number,
        "client_id": document.client_id,
        "client_name": document.client.name if document.client else None,
        "issue_date": document.issue_date,
        "status": document.status,
        "total": document.total,
    }


def header_fields(payload):
    return {key: payload[key] for key in HEADER_FIELDS if key in payload}


def _create(kind):
    payload = request.get_json() or {}
    items = payload.get("items")
    if not payload.get("client_id"):
        return jsonify({"error": "client_id is required"}), 400
    if not items or not isinstance(items, list):
        return jsonify({"error": "items list is required"}), 400
    try:
        document = InvoiceService.create_document(kind, payload["client_id"], items, **header_fields(payload))
        return _document_json(document, kind, 201)
    except Exception as e:
        return error_response(e)


def _list(kind):
    try:
        documents = InvoiceService.list_documents(kind, status=request.args.get("status"))
        return jsonify([serialize_for_json(document_summary(d)) for d in documents]), 200
    except Exception as e:
        return error_response(e)


def _get(kind, document_id):
    try:
        return jsonify(serialize_for_json(InvoiceService.get_detailed_document(kind, document_id))), 200
    except Exception as e:
        return error_response(e)


def _update(kind, document_id):
    payload = request.get_json() or {}
    items = payload.get("items")
    if items is not None and not isinstance(items, list):
        return jsonify({"error": "items must be a list"}), 400
    try:
        document = InvoiceService.update_document(kind, document_id, items=items,
                                                  client_id=payload.get("client_id"), **header_fields(payload))
        return _document_json(document, kind)
    except Exception as e:
        return error_response(e)


def _update_status(kind, document_id):
    status = (request.get_json() or {}).get("status")
    if not status:
        return jsonify({"error": "status is required"}), 400
    try:
        document = InvoiceService.update_status(kind, document_id, status)
        return jsonify({"id": document.id, "number": document.number, "status": document.status}), 200
    except Exception as e:
        return error_response(e)


def _delete(kind, document_id):
    try:
        InvoiceService.delete_document(kind, document_id)
        return jsonify({"message": "Document deleted successfully"}), 200
    except Exception as e:
        return error_response(e)


# -------------------- PROFORMA INVOICES --------------------
@proforma_bp.route("/", methods=["POST"])
def create_proforma():
    return _create(DocumentKind.PROFORMA)


@proforma_bp.route("/", methods=["GET"])
def list_proformas():
    return _list(DocumentKind.PROFORMA)


@proforma_bp.route("/<int:proforma_id>", methods=["GET"])
def get_proforma(proforma_id):
    return _get(DocumentKind.PROFORMA, proforma_id)


@proforma_bp.route("/<int:proforma_id>", methods=["PUT"])
def update_proforma(proforma_id):
    return _update(DocumentKind.PROFORMA, proforma_id)


@proforma_bp.route("/<int:proforma_id>/status", methods=["PATCH"])
def update_proforma_status(proforma_id):
    return _update_status(DocumentKind.PROFORMA, proforma_id)


@proforma_bp.route("/<int:proforma_id>", methods=["DELETE"])
def delete_proforma(proforma_id):
    return _delete(DocumentKind.PROFORMA, proforma_id)


@proforma_bp.route("/<int:proforma_id>/convert", methods=["POST"])
def convert_proforma(proforma_id):
    try:
        proforma, invoice = InvoiceService.convert_proforma_to_final(proforma_id)
        return jsonify(serialize_for_json({
            "message": f"Proforma {proforma.number} converted",
            "proforma_id": proforma.id,
            "proforma_status": proforma.status,
            "invoice": hydrate_document(invoice, DocumentKind.INVOICE),
        })), 201
    except Exception as e:
        return error_response(e)


# -------------------- FINAL INVOICES --------------------
@bp.route("/", methods=["POST"])
def create_invoice():
    return _create(DocumentKind.INVOICE)


@bp.route("/", methods=["GET"])
def list_invoices():
    return _list(DocumentKind.INVOICE)


@bp.route("/<int:invoice_id>", methods=["GET"])
def get_invoice(invoice_id):
    return _get(DocumentKind.INVOICE, invoice_id)


@bp.route("/<int:invoice_id>", methods=["PUT"])
def update_invoice(invoice_id):
    return _update(DocumentKind.INVOICE, invoice_id)


@bp.route("/<int:invoice_id>/status", methods=["PATCH"])
def update_invoice_status(invoice_id):
    return _update_status(DocumentKind.INVOICE, invoice_id)


@bp.route("/<int:invoice_id>", methods=["DELETE"])
def delete_invoice(invoice_id):
    return _delete(DocumentKind.INVOICE, invoice_id)


@bp.route("/export", methods=["GET"])
def export_invoices():
    try:
        invoices = InvoiceService.list_documents(DocumentKind.INVOICE, status=request.args.get("status"))
        rows = [{
            'number': invoice.number,
            'client': invoice.client.name if invoice.client else '',
            'taxid': (invoice.client.taxid if invoice.client else '') or '',
            'issue_date': invoice.issue_date.strftime('%Y-%m-%d'),
            'due_date': invoice.due_date.strftime('%Y-%m-%d') if invoice.due_date else '',
            'subtotal': float(invoice.subtotal or 0),
            'tax_total': float(invoice.tax_total or 0),
            'stamp_tax': float(invoice.stamp_tax or 0),
            'total': float(invoice.total or 0),
            'amount_paid': float(invoice.amount_paid or 0),
            'client_debt': float(invoice.client_debt or 0),
            'status': invoice.status,
        } for invoice in invoices]

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name='Invoices', index=False)
        output.seek(0)
        return send_file(
            output,
            as_attachment=True,
            download_name='invoices_export.xlsx',
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
    except Exception as e:
        return jsonify({"error": str(e)}), 500
