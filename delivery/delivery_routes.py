from flask import Blueprint, request, jsonify
from src.serialization import serialize_for_json
from invoices.document_base import DocumentKind
from invoices.document_data import hydrate_document
from invoices.invoice_routes import document_summary, error_response, header_fields
from invoices.invoice_service import InvoiceService
from delivery.delivery_service import DeliveryService

bp = Blueprint("delivery_notes", __name__)

KIND = DocumentKind.DELIVERY_NOTE


@bp.route("/", methods=["POST"])
def create_delivery_note():
    payload = request.get_json() or {}
    items = payload.get("items")
    if not payload.get("client_id"):
        return jsonify({"error": "client_id is required"}), 400
    if not items or not isinstance(items, list):
        return jsonify({"error": "items list is required"}), 400
    try:
        note = DeliveryService.create_delivery_note(payload["client_id"], items, **header_fields(payload))
        return jsonify(serialize_for_json(hydrate_document(note, KIND))), 201
    except Exception as e:
        return error_response(e)


@bp.route("/from-invoice/<int:invoice_id>", methods=["POST"])
def create_from_invoice(invoice_id):
    payload = request.get_json(silent=True) or {}
    try:
        note = DeliveryService.create_from_invoice(invoice_id, **header_fields(payload))
        return jsonify(serialize_for_json(hydrate_document(note, KIND))), 201
    except Exception as e:
        return error_response(e)


@bp.route("/", methods=["GET"])
def list_delivery_notes():
    notes = InvoiceService.list_documents(KIND, status=request.args.get("status"))
    return jsonify([serialize_for_json(document_summary(n)) for n in notes]), 200


@bp.route("/<int:note_id>", methods=["GET"])
def get_delivery_note(note_id):
    try:
        return jsonify(serialize_for_json(InvoiceService.get_detailed_document(KIND, note_id))), 200
    except Exception as e:
        return error_response(e)


@bp.route("/<int:note_id>", methods=["PUT"])
def update_delivery_note(note_id):
    payload = request.get_json() or {}
    try:
        note = InvoiceService.update_document(KIND, note_id, items=payload.get("items"),
                                              client_id=payload.get("client_id"), **header_fields(payload))
        return jsonify(serialize_for_json(hydrate_document(note, KIND))), 200
    except Exception as e:
        return error_response(e)


@bp.route("/<int:note_id>/status", methods=["PATCH"])
def update_delivery_status(note_id):
    status = (request.get_json() or {}).get("status")
    if not status:
        return jsonify({"error": "status is required"}), 400
    try:
        note = InvoiceService.update_status(KIND, note_id, status)
        return jsonify({"id": note.id, "number": note.number, "status": note.status}), 200
    except Exception as e:
        return error_response(e)


@bp.route("/<int:note_id>", methods=["DELETE"])
def delete_delivery_note(note_id):
    try:
        InvoiceService.delete_document(KIND, note_id)
        return jsonify({"message": "Delivery note deleted successfully"}), 200
    except Exception as e:
        return error_response(e)
