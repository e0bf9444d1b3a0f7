from flask import Blueprint, jsonify, send_file
import io
from invoices.document_base import DocumentKind
from exports.export_service import export_document

bp = Blueprint("exports", __name__)

EXPORTABLE = {
    "proforma": DocumentKind.PROFORMA,
    "invoice": DocumentKind.INVOICE,
    "delivery": DocumentKind.DELIVERY_NOTE,
}


def send_export(result, failure_message):
    if result is None:
        return jsonify({"error": failure_message}), 500
    return send_file(
        io.BytesIO(result.content),
        as_attachment=True,
        download_name=result.filename,
        mimetype=result.mimetype
    )


@bp.route("/<kind>/<int:document_id>/pdf", methods=["GET"])
def download_document_pdf(kind, document_id):
    if kind not in EXPORTABLE:
        return jsonify({"error": f"Unknown document type: {kind}"}), 404
    result = export_document(EXPORTABLE[kind], document_id)
    return send_export(result, "Failed to generate PDF")
