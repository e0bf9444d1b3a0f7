from flask import Blueprint, request, jsonify
import uuid
from src.serialization import serialize_for_json
from invoices.document_base import DocumentKind
from pdf_templates.template_repository import SqlTemplateRepository, Template

bp = Blueprint("pdf_templates", __name__)


@bp.route("/", methods=["GET"])
def list_templates():
    templates = SqlTemplateRepository().list()
    return jsonify([{"id": t.id, "name": t.name, "document_type": t.document_type} for t in templates]), 200


@bp.route("/<document_type>", methods=["GET"])
def get_template(document_type):
    try:
        template = SqlTemplateRepository().get(document_type)
    except ValueError:
        return jsonify({"error": f"Unknown document type: {document_type}"}), 400
    if template is None:
        return jsonify({"message": "No template for this document type"}), 404
    return jsonify(serialize_for_json(template)), 200


@bp.route("/", methods=["POST"])
@bp.route("/<template_id>", methods=["PUT"])
def save_template(template_id=None):
    payload = request.get_json() or {}
    document_type = payload.get("document_type")
    layout_data = payload.get("layout_data")

    if document_type not in {kind.value for kind in DocumentKind}:
        return jsonify({"error": "document_type must be one of proforma, invoice, delivery, report"}), 400
    if not isinstance(layout_data, (dict, list)):
        return jsonify({"error": "layout_data must be a JSON object"}), 400

    template_id = template_id or str(uuid.uuid4())
    template = Template(template_id, payload.get("name"), document_type, layout_data)
    if not SqlTemplateRepository().save(template_id, template):
        return jsonify({"error": "Failed to save template"}), 500
    return jsonify({"id": template_id, "message": "Template saved successfully"}), 200
