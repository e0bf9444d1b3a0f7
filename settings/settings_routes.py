from flask import Blueprint, request, jsonify
from src.extensions import db
from settings.company_settings import Settings

bp = Blueprint("settings", __name__)

EDITABLE_FIELDS = ("business_name", "taxid", "commerce_reg_number", "nis", "ai", "logo_path", "phone", "email",
                   "website", "address", "bank_name", "bank_account")


def _apply(settings, data):
    for key in EDITABLE_FIELDS:
        if key in data:
            setattr(settings, key, data[key])


@bp.route("/", methods=["GET"])
def get_settings():
    settings = Settings.query.first()
    if not settings:
        return jsonify({"message": "No settings found"}), 404

    data = settings.to_dict()
    data.update({
        "id": settings.id,
        "created_at": settings.created_at.isoformat() if settings.created_at else None,
        "updated_at": settings.updated_at.isoformat() if settings.updated_at else None
    })
    return jsonify(data), 200


@bp.route("/", methods=["POST"])
def create_settings():
    # Check if settings already exist
    if Settings.query.first():
        return jsonify({"error": "Settings already exist. Use PUT to update."}), 400

    settings = Settings()
    _apply(settings, request.get_json() or {})
    db.session.add(settings)
    db.session.commit()
    return jsonify({"message": "Settings created successfully"}), 201


@bp.route("/", methods=["PUT"])
def update_settings():
    settings = Settings.query.first()
    if not settings:
        return jsonify({"error": "Settings not found"}), 404

    _apply(settings, request.get_json() or {})
    db.session.commit()
    return jsonify({"message": "Settings updated successfully"}), 200
