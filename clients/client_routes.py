from flask import Blueprint, request, jsonify, send_file
from src.extensions import db
from clients.client import Client
import pandas as pd
import io

bp = Blueprint("clients", __name__)

CLIENT_FIELDS = ("name", "taxid", "commerce_reg_number", "address", "city", "country", "phone", "email")


# -------------------- CREATE CLIENT --------------------
@bp.route("/", methods=["POST"])
def create_client():
    data = request.get_json() or {}

    if not data.get("name"):
        return jsonify({"error": "name is required"}), 400
    if data.get("taxid") and Client.query.filter_by(taxid=data["taxid"]).first():
        return jsonify({"error": "taxid already exists"}), 400

    try:
        client = Client(**{key: data.get(key) for key in CLIENT_FIELDS})
        db.session.add(client)
        db.session.commit()
        return jsonify(client.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 500


# -------------------- LIST CLIENTS --------------------
@bp.route("/", methods=["GET"])
def list_clients():
    query = Client.query
    search = request.args.get("q")
    if search:
        query = query.filter(Client.name.ilike(f"%{search}%"))
    return jsonify([c.to_dict() for c in query.order_by(Client.name).all()]), 200


@bp.route("/<int:client_id>", methods=["GET"])
def get_client(client_id):
    client = db.session.get(Client, client_id)
    if not client:
        return jsonify({"error": "Client not found"}), 404
    return jsonify(client.to_dict()), 200


# -------------------- UPDATE CLIENT --------------------
@bp.route("/<int:client_id>", methods=["PUT"])
def update_client(client_id):
    client = db.session.get(Client, client_id)
    if not client:
        return jsonify({"error": "Client not found"}), 404

    data = request.get_json() or {}
    if "name" in data and not data["name"]:
        return jsonify({"error": "name cannot be empty"}), 400

    try:
        for key in CLIENT_FIELDS:
            if key in data:
                setattr(client, key, data[key])
        db.session.commit()
        return jsonify(client.to_dict()), 200
    except Exception as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 500


@bp.route("/<int:client_id>", methods=["DELETE"])
def delete_client(client_id):
    client = db.session.get(Client, client_id)
    if not client:
        return jsonify({"error": "Client not found"}), 404

    try:
        db.session.delete(client)
        db.session.commit()
        return jsonify({"message": "Client deleted successfully"}), 200
    except Exception as e:
        # documents still reference the client
        db.session.rollback()
        return jsonify({"error": str(e)}), 400


# -------------------- EXPORT CLIENTS --------------------
@bp.route("/export", methods=["GET"])
def export_clients():
    try:
        clients = Client.query.order_by(Client.name).all()
        df = pd.DataFrame([c.to_dict() for c in clients],
                          columns=["id", "name", "taxid", "commerce_reg_number", "address", "city", "country",
                                   "phone", "email"])

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name='Clients', index=False)
        output.seek(0)
        return send_file(
            output,
            as_attachment=True,
            download_name='clients_export.xlsx',
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
    except Exception as e:
        return jsonify({"error": str(e)}), 500
