from flask import Blueprint, request, jsonify
from datetime import date
from src.serialization import serialize_for_json
from exports.export_routes import send_export
from reports.etat104_service import Etat104Service
from reports.etat104_export import export_etat104_excel, export_etat104_pdf

bp = Blueprint("reports", __name__)


def _period():
    today = date.today()
    year = request.args.get("year", default=today.year, type=int)
    month = request.args.get("month", default=today.month, type=int)
    return year, month


@bp.route("/etat104", methods=["GET"])
def get_etat104():
    try:
        report = Etat104Service.build_report(*_period())
        return jsonify(serialize_for_json(report.to_dict())), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/etat104/export", methods=["GET"])
def export_etat104():
    format_type = request.args.get("format", "pdf").lower()
    if format_type not in ("pdf", "excel", "xlsx"):
        return jsonify({"error": "format must be pdf or excel"}), 400

    try:
        report = Etat104Service.build_report(*_period())
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return jsonify({"error": str(e)}), 500

    if format_type == "pdf":
        return send_export(export_etat104_pdf(report), "Failed to generate État 104 PDF")
    return send_export(export_etat104_excel(report), "Failed to generate État 104 Excel file")
