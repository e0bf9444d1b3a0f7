from flask import Blueprint, request, jsonify
from src.exceptions import PaymentExceedsBalanceException
from src.serialization import parse_date, serialize_for_json
from invoices.invoice_routes import error_response
from payments.payment_service import PaymentService

bp = Blueprint("payments", __name__)


@bp.route("/", methods=["POST"])
def create_payment():
    payload = request.get_json() or {}
    invoice_id = payload.get("invoice_id")
    amount = payload.get("amount")
    payment_method = payload.get("payment_method")

    if not all([invoice_id, amount, payment_method]):
        return jsonify({"error": "invoice_id, amount, payment_method required"}), 400

    try:
        payment = PaymentService.add_payment(
            invoice_id=invoice_id,
            amount=amount,
            method=payment_method,
            payment_date=parse_date(payload.get("payment_date")),
            reference=payload.get("reference"),
            notes=payload.get("notes"),
        )
        invoice = payment.invoice
        return jsonify(serialize_for_json({
            "payment": payment.to_dict(),
            "invoice_status": invoice.status,
            "amount_paid": invoice.amount_paid,
            "client_debt": invoice.client_debt,
        })), 201
    except PaymentExceedsBalanceException as e:
        return jsonify({"error": str(e)}), 422
    except Exception as e:
        return error_response(e)


@bp.route("/invoice/<int:invoice_id>", methods=["GET"])
def list_invoice_payments(invoice_id):
    try:
        return jsonify(serialize_for_json(PaymentService.list_payments(invoice_id))), 200
    except Exception as e:
        return error_response(e)


@bp.route("/<int:payment_id>", methods=["DELETE"])
def delete_payment(payment_id):
    try:
        invoice = PaymentService.delete_payment(payment_id)
        return jsonify(serialize_for_json({
            "message": "Payment deleted successfully",
            "invoice_status": invoice.status,
            "amount_paid": invoice.amount_paid,
            "client_debt": invoice.client_debt,
        })), 200
    except Exception as e:
        return error_response(e)
