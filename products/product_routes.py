from flask import Blueprint, request, jsonify
from src.exceptions import ResourceNotFoundException
from src.serialization import serialize_for_json
from products.product import Product
from products.product_service import ProductService

bp = Blueprint("products", __name__)

REQUIRED = ["code", "name", "unit_price"]


# -------------------------
# Create single or multiple products
# -------------------------
@bp.route("/", methods=["POST"])
def create_product():
    data = request.get_json() or {}

    # Handle multiple products as a list
    if isinstance(data, list):
        created = []
        skipped = []
        errors = []

        for idx, item in enumerate(data, 1):
            if not all(item.get(r) not in (None, "") for r in REQUIRED):
                skipped.append({"row": idx, "reason": "Missing required fields", "data": item})
                continue
            try:
                product, already_exists = ProductService.create_product(item)
                created.append({"id": product.id, "code": product.code, "already_exists": already_exists})
            except Exception as e:
                errors.append({"row": idx, "error": str(e), "data": item})
                continue

        response = {
            "created_count": len(created),
            "skipped_count": len(skipped),
            "error_count": len(errors),
            "created": created
        }
        if skipped:
            response["skipped"] = skipped[:5]
        if errors:
            response["errors"] = errors[:5]
        return jsonify(serialize_for_json(response)), 201

    # Single product
    for r in REQUIRED:
        if r not in data:
            return jsonify({"error": f"{r} is required"}), 400

    try:
        product, already_exists = ProductService.create_product(data)
        if already_exists:
            return jsonify({
                "message": f"Product with code {product.code} already exists",
                "product": {"id": product.id, "name": product.name}
            }), 200
        return jsonify(serialize_for_json(product.to_dict())), 201
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/", methods=["GET"])
def list_products():
    query = Product.query
    search = request.args.get("q")
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%") | Product.code.ilike(f"%{search}%"))
    products = query.order_by(Product.name).all()
    return jsonify([serialize_for_json(p.to_dict()) for p in products]), 200


@bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id):
    try:
        return jsonify(serialize_for_json(ProductService.get_product_by_id(product_id).to_dict())), 200
    except ResourceNotFoundException as e:
        return jsonify({"error": str(e)}), 404


@bp.route("/<int:product_id>", methods=["PUT"])
def update_product(product_id):
    data = request.get_json() or {}
    try:
        product = ProductService.update_product(product_id, data)
        return jsonify(serialize_for_json(product.to_dict())), 200
    except ResourceNotFoundException as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@bp.route("/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    try:
        ProductService.delete_product(product_id)
        return jsonify({"message": "Product deleted successfully"}), 200
    except ResourceNotFoundException as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return jsonify({"error": str(e)}), 500
