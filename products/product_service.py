from src.extensions import db
from src.exceptions import ResourceNotFoundException
from products.product import Product
from invoices.totals import parse_amount, round_money

EDITABLE_FIELDS = ("name", "description", "unit_price", "tax_rate", "stock_quantity", "unit")


class ProductService:
    @staticmethod
    def _apply(product, data):
        for key in EDITABLE_FIELDS:
            if key not in data:
                continue
            value = data[key]
            if key == "unit_price":
                value = round_money(parse_amount(value))
            elif key == "tax_rate":
                value = parse_amount(value)
            elif key == "stock_quantity":
                value = int(value or 0)
            setattr(product, key, value)

    @staticmethod
    def create_product(data):
        """
        Create a product. Returns (product, already_exists); an existing
        product with the same code is returned untouched.
        """
        existing_product = Product.query.filter_by(code=data["code"]).first()
        if existing_product:
            return existing_product, True

        product = Product(code=data["code"], name=data["name"])
        ProductService._apply(product, data)
        db.session.add(product)
        db.session.commit()
        return product, False

    @staticmethod
    def get_product_by_id(product_id):
        product = db.session.get(Product, product_id)
        if not product:
            raise ResourceNotFoundException(f"Product {product_id} not found")
        return product

    @staticmethod
    def update_product(product_id, data):
        product = ProductService.get_product_by_id(product_id)
        if "code" in data and data["code"] != product.code:
            if Product.query.filter_by(code=data["code"]).first():
                raise ValueError(f"Product code {data['code']} already in use")
            product.code = data["code"]
        ProductService._apply(product, data)
        db.session.commit()
        return product

    @staticmethod
    def delete_product(product_id):
        product = ProductService.get_product_by_id(product_id)
        db.session.delete(product)
        db.session.commit()
