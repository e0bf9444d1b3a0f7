import logging

logger = logging.getLogger("Routes")


def register_routes(app):
    try:
        from clients.client_routes import bp as client_bp
        app.register_blueprint(client_bp, url_prefix="/clients")
    except ImportError as e:
        logger.error(f"Failed to import client_routes: {e}")

    try:
        from products.product_routes import bp as product_bp
        app.register_blueprint(product_bp, url_prefix="/products")
    except ImportError as e:
        logger.error(f"Failed to import product_routes: {e}")

    try:
        from invoices.invoice_routes import bp as invoice_bp, proforma_bp
        app.register_blueprint(proforma_bp, url_prefix="/proformas")
        app.register_blueprint(invoice_bp, url_prefix="/invoices")
    except ImportError as e:
        logger.error(f"Failed to import invoice_routes: {e}")

    try:
        from delivery.delivery_routes import bp as delivery_bp
        app.register_blueprint(delivery_bp, url_prefix="/delivery-notes")
    except ImportError as e:
        logger.error(f"Failed to import delivery_routes: {e}")

    try:
        from payments.payment_routes import bp as payment_bp
        app.register_blueprint(payment_bp, url_prefix="/payments")
    except ImportError as e:
        logger.error(f"Failed to import payment_routes: {e}")

    try:
        from settings.settings_routes import bp as settings_bp
        app.register_blueprint(settings_bp, url_prefix="/settings")
    except ImportError as e:
        logger.error(f"Failed to import settings_routes: {e}")

    try:
        from exports.export_routes import bp as export_bp
        app.register_blueprint(export_bp, url_prefix="/exports")
    except ImportError as e:
        logger.error(f"Failed to import export_routes: {e}")

    try:
        from pdf_templates.template_routes import bp as template_bp
        app.register_blueprint(template_bp, url_prefix="/pdf-templates")
    except ImportError as e:
        logger.error(f"Failed to import template_routes: {e}")

    try:
        from reports.report_routes import bp as report_bp
        app.register_blueprint(report_bp, url_prefix="/reports")
    except ImportError as e:
        logger.error(f"Failed to import report_routes: {e}")
