from flask import Flask

from crushstore.modules.storefront.config import bp as config_bp
from crushstore.modules.catalog.routes import bp as catalog_bp
from crushstore.modules.checkout.routes import api_bp as checkout_api_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(config_bp, url_prefix="/api")
    app.register_blueprint(catalog_bp, url_prefix="/api")
    app.register_blueprint(checkout_api_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "CRUSH Clothing Storefront API",
            "version": "0.1.0",
            "endpoints": {
                "config": ["/config/shopify"],
                "catalog": ["/catalog"],
                "checkout": ["/checkout"],
            },
        }, 200
