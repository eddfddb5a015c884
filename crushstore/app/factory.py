from __future__ import annotations

import logging
from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from crushstore.app.config import Config
from crushstore.app.extensions import cors
from crushstore.app.common.errors import ApiError
from crushstore.app.common.request_context import echo_request_id, init_request_id
from crushstore.app.api.register import register_api_blueprints
from crushstore.app.cli import cli_bp
from crushstore.app.ui import ui_bp
from crushstore.modules.checkout.routes import bp as checkout_bp


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True, template_folder="../templates")
    app.config.from_object(config_object)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    # Extensions
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}})

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    app.after_request(echo_request_id)

    # Health endpoint (for Docker/uptime checks)
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    # Register API blueprints
    register_api_blueprints(app)

    # Pages
    app.register_blueprint(ui_bp)
    app.register_blueprint(checkout_bp)

    # CLI (flask catalog)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(getattr(g, "request_id", None))), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        # Normalize Werkzeug errors into our JSON shape
        payload = {
            "error": {
                "code": "http_error",
                "message": err.description,
                "details": {"name": err.name},
                "request_id": getattr(g, "request_id", None),
            }
        }
        return jsonify(payload), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        payload = {
            "error": {
                "code": "internal_error",
                "message": "Internal server error",
                "details": {},
                "request_id": getattr(g, "request_id", None),
            }
        }
        return jsonify(payload), 500

    return app
