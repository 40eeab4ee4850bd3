from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import build_container
from .core.logging_setup import configure_logging
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(settings=None) -> Flask:
    """Build the Flask app. ``settings`` overrides the APP_ENV-selected module (tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings_module = get_settings_module()
        settings = importlib.import_module(settings_module)
    else:
        settings_module = getattr(settings, "__name__", type(settings).__name__)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings)
    app.extensions["account_service"] = container

    logger.info("settings=%s store=%s", settings_module, getattr(settings, "USER_STORE", "mysql"))

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return jsonify({"error": error.description}), error.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500

    register_users(app, container)

    return app
