from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import AuthorizationError, ConflictError, DomainError, NotFoundError, ValidationError
from .payments.controller import register as register_payments
from .policies.controller import register as register_policies
from .settings import get_settings_module

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ConflictError, 409),
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        if status != 400:
            logger.warning("%s: %s", type(e).__name__, e)
        return jsonify({"success": False, "message": str(e)}), status


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    ``container`` lets tests inject in-memory repositories; by default the
    MySQL repositories are wired from ``DB_CONFIG``.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_REQUIRED_PERCENTAGE"] = getattr(settings, "DEFAULT_REQUIRED_PERCENTAGE", 75)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        container = build_container(
            db_config=db_config,
            required_percentage=app.config["DEFAULT_REQUIRED_PERCENTAGE"],
        )

    _register_error_handlers(app)
    register_attendance(app, container)
    register_policies(app, container)
    register_payments(app, container)

    return app
