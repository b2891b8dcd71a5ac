"""Application factory for the equipment-reservation portal."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from flask_login import LoginManager
from flask_wtf import CSRFProtect

from .config import BaseConfig, get_config
from .data_access import users_dao
from .data_access.db import init_app as init_db_app
from .errors import ReservationError
from .models.entities import User

csrf = CSRFProtect()
login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id: str) -> User | None:
    """Look up a user for Flask-Login session handling."""
    if not user_id:
        return None
    return users_dao.get_user_by_id(int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "unauthorized", "message": "Please sign in first."}), 401


def create_app(config_object: type[BaseConfig] | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)

    config_cls = config_object or get_config()
    app.config.from_object(config_cls)
    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"], logging.INFO))

    csrf.init_app(app)
    login_manager.init_app(app)
    init_db_app(app)

    register_blueprints(app)
    register_error_handlers(app)

    @app.route("/")
    def index():
        return jsonify({"service": "reservation-portal", "status": "ok"})

    return app


def register_blueprints(app: Flask) -> None:
    """Import and register application blueprints."""

    from .controllers import (  # pylint: disable=import-outside-toplevel
        admin,
        auth,
        catalog,
        notifications,
        reservations,
    )

    app.register_blueprint(auth.bp)
    app.register_blueprint(catalog.bp)
    app.register_blueprint(reservations.bp)
    app.register_blueprint(admin.bp)
    app.register_blueprint(notifications.bp)


def register_error_handlers(app: Flask) -> None:
    """Translate domain errors and HTTP errors into JSON bodies."""

    @app.errorhandler(ReservationError)
    def reservation_error(error: ReservationError) -> tuple:
        if error.http_status >= 500:
            app.logger.error("Reservation store failure: %s", error)
        return jsonify({"error": error.code, "message": str(error)}), error.http_status

    @app.errorhandler(403)
    def forbidden(error: Exception) -> tuple:
        return jsonify({"error": "forbidden", "message": "You do not have access to this resource."}), 403

    @app.errorhandler(404)
    def not_found(error: Exception) -> tuple:
        return jsonify({"error": "not_found", "message": "We could not locate the resource you requested."}), 404

    @app.errorhandler(500)
    def server_error(error: Exception) -> tuple:
        return jsonify({"error": "server_error", "message": "An unexpected error occurred."}), 500
