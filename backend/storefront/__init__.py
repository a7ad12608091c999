import logging
from flask import Flask
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from .application.courier.history import CourierHistoryService
from .application.checkout.draft_store import SqlDraftStore
from .integrations.bdcourier import BdCourierClient
from .integrations.place_order import PlaceOrderClient


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .models import audit_log, draft_order, page, section  # noqa: F401  register tables

    # -------------------------------------------------
    # Courier history (one cache per process)
    # -------------------------------------------------
    app.extensions["courier_history"] = CourierHistoryService(
        BdCourierClient(
            app.config["COURIER_API_URL"],
            app.config["COURIER_API_KEY"],
            timeout=app.config["COURIER_TIMEOUT_SECONDS"],
        )
    )

    # -------------------------------------------------
    # Checkout collaborators
    # -------------------------------------------------
    app.extensions["order_submitter"] = PlaceOrderClient(
        app.config["ORDER_API_URL"],
        app.config["ORDER_API_KEY"],
        timeout=app.config["ORDER_TIMEOUT_SECONDS"],
    )
    app.extensions["draft_store"] = SqlDraftStore(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    return app
