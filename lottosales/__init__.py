"""Lottery sales management API package."""

from __future__ import annotations

from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(config: Any | None = None, mongo_db: Any | None = None) -> Flask:
    """Application factory.

    Args:
        config: Configuration object/class. Defaults to the one selected by APP_ENV.
        mongo_db: Pre-built database handle (tests inject an in-memory one).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lottosales.config import get_config
    from lottosales.db import init_db
    from lottosales.error_handlers import register_error_handlers
    from lottosales.logging_config import configure_logging
    from lottosales.rate_limit import init_rate_limiter
    from lottosales.routes.business import business_bp
    from lottosales.routes.closings import closings_bp
    from lottosales.routes.draws import draws_bp
    from lottosales.routes.finance import finance_bp
    from lottosales.routes.health import health_bp
    from lottosales.routes.results import results_bp
    from lottosales.routes.sales import sales_bp
    from lottosales.routes.verification import verification_bp

    app = Flask(__name__)
    app.config.from_object(config or get_config())

    configure_logging(app)
    init_db(app, mongo_db=mongo_db)
    init_rate_limiter(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(verification_bp)
    app.register_blueprint(draws_bp, url_prefix="/api")
    app.register_blueprint(sales_bp, url_prefix="/api")
    app.register_blueprint(results_bp, url_prefix="/api")
    app.register_blueprint(closings_bp, url_prefix="/api")
    app.register_blueprint(finance_bp, url_prefix="/api")
    app.register_blueprint(business_bp, url_prefix="/api")

    return app
