"""Flask application factory."""

import os

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from flowlingo.config import config

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from flowlingo.extensions import cache, init_sentry, limiter

    cache.init_app(app)
    limiter.init_app(app)
    init_sentry(app)

    from flowlingo.logging_config import setup_logging

    setup_logging(app)

    from flowlingo.celery_app import init_celery

    init_celery(app)

    # CORS
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    from flowlingo.utils.auth import register_jwt_handlers

    register_jwt_handlers(jwt)

    # Register blueprints
    from flowlingo.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    # Shell context
    @app.shell_context_processor
    def make_shell_context():
        from flowlingo.models import (Conversation, Document, GeneratedText,
                                      LevelProgress, User, UserSticker,
                                      VocabularyWord, XpTransaction)

        return {
            "db": db,
            "User": User,
            "UserSticker": UserSticker,
            "XpTransaction": XpTransaction,
            "VocabularyWord": VocabularyWord,
            "Conversation": Conversation,
            "GeneratedText": GeneratedText,
            "Document": Document,
            "LevelProgress": LevelProgress,
        }

    return app
