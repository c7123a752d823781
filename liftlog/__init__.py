# liftlog/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: allow the web client (and others) to call /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Missing or invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid auth token",
                    "error": reason,
                }
            ),
            422,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # Domain error handlers
    # -----------------------------
    from .services.errors import Forbidden, NotFound, ValidationFailure

    @app.errorhandler(NotFound)
    def not_found_callback(err):
        return jsonify({"message": err.message}), 404

    @app.errorhandler(Forbidden)
    def forbidden_callback(err):
        # Same answer as a missing row: other users' data stays invisible.
        app.logger.info(f"[ownership] refused: {err.message}")
        return jsonify({"message": err.public_message}), 404

    @app.errorhandler(ValidationFailure)
    def validation_callback(err):
        body = {"message": err.message}
        if err.field:
            body["field"] = err.field
        return jsonify(body), 400

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.library_routes import library_bp
    from .routes.exercise_routes import exercises_bp
    from .routes.workout_routes import workouts_bp
    from .routes.analytics_routes import analytics_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(library_bp, url_prefix="/api")
    app.register_blueprint(exercises_bp, url_prefix="/api/exercises")
    app.register_blueprint(workouts_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api/analytics")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        from .models import user, training, history  # noqa: F401  (register tables)
        db.create_all()

    return app
