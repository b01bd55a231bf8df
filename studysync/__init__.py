from flask import Flask
from studysync.config import DevelopmentConfig
from studysync.extensions import db, migrate

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before create_all / migrations see them
    from studysync import models  # noqa: F401

    from studysync.errors import register_error_handlers
    register_error_handlers(app)

    # Register Blueprints
    from studysync.api.routes.auth import auth_bp
    from studysync.api.routes.library_rooms import library_rooms_bp
    from studysync.api.routes.reservations import reservations_bp
    from studysync.api.routes.seats import seats_bp
    from studysync.api.routes.practice import practice_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(library_rooms_bp, url_prefix='/api/library-rooms')
    app.register_blueprint(reservations_bp, url_prefix='/api/reservations')
    app.register_blueprint(seats_bp, url_prefix='/api/seats')
    app.register_blueprint(practice_bp, url_prefix='/api/practice')

    from studysync.cli import register_commands
    register_commands(app)

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "StudySync"}

    return app
