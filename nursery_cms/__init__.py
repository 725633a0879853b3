from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_mail import Mail
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
mail = Mail()


def create_app(config_class=Config, storage=None):
    """Build the application.

    ``storage`` may be any ``nursery_cms.storage.Storage`` instance; when it is
    omitted the backend named by ``STORAGE_BACKEND`` is constructed.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    with app.app_context():
        # Import models and routes here to register with the app
        from nursery_cms import models  # noqa: F401
        from nursery_cms.storage import build_storage, init_storage
        from nursery_cms.routes import (
            auth, nurseries, users, events, newsletters, gallery,
            activity, contact, public,
        )

        # Register blueprints
        app.register_blueprint(auth.bp)
        app.register_blueprint(nurseries.bp)
        app.register_blueprint(users.bp)
        app.register_blueprint(events.bp)
        app.register_blueprint(newsletters.bp)
        app.register_blueprint(gallery.bp)
        app.register_blueprint(activity.bp)
        app.register_blueprint(contact.bp)
        app.register_blueprint(public.bp)

        if storage is None:
            storage = build_storage(app)
        init_storage(app, storage)

        register_login_handlers(app)
        register_error_handlers(app)

    app.logger.info(f'Nursery CMS started with {type(storage).__name__}')
    return app


def register_login_handlers(app):
    """Resolve the session user through the injected storage."""
    from nursery_cms.storage import get_storage

    @login_manager.user_loader
    def load_user(user_id):
        user = get_storage().get_user(int(user_id))
        # Deactivated accounts lose their session on the next request
        if user is None or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(success=False, message='Authentication required'), 401


def register_error_handlers(app):
    """Register global error handlers"""
    from werkzeug.exceptions import HTTPException
    from nursery_cms.utils.errors import ValidationError

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify(success=False, message=error.message, errors=error.errors), 400

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify(success=False, message=error.description), error.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        app.logger.exception(f'Unhandled exception: {str(e)}')
        db.session.rollback()
        return jsonify(success=False, message='An unexpected error occurred'), 500
