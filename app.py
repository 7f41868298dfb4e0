import logging

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError
from pydantic import ValidationError

from config import config
from extensions import db, login_manager, init_extensions
from models import User
from services.exceptions import InsufficientStock, NotFound, PersistenceFailure

logger = logging.getLogger(__name__)


def create_app(config_class='default'):
    """
    Application factory.

    Args:
        config_class: Config class or a name from config.config
            ('development', 'production', 'testing')
    """
    if isinstance(config_class, str):
        config_class = config[config_class]

    app = Flask(__name__)
    app.config.from_object(config_class())

    init_extensions(app)

    from logging_config import setup_logging
    setup_logging(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Not authenticated'}), 401

    from routes import register_blueprints
    register_blueprints(app)

    register_error_handlers(app)

    from cli import register_commands
    register_commands(app)

    @app.shell_context_processor
    def make_shell_context():
        import models
        return {'db': db, 'models': models}

    return app


def register_error_handlers(app):
    """Translate service errors into JSON responses."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify({
            'error': 'Invalid request',
            'details': error.errors(include_url=False, include_context=False),
        }), 400

    @app.errorhandler(NotFound)
    def not_found(error):
        return jsonify(error.to_dict()), 404

    @app.errorhandler(InsufficientStock)
    def insufficient_stock(error):
        return jsonify(error.to_dict()), 400

    @app.errorhandler(PersistenceFailure)
    def persistence_failure(error):
        return jsonify({**error.to_dict(), 'retryable': True}), 503

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return jsonify({'error': error.description}), 400

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    app = create_app()
    app.run(debug=False)
