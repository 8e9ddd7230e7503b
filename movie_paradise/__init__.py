"""
Movie Paradise - movie catalog and review moderation
"""
import logging
from datetime import datetime

from flask import Flask, render_template, session

from .backend import HostedBackend
from .config import Config
from .extensions import limiter

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    limiter.init_app(app)
    app.extensions['backend'] = HostedBackend.from_config(app.config)

    from .admin import admin_bp
    from .api import api_bp
    from .auth import auth_bp
    from .views import main_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp)

    from .cli import register_commands
    register_commands(app)

    register_error_handlers(app)
    register_context_processors(app)

    logger.info("🎬 Movie Paradise ready (tables prefix: %s)", app.config['TABLE_PREFIX'])
    return app


def register_error_handlers(app):
    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_error(e):
        return render_template('500.html'), 500


def register_context_processors(app):
    @app.context_processor
    def inject_now():
        return {'now': datetime.now()}

    @app.context_processor
    def inject_user():
        return {
            'logged_in': 'user_id' in session,
            'user_email': session.get('user_email', ''),
            'user_is_admin': session.get('is_admin', False),
        }
