"""
Postbox Flask extension: wires config, database, logging and blueprints onto an app.
"""

import os
import logging
from flask import Flask, got_request_exception
from flask_cors import CORS
from .core.config import Config
from .core.database import db, init_db
from .core.logging_service import LoggingService, configure_logging
from .core.middleware import MethodOverrideMiddleware
from .core.store import NewsletterStore

logger = logging.getLogger(__name__)


class Postbox:
    """
    Usage:
        app = Flask(__name__)
        postbox = Postbox(app)

    Settings already present in app.config win over environment defaults.
    """

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered_modules = []
        self.store = None
        self.app = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self._apply_config(app)
        self._setup_database_dir(app)
        configure_logging(app)

        init_db(app)
        self.store = NewsletterStore()

        self._register_blueprints(app)
        self._register_error_logging(app)

        # Forms post with ?_method=DELETE
        app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

        @app.context_processor
        def inject_postbox_context():
            return {'brand_name': app.config.get('BRAND_NAME', Config.BRAND_NAME)}

        app.extensions['postbox'] = self
        logger.info(f"Postbox initialised with database {app.config['SQLALCHEMY_DATABASE_URI']}")

    def _apply_config(self, app):
        app.config.update(self._config)

        # DB_DIR given without an explicit file still decides where the database lives
        if 'DATABASE_URL' not in app.config and not os.getenv('DATABASE_URL') and 'DB_DIR' in app.config:
            app.config['DATABASE_URL'] = os.path.join(app.config['DB_DIR'], 'postbox.db')

        for key, value in Config.as_app_config().items():
            app.config.setdefault(key, value)
        app.config.setdefault('SQLALCHEMY_DATABASE_URI', Config.database_uri(app.config['DATABASE_URL']))

    def _setup_database_dir(self, app):
        uri = app.config['SQLALCHEMY_DATABASE_URI']
        if not uri.startswith('sqlite:///'):
            return
        db_dir = os.path.dirname(uri[len('sqlite:///'):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _register_blueprints(self, app):
        from .modules.newsletters import newsletters_bp
        from .modules.api import api_bp

        app.register_blueprint(newsletters_bp)
        app.register_blueprint(api_bp)
        CORS(app, resources={r'/api/*': {'origins': '*'}}, send_wildcard=True)

        self._registered_modules = ['newsletters', 'api']

    def _register_error_logging(self, app):
        def log_unhandled_exception(sender, exception, **extra):
            db.session.rollback()
            LoggingService.log_error_with_traceback('system', exception)

        got_request_exception.connect(log_unhandled_exception, app, weak=False)

    def get_registered_modules(self):
        return list(self._registered_modules)


def create_app(config=None):
    """Build a Flask app with Postbox registered"""
    app = Flask(__name__)
    Postbox(app, config)
    return app
