"""
News Portal
===========

A small Flask news site:
- Public home page, article listing and article pages
- JSON API for listing, reading and creating articles
- Session-authenticated admin panel for article CRUD with image uploads

Usage:
    from flask import Flask
    from newsportal import NewsPortal

    app = Flask(__name__)
    NewsPortal(app)

or simply ``app = create_app()``.
"""

import os
import secrets
from datetime import timedelta

from flask import Blueprint, Flask, jsonify, render_template, request, send_from_directory

from .core.config import Config
from .core.logging_service import configure_logging, logger

__version__ = '0.1.0'

templates_bp = Blueprint('newsportal', __name__, template_folder='templates')


class NewsPortal:
    """Flask extension wiring configuration, storage and blueprints together"""

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        self.app = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        for key, value in self._config.items():
            app.config[key] = value

        self._apply_defaults(app)
        configure_logging(app)
        self._setup_database_dir(app)
        self._init_tables(app)
        self._register_blueprints(app)
        self._register_uploads_route(app)
        self._register_error_handlers(app)

        app.extensions['newsportal'] = self
        logger.info('system', 'News portal initialised', {'modules': self._registered})

    def _apply_defaults(self, app):
        for key, value in Config.as_dict().items():
            if key in ('SECRET_KEY', 'NEWS_DB', 'USER_DB'):
                continue
            app.config.setdefault(key, value)

        # Database files follow DB_DIR unless pinned by the environment
        db_dir = app.config['DB_DIR']
        app.config.setdefault('NEWS_DB', os.getenv('NEWS_DB') or os.path.join(db_dir, 'news.db'))
        app.config.setdefault('USER_DB', os.getenv('USER_DB') or os.path.join(db_dir, 'users.db'))

        if not app.config.get('SECRET_KEY'):
            app.config['SECRET_KEY'] = Config.SECRET_KEY or secrets.token_hex(32)
            if not Config.SECRET_KEY:
                logger.warning('system', 'No NEWSPORTAL_SECRET_KEY set; sessions will not survive a restart')

        app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(
            hours=app.config['SESSION_LIFETIME_HOURS']
        )
        # Flask ships SAMESITE=None, so setdefault would never apply
        if not app.config.get('SESSION_COOKIE_SAMESITE'):
            app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    def _setup_database_dir(self, app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    def _init_tables(self, app):
        from .modules.articles.database import ArticleDatabase
        from .modules.auth.database import AccountDatabase

        with app.app_context():
            ArticleDatabase.init_table()
            AccountDatabase.init_table()

    def _register_blueprints(self, app):
        from .modules.auth import auth_bp
        from .modules.articles import articles_bp
        from .modules.news_public import news_public_bp

        # Shared base.html / error pages, also when the host app has its own templates
        if templates_bp.name not in app.blueprints:
            app.register_blueprint(templates_bp)

        for name, blueprint in (('auth', auth_bp),
                                ('articles', articles_bp),
                                ('news_public', news_public_bp)):
            if blueprint.name not in app.blueprints:
                app.register_blueprint(blueprint)
            self._registered.append(name)

    def _register_uploads_route(self, app):
        prefix = app.config['UPLOAD_URL_PREFIX'].rstrip('/')

        def uploaded_file(filename):
            return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

        app.add_url_rule(f'{prefix}/<path:filename>', 'uploaded_file', uploaded_file)

    def _register_error_handlers(self, app):
        def wants_json():
            return request.path.startswith('/api/')

        @app.errorhandler(404)
        def not_found(error):
            if wants_json():
                return jsonify({'error': 'Not found'}), 404
            return render_template('errors/error.html', status=404,
                                   message='The page you are looking for does not exist.'), 404

        @app.errorhandler(413)
        def too_large(error):
            if wants_json():
                return jsonify({'error': 'Upload too large'}), 413
            return render_template('errors/error.html', status=413,
                                   message='The uploaded file is too large.'), 413

        @app.errorhandler(500)
        def server_error(error):
            logger.error('system', 'Unhandled server error', {'error': repr(getattr(error, 'original_exception', error))})
            if wants_json():
                return jsonify({'error': 'Internal server error'}), 500
            return render_template('errors/error.html', status=500,
                                   message='Something went wrong. Please try again.'), 500

    def get_registered_modules(self):
        return list(self._registered)


def create_app(config=None):
    """Build a Flask app with the portal installed. ``config`` overrides app.config."""
    app = Flask(__name__)
    NewsPortal(app, config)
    return app


__all__ = ['NewsPortal', 'create_app', 'Config']
