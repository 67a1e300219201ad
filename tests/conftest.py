"""
Shared fixtures for the news portal tests.
Run with: pytest -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from newsportal import NewsPortal

ADMIN_USERNAME = "editor"
ADMIN_PASSWORD = "correct horse battery"


def build_app(base_dir, **overrides):
    """Flask app with the portal installed against files under base_dir."""
    app = Flask(__name__)
    config = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_DIR": base_dir,
        "NEWS_DB": os.path.join(base_dir, "news.db"),
        "USER_DB": os.path.join(base_dir, "users.db"),
        "UPLOAD_FOLDER": os.path.join(base_dir, "uploads"),
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": None,
    }
    config.update(overrides)
    NewsPortal(app, config)
    return app


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="newsportal-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    return build_app(tmp_db_dir)


@pytest.fixture
def app_factory(tmp_db_dir):
    """Build a second app on the same directory with config overrides."""
    def _factory(**overrides):
        return build_app(tmp_db_dir, **overrides)
    return _factory


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    """ArticleDatabase bound to the test app's database."""
    from newsportal.modules.articles.database import ArticleDatabase

    with app.app_context():
        yield ArticleDatabase


@pytest.fixture
def admin_account(app):
    """An existing admin account with a known password."""
    from newsportal.modules.auth.database import AccountDatabase
    from newsportal.modules.auth.utils import hash_password

    with app.app_context():
        AccountDatabase.create_account(ADMIN_USERNAME, hash_password(ADMIN_PASSWORD))
    return ADMIN_USERNAME, ADMIN_PASSWORD


@pytest.fixture
def auth_client(client, admin_account):
    """Test client with an authenticated admin session."""
    username, password = admin_account
    response = client.post("/login", data={"username": username, "password": password})
    assert response.status_code == 302
    return client


@pytest.fixture
def make_article(app):
    """Insert an article directly and return its id."""
    from newsportal.modules.articles.database import ArticleDatabase

    def _make(**fields):
        data = {"title": "Title", "body": "Body text", "author": "Reporter"}
        data.update(fields)
        with app.app_context():
            return ArticleDatabase.create(data)

    return _make
