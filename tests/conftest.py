"""
Shared fixtures: every test gets its own Flask app on a throwaway SQLite file.
Run with: pytest tests/ -v
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from postbox import Postbox


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="postbox-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised Flask app with Postbox registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    Postbox(app, {
        "DB_DIR": tmp_db_dir,
        "DATABASE_URL": os.path.join(tmp_db_dir, "postbox.db"),
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    """The app's store, used inside an application context."""
    with app.app_context():
        yield app.extensions["postbox"].store
