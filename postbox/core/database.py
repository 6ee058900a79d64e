from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

# Initialize the database instance, bound to an app in Postbox.init_app
db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp, the way SQLite stores it"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(db.Model):
    """Base model with common fields for all tables."""
    __abstract__ = True

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


def init_db(app):
    """Bind the database to the app and create any missing tables"""
    db.init_app(app)
    with app.app_context():
        # Model modules must be imported so their tables are registered
        from . import models  # noqa: F401
        from .logging_service import AppLog  # noqa: F401
        db.create_all()
