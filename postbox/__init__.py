"""
Postbox - Newsletters and Subscribers
=====================================

A small Flask application managing newsletters and their subscribers:
- Server-rendered pages for browsing and editing newsletters
- A JSON API mirroring the pages, plus subscriber-centric endpoints
- SQLite persistence through Flask-SQLAlchemy

Usage:
    from flask import Flask
    from postbox import Postbox

    app = Flask(__name__)
    Postbox(app)

Or:
    from postbox import create_app
    app = create_app({'DATABASE_URL': 'newsletters.db'})
"""

__version__ = '0.1.0'

from .extension import Postbox, create_app

__all__ = ['Postbox', 'create_app']
