"""
Newsletters Module
==================

Provides the browser-facing pages:
- Newsletter list with create/delete forms
- Per-newsletter subscriber page with add/delete forms
"""

from flask import Blueprint

newsletters_bp = Blueprint(
    'newsletters',
    __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/newsletters/static'
)

from . import routes
