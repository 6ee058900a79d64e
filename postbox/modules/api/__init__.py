"""
API Module
==========

JSON API mirroring the newsletter pages, plus subscriber-centric endpoints.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

from . import routes
