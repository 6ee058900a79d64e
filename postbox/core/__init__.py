"""
Postbox Core
============

Configuration, persistence, errors and logging shared by the blueprints.
"""

from .config import Config
from .database import db
from .errors import PostboxError, ValidationError, NotFoundError
from .logging_service import LoggingService
from .models import Newsletter, Subscriber, newsletter_subscribers
from .store import NewsletterStore, get_store

__all__ = [
    'Config', 'db', 'PostboxError', 'ValidationError', 'NotFoundError', 'LoggingService',
    'Newsletter', 'Subscriber', 'newsletter_subscribers', 'NewsletterStore', 'get_store',
]
