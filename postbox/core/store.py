"""
Newsletter Store
================

Every persistence operation the HTML pages and the JSON API share. Handlers
get the store for the current app via get_store() rather than touching the
session directly.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError
from .database import db
from .errors import NotFoundError, ValidationError
from .logging_service import LoggingService
from .models import Newsletter, Subscriber

NEWSLETTER_NOT_FOUND = 'Newsletter not found'
SUBSCRIBER_NOT_FOUND = 'Subscriber not found'
DUPLICATE_EMAIL = 'Subscriber email must be unique'


def _clean(value, field='value'):
    """Strip text input; blank values become None, non-text values are rejected"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f'{field} must be a string')
    value = str(value)
    value = value.strip()
    return value or None


def _parse_id(value):
    """Integer primary key from a route value, or None when it does not parse"""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _require(value, field, entity):
    value = _clean(value, f'{entity}.{field}')
    if value is None:
        raise ValidationError(f'{entity}.{field} cannot be null')
    return value


class NewsletterStore:
    """Persistence handle wrapping a SQLAlchemy session"""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    # ===== Newsletters =====

    def list_newsletters(self):
        return self.session.execute(db.select(Newsletter).order_by(Newsletter.id)).scalars().all()

    def get_newsletter(self, newsletter_id):
        newsletter_pk = _parse_id(newsletter_id)
        newsletter = self.session.get(Newsletter, newsletter_pk) if newsletter_pk is not None else None
        if newsletter is None:
            raise NotFoundError(NEWSLETTER_NOT_FOUND)
        return newsletter

    def create_newsletter(self, name):
        name = _require(name, 'name', 'Newsletter')
        newsletter = Newsletter(name=name)
        self.session.add(newsletter)
        self.session.commit()
        LoggingService.info('newsletters', f"Created newsletter {newsletter.id}", {'name': name})
        return newsletter

    def delete_newsletter(self, newsletter_id):
        newsletter = self.get_newsletter(newsletter_id)
        newsletter.clear_subscribers()
        self.session.flush()
        self.session.delete(newsletter)
        self.session.commit()
        LoggingService.info('newsletters', f"Deleted newsletter {newsletter_id}")

    def newsletter_subscribers(self, newsletter_id):
        return list(self.get_newsletter(newsletter_id).subscribers)

    # ===== Subscribers =====

    def list_subscribers(self):
        return self.session.execute(db.select(Subscriber).order_by(Subscriber.id)).scalars().all()

    def get_subscriber(self, subscriber_id):
        subscriber_pk = _parse_id(subscriber_id)
        subscriber = self.session.get(Subscriber, subscriber_pk) if subscriber_pk is not None else None
        if subscriber is None:
            raise NotFoundError(SUBSCRIBER_NOT_FOUND)
        return subscriber

    def find_subscriber_by_email(self, email):
        email = _clean(email, 'Subscriber.email')
        if email is None:
            return None
        return self.session.execute(db.select(Subscriber).filter_by(email=email)).scalar_one_or_none()

    def create_subscriber(self, name, email):
        email = _require(email, 'email', 'Subscriber')
        name = _require(name, 'name', 'Subscriber')
        subscriber = Subscriber(name=name, email=email)
        self.session.add(subscriber)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ValidationError(DUPLICATE_EMAIL)
        LoggingService.info('subscribers', f"Created subscriber {subscriber.id}", {'email': email})
        return subscriber

    def find_or_create_subscriber(self, name, email):
        """
        Return (subscriber, created) for the given email.

        An existing subscriber is reused as-is; the supplied name only applies
        when a new row is created. A concurrent insert of the same email is
        resolved by re-reading the row that won the unique constraint.
        """
        email = _require(email, 'email', 'Subscriber')
        existing = self.find_subscriber_by_email(email)
        if existing is not None:
            return existing, False

        try:
            return self.create_subscriber(name, email), True
        except ValidationError as e:
            if e.message != DUPLICATE_EMAIL:
                raise
            existing = self.find_subscriber_by_email(email)
            if existing is None:
                raise
            return existing, False

    def add_subscriber_to_newsletter(self, newsletter_id, name, email):
        """Find or create the subscriber by email, then attach it to the newsletter"""
        subscriber, created = self.find_or_create_subscriber(name, email)
        newsletter = self.get_newsletter(newsletter_id)
        if not newsletter.has_subscriber(subscriber):
            newsletter.add_subscriber(subscriber)
            self.session.commit()
            LoggingService.info('subscribers', f"Added subscriber {subscriber.id} to newsletter {newsletter.id}",
                                {'email': subscriber.email, 'created': created})
        return subscriber

    def delete_subscriber(self, subscriber_id):
        subscriber = self.get_subscriber(subscriber_id)
        subscriber.clear_newsletters()
        self.session.flush()
        self.session.delete(subscriber)
        self.session.commit()
        LoggingService.info('subscribers', f"Deleted subscriber {subscriber_id}")

    def subscriber_newsletters(self, subscriber_id):
        return list(self.get_subscriber(subscriber_id).newsletters)


def get_store():
    """The store registered on the current app by Postbox.init_app"""
    return current_app.extensions['postbox'].store
