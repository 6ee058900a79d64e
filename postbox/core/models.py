"""
Postbox Models
==============

Newsletters and subscribers, related many-to-many through an explicit
association table. The composite primary key on the association table keeps
each (newsletter, subscriber) pair unique.
"""

from .config import Config
from .database import db, BaseModel, utcnow

# Association table for newsletter-subscriber relationship
newsletter_subscribers = db.Table(
    Config.NEWSLETTER_SUBSCRIBERS_TABLE,
    db.Column('newsletter_id', db.Integer,
              db.ForeignKey(f'{Config.NEWSLETTERS_TABLE}.id', ondelete='CASCADE'), primary_key=True),
    db.Column('subscriber_id', db.Integer,
              db.ForeignKey(f'{Config.SUBSCRIBERS_TABLE}.id', ondelete='CASCADE'), primary_key=True),
    db.Column('created_at', db.DateTime, default=utcnow, nullable=False)
)


class Newsletter(BaseModel):
    __tablename__ = Config.NEWSLETTERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Relationships
    subscribers = db.relationship('Subscriber',
                                  secondary=newsletter_subscribers,
                                  back_populates='newsletters',
                                  order_by='Subscriber.id')

    def has_subscriber(self, subscriber):
        """Check if the newsletter already holds this subscriber"""
        return subscriber in self.subscribers

    def add_subscriber(self, subscriber):
        """Add a subscriber to the newsletter, ignoring existing pairs"""
        if not self.has_subscriber(subscriber):
            self.subscribers.append(subscriber)

    def clear_subscribers(self):
        """Remove every association row for this newsletter"""
        self.subscribers = []

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Newsletter {self.id} {self.name!r}>'


class Subscriber(BaseModel):
    __tablename__ = Config.SUBSCRIBERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)

    # Relationships
    newsletters = db.relationship('Newsletter',
                                  secondary=newsletter_subscribers,
                                  back_populates='subscribers',
                                  order_by='Newsletter.id')

    def clear_newsletters(self):
        """Remove every association row for this subscriber"""
        self.newsletters = []

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Subscriber {self.id} {self.email!r}>'
