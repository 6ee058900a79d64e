"""
Newsletters Routes
==================

Provides:
- GET / -- list newsletters
- POST /newsletters -- create newsletter, redirect to /
- DELETE /newsletters/<id> -- delete newsletter, redirect to /
- GET /newsletters/<id> -- subscribers of a newsletter
- POST /newsletters/<id>/subscribers -- add (or reuse by email) a subscriber
- DELETE /subscribers/<id> -- delete subscriber, redirect back

Forms send DELETE as POST with ?_method=DELETE.

Missing newsletters/subscribers on the delete and add paths are silent no-ops
followed by the usual redirect; existing form flows rely on it.
"""

import logging
from flask import request, redirect, render_template, url_for
from . import newsletters_bp
from ...core.errors import NotFoundError, ValidationError
from ...core.store import get_store

logger = logging.getLogger(__name__)


def _text_response(message, status_code):
    return message, status_code, {'Content-Type': 'text/plain; charset=utf-8'}


def _redirect_back():
    """Redirect to the referring page, or home when there is none"""
    return redirect(request.referrer or url_for('newsletters.index'))


@newsletters_bp.route('/')
def index():
    """Home page - list newsletters"""
    newsletters = get_store().list_newsletters()
    return render_template('newsletters/index.html', newsletters=newsletters)


@newsletters_bp.route('/newsletters', methods=['POST'])
def create_newsletter():
    try:
        get_store().create_newsletter(request.form.get('name'))
    except ValidationError as e:
        return _text_response(e.message, e.status_code)
    return redirect(url_for('newsletters.index'))


@newsletters_bp.route('/newsletters/<newsletter_id>', methods=['DELETE'])
def delete_newsletter(newsletter_id):
    try:
        get_store().delete_newsletter(newsletter_id)
    except NotFoundError:
        logger.debug(f"Delete of missing newsletter {newsletter_id} ignored")
    return redirect(url_for('newsletters.index'))


@newsletters_bp.route('/newsletters/<newsletter_id>')
def show_newsletter(newsletter_id):
    """View subscribers of a newsletter"""
    store = get_store()
    try:
        newsletter = store.get_newsletter(newsletter_id)
    except NotFoundError as e:
        return _text_response(e.message, e.status_code)
    return render_template('newsletters/subscribers.html',
                           newsletter=newsletter,
                           subscribers=store.newsletter_subscribers(newsletter_id))


@newsletters_bp.route('/newsletters/<newsletter_id>/subscribers', methods=['POST'])
def add_subscriber(newsletter_id):
    try:
        get_store().add_subscriber_to_newsletter(newsletter_id,
                                                 request.form.get('name'),
                                                 request.form.get('email'))
    except ValidationError as e:
        return _text_response(e.message, e.status_code)
    except NotFoundError:
        logger.debug(f"Subscriber posted to missing newsletter {newsletter_id}")
    return redirect(url_for('newsletters.show_newsletter', newsletter_id=newsletter_id))


@newsletters_bp.route('/subscribers/<subscriber_id>', methods=['DELETE'])
def delete_subscriber(subscriber_id):
    try:
        get_store().delete_subscriber(subscriber_id)
    except NotFoundError:
        logger.debug(f"Delete of missing subscriber {subscriber_id} ignored")
    return _redirect_back()
