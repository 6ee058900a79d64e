"""
API Routes
==========

Provides:
- GET/POST /api/newsletters
- DELETE /api/newsletters/<id>
- GET/POST /api/newsletters/<id>/subscribers
- GET/POST /api/subscribers
- DELETE /api/subscribers/<id>
- GET /api/subscribers/<id>/newsletters

Status codes: 200 read, 201 created, 204 deleted, 400 validation error,
404 not found. Errors carry a {"error": message} body.
"""

from flask import request, jsonify
from . import api_bp
from ...core.errors import PostboxError, ValidationError
from ...core.logging_service import LoggingService
from ...core.store import get_store


def get_payload():
    """JSON body of the request, falling back to form fields"""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


@api_bp.errorhandler(PostboxError)
def handle_postbox_error(error):
    LoggingService.log_api_call('api', request.path, request.method, error.status_code,
                                {'error': error.message})
    return jsonify(error.to_dict()), error.status_code


# ===================
# NEWSLETTERS
# ===================

@api_bp.route('/newsletters', methods=['GET'])
def list_newsletters():
    return jsonify([newsletter.serialize() for newsletter in get_store().list_newsletters()])


@api_bp.route('/newsletters', methods=['POST'])
def create_newsletter():
    data = get_payload()
    newsletter = get_store().create_newsletter(data.get('name'))
    return jsonify(newsletter.serialize()), 201


@api_bp.route('/newsletters/<newsletter_id>', methods=['DELETE'])
def delete_newsletter(newsletter_id):
    get_store().delete_newsletter(newsletter_id)
    return '', 204


@api_bp.route('/newsletters/<newsletter_id>/subscribers', methods=['GET'])
def newsletter_subscribers(newsletter_id):
    subscribers = get_store().newsletter_subscribers(newsletter_id)
    return jsonify([subscriber.serialize() for subscriber in subscribers])


@api_bp.route('/newsletters/<newsletter_id>/subscribers', methods=['POST'])
def add_subscriber(newsletter_id):
    """Attach a subscriber, reusing the existing record when the email is known"""
    data = get_payload()
    subscriber = get_store().add_subscriber_to_newsletter(newsletter_id, data.get('name'), data.get('email'))
    return jsonify(subscriber.serialize()), 201


# ===================
# SUBSCRIBERS
# ===================

@api_bp.route('/subscribers', methods=['GET'])
def list_subscribers():
    return jsonify([subscriber.serialize() for subscriber in get_store().list_subscribers()])


@api_bp.route('/subscribers', methods=['POST'])
def create_subscriber():
    data = get_payload()
    subscriber = get_store().create_subscriber(data.get('name'), data.get('email'))
    return jsonify(subscriber.serialize()), 201


@api_bp.route('/subscribers/<subscriber_id>', methods=['DELETE'])
def delete_subscriber(subscriber_id):
    get_store().delete_subscriber(subscriber_id)
    return '', 204


@api_bp.route('/subscribers/<subscriber_id>/newsletters', methods=['GET'])
def subscriber_newsletters(subscriber_id):
    newsletters = get_store().subscriber_newsletters(subscriber_id)
    return jsonify([newsletter.serialize() for newsletter in newsletters])
