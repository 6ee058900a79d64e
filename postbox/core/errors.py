"""
Postbox Errors
==============

Exceptions raised by the store and translated into HTTP responses by the
blueprints.
"""


class PostboxError(Exception):
    """Base class for errors that map onto an HTTP status"""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(PostboxError):
    """Missing required field or uniqueness violation"""
    status_code = 400


class NotFoundError(PostboxError):
    """Identifier did not resolve to a row"""
    status_code = 404
