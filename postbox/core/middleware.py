from urllib.parse import parse_qs


class MethodOverrideMiddleware:
    """
    Let HTML forms send PUT, PATCH and DELETE.

    A POST carrying ``?_method=DELETE`` (or an ``X-HTTP-Method-Override``
    header) is dispatched as that method. Other methods pass through.
    """

    allowed_methods = frozenset(['PUT', 'PATCH', 'DELETE'])
    param = '_method'

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        if environ.get('REQUEST_METHOD', '').upper() == 'POST':
            method = environ.get('HTTP_X_HTTP_METHOD_OVERRIDE')
            if not method:
                query = parse_qs(environ.get('QUERY_STRING', ''))
                method = (query.get(self.param) or [''])[0]
            method = method.upper()
            if method in self.allowed_methods:
                environ['REQUEST_METHOD'] = method
        return self.app(environ, start_response)
