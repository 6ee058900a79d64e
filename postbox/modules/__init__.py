"""
Postbox Modules
===============

Flask blueprints: server-rendered newsletter pages and the JSON API.
"""

__all__ = ['newsletters', 'api']
