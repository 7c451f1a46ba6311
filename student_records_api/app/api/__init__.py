"""
HTTP layer of the service.

``router.py`` aggregates the domain routers defined in ``endpoints``;
``deps.py`` provides the dependencies handlers use to reach the
application's record stores.
"""
