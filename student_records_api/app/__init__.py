"""
Application package.

Layout:

* ``core`` - settings, logging and the CSV-backed record stores.
* ``schemas`` - pydantic models for stored records and API payloads.
* ``services`` - student CRUD with cascading delete, quiz statistics
  and user search, each working on stores passed in by the caller.
* ``api`` - FastAPI routers translating HTTP requests into service calls.
"""

from .main import app  # noqa: F401
