"""
Endpoint modules.

Each module defines an APIRouter for one domain; ``router.py`` in the
parent package includes them in the application.
"""
