"""
FastAPI dependencies shared by the endpoint modules.
"""

from fastapi import Request

from student_records_api.app.core.storage import Records


def get_records(request: Request) -> Records:
    """Return the record stores attached to the running application."""
    records = getattr(request.app.state, "records", None)
    if records is None:
        raise RuntimeError("Record stores are not loaded; the application has not started")
    return records
