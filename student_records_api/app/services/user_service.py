"""
Service layer for the users table and its search endpoints.

Two searches are offered side by side.  ``search_unsafe`` matches the
raw input against e-mail addresses without validating it and treats
any input containing a single quote as matching everything, the way a
string-concatenated ``WHERE email = '...'`` query would behave under
``' OR '1'='1``.  ``search_safe`` validates the input first and only
returns an exact match.  Neither touches a database.
"""

from __future__ import annotations

import logging
import re
from typing import List

from student_records_api.app.core.storage import RecordStore
from student_records_api.app.schemas.user import UserRead

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
FORBIDDEN_TOKENS = ("'", '"', ";", "--", "/*", "*/")


def is_valid_email(email: str) -> bool:
    """Reject quote, statement and comment tokens, then check the address shape."""
    if any(token in email for token in FORBIDDEN_TOKENS):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


class UserService:
    """Read-only access to users."""

    @classmethod
    async def list_users(cls, users: RecordStore[UserRead]) -> List[UserRead]:
        return users.all()

    @classmethod
    async def search_unsafe(cls, users: RecordStore[UserRead], email: str) -> List[UserRead]:
        """Substring search without any input validation."""
        logger.info("Unvalidated search for %r", email)
        injected = "'" in email
        return users.filter(lambda user: injected or email in user.email)

    @classmethod
    async def search_safe(cls, users: RecordStore[UserRead], email: str) -> List[UserRead]:
        """Exact search; raises ``ValueError`` for input that is not a plain e-mail address."""
        if not is_valid_email(email):
            raise ValueError("Invalid email format")
        user = users.get(email)
        return [user] if user is not None else []
