"""
Pydantic model for the read-only users table used by the search endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str = Field(..., examples=["bruker1@epost.no"])
    name: str
