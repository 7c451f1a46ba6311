"""
Pydantic schema definitions for API payloads and stored records.

Records held by the stores are frozen models: an update replaces the
stored instance instead of mutating it, which keeps table snapshots
taken for rollback valid.
"""
