"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services take
the record stores they work on as arguments instead of reaching for
module-level state, so API handlers pass in the application's stores
and tests pass in memory-only ones.
"""
