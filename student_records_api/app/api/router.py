"""
Top-level router of the API.

Aggregates the domain routers (students, analytics, users, health).
Routes are served at the root of the application, e.g. ``/students``
and ``/quiz-stats``.
"""

from fastapi import APIRouter

from .endpoints import analytics, health, students, users

router = APIRouter()

router.include_router(students.router, prefix="/students", tags=["students"])
router.include_router(analytics.router, tags=["analytics"])
router.include_router(users.router, tags=["users"])
router.include_router(health.router, tags=["health"])
