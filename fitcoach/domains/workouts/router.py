"""Workout router: thin entry point that includes the sub-routers.

Sub-routers:
  - exercises_router: exercise library CRUD (mounted under /workouts)
  - plans_router: trainer plan and workout endpoints (mounted under /trainer)
  - assignments_router: trainer assignment and feedback endpoints (/trainer)
  - uploads_router: role-dispatched video download URLs (/assignments)
"""
from fastapi import APIRouter

from fitcoach.domains.workouts.assignments_router import assignments_router
from fitcoach.domains.workouts.exercises_router import exercises_router
from fitcoach.domains.workouts.plans_router import plans_router
from fitcoach.domains.workouts.uploads_router import uploads_router

router = APIRouter()

# No prefix: the main app adds /api/v1/workouts
router.include_router(exercises_router)

__all__ = ["router", "plans_router", "assignments_router", "uploads_router"]
