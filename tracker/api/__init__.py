"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from tracker.api import audit, auth, health, metrics, projects, scholarships, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(scholarships.router, prefix="/scholarships", tags=["scholarships"])
router.include_router(metrics.router, tags=["metrics"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(audit.router, prefix="/audit-logs", tags=["audit"])
