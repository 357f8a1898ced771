"""V1 API router aggregation."""

from fastapi import APIRouter

from app.api.v1.ai import router as ai_router
from app.api.v1.auth import router as auth_router
from app.api.v1.portfolios import router as portfolios_router
from app.api.v1.profile import router as profile_router
from app.api.v1.public import router as public_router
from app.api.v1.sections import (
    education_router,
    experiences_router,
    projects_router,
    skills_router,
    social_links_router,
)
from app.api.v1.themes import router as themes_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(profile_router)
v1_router.include_router(portfolios_router)
v1_router.include_router(themes_router)
v1_router.include_router(skills_router)
v1_router.include_router(projects_router)
v1_router.include_router(experiences_router)
v1_router.include_router(education_router)
v1_router.include_router(social_links_router)
v1_router.include_router(public_router)
v1_router.include_router(ai_router)
