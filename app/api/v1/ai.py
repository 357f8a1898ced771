"""AI writing assistant routes — thin wrappers over the AI gateway.

Request bodies are deliberately loose; the gateway validates them so every
operation reports field errors in the same ``VALIDATION_ERROR`` shape.
"""

import uuid
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import func
from sqlmodel import select

from app.api.deps import Auth, Session, get_owned_or_404
from app.models.education import Education
from app.models.experience import Experience
from app.models.portfolio import Portfolio
from app.models.project import Project
from app.models.skill import Skill
from app.models.social_link import SocialLink
from app.services import ai_gateway
from app.services.ai_gateway import PortfolioSummary

router = APIRouter(prefix="/ai", tags=["ai"])


# ── Schemas ──────────────────────────────────────────────────

class EnhanceBody(BaseModel):
    content: str = ""
    type: str = "improve"
    tone: str = "professional"


class EnhanceResponse(BaseModel):
    content: str


class BioBody(BaseModel):
    skills: list[str] = []
    experience: str = ""
    education: str = ""
    tone: str = "professional"


class BioResponse(BaseModel):
    bio: str


class SkillsBody(BaseModel):
    job_title: str = ""
    current_skills: list[str] | None = None
    experience: str | None = None


class SkillsResponse(BaseModel):
    skills: list[str]


class AnalysisResponse(BaseModel):
    portfolio_id: uuid.UUID
    suggestions: list[str]


class UsageResponse(BaseModel):
    used: int
    limit: int
    remaining: int
    window_minutes: int
    window_started_at: datetime


# ── Routes ───────────────────────────────────────────────────

@router.post("/enhance", response_model=EnhanceResponse)
async def enhance(body: EnhanceBody, auth: Auth, session: Session) -> EnhanceResponse:
    content = await ai_gateway.enhance_content(
        session, auth.user_id, body.content, enhancement_type=body.type, tone=body.tone
    )
    return EnhanceResponse(content=content)


@router.post("/generate-bio", response_model=BioResponse)
async def generate_bio(body: BioBody, auth: Auth, session: Session) -> BioResponse:
    bio = await ai_gateway.generate_bio(
        session, auth.user_id, body.skills, body.experience, body.education, tone=body.tone
    )
    return BioResponse(bio=bio)


@router.post("/recommend-skills", response_model=SkillsResponse)
async def recommend_skills(body: SkillsBody, auth: Auth, session: Session) -> SkillsResponse:
    skills = await ai_gateway.recommend_skills(
        session,
        auth.user_id,
        body.job_title,
        current_skills=body.current_skills,
        experience=body.experience,
    )
    return SkillsResponse(skills=skills)


async def _count(session, model, user_id: uuid.UUID) -> int:
    result = await session.execute(
        select(func.count()).select_from(model).where(model.user_id == user_id)
    )
    return result.scalar_one()


@router.post("/analyze-portfolio/{portfolio_id}", response_model=AnalysisResponse)
async def analyze_portfolio(
    portfolio_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> AnalysisResponse:
    """Suggest improvements for one of the caller's portfolios."""
    portfolio = await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")

    skill_rows = await session.execute(
        select(Skill.name).where(Skill.user_id == auth.user_id).order_by(Skill.order.asc())
    )
    summary = PortfolioSummary(
        title=portfolio.title,
        subtitle=portfolio.subtitle,
        description=portfolio.description,
        skills=list(skill_rows.scalars().all()),
        project_count=await _count(session, Project, auth.user_id),
        experience_count=await _count(session, Experience, auth.user_id),
        education_count=await _count(session, Education, auth.user_id),
        social_link_count=await _count(session, SocialLink, auth.user_id),
    )

    suggestions = await ai_gateway.analyze_portfolio(session, auth.user_id, summary)
    return AnalysisResponse(portfolio_id=portfolio_id, suggestions=suggestions)


@router.get("/usage", response_model=UsageResponse)
async def get_usage(auth: Auth, session: Session) -> UsageResponse:
    window = await ai_gateway.get_usage_window(session, auth.user_id)
    return UsageResponse(
        used=window.used,
        limit=window.limit,
        remaining=window.remaining,
        window_minutes=window.window_minutes,
        window_started_at=window.window_started_at,
    )
