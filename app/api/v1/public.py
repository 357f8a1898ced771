"""Public portfolio page — unauthenticated, published portfolios only."""

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import update
from sqlmodel import SQLModel, select

from app.api.deps import Session
from app.models.education import Education, EducationRead
from app.models.experience import Experience, ExperienceRead
from app.models.portfolio import Portfolio, PortfolioRead
from app.models.project import Project, ProjectRead
from app.models.skill import Skill, SkillRead
from app.models.social_link import SocialLink, SocialLinkRead
from app.models.theme import ThemeRead
from app.models.user import User, UserPublic
from app.services.themes import get_theme

router = APIRouter(prefix="/p", tags=["public"])


class PublicPortfolio(SQLModel):
    portfolio: PortfolioRead
    owner: UserPublic
    theme: ThemeRead | None
    skills: list[SkillRead]
    projects: list[ProjectRead]
    experiences: list[ExperienceRead]
    education: list[EducationRead]
    social_links: list[SocialLinkRead]


async def _owned_rows(session, model, user_id, *order_by) -> list:
    result = await session.execute(
        select(model).where(model.user_id == user_id).order_by(*order_by)
    )
    return list(result.scalars().all())


@router.get("/{username}/{slug}", response_model=PublicPortfolio)
async def get_public_portfolio(
    username: str,
    slug: str,
    session: Session,
) -> PublicPortfolio:
    """Render a published portfolio with its owner's profile sections.

    Unknown users, unknown slugs and unpublished portfolios all answer 404.
    Each successful fetch counts one view.
    """
    stmt = (
        select(Portfolio, User)
        .join(User, User.id == Portfolio.user_id)
        .where(
            User.username == username.lower(),
            User.is_active == True,  # noqa: E712
            Portfolio.slug == slug,
            Portfolio.is_published == True,  # noqa: E712
        )
    )
    row = (await session.execute(stmt)).first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Portfolio not found")
    portfolio, owner = row

    await session.execute(
        update(Portfolio)
        .where(Portfolio.id == portfolio.id)
        .values(view_count=Portfolio.view_count + 1)
    )
    await session.commit()
    await session.refresh(portfolio)

    theme = await get_theme(session, portfolio.id)
    skills = await _owned_rows(session, Skill, owner.id, Skill.order.asc(), Skill.name.asc())
    projects = await _owned_rows(
        session, Project, owner.id, Project.is_featured.desc(), Project.order.asc()
    )
    experiences = await _owned_rows(session, Experience, owner.id, Experience.start_date.desc())
    education = await _owned_rows(session, Education, owner.id, Education.start_date.desc())
    links = await _owned_rows(session, SocialLink, owner.id, SocialLink.platform.asc())

    return PublicPortfolio(
        portfolio=PortfolioRead.model_validate(portfolio),
        owner=UserPublic.model_validate(owner),
        theme=ThemeRead.model_validate(theme) if theme else None,
        skills=[SkillRead.model_validate(s) for s in skills],
        projects=[ProjectRead.model_validate(p) for p in projects],
        experiences=[ExperienceRead.model_validate(e) for e in experiences],
        education=[EducationRead.model_validate(e) for e in education],
        social_links=[SocialLinkRead.model_validate(s) for s in links],
    )
