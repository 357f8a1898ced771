"""Profile section CRUD — skills, projects, experience, education, social links.

Every section is a flat, owner-scoped list with the same four routes, so
the routers are built from one factory. Rows owned by someone else answer
404 exactly like rows that do not exist.
"""

import uuid
from typing import Any

from fastapi import APIRouter, status
from pydantic import AnyUrl
from sqlmodel import SQLModel, select

from app.api.deps import Auth, Session, get_owned_or_404
from app.models.education import Education, EducationCreate, EducationRead, EducationUpdate
from app.models.experience import Experience, ExperienceCreate, ExperienceRead, ExperienceUpdate
from app.models.project import Project, ProjectCreate, ProjectRead, ProjectUpdate
from app.models.skill import Skill, SkillCreate, SkillRead, SkillUpdate
from app.models.social_link import SocialLink, SocialLinkCreate, SocialLinkRead, SocialLinkUpdate


def _column_values(data: dict[str, Any]) -> dict[str, Any]:
    """URL types are stored as plain strings."""
    return {k: str(v) if isinstance(v, AnyUrl) else v for k, v in data.items()}


def build_section_router(
    *,
    prefix: str,
    label: str,
    table: type[SQLModel],
    create_schema: type[SQLModel],
    update_schema: type[SQLModel],
    read_schema: type[SQLModel],
    order_by: tuple,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.post("", response_model=read_schema, status_code=status.HTTP_201_CREATED)
    async def create_item(body: create_schema, auth: Auth, session: Session):  # type: ignore[valid-type]
        row = table(user_id=auth.user_id, **_column_values(body.model_dump()))
        session.add(row)
        await session.commit()
        await session.refresh(row)
        return read_schema.model_validate(row)

    @router.get("", response_model=list[read_schema])  # type: ignore[valid-type]
    async def list_items(auth: Auth, session: Session):
        stmt = (
            select(table)
            .where(table.user_id == auth.user_id)  # type: ignore[attr-defined]
            .order_by(*order_by)
        )
        result = await session.execute(stmt)
        return [read_schema.model_validate(r) for r in result.scalars().all()]

    @router.patch("/{item_id}", response_model=read_schema)
    async def update_item(
        item_id: uuid.UUID,
        body: update_schema,  # type: ignore[valid-type]
        auth: Auth,
        session: Session,
    ):
        row = await get_owned_or_404(table, item_id, auth.user_id, session, label)
        columns = table.__table__.columns  # type: ignore[attr-defined]
        for field, value in _column_values(body.model_dump(exclude_unset=True)).items():
            # an explicit null clears optional columns and is ignored on required ones
            if value is None and not columns[field].nullable:
                continue
            setattr(row, field, value)
        row.touch()  # type: ignore[attr-defined]
        session.add(row)
        await session.commit()
        await session.refresh(row)
        return read_schema.model_validate(row)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(item_id: uuid.UUID, auth: Auth, session: Session) -> None:
        row = await get_owned_or_404(table, item_id, auth.user_id, session, label)
        await session.delete(row)
        await session.commit()

    return router


skills_router = build_section_router(
    prefix="/skills",
    label="Skill",
    table=Skill,
    create_schema=SkillCreate,
    update_schema=SkillUpdate,
    read_schema=SkillRead,
    order_by=(Skill.order.asc(), Skill.name.asc()),  # type: ignore[attr-defined]
)

projects_router = build_section_router(
    prefix="/projects",
    label="Project",
    table=Project,
    create_schema=ProjectCreate,
    update_schema=ProjectUpdate,
    read_schema=ProjectRead,
    order_by=(Project.is_featured.desc(), Project.order.asc()),  # type: ignore[attr-defined]
)

experiences_router = build_section_router(
    prefix="/experiences",
    label="Experience",
    table=Experience,
    create_schema=ExperienceCreate,
    update_schema=ExperienceUpdate,
    read_schema=ExperienceRead,
    order_by=(Experience.start_date.desc(),),  # type: ignore[attr-defined]
)

education_router = build_section_router(
    prefix="/education",
    label="Education",
    table=Education,
    create_schema=EducationCreate,
    update_schema=EducationUpdate,
    read_schema=EducationRead,
    order_by=(Education.start_date.desc(),),  # type: ignore[attr-defined]
)

social_links_router = build_section_router(
    prefix="/social-links",
    label="Social link",
    table=SocialLink,
    create_schema=SocialLinkCreate,
    update_schema=SocialLinkUpdate,
    read_schema=SocialLinkRead,
    order_by=(SocialLink.platform.asc(),),  # type: ignore[attr-defined]
)
