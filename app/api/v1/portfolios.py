"""Portfolio CRUD — all queries scoped to the owner; slugs unique per owner."""

import logging
import uuid

from fastapi import APIRouter, Query, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from app.api.deps import Auth, Session, get_owned_or_404
from app.core.exceptions import SlugConflictError
from app.models.portfolio import (
    Portfolio,
    PortfolioCreate,
    PortfolioRead,
    PortfolioUpdate,
    SLUG_PATTERN,
    SlugAvailability,
)
from app.models.theme import PortfolioTheme
from app.services.slugs import allocate_slug, is_slug_available

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolios", tags=["portfolios"])

# Commits attempted for a derived slug before giving up on a concurrent collision
SLUG_COMMIT_ATTEMPTS = 3

# Columns that may not be nulled through PATCH
_NOT_NULLABLE = ("title", "is_published")


@router.post("", response_model=PortfolioRead, status_code=status.HTTP_201_CREATED)
async def create_portfolio(
    body: PortfolioCreate,
    auth: Auth,
    session: Session,
) -> PortfolioRead:
    """Create a portfolio.

    An explicit ``slug`` must be free in the caller's namespace (409 otherwise).
    Without one, a slug is derived from the title, and a lost race against a
    concurrent create is retried with the next free suffix.
    """
    fields = body.model_dump(exclude={"slug"})

    if body.slug is not None and not await is_slug_available(session, body.slug, auth.user_id):
        raise SlugConflictError(body.slug)

    attempt = 0
    while True:
        attempt += 1
        slug = body.slug or await allocate_slug(session, body.title, auth.user_id)
        portfolio = Portfolio(user_id=auth.user_id, slug=slug, **fields)
        session.add(portfolio)
        try:
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            if body.slug is not None or attempt == SLUG_COMMIT_ATTEMPTS:
                raise SlugConflictError(slug) from exc
            logger.info("Slug %r taken concurrently for user %s, retrying", slug, auth.user_id)
            continue

        await session.refresh(portfolio)
        return PortfolioRead.model_validate(portfolio)


@router.get("", response_model=list[PortfolioRead])
async def list_portfolios(
    auth: Auth,
    session: Session,
) -> list[PortfolioRead]:
    stmt = (
        select(Portfolio)
        .where(Portfolio.user_id == auth.user_id)
        .order_by(Portfolio.updated_at.desc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return [PortfolioRead.model_validate(p) for p in result.scalars().all()]


@router.get("/slug-availability", response_model=SlugAvailability)
async def check_slug_availability(
    auth: Auth,
    session: Session,
    slug: str = Query(min_length=1, max_length=100, pattern=SLUG_PATTERN),
    exclude_id: uuid.UUID | None = None,
) -> SlugAvailability:
    """Tell whether ``slug`` is free in the caller's namespace."""
    available = await is_slug_available(session, slug, auth.user_id, exclude_id=exclude_id)
    return SlugAvailability(slug=slug, available=available)


@router.get("/{portfolio_id}", response_model=PortfolioRead)
async def get_portfolio(
    portfolio_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> PortfolioRead:
    portfolio = await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")
    return PortfolioRead.model_validate(portfolio)


@router.patch("/{portfolio_id}", response_model=PortfolioRead)
async def update_portfolio(
    portfolio_id: uuid.UUID,
    body: PortfolioUpdate,
    auth: Auth,
    session: Session,
) -> PortfolioRead:
    """Partial update.

    The slug only changes when a new ``slug`` is given (checked for
    availability) or when ``regenerate_slug`` asks for one derived from the
    title.
    """
    portfolio = await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")

    update_data = body.model_dump(exclude_unset=True)
    new_slug = update_data.pop("slug", None)
    regenerate = update_data.pop("regenerate_slug", False)

    for field, value in update_data.items():
        if value is None and field in _NOT_NULLABLE:
            continue
        setattr(portfolio, field, value)

    if new_slug and new_slug != portfolio.slug:
        if not await is_slug_available(session, new_slug, auth.user_id, exclude_id=portfolio.id):
            raise SlugConflictError(new_slug)
        portfolio.slug = new_slug
    elif regenerate:
        portfolio.slug = await allocate_slug(
            session, portfolio.title, auth.user_id, exclude_id=portfolio.id
        )

    slug = portfolio.slug
    portfolio.touch()
    session.add(portfolio)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise SlugConflictError(slug) from exc

    await session.refresh(portfolio)
    return PortfolioRead.model_validate(portfolio)


@router.delete("/{portfolio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_portfolio(
    portfolio_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> None:
    portfolio = await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")

    result = await session.execute(
        select(PortfolioTheme).where(PortfolioTheme.portfolio_id == portfolio.id)
    )
    theme = result.scalar_one_or_none()
    if theme is not None:
        await session.delete(theme)
        await session.flush()

    await session.delete(portfolio)
    await session.commit()
