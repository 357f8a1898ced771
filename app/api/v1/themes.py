"""Portfolio theme endpoints — read and upsert."""

import uuid

from fastapi import APIRouter, HTTPException, status

from app.api.deps import Auth, Session, get_owned_or_404
from app.models.portfolio import Portfolio
from app.models.theme import ThemeRead, ThemeUpdate
from app.services.themes import get_theme, upsert_theme

router = APIRouter(prefix="/portfolios/{portfolio_id}/theme", tags=["themes"])


@router.get("", response_model=ThemeRead)
async def read_theme(
    portfolio_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> ThemeRead:
    await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")
    theme = await get_theme(session, portfolio_id)
    if theme is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Theme not set")
    return ThemeRead.model_validate(theme)


@router.put("", response_model=ThemeRead)
async def save_theme(
    portfolio_id: uuid.UUID,
    body: ThemeUpdate,
    auth: Auth,
    session: Session,
) -> ThemeRead:
    """Create or replace the portfolio's theme. Custom CSS is sanitised."""
    await get_owned_or_404(Portfolio, portfolio_id, auth.user_id, session, "Portfolio")
    theme = await upsert_theme(session, portfolio_id, body)
    return ThemeRead.model_validate(theme)
