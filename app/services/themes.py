"""Theme helpers — custom CSS sanitising and per-portfolio upsert."""

import re
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.theme import PortfolioTheme, ThemeUpdate

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_IMPORT_RE = re.compile(r"@import", re.IGNORECASE)
_URL_RE = re.compile(r"url\(", re.IGNORECASE)

_CSS_STRIP_PATTERNS = (_HTML_TAG_RE, _IMPORT_RE, _URL_RE)


def sanitize_custom_css(css: str | None) -> str | None:
    """Strip HTML tags, ``@import`` rules and ``url(`` calls from user CSS.

    Substitution repeats until nothing changes, so fragments nested inside
    each other (``@im@importport``) cannot reassemble after one pass.
    """
    if not css:
        return css
    previous = None
    while css != previous:
        previous = css
        for pattern in _CSS_STRIP_PATTERNS:
            css = pattern.sub("", css)
    return css


async def get_theme(session: AsyncSession, portfolio_id: uuid.UUID) -> PortfolioTheme | None:
    result = await session.execute(
        select(PortfolioTheme).where(PortfolioTheme.portfolio_id == portfolio_id)
    )
    return result.scalar_one_or_none()


async def upsert_theme(
    session: AsyncSession, portfolio_id: uuid.UUID, body: ThemeUpdate
) -> PortfolioTheme:
    """Create the portfolio's theme or overwrite it in place. Commits."""
    data = body.model_dump()
    data["custom_css"] = sanitize_custom_css(data.get("custom_css"))

    theme = await get_theme(session, portfolio_id)
    if theme is None:
        theme = PortfolioTheme(portfolio_id=portfolio_id, **data)
    else:
        for field, value in data.items():
            setattr(theme, field, value)
        theme.touch()

    session.add(theme)
    await session.commit()
    await session.refresh(theme)
    return theme
