"""Slug allocation — per-owner unique, URL-safe portfolio slugs.

Flow:
  1. Normalise the title into a base token (python-slugify)
  2. Probe the owner's portfolios for the candidate
  3. On collision append ``-1``, ``-2``, ... and check again

Allocation is read-only. The caller writes the slug as part of its own
transaction and must handle the unique-constraint race on commit.
"""

from __future__ import annotations

import logging
import uuid

from slugify import slugify
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import get_settings
from app.core.exceptions import SlugExhaustedError
from app.models.portfolio import Portfolio

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 100
FALLBACK_SLUG = "portfolio"


def slugify_title(title: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Derive a URL-safe base slug from a human title.

    >>> slugify_title("My Project!")
    'my-project'
    """
    slug = slugify(title, max_length=max_length, word_boundary=True, separator="-")
    return slug or FALLBACK_SLUG


def with_suffix(base: str, counter: int, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Append ``-<counter>``, trimming the base so the result fits."""
    suffix = f"-{counter}"
    trimmed = base[: max_length - len(suffix)].rstrip("-") or FALLBACK_SLUG
    return f"{trimmed}{suffix}"


async def slug_exists(
    session: AsyncSession,
    slug: str,
    owner_id: uuid.UUID,
    exclude_id: uuid.UUID | None = None,
) -> bool:
    """True if ``owner_id`` already has a portfolio (other than ``exclude_id``) with ``slug``."""
    stmt = select(Portfolio.id).where(
        Portfolio.user_id == owner_id,
        Portfolio.slug == slug,
    )
    if exclude_id is not None:
        stmt = stmt.where(Portfolio.id != exclude_id)
    result = await session.execute(stmt.limit(1))
    return result.first() is not None


async def is_slug_available(
    session: AsyncSession,
    slug: str,
    owner_id: uuid.UUID,
    exclude_id: uuid.UUID | None = None,
) -> bool:
    return not await slug_exists(session, slug, owner_id, exclude_id)


async def allocate_slug(
    session: AsyncSession,
    title: str,
    owner_id: uuid.UUID,
    exclude_id: uuid.UUID | None = None,
    max_attempts: int | None = None,
) -> str:
    """Return the first free slug for ``title`` in the owner's namespace.

    Args:
        session: Open DB session used for the existence checks.
        title: Human title to derive the slug from.
        owner_id: Owner whose namespace must not contain the slug.
        exclude_id: Portfolio to ignore (the one being renamed).
        max_attempts: Probe budget; defaults to ``settings.slug_max_attempts``.

    Raises:
        SlugExhaustedError: every candidate within the budget is taken.
    """
    budget = get_settings().slug_max_attempts if max_attempts is None else max_attempts
    base = slugify_title(title)
    candidate = base

    for counter in range(budget):
        if counter:
            candidate = with_suffix(base, counter)
        if not await slug_exists(session, candidate, owner_id, exclude_id):
            return candidate

    logger.warning(
        "Slug allocation exhausted for owner %s after %d attempts (base=%r)",
        owner_id, budget, base,
    )
    raise SlugExhaustedError(f"No free slug for '{base}' after {budget} attempts")
