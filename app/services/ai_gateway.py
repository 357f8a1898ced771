"""AI gateway — rate-limited text generation for portfolio content.

Flow (shared by every operation):
  1. Require an authenticated caller
  2. Validate the request (pydantic)
  3. Count the caller's usage rows in the trailing window, reject at the ceiling
  4. Build the system / user prompts
  5. Call the LLM via LiteLLM (single suspension point)
  6. Reject empty output, parse
  7. Record usage (best effort: a failed write never hides a generated result)

The quota check and the usage insert are not atomic. Concurrent requests
from one caller can each see ``limit - 1`` rows and all pass; this is
accepted rather than serialised in-process.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any, TypeVar, assert_never

import litellm
from litellm import acompletion
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import get_settings
from app.core.exceptions import (
    GenerationError,
    GenerationFailure,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from app.models.base import utcnow
from app.models.usage_record import AIUsageRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENHANCE_MAX_TOKENS = 2048
BIO_MAX_TOKENS = 1024
SKILLS_MAX_TOKENS = 1024
ANALYSIS_MAX_TOKENS = 800

MAX_RECOMMENDED_SKILLS = 15
MAX_SUGGESTIONS = 5


# ── Enumerations ─────────────────────────────────────────────

class EnhancementType(StrEnum):
    IMPROVE = "improve"
    PROOFREAD = "proofread"
    SIMPLIFY = "simplify"
    EXPAND = "expand"
    KEYWORDS = "keywords"


class Tone(StrEnum):
    PROFESSIONAL = "professional"
    CONVERSATIONAL = "conversational"
    TECHNICAL = "technical"
    ENTHUSIASTIC = "enthusiastic"
    AUTHORITATIVE = "authoritative"


class RequestType(StrEnum):
    """Label stored on each usage record; enhancements add their type."""
    BIO_GENERATION = "generate-bio"
    SKILL_RECOMMENDATION = "recommend-skills"
    PORTFOLIO_ANALYSIS = "analyze-portfolio"


def enhancement_request_type(enhancement_type: EnhancementType) -> str:
    return f"enhance-{enhancement_type}"


TONE_DESCRIPTIONS: dict[Tone, str] = {
    Tone.PROFESSIONAL: "professional: polished, confident and concise",
    Tone.CONVERSATIONAL: "conversational: warm, approachable and first-person",
    Tone.TECHNICAL: "technical: precise, detailed and domain-specific",
    Tone.ENTHUSIASTIC: "enthusiastic: energetic, positive and motivated",
    Tone.AUTHORITATIVE: "authoritative: assured, expert and decisive",
}


# ── Request schemas ──────────────────────────────────────────

def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _within_content_limit(value: str) -> str:
    limit = get_settings().ai_max_content_length
    if len(value) > limit:
        raise ValueError(f"must be at most {limit} characters")
    return value


class EnhancementRequest(BaseModel):
    content: str
    type: EnhancementType = EnhancementType.IMPROVE
    tone: Tone = Tone.PROFESSIONAL

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str) -> str:
        return _within_content_limit(_not_blank(value))


class BioRequest(BaseModel):
    skills: list[str] = Field(min_length=1, max_length=100)
    experience: str
    education: str
    tone: Tone = Tone.PROFESSIONAL

    @field_validator("skills")
    @classmethod
    def _check_skills(cls, value: list[str]) -> list[str]:
        skills = [s.strip() for s in value if s.strip()]
        if not skills:
            raise ValueError("at least one skill is required")
        return skills

    @field_validator("experience", "education")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return _within_content_limit(_not_blank(value))


class SkillRecommendationRequest(BaseModel):
    job_title: str = Field(max_length=200)
    current_skills: list[str] | None = Field(default=None, max_length=100)
    experience: str | None = None

    @field_validator("job_title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return _not_blank(value).strip()

    @field_validator("experience")
    @classmethod
    def _check_experience(cls, value: str | None) -> str | None:
        return _within_content_limit(value) if value else value


class PortfolioSummary(BaseModel):
    """Condensed portfolio facts handed to the reviewer prompt."""
    title: str
    subtitle: str | None = None
    description: str | None = None
    skills: list[str] = Field(default_factory=list)
    project_count: int = 0
    experience_count: int = 0
    education_count: int = 0
    social_link_count: int = 0


def _validate(schema: type[BaseModel], **data: Any) -> Any:
    try:
        return schema(**data)
    except PydanticValidationError as exc:
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid AI request", details=details) from exc


# ── Prompt construction (pure) ───────────────────────────────

@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


def build_enhancement_prompts(content: str, enhancement_type: EnhancementType, tone: Tone) -> PromptPair:
    """Map (type, tone) to the system / user prompt pair for an enhancement."""
    match enhancement_type:
        case EnhancementType.IMPROVE:
            role = "You are an expert content enhancer specialised in portfolio text."
            task = (
                "Improve clarity, professionalism and impact. Keep the overall "
                "meaning but make it more compelling."
            )
            ask = "Please enhance the following portfolio content"
        case EnhancementType.PROOFREAD:
            role = "You are a professional editor specialised in proofreading."
            task = (
                "Correct spelling, grammar, punctuation and syntax errors. Do not "
                "add new information or change the meaning."
            )
            ask = "Please proofread and correct the following portfolio content"
        case EnhancementType.SIMPLIFY:
            role = "You are a content simplification expert."
            task = (
                "Make the text more concise and easier to understand. Remove jargon "
                "and unnecessary words while keeping the core message."
            )
            ask = "Please simplify the following portfolio content"
        case EnhancementType.EXPAND:
            role = "You are a content development specialist."
            task = (
                "Add relevant detail, examples and context. Elaborate on key points "
                "without changing the core message."
            )
            ask = "Please expand the following portfolio content with more detail"
        case EnhancementType.KEYWORDS:
            role = "You are an SEO and keyword optimisation expert."
            task = (
                "Work relevant industry keywords and phrases into the text so it is "
                "more discoverable, while keeping a natural flow."
            )
            ask = "Please optimise the following portfolio content with industry keywords"
        case _:
            assert_never(enhancement_type)

    system = (
        f"{role}\n{task}\n"
        f"Write in a {TONE_DESCRIPTIONS[tone]} tone.\n"
        "Return only the rewritten text, without commentary."
    )
    return PromptPair(system=system, user=f"{ask}:\n\n{content}")


def build_bio_prompts(skills: list[str], experience: str, education: str, tone: Tone) -> PromptPair:
    system = (
        "You are an expert professional bio writer.\n"
        "Create a compelling bio that showcases the person's skills, experience "
        "and education. Make it engaging, concise and impactful.\n"
        f"Write in a {TONE_DESCRIPTIONS[tone]} tone."
    )
    user = (
        "Please write a professional bio based on the following information.\n\n"
        f"Skills: {', '.join(skills)}\n\n"
        f"Experience:\n{experience}\n\n"
        f"Education:\n{education}\n\n"
        "The bio should be about 150-200 words and highlight the most impressive "
        "parts of this background."
    )
    return PromptPair(system=system, user=user)


def build_skill_prompts(
    job_title: str,
    current_skills: list[str] | None = None,
    experience: str | None = None,
) -> PromptPair:
    system = (
        "You are an expert career coach and industry analyst.\n"
        "Recommend in-demand technical and soft skills for the given job title. "
        "When current skills are given, recommend complementary skills they are "
        "missing. When experience is given, tailor the list to it."
    )
    skills_line = ", ".join(current_skills) if current_skills else "None provided"
    experience_block = f"Experience:\n{experience}" if experience else "No experience provided."
    user = (
        f"Recommend 5-{MAX_RECOMMENDED_SKILLS} skills for a {job_title}.\n\n"
        f"Current skills: {skills_line}\n\n"
        f"{experience_block}\n\n"
        'Respond with a JSON array of skill names only, e.g. ["Skill A", "Skill B"].'
    )
    return PromptPair(system=system, user=user)


def build_analysis_prompts(summary: PortfolioSummary) -> PromptPair:
    system = (
        "You are a career coach and portfolio expert who gives specific, "
        "actionable feedback."
    )
    user = (
        f"Review this portfolio and give {MAX_SUGGESTIONS} concrete improvement "
        "suggestions, one per line, each formatted as "
        "'<short title>: <one-sentence explanation>'.\n\n"
        f"{summary.model_dump_json()}"
    )
    return PromptPair(system=system, user=user)


# ── Response parsing ─────────────────────────────────────────

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)
_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•+]|\d+[.)])\s*")


def _json_items(text: str) -> list | None:
    """Return list items from a JSON array or an object holding one, else None."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if isinstance(data, dict):
        obj = data
        data = next((v for v in obj.values() if isinstance(v, list)), None)
        for key in ("skills", "recommendations", "suggestions"):
            if isinstance(obj.get(key), list):
                data = obj[key]
                break
    # every list, top-level or nested, gets the same item normalisation
    if not isinstance(data, list):
        return None
    return [item.get("name", "") if isinstance(item, dict) else item for item in data]


def parse_text_list(text: str) -> list[str]:
    """Parse an LLM list answer: JSON array, or one item per (bulleted) line.

    List markers, wrapping quotes and trailing commas are stripped; blank
    items and case-insensitive duplicates are dropped, order is kept.
    """
    raw = text.strip()
    fenced = _FENCE_RE.match(raw)
    if fenced:
        raw = fenced.group(1)

    items = _json_items(raw)
    if items is None:
        items = [
            _LIST_MARKER_RE.sub("", line)
            for line in raw.splitlines()
            if line.strip() and not line.strip().endswith(":")
        ]

    result: list[str] = []
    seen: set[str] = set()
    for item in items:
        value = str(item).strip().rstrip(",").strip().strip("\"'").strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            result.append(value)
    return result


# ── Upstream call ────────────────────────────────────────────

def _classify_upstream_error(exc: Exception) -> GenerationFailure:
    if isinstance(exc, litellm.RateLimitError):
        return GenerationFailure.UPSTREAM_RATE_LIMITED
    if isinstance(exc, litellm.BadRequestError):
        return GenerationFailure.UPSTREAM_BAD_REQUEST
    if isinstance(exc, (
        litellm.Timeout,
        litellm.APIConnectionError,
        litellm.ServiceUnavailableError,
        litellm.InternalServerError,
    )):
        return GenerationFailure.UPSTREAM_UNAVAILABLE

    status_code = getattr(exc, "status_code", None)
    if status_code == 429:
        return GenerationFailure.UPSTREAM_RATE_LIMITED
    if status_code == 400:
        return GenerationFailure.UPSTREAM_BAD_REQUEST
    if isinstance(status_code, int) and status_code >= 500:
        return GenerationFailure.UPSTREAM_UNAVAILABLE
    return GenerationFailure.UNKNOWN


_FAILURE_MESSAGES: dict[GenerationFailure, str] = {
    GenerationFailure.UPSTREAM_RATE_LIMITED: "AI provider rate limit exceeded. Please try again later.",
    GenerationFailure.UPSTREAM_BAD_REQUEST: "The AI provider rejected the request.",
    GenerationFailure.UPSTREAM_UNAVAILABLE: "AI service is currently unavailable. Please try again later.",
    GenerationFailure.EMPTY_OUTPUT: "Failed to produce usable content",
    GenerationFailure.UNKNOWN: "Failed to generate content",
}


async def generate_text(
    system_prompt: str,
    user_prompt: str,
    model: str,
    temperature: float,
    max_tokens: int,
) -> str:
    """Single chat completion via LiteLLM; upstream failures become GenerationError."""
    kwargs: dict = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
        "timeout": get_settings().llm_timeout_seconds,
    }

    try:
        response = await acompletion(**kwargs)
    except Exception as exc:
        reason = _classify_upstream_error(exc)
        logger.warning("LLM call to %s failed (%s): %s", model, reason, exc)
        raise GenerationError(_FAILURE_MESSAGES[reason], reason=reason) from exc

    return response.choices[0].message.content or ""


# ── Quota + usage ────────────────────────────────────────────

@dataclass
class UsageWindow:
    used: int
    limit: int
    remaining: int
    window_minutes: int
    window_started_at: datetime


async def count_recent_requests(
    session: AsyncSession, caller_id: uuid.UUID, since: datetime
) -> int:
    stmt = (
        select(func.count())
        .select_from(AIUsageRecord)
        .where(
            AIUsageRecord.user_id == caller_id,
            AIUsageRecord.created_at >= since,
        )
    )
    result = await session.execute(stmt)
    return result.scalar_one()


async def get_usage_window(session: AsyncSession, caller_id: uuid.UUID | None) -> UsageWindow:
    caller_id = _require_caller(caller_id)
    settings = get_settings()
    since = utcnow() - timedelta(minutes=settings.ai_rate_limit_window_minutes)
    used = await count_recent_requests(session, caller_id, since)
    return UsageWindow(
        used=used,
        limit=settings.ai_rate_limit_per_hour,
        remaining=max(settings.ai_rate_limit_per_hour - used, 0),
        window_minutes=settings.ai_rate_limit_window_minutes,
        window_started_at=since,
    )


async def check_rate_limit(session: AsyncSession, caller_id: uuid.UUID) -> int:
    """Raise RateLimitError if the caller is at the ceiling; return the current count."""
    window = await get_usage_window(session, caller_id)
    if window.used >= window.limit:
        logger.warning(
            "AI rate limit hit for user %s (%d/%d in %d min)",
            caller_id, window.used, window.limit, window.window_minutes,
        )
        raise RateLimitError(
            f"Rate limit exceeded: {window.limit} AI requests per hour",
            retry_after=window.window_minutes * 60,
        )
    return window.used


async def record_usage(
    session: AsyncSession,
    caller_id: uuid.UUID,
    request_type: str,
    prompt_length: int,
    response_length: int,
    model: str,
) -> AIUsageRecord:
    record = AIUsageRecord(
        user_id=caller_id,
        request_type=request_type,
        prompt_length=prompt_length,
        response_length=response_length,
        model=model,
    )
    session.add(record)
    await session.commit()
    return record


async def _record_usage_safely(
    session: AsyncSession,
    caller_id: uuid.UUID,
    request_type: str,
    prompt_length: int,
    response_length: int,
    model: str,
) -> None:
    """Record usage; failures are logged and never propagate."""
    try:
        await record_usage(
            session,
            caller_id,
            request_type,
            prompt_length=prompt_length,
            response_length=response_length,
            model=model,
        )
    except Exception:
        logger.exception("Failed to record AI usage for user %s (%s)", caller_id, request_type)
        try:
            await session.rollback()
        except Exception:
            logger.warning("Rollback after failed usage write also failed for user %s", caller_id)


# ── Pipeline ─────────────────────────────────────────────────

def _require_caller(caller_id: uuid.UUID | None) -> uuid.UUID:
    if caller_id is None:
        raise UnauthorizedError()
    return caller_id


def _non_empty(text: str) -> str:
    if not text.strip():
        raise GenerationError(
            _FAILURE_MESSAGES[GenerationFailure.EMPTY_OUTPUT],
            reason=GenerationFailure.EMPTY_OUTPUT,
        )
    return text.strip()


async def _run(
    session: AsyncSession,
    caller_id: uuid.UUID,
    request_type: str,
    prompts: PromptPair,
    input_length: int,
    max_tokens: int,
    parse: Callable[[str], T],
) -> T:
    """Quota check, generation, parse, then the usage row.

    ``input_length`` is the size of what the caller sent, not of the
    templated prompt.
    """
    await check_rate_limit(session, caller_id)

    settings = get_settings()
    text = await generate_text(
        prompts.system,
        prompts.user,
        model=settings.ai_model,
        temperature=settings.ai_temperature,
        max_tokens=max_tokens,
    )
    result = parse(_non_empty(text))

    await _record_usage_safely(
        session,
        caller_id,
        request_type,
        prompt_length=input_length,
        response_length=len(text),
        model=settings.ai_model,
    )
    return result


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _parse_list(limit: int) -> Callable[[str], list[str]]:
    def parse(text: str) -> list[str]:
        items = parse_text_list(text)
        if not items:
            raise GenerationError(
                "Failed to parse a list from the AI response",
                reason=GenerationFailure.EMPTY_OUTPUT,
            )
        return items[:limit]
    return parse


# ── Public operations ────────────────────────────────────────

async def enhance_content(
    session: AsyncSession,
    caller_id: uuid.UUID | None,
    content: str,
    enhancement_type: str = EnhancementType.IMPROVE,
    tone: str = Tone.PROFESSIONAL,
) -> str:
    """Rewrite portfolio text according to ``enhancement_type`` and ``tone``."""
    caller_id = _require_caller(caller_id)
    request: EnhancementRequest = _validate(
        EnhancementRequest, content=content, type=enhancement_type, tone=tone
    )
    prompts = build_enhancement_prompts(request.content, request.type, request.tone)
    return await _run(
        session, caller_id, enhancement_request_type(request.type), prompts,
        input_length=len(request.content),
        max_tokens=ENHANCE_MAX_TOKENS, parse=str,
    )


async def generate_bio(
    session: AsyncSession,
    caller_id: uuid.UUID | None,
    skills: list[str],
    experience: str,
    education: str,
    tone: str = Tone.PROFESSIONAL,
) -> str:
    caller_id = _require_caller(caller_id)
    request: BioRequest = _validate(
        BioRequest, skills=skills, experience=experience, education=education, tone=tone
    )
    prompts = build_bio_prompts(request.skills, request.experience, request.education, request.tone)
    return await _run(
        session, caller_id, RequestType.BIO_GENERATION, prompts,
        input_length=len(_compact_json({
            "skills": request.skills,
            "experience": request.experience,
            "education": request.education,
        })),
        max_tokens=BIO_MAX_TOKENS, parse=str,
    )


async def recommend_skills(
    session: AsyncSession,
    caller_id: uuid.UUID | None,
    job_title: str,
    current_skills: list[str] | None = None,
    experience: str | None = None,
) -> list[str]:
    """Return an ordered list of recommended skill names."""
    caller_id = _require_caller(caller_id)
    request: SkillRecommendationRequest = _validate(
        SkillRecommendationRequest,
        job_title=job_title,
        current_skills=current_skills,
        experience=experience,
    )
    prompts = build_skill_prompts(request.job_title, request.current_skills, request.experience)
    return await _run(
        session, caller_id, RequestType.SKILL_RECOMMENDATION, prompts,
        input_length=(
            len(request.job_title)
            + (len(_compact_json(request.current_skills)) if request.current_skills is not None else 0)
            + len(request.experience or "")
        ),
        max_tokens=SKILLS_MAX_TOKENS, parse=_parse_list(MAX_RECOMMENDED_SKILLS),
    )


async def analyze_portfolio(
    session: AsyncSession,
    caller_id: uuid.UUID | None,
    summary: PortfolioSummary,
) -> list[str]:
    """Return up to five improvement suggestions for a portfolio."""
    caller_id = _require_caller(caller_id)
    prompts = build_analysis_prompts(summary)
    return await _run(
        session, caller_id, RequestType.PORTFOLIO_ANALYSIS, prompts,
        input_length=len(summary.model_dump_json()),
        max_tokens=ANALYSIS_MAX_TOKENS, parse=_parse_list(MAX_SUGGESTIONS),
    )
