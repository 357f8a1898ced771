"""AI gateway tests — quota, validation order, upstream failures, parsing."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import litellm
import pytest
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.core.exceptions import (
    GenerationError,
    GenerationFailure,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from app.models.base import utcnow
from app.models.usage_record import AIUsageRecord
from app.services.ai_gateway import (
    EnhancementType,
    PortfolioSummary,
    Tone,
    analyze_portfolio,
    build_enhancement_prompts,
    enhance_content,
    generate_bio,
    get_usage_window,
    parse_text_list,
    recommend_skills,
)


def _mock_llm_response(content: str | None = "Polished portfolio text."):
    """Create a mock LiteLLM acompletion response."""
    message = MagicMock()
    message.content = content

    choice = MagicMock()
    choice.message = message

    response = MagicMock()
    response.choices = [choice]
    return response


async def _seed_usage(session, user_id, count: int, age: timedelta = timedelta(minutes=5)):
    for _ in range(count):
        session.add(AIUsageRecord(
            user_id=user_id,
            request_type="enhance-improve",
            prompt_length=10,
            response_length=10,
            model="gpt-4-turbo",
            created_at=utcnow() - age,
        ))
    await session.commit()


async def _usage_count(session, user_id) -> int:
    result = await session.execute(
        select(func.count()).select_from(AIUsageRecord).where(AIUsageRecord.user_id == user_id)
    )
    return result.scalar_one()


class _ProviderDown(Exception):
    status_code = 503


# ── Enhancement happy path ───────────────────────────────────

@pytest.mark.asyncio
async def test_enhance_returns_text_and_records_usage(session, user):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response("  Polished portfolio text.  "),
    ) as mock_llm:
        result = await enhance_content(
            session, user.id, "i build websites", enhancement_type="improve", tone="technical"
        )

    assert result == "Polished portfolio text."
    mock_llm.assert_awaited_once()
    messages = mock_llm.call_args.kwargs["messages"]
    assert messages[0]["role"] == "system"
    assert "technical" in messages[0]["content"]
    assert "i build websites" in messages[1]["content"]

    records = (await session.execute(
        select(AIUsageRecord).where(AIUsageRecord.user_id == user.id)
    )).scalars().all()
    assert len(records) == 1
    assert records[0].request_type == "enhance-improve"
    assert records[0].prompt_length == len("i build websites")
    assert records[0].response_length == len("  Polished portfolio text.  ")


# ── Rate limit ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_rate_limit_boundary(session, user):
    await _seed_usage(session, user.id, 9)

    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(),
    ) as mock_llm:
        # 10th request in the window is accepted and logged
        await enhance_content(session, user.id, "Some content")
        assert await _usage_count(session, user.id) == 10
        assert mock_llm.await_count == 1

        # 11th is rejected before any generation call or write
        with pytest.raises(RateLimitError) as exc_info:
            await enhance_content(session, user.id, "Some content")

    assert mock_llm.await_count == 1
    assert await _usage_count(session, user.id) == 10
    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == 3600


@pytest.mark.asyncio
async def test_rate_limit_ignores_records_outside_window(session, user):
    await _seed_usage(session, user.id, 10, age=timedelta(minutes=61))

    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(),
    ):
        assert await enhance_content(session, user.id, "Some content")


@pytest.mark.asyncio
async def test_usage_window_reports_remaining(session, user):
    await _seed_usage(session, user.id, 4)
    await _seed_usage(session, user.id, 3, age=timedelta(hours=2))

    window = await get_usage_window(session, user.id)
    assert window.used == 4
    assert window.limit == 10
    assert window.remaining == 6
    assert window.window_minutes == 60
    assert utcnow() - window.window_started_at >= timedelta(minutes=60)
    assert utcnow() - window.window_started_at < timedelta(minutes=61)


# ── Validation and identity ──────────────────────────────────

@pytest.mark.asyncio
async def test_empty_content_rejected_without_side_effects(session, user):
    with patch("app.services.ai_gateway.acompletion", new_callable=AsyncMock) as mock_llm:
        with pytest.raises(ValidationError) as exc_info:
            await enhance_content(session, user.id, "", enhancement_type="improve", tone="professional")

    mock_llm.assert_not_awaited()
    assert await _usage_count(session, user.id) == 0
    assert exc_info.value.details[0]["field"] == "content"


@pytest.mark.asyncio
async def test_unknown_type_and_tone_rejected(session, user):
    with patch("app.services.ai_gateway.acompletion", new_callable=AsyncMock) as mock_llm:
        with pytest.raises(ValidationError) as exc_info:
            await enhance_content(session, user.id, "Text", enhancement_type="rewrite", tone="sarcastic")

    mock_llm.assert_not_awaited()
    fields = {d["field"] for d in exc_info.value.details}
    assert fields == {"type", "tone"}


@pytest.mark.asyncio
async def test_content_over_limit_rejected(session, user):
    with patch("app.services.ai_gateway.acompletion", new_callable=AsyncMock) as mock_llm:
        with pytest.raises(ValidationError):
            await enhance_content(session, user.id, "x" * 5001)
    mock_llm.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_caller_is_unauthorized(session):
    with patch("app.services.ai_gateway.acompletion", new_callable=AsyncMock) as mock_llm:
        with pytest.raises(UnauthorizedError):
            await enhance_content(session, None, "Text")
        with pytest.raises(UnauthorizedError):
            await recommend_skills(session, None, "Engineer")
    mock_llm.assert_not_awaited()


@pytest.mark.asyncio
async def test_validation_runs_before_quota(session, user):
    await _seed_usage(session, user.id, 10)

    with pytest.raises(ValidationError):
        await enhance_content(session, user.id, "   ")


# ── Upstream failures ────────────────────────────────────────

@pytest.mark.asyncio
async def test_upstream_rate_limit_is_retryable(session, user):
    error = litellm.RateLimitError(message="slow down", llm_provider="openai", model="gpt-4-turbo")
    with patch("app.services.ai_gateway.acompletion", new_callable=AsyncMock, side_effect=error):
        with pytest.raises(GenerationError) as exc_info:
            await enhance_content(session, user.id, "Some content")

    assert exc_info.value.reason == GenerationFailure.UPSTREAM_RATE_LIMITED
    assert exc_info.value.retryable is True
    assert exc_info.value.status_code == 503
    assert await _usage_count(session, user.id) == 0


@pytest.mark.asyncio
async def test_upstream_status_code_classification(session, user):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        side_effect=_ProviderDown("gateway timeout"),
    ):
        with pytest.raises(GenerationError) as exc_info:
            await enhance_content(session, user.id, "Some content")

    assert exc_info.value.reason == GenerationFailure.UPSTREAM_UNAVAILABLE
    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_unexpected_upstream_error_is_not_retryable(session, user):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        side_effect=ValueError("weird payload"),
    ):
        with pytest.raises(GenerationError) as exc_info:
            await enhance_content(session, user.id, "Some content")

    assert exc_info.value.reason == GenerationFailure.UNKNOWN
    assert exc_info.value.retryable is False
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   \n", None])
async def test_empty_output_records_nothing(session, user, content):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(content),
    ):
        with pytest.raises(GenerationError) as exc_info:
            await enhance_content(session, user.id, "Some content")

    assert exc_info.value.reason == GenerationFailure.EMPTY_OUTPUT
    assert await _usage_count(session, user.id) == 0


@pytest.mark.asyncio
async def test_usage_write_failure_keeps_result(session, user):
    with (
        patch(
            "app.services.ai_gateway.acompletion",
            new_callable=AsyncMock,
            return_value=_mock_llm_response("Generated anyway."),
        ),
        patch(
            "app.services.ai_gateway.record_usage",
            new_callable=AsyncMock,
            side_effect=SQLAlchemyError("disk full"),
        ) as mock_record,
    ):
        result = await enhance_content(session, user.id, "Some content")

    assert result == "Generated anyway."
    mock_record.assert_awaited_once()


# ── Bio, skills, analysis ────────────────────────────────────

@pytest.mark.asyncio
async def test_generate_bio_includes_background(session, user):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response("Jane is a backend engineer."),
    ) as mock_llm:
        bio = await generate_bio(
            session, user.id,
            skills=["Python", "Postgres"],
            experience="5 years at Acme",
            education="BSc Computer Science",
            tone="conversational",
        )

    assert bio == "Jane is a backend engineer."
    user_prompt = mock_llm.call_args.kwargs["messages"][1]["content"]
    assert "Python, Postgres" in user_prompt
    assert "5 years at Acme" in user_prompt
    records = (await session.execute(select(AIUsageRecord))).scalars().all()
    assert [r.request_type for r in records] == ["generate-bio"]
    # compact JSON of the caller's inputs, not the templated prompt
    assert records[0].prompt_length == len(
        '{"skills":["Python","Postgres"],"experience":"5 years at Acme",'
        '"education":"BSc Computer Science"}'
    )


@pytest.mark.asyncio
async def test_generate_bio_requires_skills(session, user):
    with pytest.raises(ValidationError):
        await generate_bio(session, user.id, skills=["  "], experience="x", education="y")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    '["Go", "Kubernetes", "gRPC"]',
    "- Go\n- Kubernetes\n- gRPC",
])
async def test_recommend_skills_parses_json_and_bullets(session, user, response):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(response),
    ):
        skills = await recommend_skills(session, user.id, "Backend Engineer")

    assert skills == ["Go", "Kubernetes", "gRPC"]


@pytest.mark.asyncio
async def test_recommend_skills_caps_list(session, user):
    many = "\n".join(f"{i}. Skill {i}" for i in range(1, 31))
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(many),
    ):
        skills = await recommend_skills(session, user.id, "Engineer", current_skills=["SQL"])

    assert len(skills) == 15
    assert skills[0] == "Skill 1"


@pytest.mark.asyncio
async def test_analyze_portfolio_returns_suggestions(session, user):
    summary = PortfolioSummary(title="My Work", skills=["Python"], project_count=0)
    lines = "\n".join(f"- Suggestion {i}: do thing {i}" for i in range(1, 8))
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response(lines),
    ) as mock_llm:
        suggestions = await analyze_portfolio(session, user.id, summary)

    assert len(suggestions) == 5
    assert suggestions[0] == "Suggestion 1: do thing 1"
    assert "My Work" in mock_llm.call_args.kwargs["messages"][1]["content"]


# ── Pure helpers ─────────────────────────────────────────────

def test_every_enhancement_type_has_distinct_prompt():
    systems = {
        build_enhancement_prompts("text", kind, Tone.PROFESSIONAL).system
        for kind in EnhancementType
    }
    assert len(systems) == len(EnhancementType)


def test_tone_is_part_of_system_prompt():
    prompts = build_enhancement_prompts("text", EnhancementType.PROOFREAD, Tone.ENTHUSIASTIC)
    assert "enthusiastic" in prompts.system
    assert prompts.user.endswith("text")


def test_parse_text_list_variants():
    assert parse_text_list('```json\n["A", "B"]\n```') == ["A", "B"]
    assert parse_text_list('{"skills": ["A", {"name": "B"}]}') == ["A", "B"]
    assert parse_text_list("Skills:\n1. A\n2) B\n* C") == ["A", "B", "C"]
    assert parse_text_list('"A",\n"a",\n"B"') == ["A", "B"]
    assert parse_text_list("   ") == []


def test_parse_text_list_unwraps_named_items_under_known_key():
    assert parse_text_list('{"recommendations": [{"name": "Go"}, {"name": "gRPC"}]}') == ["Go", "gRPC"]
    assert parse_text_list('{"data": [{"name": "Rust"}, "Zig"]}') == ["Rust", "Zig"]


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", list(EnhancementType))
async def test_enhancement_usage_records_input_length_and_type(session, user, kind):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response("Done."),
    ):
        await enhance_content(session, user.id, "hello", enhancement_type=kind)

    record = (await session.execute(select(AIUsageRecord))).scalars().one()
    assert record.request_type == f"enhance-{kind}"
    assert record.prompt_length == 5
    assert record.response_length == len("Done.")


@pytest.mark.asyncio
async def test_skill_usage_records_input_length(session, user):
    with patch(
        "app.services.ai_gateway.acompletion",
        new_callable=AsyncMock,
        return_value=_mock_llm_response('["Go"]'),
    ):
        await recommend_skills(
            session, user.id, "Backend Engineer", current_skills=["SQL"], experience="3 years"
        )

    record = (await session.execute(select(AIUsageRecord))).scalars().one()
    assert record.request_type == "recommend-skills"
    assert record.prompt_length == len("Backend Engineer") + len('["SQL"]') + len("3 years")
