"""initial folio schema

Revision ID: 4f1a9c2e7b30
Revises:
Create Date: 2026-10-19 09:12:44.201337

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '4f1a9c2e7b30'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _owner() -> sa.Column:
    return sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("job_title", sa.String(255), nullable=True),
        sa.Column("bio", sa.String(5000), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "portfolios",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("subtitle", sa.String(200), nullable=True),
        sa.Column("description", sa.String(5000), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.Column("primary_color", sa.String(7), nullable=True),
        sa.Column("secondary_color", sa.String(7), nullable=True),
        sa.Column("font_family", sa.String(50), nullable=True),
        sa.Column("seo_title", sa.String(70), nullable=True),
        sa.Column("seo_description", sa.String(160), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "slug", name="uq_portfolios_user_slug"),
    )
    op.create_index("ix_portfolios_user_id", "portfolios", ["user_id"])
    op.create_index("ix_portfolios_slug", "portfolios", ["slug"])

    op.create_table(
        "portfolio_themes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("portfolio_id", sa.Uuid(), sa.ForeignKey("portfolios.id"), nullable=False),
        sa.Column(
            "layout",
            sa.Enum("GRID", "TIMELINE", "CARDS", name="themelayout"),
            nullable=False,
        ),
        sa.Column("primary_color", sa.String(7), nullable=False),
        sa.Column("secondary_color", sa.String(7), nullable=False),
        sa.Column("background_color", sa.String(7), nullable=False),
        sa.Column("font_family", sa.String(50), nullable=False),
        sa.Column("background_image", sa.String(1000), nullable=True),
        sa.Column("custom_css", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_portfolio_themes_portfolio_id", "portfolio_themes", ["portfolio_id"], unique=True
    )

    op.create_table(
        "skills",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("proficiency", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_skills_user_id", "skills", ["user_id"])

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("technologies", sa.JSON(), nullable=False),
        sa.Column("live_url", sa.String(1000), nullable=True),
        sa.Column("repo_url", sa.String(1000), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])

    op.create_table(
        "experiences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("position", sa.String(200), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_experiences_user_id", "experiences", ["user_id"])

    op.create_table(
        "education",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("institution", sa.String(200), nullable=False),
        sa.Column("degree", sa.String(200), nullable=False),
        sa.Column("field_of_study", sa.String(200), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("description", sa.String(2000), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_education_user_id", "education", ["user_id"])

    op.create_table(
        "social_links",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("platform", sa.String(50), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_social_links_user_id", "social_links", ["user_id"])

    op.create_table(
        "ai_usage_records",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("request_type", sa.String(50), nullable=False),
        sa.Column("prompt_length", sa.Integer(), nullable=False),
        sa.Column("response_length", sa.Integer(), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_ai_usage_records_user_created", "ai_usage_records", ["user_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("ai_usage_records")
    op.drop_table("social_links")
    op.drop_table("education")
    op.drop_table("experiences")
    op.drop_table("projects")
    op.drop_table("skills")
    op.drop_table("portfolio_themes")
    op.drop_table("portfolios")
    op.drop_table("users")
    sa.Enum(name="themelayout").drop(op.get_bind(), checkfirst=True)
