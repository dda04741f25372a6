"""
Initial schema with uuid-ossp extension, users and Q&A tables.

Revision ID: 20260101_000000_initial_schema
Revises:
Create Date: 2026-01-01 00:00:00
"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20260101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    # Required extension for uuid_generate_v4
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp";')

    # users
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255)),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.String(length=32)),
            server_default=sa.text("ARRAY['USER']::varchar[]"),
        ),
        sa.Column("reset_token", sa.String(length=64)),
        sa.Column("reset_token_expiry", sa.DateTime(timezone=True)),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_index("idx_users_reset_token", "users", ["reset_token"])

    # tags
    op.create_table(
        "tags",
        _uuid_pk(),
        sa.Column("name", sa.String(length=64), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="tags_pkey"),
        sa.UniqueConstraint("name", name="tags_name_key"),
    )

    # questions
    op.create_table(
        "questions",
        _uuid_pk(),
        sa.Column("asked_by_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(
            ["asked_by_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="questions_asked_by_id_fkey",
        ),
        sa.PrimaryKeyConstraint("id", name="questions_pkey"),
    )
    op.create_index("idx_questions_asked_by", "questions", ["asked_by_id"])

    # question_tags
    op.create_table(
        "question_tags",
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tag_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            ondelete="CASCADE",
            name="question_tags_question_id_fkey",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            ondelete="CASCADE",
            name="question_tags_tag_id_fkey",
        ),
        sa.PrimaryKeyConstraint("question_id", "tag_id", name="pk_question_tags"),
    )

    # question_views
    op.create_table(
        "question_views",
        _uuid_pk(),
        sa.Column("viewed_by_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["viewed_by_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="question_views_viewed_by_id_fkey",
        ),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            ondelete="CASCADE",
            name="question_views_question_id_fkey",
        ),
        sa.PrimaryKeyConstraint("id", name="question_views_pkey"),
        sa.UniqueConstraint(
            "viewed_by_id",
            "question_id",
            name="question_views_viewed_by_id_question_id_key",
        ),
    )

    # answers
    op.create_table(
        "answers",
        _uuid_pk(),
        sa.Column("answered_by_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["answered_by_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="answers_answered_by_id_fkey",
        ),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            ondelete="CASCADE",
            name="answers_question_id_fkey",
        ),
        sa.PrimaryKeyConstraint("id", name="answers_pkey"),
    )
    op.create_index("idx_answers_question", "answers", ["question_id"])


def downgrade() -> None:
    op.drop_index("idx_answers_question", table_name="answers")
    op.drop_table("answers")
    op.drop_table("question_views")
    op.drop_table("question_tags")
    op.drop_index("idx_questions_asked_by", table_name="questions")
    op.drop_table("questions")
    op.drop_table("tags")
    op.drop_index("idx_users_reset_token", table_name="users")
    op.drop_table("users")
