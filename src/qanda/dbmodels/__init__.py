"""
Database models for Qanda (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    ARRAY,
    Column,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

DEFAULT_PERMISSIONS = ["USER"]


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


question_tags = Table(
    "question_tags",
    Base.metadata,
    Column(
        "question_id",
        Uuid,
        ForeignKey("questions.id", ondelete="CASCADE", name="question_tags_question_id_fkey"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Uuid,
        ForeignKey("tags.id", ondelete="CASCADE", name="question_tags_tag_id_fkey"),
        primary_key=True,
    ),
)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
        Index("idx_users_reset_token", "reset_token"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=text("uuid_generate_v4()"))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    permissions: Mapped[list[str]] = mapped_column(
        ARRAY(String(32)), server_default=text("ARRAY['USER']::varchar[]")
    )
    reset_token: Mapped[str | None] = mapped_column(String(64))
    reset_token_expiry: Mapped[datetime | None] = mapped_column(DateTime(True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    questions: Mapped[list["Questions"]] = relationship(
        "Questions", uselist=True, back_populates="asked_by"
    )
    answers: Mapped[list["Answers"]] = relationship(
        "Answers", uselist=True, back_populates="answered_by"
    )
    question_views: Mapped[list["QuestionViews"]] = relationship(
        "QuestionViews", uselist=True, back_populates="viewed_by"
    )


class Tags(Base):
    __tablename__ = "tags"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="tags_pkey"),
        UniqueConstraint("name", name="tags_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=text("uuid_generate_v4()"))
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    questions: Mapped[list["Questions"]] = relationship(
        "Questions", secondary=question_tags, uselist=True, back_populates="tags"
    )


class Questions(Base):
    __tablename__ = "questions"
    __table_args__ = (
        ForeignKeyConstraint(
            ["asked_by_id"], ["users.id"], ondelete="CASCADE", name="questions_asked_by_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="questions_pkey"),
        Index("idx_questions_asked_by", "asked_by_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=text("uuid_generate_v4()"))
    asked_by_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    asked_by: Mapped["Users"] = relationship("Users", back_populates="questions")
    tags: Mapped[list["Tags"]] = relationship(
        "Tags", secondary=question_tags, uselist=True, back_populates="questions"
    )
    answers: Mapped[list["Answers"]] = relationship(
        "Answers", uselist=True, back_populates="answered_to"
    )
    views: Mapped[list["QuestionViews"]] = relationship(
        "QuestionViews", uselist=True, back_populates="viewed_question"
    )


class QuestionViews(Base):
    __tablename__ = "question_views"
    __table_args__ = (
        ForeignKeyConstraint(
            ["viewed_by_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="question_views_viewed_by_id_fkey",
        ),
        ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            ondelete="CASCADE",
            name="question_views_question_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="question_views_pkey"),
        UniqueConstraint(
            "viewed_by_id", "question_id", name="question_views_viewed_by_id_question_id_key"
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=text("uuid_generate_v4()"))
    viewed_by_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    question_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    viewed_by: Mapped["Users"] = relationship("Users", back_populates="question_views")
    viewed_question: Mapped["Questions"] = relationship("Questions", back_populates="views")


class Answers(Base):
    __tablename__ = "answers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["answered_by_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="answers_answered_by_id_fkey",
        ),
        ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            ondelete="CASCADE",
            name="answers_question_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="answers_pkey"),
        Index("idx_answers_question", "question_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=text("uuid_generate_v4()"))
    answered_by_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    question_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    answered_by: Mapped["Users"] = relationship("Users", back_populates="answers")
    answered_to: Mapped["Questions"] = relationship("Questions", back_populates="answers")


target_metadata = Base.metadata
