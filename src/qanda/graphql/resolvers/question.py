from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.orm import selectinload

from ...database.connection import get_async_session
from ...dbmodels import Answers, Questions, QuestionViews, Tags
from ...errors import NotFoundError
from ...logging import get_logger
from ..access_control import require_user_id

if TYPE_CHECKING:
    from ..mutations.root import CreateAnswerInput, CreateQuestionInput
    from ..types.question import Answer, Question, Tag

logger = get_logger(__name__)

MIN_TAG_LENGTH = 2


async def create_question(info: strawberry.Info, input: CreateQuestionInput) -> Question:
    """
    Create a question asked by the authenticated user.

    Tags are connected by id; unknown ids are rejected.
    """
    from ..types.question import Question as QuestionType

    user_id = await require_user_id(info)
    tag_ids = [UUID(str(tag_id)) for tag_id in input.tags or []]

    async with get_async_session() as session:
        tags: list[Tags] = []
        if tag_ids:
            result = await session.execute(select(Tags).where(Tags.id.in_(tag_ids)))
            tags = list(result.scalars().all())
            if len(tags) != len(set(tag_ids)):
                raise NotFoundError("One or more tags do not exist")

        new_question = Questions(
            asked_by_id=user_id,
            title=input.title,
            description=input.description,
        )
        new_question.tags = tags

        session.add(new_question)
        await session.commit()

        stmt = (
            select(Questions)
            .where(Questions.id == new_question.id)
            .options(selectinload(Questions.tags))
        )
        result = await session.execute(stmt)
        question = result.scalar_one()

        logger.info(
            "Question created",
            question_id=str(question.id),
            user_id=str(user_id),
            tag_count=len(question.tags),
        )
        return QuestionType.from_model(question)


async def create_question_view(info: strawberry.Info, question_id: UUID) -> bool:
    """Record that the authenticated user viewed a question (once per user)."""
    user_id = await require_user_id(info)

    async with get_async_session() as session:
        question = await session.get(Questions, question_id)
        if question is None:
            raise NotFoundError("Question not found")

        # Concurrent first views collapse onto the (viewer, question) unique key
        stmt = (
            pg_insert(QuestionViews)
            .values(viewed_by_id=user_id, question_id=question_id)
            .on_conflict_do_nothing(
                constraint="question_views_viewed_by_id_question_id_key"
            )
            .returning(QuestionViews.id)
        )
        result = await session.execute(stmt)
        if result.scalar_one_or_none() is not None:
            logger.info(
                "Question view recorded", question_id=str(question_id), user_id=str(user_id)
            )

    return True


async def create_tag(info: strawberry.Info, name: str) -> Tag | None:
    """
    Create a tag, or return the existing one with the same name.

    Names are trimmed and lowercased; names shorter than two characters are
    ignored and resolve to null.
    """
    from ..types.question import Tag as TagType

    await require_user_id(info)

    normalized = name.strip().lower()
    if len(normalized) < MIN_TAG_LENGTH:
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Tags).where(Tags.name == normalized))
        existing = result.scalar_one_or_none()
        if existing is not None:
            return TagType.from_model(existing)

        tag = Tags(name=normalized)
        session.add(tag)
        await session.commit()
        await session.refresh(tag)

        logger.info("Tag created", tag_id=str(tag.id), name=tag.name)
        return TagType.from_model(tag)


async def create_answer(info: strawberry.Info, input: CreateAnswerInput) -> Answer:
    """Post an answer to a question as the authenticated user."""
    from ..types.question import Answer as AnswerType

    user_id = await require_user_id(info)

    async with get_async_session() as session:
        question = await session.get(Questions, input.question_id)
        if question is None:
            raise NotFoundError("Question not found")

        answer = Answers(
            body=input.body,
            answered_by_id=user_id,
            question_id=input.question_id,
        )
        session.add(answer)
        await session.commit()
        await session.refresh(answer)

        logger.info(
            "Answer created",
            answer_id=str(answer.id),
            question_id=str(input.question_id),
            user_id=str(user_id),
        )
        return AnswerType.from_model(answer)
