"""
Question, tag and answer GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ...dbmodels import Answers, Questions, Tags


@strawberry.type
class Tag:
    """Tag type for GraphQL API."""

    id: UUID
    name: str

    @classmethod
    def from_model(cls, tag: Tags) -> "Tag":
        return cls(id=tag.id, name=tag.name)


@strawberry.type
class Question:
    """Question type for GraphQL API."""

    id: UUID
    title: str
    description: str | None
    asked_by_id: UUID
    tags: list[Tag]
    created_at: datetime

    @classmethod
    def from_model(cls, question: Questions) -> "Question":
        return cls(
            id=question.id,
            title=question.title,
            description=question.description,
            asked_by_id=question.asked_by_id,
            tags=[Tag.from_model(tag) for tag in question.tags],
            created_at=question.created_at,
        )


@strawberry.type
class Answer:
    """Answer type for GraphQL API."""

    id: UUID
    body: str
    answered_by_id: UUID
    question_id: UUID
    created_at: datetime

    @classmethod
    def from_model(cls, answer: Answers) -> "Answer":
        return cls(
            id=answer.id,
            body=answer.body,
            answered_by_id=answer.answered_by_id,
            question_id=answer.question_id,
            created_at=answer.created_at,
        )
