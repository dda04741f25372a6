"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.message import SuccessMessage
from ..types.question import Answer, Question, Tag
from ..types.user import User


# Input types for mutations
@strawberry.input
class UpdateUserInput:
    """Input for updating a user's profile."""

    id: UUID
    name: str | None = None
    email: str | None = None


@strawberry.input
class CreateQuestionInput:
    """Input for asking a new question."""

    title: str
    description: str | None = None
    tags: list[UUID] | None = None


@strawberry.input
class CreateAnswerInput:
    """Input for answering a question."""

    question_id: UUID
    body: str


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Account mutations
    @strawberry.mutation
    async def signup(
        self, info: strawberry.Info, email: str, password: str, name: str | None = None
    ) -> User:
        """Create an account and sign it in."""
        from ..resolvers.auth import signup

        return await signup(info, email, password, name)

    @strawberry.mutation
    async def signin(self, info: strawberry.Info, email: str, password: str) -> User:
        """Sign in with email and password."""
        from ..resolvers.auth import signin

        return await signin(info, email, password)

    @strawberry.mutation
    async def signout(self, info: strawberry.Info) -> SuccessMessage:
        """Sign out by clearing the session cookie."""
        from ..resolvers.auth import signout

        return await signout(info)

    @strawberry.mutation(name="requestReset")
    async def request_reset(self, info: strawberry.Info, email: str) -> SuccessMessage:
        """Email a password reset link."""
        from ..resolvers.auth import request_reset

        return await request_reset(info, email)

    @strawberry.mutation(name="resetPassword")
    async def reset_password(
        self,
        info: strawberry.Info,
        reset_token: str,
        password: str,
        confirm_password: str,
    ) -> User:
        """Set a new password using a reset token."""
        from ..resolvers.auth import reset_password

        return await reset_password(info, reset_token, password, confirm_password)

    @strawberry.mutation(name="updateUser")
    async def update_user(self, info: strawberry.Info, input: UpdateUserInput) -> User:
        """Update a user's profile."""
        from ..resolvers.user import update_user

        return await update_user(info, input)

    # Content mutations
    @strawberry.mutation(name="createQuestion")
    async def create_question(
        self, info: strawberry.Info, input: CreateQuestionInput
    ) -> Question:
        """Ask a new question."""
        from ..resolvers.question import create_question

        return await create_question(info, input)

    @strawberry.mutation(name="createQuestionView")
    async def create_question_view(self, info: strawberry.Info, question_id: UUID) -> bool:
        """Record a view of a question by the current user."""
        from ..resolvers.question import create_question_view

        return await create_question_view(info, question_id)

    @strawberry.mutation(name="createTag")
    async def create_tag(self, info: strawberry.Info, name: str) -> Tag | None:
        """Create a tag (or return the existing one)."""
        from ..resolvers.question import create_tag

        return await create_tag(info, name)

    @strawberry.mutation(name="createAnswer")
    async def create_answer(self, info: strawberry.Info, input: CreateAnswerInput) -> Answer:
        """Answer a question."""
        from ..resolvers.question import create_answer

        return await create_answer(info, input)
