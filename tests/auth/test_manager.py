"""
Unit tests for the credential manager: signup, signin and password reset.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from qanda.auth.manager import (
    RESET_EMAIL_SUBJECT,
    RESET_REQUESTED_MESSAGE,
    SIGNOUT_MESSAGE,
    CredentialManager,
)
from qanda.auth.passwords import PasswordHasher
from qanda.auth.tokens import SessionTokenIssuer
from qanda.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    PasswordMismatchError,
    UserNotFoundError,
)


class TestRegister:
    """Tests for CredentialManager.register."""

    @pytest.mark.asyncio
    async def test_register_creates_user_and_issues_token(self, manager, test_settings):
        result = await manager.register("new@example.com", "hunter22", {"name": "New"})

        assert result.user.email == "new@example.com"
        assert result.user.name == "New"
        assert result.user.permissions == ["USER"]

        issuer = SessionTokenIssuer.from_settings(test_settings)
        assert issuer.verify(result.token) == result.user.id

    @pytest.mark.asyncio
    async def test_register_lowercases_email(self, manager, user_store):
        result = await manager.register("Foo@Bar.com", "hunter22")

        assert result.user.email == "foo@bar.com"
        assert await user_store.get_by_email("foo@bar.com") is result.user

    @pytest.mark.asyncio
    async def test_register_stores_digest_not_plaintext(self, manager):
        result = await manager.register("a@example.com", "hunter22")

        assert result.user.password_hash != "hunter22"
        assert result.user.password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_register_ignores_system_managed_profile_fields(self, manager):
        result = await manager.register(
            "a@example.com",
            "hunter22",
            {
                "name": "Alice",
                "permissions": ["ADMIN"],
                "email": "other@example.com",
                "reset_token": "abc",
                "password_hash": "x",
            },
        )

        assert result.user.name == "Alice"
        assert result.user.email == "a@example.com"
        assert result.user.permissions == ["USER"]
        assert result.user.reset_token is None
        assert result.user.password_hash != "x"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, manager):
        await manager.register("dup@example.com", "hunter22")

        with pytest.raises(DuplicateEmailError):
            await manager.register("DUP@example.com", "other-pass")


class TestAuthenticate:
    """Tests for CredentialManager.authenticate."""

    @pytest.mark.asyncio
    async def test_authenticate_returns_same_user(self, manager):
        registered = await manager.register("a@example.com", "hunter22")

        result = await manager.authenticate("a@example.com", "hunter22")

        assert result.user.id == registered.user.id
        assert result.token

    @pytest.mark.asyncio
    async def test_authenticate_is_case_insensitive(self, manager):
        registered = await manager.register("Foo@Bar.com", "hunter22")

        result = await manager.authenticate("foo@bar.com", "hunter22")

        assert result.user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, manager):
        await manager.register("a@example.com", "hunter22")

        with pytest.raises(InvalidCredentialsError, match="Invalid Password!"):
            await manager.authenticate("a@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email_echoes_address(self, manager):
        with pytest.raises(UserNotFoundError) as exc_info:
            await manager.authenticate("Nobody@Example.com", "hunter22")

        assert str(exc_info.value) == "No such user found for email nobody@example.com"


class TestLogout:
    def test_logout_acknowledges(self):
        assert CredentialManager.logout().message == SIGNOUT_MESSAGE == "Goodbye!"


class TestIssueResetToken:
    """Tests for CredentialManager.issue_reset_token."""

    @pytest.mark.asyncio
    async def test_sets_token_and_expiry_one_hour_ahead(self, manager, clock):
        registered = await manager.register("a@example.com", "hunter22")

        ack = await manager.issue_reset_token("a@example.com")

        assert ack.message == RESET_REQUESTED_MESSAGE == "Thanks!"
        user = registered.user
        assert user.reset_token is not None
        assert len(user.reset_token) == 40
        int(user.reset_token, 16)
        assert user.reset_token_expiry == clock.now + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_sends_reset_link(self, manager, mailer, test_settings):
        registered = await manager.register("a@example.com", "hunter22")

        await manager.issue_reset_token("a@example.com")

        assert len(mailer.sent) == 1
        message = mailer.sent[0]
        assert message.sender == test_settings.mail_from
        assert message.to == "a@example.com"
        assert message.subject == RESET_EMAIL_SUBJECT
        token = registered.user.reset_token
        assert f"http://frontend.test/reset?resetToken={token}" in message.html

    @pytest.mark.asyncio
    async def test_token_committed_before_mail_is_sent(
        self, user_store, test_settings, clock
    ):
        commits_at_send = []

        class CommitAwareMailer:
            async def send(self, message):
                commits_at_send.append(user_store.commits)

        manager = CredentialManager(
            user_store,
            config=test_settings,
            mailer=CommitAwareMailer(),
            hasher=PasswordHasher(rounds=4),
            clock=clock,
        )
        await manager.register("a@example.com", "hunter22")

        await manager.issue_reset_token("a@example.com")

        assert commits_at_send == [1]

    @pytest.mark.asyncio
    async def test_failed_commit_sends_no_mail(self, manager, user_store, mailer):
        await manager.register("a@example.com", "hunter22")
        user_store.fail_commit = True

        with pytest.raises(ConnectionError):
            await manager.issue_reset_token("a@example.com")

        assert mailer.sent == []

    @pytest.mark.asyncio
    async def test_reissue_overwrites_pending_token(self, manager):
        registered = await manager.register("a@example.com", "hunter22")

        await manager.issue_reset_token("a@example.com")
        first = registered.user.reset_token
        await manager.issue_reset_token("a@example.com")

        assert registered.user.reset_token != first

        with pytest.raises(InvalidOrExpiredTokenError):
            await manager.consume_reset_token(first, "newpass1", "newpass1")

    @pytest.mark.asyncio
    async def test_unknown_email(self, manager, mailer):
        with pytest.raises(UserNotFoundError):
            await manager.issue_reset_token("ghost@example.com")

        assert mailer.sent == []

    @pytest.mark.asyncio
    async def test_email_is_not_lowercased(self, manager):
        await manager.register("a@example.com", "hunter22")

        with pytest.raises(UserNotFoundError):
            await manager.issue_reset_token("A@Example.com")

    @pytest.mark.asyncio
    async def test_mail_failure_still_acknowledges(
        self, user_store, test_settings, clock, failing_mailer
    ):
        manager = CredentialManager(
            user_store,
            config=test_settings,
            mailer=failing_mailer,
            hasher=PasswordHasher(rounds=4),
            clock=clock,
        )
        registered = await manager.register("a@example.com", "hunter22")

        ack = await manager.issue_reset_token("a@example.com")

        assert ack.message == "Thanks!"
        assert registered.user.reset_token is not None


class TestConsumeResetToken:
    """Tests for CredentialManager.consume_reset_token."""

    @pytest.mark.asyncio
    async def test_consume_sets_password_and_clears_token(self, manager, test_settings):
        registered = await manager.register("a@example.com", "hunter22")
        await manager.issue_reset_token("a@example.com")
        token = registered.user.reset_token

        result = await manager.consume_reset_token(token, "newpass1", "newpass1")

        assert result.user.id == registered.user.id
        assert result.user.reset_token is None
        assert result.user.reset_token_expiry is None
        issuer = SessionTokenIssuer.from_settings(test_settings)
        assert issuer.verify(result.token) == registered.user.id

    @pytest.mark.asyncio
    async def test_token_cannot_be_reused(self, manager):
        registered = await manager.register("a@example.com", "hunter22")
        await manager.issue_reset_token("a@example.com")
        token = registered.user.reset_token

        await manager.consume_reset_token(token, "newpass1", "newpass1")

        with pytest.raises(InvalidOrExpiredTokenError, match="invalid or expired"):
            await manager.consume_reset_token(token, "newpass2", "newpass2")

    @pytest.mark.asyncio
    async def test_password_mismatch_checked_before_store(self, test_settings, mailer):
        store = MagicMock()
        store.find_by_reset_token = AsyncMock()
        store.complete_password_reset = AsyncMock()
        manager = CredentialManager(
            store, config=test_settings, mailer=mailer, hasher=PasswordHasher(rounds=4)
        )

        with pytest.raises(PasswordMismatchError, match="Passwords don't match!"):
            await manager.consume_reset_token("token", "newpass1", "newpass2")

        store.find_by_reset_token.assert_not_called()
        store.complete_password_reset.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_token(self, manager):
        with pytest.raises(InvalidOrExpiredTokenError):
            await manager.consume_reset_token("f" * 40, "newpass1", "newpass1")

    @pytest.mark.asyncio
    async def test_token_outside_window_rejected(self, manager, clock):
        registered = await manager.register("a@example.com", "hunter22")
        await manager.issue_reset_token("a@example.com")
        token = registered.user.reset_token

        # Stored expiry is issuance + 1h; the lookback is another hour
        clock.advance(hours=2, seconds=1)

        with pytest.raises(InvalidOrExpiredTokenError):
            await manager.consume_reset_token(token, "newpass1", "newpass1")

        assert registered.user.reset_token == token

    @pytest.mark.asyncio
    async def test_token_inside_window_accepted(self, manager, clock):
        registered = await manager.register("a@example.com", "hunter22")
        await manager.issue_reset_token("a@example.com")
        token = registered.user.reset_token

        clock.advance(minutes=90)

        result = await manager.consume_reset_token(token, "newpass1", "newpass1")
        assert result.user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_lost_race_is_rejected(self, manager, user_store):
        registered = await manager.register("a@example.com", "hunter22")
        await manager.issue_reset_token("a@example.com")
        token = registered.user.reset_token

        user_store.complete_password_reset = AsyncMock(return_value=None)

        with pytest.raises(InvalidOrExpiredTokenError):
            await manager.consume_reset_token(token, "newpass1", "newpass1")


@pytest.mark.asyncio
async def test_full_reset_scenario(manager):
    """Register, sign in, reset; only the new password works afterwards."""
    registered = await manager.register("Carol@Example.com", "old-password")
    signed_in = await manager.authenticate("carol@example.com", "old-password")
    assert signed_in.user.id == registered.user.id

    await manager.issue_reset_token("carol@example.com")
    token = registered.user.reset_token
    await manager.consume_reset_token(token, "new-password", "new-password")

    with pytest.raises(InvalidCredentialsError):
        await manager.authenticate("carol@example.com", "old-password")

    result = await manager.authenticate("carol@example.com", "new-password")
    assert result.user.id == registered.user.id
