"""Session cookie contract shared by signup, signin and password reset."""

from __future__ import annotations

from typing import Literal, cast

from fastapi import Response

from ..config import Settings, settings


def set_session_cookie(response: Response, token: str, config: Settings | None = None) -> None:
    """Attach the session token as an httpOnly cookie valid for one year."""
    config = config or settings
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=config.session_cookie_max_age,
        httponly=True,
        secure=config.session_cookie_secure,
        samesite=cast(Literal["lax", "strict", "none"], config.session_cookie_samesite),
    )


def clear_session_cookie(response: Response, config: Settings | None = None) -> None:
    config = config or settings
    response.delete_cookie(
        key=config.session_cookie_name,
        httponly=True,
        secure=config.session_cookie_secure,
        samesite=cast(Literal["lax", "strict", "none"], config.session_cookie_samesite),
    )
