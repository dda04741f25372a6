#!/usr/bin/env python3
"""
Main CLI entry point for Qanda backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from qanda import __version__
from qanda.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="qanda")
def cli() -> None:
    """Qanda CLI - run the server and manage users."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4444, type=int, help="Port to bind to (default: 4444)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the Qanda API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting Qanda API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Settings are read at import time in each worker, so pass them via env
    if log_level == "debug":
        os.environ["QANDA_DEBUG"] = "true"
        os.environ["QANDA_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("QANDA_DEBUG", "false")
        os.environ.setdefault("QANDA_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "qanda.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage user accounts."""
    pass


@user.command("create")
@click.option("--email", required=True, help="Email address for the account")
@click.option("--name", default=None, help="Display name")
@click.option("--admin", is_flag=True, default=False, help="Grant the ADMIN permission")
@click.password_option(help="Password for the account")
def create_user(email: str, name: str | None, admin: bool, password: str) -> None:
    """Create a user account."""
    from sqlalchemy import update

    from qanda.auth.manager import CredentialManager
    from qanda.auth.store import SqlAlchemyUserStore
    from qanda.config import settings
    from qanda.database.connection import get_async_session
    from qanda.dbmodels import Users
    from qanda.errors import DuplicateEmailError
    from qanda.mail.console import ConsoleMailTransport

    configure_logging()

    async def do_create():
        async with get_async_session() as db:
            manager = CredentialManager(
                SqlAlchemyUserStore(db), config=settings, mailer=ConsoleMailTransport()
            )
            result = await manager.register(email, password, {"name": name})
            if admin:
                await db.execute(
                    update(Users)
                    .where(Users.id == result.user.id)
                    .values(permissions=["USER", "ADMIN"])
                )
            return result.user

    try:
        created = asyncio.run(do_create())
    except DuplicateEmailError:
        click.echo(f"✗ A user with email {email.lower()} already exists", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        click.echo(f"✗ Error creating user: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ User created: {created.id}")
    click.echo(f"  Email: {created.email}")
    if admin:
        click.echo("  Permissions: USER, ADMIN")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
