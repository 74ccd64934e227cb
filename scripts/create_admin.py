# flake8: noqa
# scripts/create_admin.py

"""
Creates the first admin account. Every other account is created through
POST /api/v1/usr/users by an admin.

    python -m scripts.create_admin --email admin@example.com
"""

import asyncio
import logging

import typer
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import create_db_and_tables, engine, get_async_session_context
from app.core.exceptions import Conflict
from app.core.logging import setup_logging
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

logger = logging.getLogger("scripts.create_admin")

cli = typer.Typer()


async def create_admin_user(db: AsyncSession, user_in: usr_schemas.UserCreate) -> bool:
    """
    Creates the admin account; returns False when the email is already taken.
    """
    try:
        db_user = await usr_crud.user.create(db, obj_in=user_in)
    except Conflict:
        typer.echo(f"Error: email already exists: {user_in.email}")
        return False
    typer.echo(f"Admin account created: {db_user.email} (uid={db_user.uid})")
    return True


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="Admin email",
        help="Email address of the admin account."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="Admin password",
        hide_input=True,
        confirmation_prompt=True,
        help="Password of the admin account (at least 8 characters)."
    ),
):
    """
    Creates an admin account for the Inventory API.
    """
    setup_logging()
    try:
        user_data = usr_schemas.UserCreate(email=email, password=password, role=UserRole.ADMIN)
    except ValidationError as e:
        for error in e.errors():
            typer.echo(f"Error: {error['msg']}")
        raise typer.Abort()

    async def run_creation() -> bool:
        await create_db_and_tables()
        try:
            async with get_async_session_context() as db:
                return await create_admin_user(db=db, user_in=user_data)
        finally:
            await engine.dispose()

    if not asyncio.run(run_creation()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
