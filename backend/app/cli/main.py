"""prompts-admin: operator commands that have no HTTP surface.

    prompts-admin grant-admin EMAIL     -> promote an existing user
    prompts-admin revoke-admin EMAIL    -> demote a user
    prompts-admin window                -> show the admin prompt window
    prompts-admin create-prompt A B C --start ... --end ...
"""

from __future__ import annotations

from datetime import UTC, datetime

import click
from fastapi import HTTPException

from app.cli import output as out
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import Prompt, User
from app.services.prompt_service import as_aware_utc, create_prompt, select_prompt_window


def _parse_when(value: str | None) -> datetime:
    if not value:
        return datetime.now(UTC)
    try:
        return as_aware_utc(datetime.fromisoformat(value))
    except ValueError as exc:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value}") from exc


def _set_admin(email: str, is_admin: bool) -> None:
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            out.print_error(f"No user with email {email}", detail="The user must sign in once first.")
            raise SystemExit(1)
        user.is_admin = is_admin
        db.commit()
    finally:
        db.close()
    out.print_success(f"{email} is {'now' if is_admin else 'no longer'} an admin")


@click.group()
@click.version_option(version=out.VERSION, prog_name="prompts-admin")
@click.option("--create-tables", is_flag=True, default=False, help="Create missing tables before running")
def cli(create_tables: bool) -> None:
    """Administrative commands for the weekly prompts service."""
    if create_tables:
        Base.metadata.create_all(bind=engine)


@cli.command("grant-admin")
@click.argument("email")
def grant_admin(email: str) -> None:
    """Give EMAIL admin rights."""
    _set_admin(email, True)


@cli.command("revoke-admin")
@click.argument("email")
def revoke_admin(email: str) -> None:
    """Remove admin rights from EMAIL."""
    _set_admin(email, False)


@cli.command()
@click.option("--now", "now_value", default=None, help="Reference time (ISO-8601), defaults to now")
def window(now_value: str | None) -> None:
    """Show the last five past and next five upcoming prompts."""
    now = _parse_when(now_value)
    db = SessionLocal()
    try:
        prompts = select_prompt_window(db.query(Prompt).all(), now=now)
        out.print_prompt_table(prompts, now)
    finally:
        db.close()


@cli.command("create-prompt")
@click.argument("word1")
@click.argument("word2")
@click.argument("word3")
@click.option("--start", "start_value", required=True, help="Week start (ISO-8601)")
@click.option("--end", "end_value", required=True, help="Week end (ISO-8601)")
def create_prompt_command(word1: str, word2: str, word3: str, start_value: str, end_value: str) -> None:
    """Publish a new prompt."""
    db = SessionLocal()
    try:
        prompt = create_prompt(db, [word1, word2, word3], _parse_when(start_value), _parse_when(end_value))
        prompt_id = prompt.id
    except HTTPException as exc:
        out.print_error("Prompt rejected", detail=str(exc.detail))
        raise SystemExit(1) from exc
    finally:
        db.close()
    out.print_success(f"Created prompt {prompt_id}")


if __name__ == "__main__":
    cli()
