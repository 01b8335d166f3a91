"""Terminal output for the prompts-admin CLI.

All terminal output flows through this module. Commands import ``console``
and the helpers below rather than printing directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from app.models import Prompt, PromptStatus
from app.services.prompt_service import prompt_status

_theme = Theme(
    {
        "info": "cyan",
        "success": "bold green",
        "error": "bold red",
        "error.detail": "red",
        "muted": "dim",
        "status.past": "dim",
        "status.current": "bold green",
        "status.future": "cyan",
    }
)

console = Console(theme=_theme, highlight=False)

VERSION = "0.1.0"


def print_error(title: str, detail: str | None = None) -> None:
    console.print(f"[error]✘ {title}[/]")
    if detail:
        console.print(f"  [error.detail]{detail}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def _fmt(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def print_prompt_table(prompts: Sequence[Prompt], now: datetime, title: str = "Recent & Upcoming") -> None:
    table = Table(
        title=title,
        border_style="dim",
        title_style="bold",
        header_style="bold dim",
    )
    table.add_column("Words", style="bold", min_width=24)
    table.add_column("Week start", width=16)
    table.add_column("Week end", width=16)
    table.add_column("Status", width=8)
    table.add_column("ID", style="muted")

    for prompt in prompts:
        state: PromptStatus = prompt_status(prompt, now)
        table.add_row(
            " / ".join(prompt.words),
            _fmt(prompt.week_start),
            _fmt(prompt.week_end),
            f"[status.{state.value}]{state.value}[/]",
            prompt.id,
        )

    console.print()
    console.print(table)
    console.print(f"\n[muted]{len(prompts)} prompt{'s' if len(prompts) != 1 else ''}[/]")
