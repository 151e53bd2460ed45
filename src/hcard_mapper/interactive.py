from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .model import Proposal
from .normalize import unescape

console = Console()


def _show_candidates(proposal: Proposal) -> None:
    table = Table(title="Multiple hCards found. Which one do you want to use?", show_lines=True)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Card", style="bold")
    table.add_column("Email")
    table.add_column("Url")
    for idx, (label, card) in enumerate(zip(proposal.labels(), proposal.candidates), start=1):
        table.add_row(str(idx), label, _text(card.get("email")), _text(card.get("url")))
    console.print(table)


def _text(value) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("value", "")
    return unescape(value) if isinstance(value, str) else ""


def pick_card(proposal: Proposal) -> int | None:
    """Ask which candidate to use; returns a 0-based index or None to abandon."""
    _show_candidates(proposal)
    choices = [str(i) for i in range(1, len(proposal) + 1)] + ["q"]
    choice = Prompt.ask("Use hCard number (or 'q' to cancel)", choices=choices, default="1")
    if choice == "q":
        return None
    return int(choice) - 1
