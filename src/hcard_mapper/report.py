from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .model import MappingRun

console = Console()

# ── Palette ────────────────────────────────────────────────────────────────────
_ACCENT  = "#4d9fff"
_GREEN   = "#3ecf8e"
_RED     = "#f05c5c"
_TEXT    = "#c9d1e0"
_DIM     = "#546075"
_BORDER  = "#2a3347"


def print_run(run: MappingRun, fields: list[str] | None = None) -> None:
    """Show what a mapping run wrote; `fields` lists destinations left empty too."""
    if not run.ok:
        body = Text()
        body.append("Error during hCard mapping\n", style=f"bold {_RED}")
        body.append(run.error or "", style=_TEXT)
        console.print(Panel(body, border_style=_RED, padding=(0, 2)))
        return

    values = run.values()
    source = {w.destination: w.prop for w in run.writes}
    table = Table(show_header=True, header_style="bold", border_style=_BORDER)
    table.add_column("Field", style=_ACCENT, no_wrap=True)
    table.add_column("Value", style=_TEXT)
    table.add_column("From", style=f"dim {_DIM}")
    for dest in fields or list(values):
        table.add_row(dest, values.get(dest, ""), source.get(dest, ""))
    console.print(table)

    summary = Text()
    summary.append(f"  {len(values)} field(s) filled", style=f"bold {_GREEN}")
    if run.parser:
        summary.append(f"   parser shape: {run.parser}", style=f"dim {_DIM}")
    console.print(summary)


def print_not_found(locator: str | None) -> None:
    console.print(Text(f"  No hCard found{f' at {locator}' if locator else ''}.", style=f"bold {_RED}"))
