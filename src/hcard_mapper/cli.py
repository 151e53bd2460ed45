from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, ensure_workspace, load_settings
from .errors import CardNotFoundError, InvalidMappingError, MalformedRecordError, UpstreamError
from .exporter import VCARD_MAPPINGS, VCardSink, export_vcard
from .fetch import fetch_document, is_http_uri
from .interactive import pick_card
from .io import read_json_document, read_mapping_file
from .mapping import FormSink, destinations, freeze_mapping
from .model import Proposal
from .pipeline import process, resume
from .report import print_not_found, print_run

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="hcard-mapper: copy the fields of an hCard into form fields or a vCard.",
)
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _settings(config: Path | None) -> Settings:
    if config is not None:
        return load_settings(config)
    _, settings = ensure_workspace()
    return settings


def _fail(message: str, code: int) -> typer.Exit:
    console.print(f"[bold red]{message}[/bold red]")
    return typer.Exit(code=code)


# ── `map` command ──────────────────────────────────────────────────────────────

@app.command("map")
def map_card(
    source: str = typer.Argument(..., help="JSON file with a parser response, '-' for stdin, or an http(s) page"),
    mapping_file: Path | None = typer.Option(None, "--mapping", "-m", help="Mapping spec (.json or .toml)"),
    choose: int | None = typer.Option(None, "--choose", "-c", help="Candidate number to use when several cards are found"),
    vcard: Path | None = typer.Option(None, "--vcard", help="Write the mapped card as a .vcf file"),
    config: Path | None = typer.Option(None, "--config", help="Config file (default: local/hcard.conf)"),
) -> None:
    """Map one hCard onto fields and show the result.

    \b
    Examples:
      hcard-map map response.json -m mappings.toml
      hcard-map map http://example.org/about --vcard me.vcf
    """
    settings = _settings(config)

    try:
        if mapping_file is not None:
            mapping = read_mapping_file(mapping_file)
        elif vcard is not None:
            mapping = freeze_mapping(VCARD_MAPPINGS)
        else:
            mapping = settings.mapping_spec()
    except InvalidMappingError as exc:
        raise _fail(f"Invalid mapping: {exc}", 1)

    sink = VCardSink() if vcard is not None else FormSink.for_mapping(mapping)
    locator = source if is_http_uri(source) else None

    try:
        response = fetch_document(source, settings) if locator else read_json_document(source)
        result = process(response, mapping, sink, locator=locator)
    except MalformedRecordError as exc:
        raise _fail(str(exc), 1)
    except OSError as exc:
        raise _fail(f"Cannot read {source}: not an http(s) page or readable file ({exc.strerror or exc})", 1)
    except CardNotFoundError:
        print_not_found(locator or source)
        raise typer.Exit(code=2)
    except UpstreamError as exc:
        raise _fail(str(exc), 3)

    if isinstance(result, Proposal):
        if choose is not None:
            index = choose - 1
            if not 0 <= index < len(result):
                raise _fail(f"--choose must be between 1 and {len(result)}", 1)
        else:
            index = pick_card(result)
            if index is None:
                console.print("[dim]Aborted.[/dim]")
                raise typer.Exit(code=0)
        result = resume(result, index, mapping, sink)

    print_run(result, fields=None if vcard is not None else destinations(mapping))
    if not result.ok:
        raise typer.Exit(code=1)

    if vcard is not None:
        out = export_vcard(sink, vcard)
        console.print(f"\n[bold green]✓ Wrote vCard → {out}[/bold green]")


# ── `serve` command ────────────────────────────────────────────────────────────

@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    config: Path | None = typer.Option(None, "--config", help="Config file (default: local/hcard.conf)"),
) -> None:
    """Run the hCard lookup proxy for browser forms."""
    from .server import main as serve_main

    settings = _settings(config)
    if host:
        settings.host = host
    if port:
        settings.port = port
    serve_main(settings)


if __name__ == "__main__":
    app()
