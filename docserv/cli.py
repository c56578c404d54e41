"""Command line interface for docserv.

Commands:
- serve: run the redirect server
- inspect: summarize index files
- merge: merge index files into one
- resolve: resolve a manpage reference offline
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .config import settings
from .engine.errors import IndexLoadError, ManpageNotFound, NotApplicable
from .engine.index.codec import load_index_files, write_index
from .engine.redirect import RedirectRequest, Redirector

app = typer.Typer(help="Manpage index and redirect server utilities")
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load(paths: list[Path]):
    try:
        return load_index_files(paths)
    except IndexLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    _configure_logging(verbose)


@app.command()
def version() -> None:
    """Print the docserv version."""
    typer.echo(__version__)


@app.command()
def serve(
    serving_dir: Optional[Path] = typer.Option(None, help="Directory with the rendered manpages"),
    index: Optional[list[Path]] = typer.Option(None, "--index", help="Index file (repeatable)"),
    host: Optional[str] = typer.Option(None, help="Listen address"),
    port: Optional[int] = typer.Option(None, help="Listen port"),
) -> None:
    """Serve the manpage mirror and its redirects."""
    import uvicorn

    if serving_dir is not None:
        settings.serving_dir = serving_dir
    if index:
        settings.index_paths = "#".join(str(p) for p in index)

    listen_host = host or settings.host
    listen_port = port or settings.port
    logger.info(f"Serving documentation from {str(settings.serving_dir)!r} on {listen_host}:{listen_port}")
    uvicorn.run("docserv.server:app", host=listen_host, port=listen_port, log_level=settings.log_level.lower())


@app.command()
def inspect(
    paths: list[Path] = typer.Argument(..., help="Index files, merged in order"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Summarize index files."""
    index = _load(paths)
    summary = {
        "manpages": len(index.entries),
        "entries": index.entry_count,
        "products": index.product_names,
        "product_mapping": index.product_mapping,
        "languages": index.langs,
        "sections": index.sections,
    }
    if as_json:
        typer.echo(json.dumps(summary, indent=2))
        return

    typer.echo(f"manpages:  {summary['manpages']}")
    typer.echo(f"entries:   {summary['entries']}")
    typer.echo(f"products:  {', '.join(index.product_names)}")
    for alias, product in sorted(index.product_mapping.items()):
        if alias != product:
            typer.echo(f"  {alias} -> {product}")
    typer.echo(f"languages: {len(index.langs)}")
    typer.echo(f"sections:  {len(index.sections)}")


@app.command()
def merge(
    paths: list[Path] = typer.Argument(..., help="Index files, merged in order"),
    output: Path = typer.Option(..., "--output", "-o", help="Merged index file"),
) -> None:
    """Merge index files into one."""
    index = _load(paths)
    written = write_index(output, index)
    typer.echo(f"Wrote {index.entry_count} entries ({written} bytes) to {output}")


@app.command()
def resolve(
    path: str = typer.Argument(..., help="Request path, e.g. /i3(1)"),
    index: list[Path] = typer.Option(..., "--index", help="Index file (repeatable)"),
    accept_language: str = typer.Option("", help="Accept-Language header value"),
    suite: str = typer.Option("", help="Referrer product"),
    binarypkg: str = typer.Option("", help="Referrer binary package"),
    section: str = typer.Option("", help="Referrer section"),
    language: str = typer.Option("", help="Referrer language"),
) -> None:
    """Resolve a manpage reference the way the server would."""
    redirector = Redirector(_load(index), section_order=settings.section_precedence)
    request = RedirectRequest(
        path=path if path.startswith("/") else f"/{path}",
        accept_language=accept_language,
        suite=suite,
        binarypkg=binarypkg,
        section=section,
        language=language,
    )
    try:
        typer.echo(redirector.resolve(request))
    except NotApplicable as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except ManpageNotFound as e:
        typer.echo(f"No such man page: {e.manpage}", err=True)
        for choice in e.choices:
            typer.echo(f"  {choice.serving_path('.html')}", err=True)
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
