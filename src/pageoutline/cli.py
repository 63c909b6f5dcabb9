"""CLI entrypoints for pageoutline."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from pageoutline.config import load_settings
from pageoutline.logging import configure_logging, get_logger
from pageoutline.outline.generator import compress_outline, generate_outlines
from pageoutline.outline.renderer import OutlineBudgetError
from pageoutline.utils.refs import extract_refs
from pageoutline.utils.tokens import truncate_by_tokens

app = typer.Typer(add_completion=False, help="Compress accessibility snapshots into short page outlines")
logger = get_logger(__name__)


def _read_text(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


@app.command()
def compress(
    snapshot: Path = typer.Argument(..., help="Snapshot text file, or '-' to read stdin."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the outline here instead of stdout"),
    max_lines: int | None = typer.Option(
        None, "--max-lines", help="Line budget (overrides PAGEOUTLINE_MAX_LINES)"
    ),
    min_group_size: int | None = typer.Option(
        None, "--min-group-size", help="Smallest run of similar siblings that gets folded (>= 3)"
    ),
    max_tokens: int | None = typer.Option(
        None, "--max-tokens", min=1, help="Approximate token cap on the printed outline (overrides PAGEOUTLINE_MAX_TOKENS)"
    ),
    stats: bool = typer.Option(False, "--stats", help="Print compression statistics to stderr"),
) -> None:
    """Compress a snapshot and print the page outline."""

    settings = load_settings()
    configure_logging(settings.log_level)

    text = _read_text(snapshot)
    try:
        options = settings.outline_options(max_lines=max_lines, min_group_size=min_group_size)
        result = compress_outline(text, options)
    except OutlineBudgetError as e:
        raise typer.BadParameter(str(e), param_hint="--max-lines") from e
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    outline = truncate_by_tokens(result.text, max_tokens or settings.max_tokens)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(outline + "\n", encoding="utf-8")
        logger.info("Outline written to %s", output)
    else:
        typer.echo(outline)

    if stats:
        typer.echo(
            f"lines {result.rendered_lines}/{result.original_lines} "
            f"({result.compression_ratio:.0%} removed), "
            f"wrappers removed {result.wrappers_removed}, "
            f"patterns {result.patterns} folding {result.folded_items} items, "
            f"refs {result.refs_total} ({result.refs_hidden} in hidden index)",
            err=True,
        )


@app.command()
def batch(
    snapshots: list[Path] = typer.Argument(..., help="Snapshot text files."),
    output_dir: Path = typer.Option(Path("outlines"), "--output-dir", "-d", help="Directory for <name>.outline.txt files"),
    max_concurrent: int | None = typer.Option(
        None, "--max-concurrent", min=1, help="Simultaneous compressions (overrides PAGEOUTLINE_MAX_CONCURRENT)"
    ),
) -> None:
    """Compress several snapshots concurrently, writing one outline file per snapshot."""

    settings = load_settings()
    if max_concurrent is not None:
        settings.max_concurrent = max_concurrent
    configure_logging(settings.log_level)

    texts = [_read_text(path) for path in snapshots]
    outlines = asyncio.run(
        generate_outlines(texts, settings.outline_options(), max_concurrent=settings.max_concurrent)
    )

    output_dir.mkdir(parents=True, exist_ok=True)
    for path, outline in zip(snapshots, outlines):
        target = output_dir / f"{path.stem}.outline.txt"
        target.write_text(truncate_by_tokens(outline, settings.max_tokens) + "\n", encoding="utf-8")
        typer.echo(str(target))
    logger.info("Wrote %d outlines to %s", len(outlines), output_dir)


@app.command()
def refs(
    outline: Path = typer.Argument(..., help="Rendered outline file, or '-' to read stdin."),
) -> None:
    """List every reference id recoverable from a rendered outline, one per line."""

    for ref in extract_refs(_read_text(outline)):
        typer.echo(ref)


if __name__ == "__main__":
    app()
