"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from blockparse.config import Settings, build_config, load_config
from blockparse.core.pipeline import parse_dir, parse_file
from blockparse.core.serializer import serialize


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, verbose: bool = False) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _write(text: str, out: Optional[str]) -> None:
    """Write text to out, or echo to stdout when out is None."""
    if out is None:
        typer.echo(text)
        return
    Path(out).parent.mkdir(parents=True, exist_ok=True)
    Path(out).write_text(text, encoding="utf-8")
    typer.echo(f"Wrote {out}", err=True)


FallbackOpt = Annotated[Optional[str], typer.Option("--fallback", help="Fallback block type name")]
DevOpt = Annotated[Optional[bool], typer.Option("--dev/--no-dev", help="Report round-trip mismatches")]
OutOpt = Annotated[Optional[str], typer.Option("--out", "-o", help="Output file (default: stdout)")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


def parse_cmd(
    path: Annotated[str, typer.Argument(help="Document file to parse")],
    fallback: FallbackOpt = None,
    dev: DevOpt = None,
    out: OutOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Parse a document and print its blocks as JSON."""
    settings = _settings(overrides={"fallback_block_name": fallback, "dev_mode": dev}, verbose=verbose)
    try:
        blocks = parse_file(Path(path), build_config(settings))
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    payload = [b.model_dump() for b in blocks]
    _write(json.dumps(payload, indent=settings.indent, ensure_ascii=False), out)


def validate_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to validate")],
    fallback: FallbackOpt = None,
    dev: DevOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Report blocks whose markup does not survive a round trip. Exits 1 if any are invalid."""
    settings = _settings(overrides={"fallback_block_name": fallback, "dev_mode": dev}, verbose=verbose)
    try:
        results = parse_dir(Path(path), build_config(settings))
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    if not results:
        typer.echo("No documents found.")
        raise typer.Exit(1)

    total = invalid = 0
    for file, blocks in results.items():
        total += len(blocks)
        for position, block in enumerate(blocks):
            if not block.is_valid:
                invalid += 1
                typer.echo(f"  invalid: {file} [{position}] {block.name}")
    typer.echo(f"Validated {len(results)} document(s): {total} block(s), {invalid} invalid")
    if invalid:
        raise typer.Exit(1)


def serialize_cmd(
    path: Annotated[str, typer.Argument(help="Document file to re-serialize")],
    fallback: FallbackOpt = None,
    out: OutOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Parse a document and write it back out in canonical delimited form."""
    settings = _settings(overrides={"fallback_block_name": fallback}, verbose=verbose)
    config = build_config(settings)
    try:
        blocks = parse_file(Path(path), config)
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    _write(serialize(blocks, config), out)
