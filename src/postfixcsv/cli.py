"""Command-line interface for postfixcsv."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from postfixcsv import __version__
from postfixcsv.config import load_config
from postfixcsv.errors import PostfixCsvError


@click.group()
@click.version_option(version=__version__, prog_name="postfixcsv")
def main() -> None:
    """postfixcsv -- evaluate CSV sheets of postfix expressions."""


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _load_settings(config_path: str | None, **overrides: Any) -> dict[str, Any]:
    """Load config and apply CLI overrides that were actually given."""
    from postfixcsv import logging as events

    try:
        cfg = load_config(Path(config_path) if config_path else None)
    except (PostfixCsvError, FileNotFoundError) as e:
        raise click.ClickException(str(e))
    for key, value in overrides.items():
        if value is not None:
            cfg[key] = value
    events.configure(cfg["logging_dir"], fsync=bool(cfg["logging_fsync"]))
    return cfg


def _read_grid(csv_path: str, separator: str):
    from postfixcsv.grid import Grid
    from postfixcsv.logging import EventType, emit_error, emit_info

    path = Path(csv_path)
    try:
        text = path.read_text(encoding="utf-8")
        grid = Grid.from_text(text, separator)
    except (OSError, UnicodeDecodeError, PostfixCsvError) as e:
        emit_error(
            EventType.file_read,
            f"Could not read {path}: {e}",
            {"path": str(path)},
            error_code=type(e).__name__,
        )
        raise click.ClickException(f"Could not read {path}: {e}")
    emit_info(
        EventType.file_read,
        f"Read {path}",
        {"path": str(path), "rows": len(grid), "bytes": len(text.encode("utf-8"))},
    )
    return grid


# ---------------------------------------------------------------------------
# Process
# ---------------------------------------------------------------------------


@main.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-s", "--separator", default=None, help="Field separator (default from config, else ',').")
@click.option("-o", "--out", "out_path", default=None, type=click.Path(dir_okay=False), help="Write the result here instead of stdout.")
@click.option("-x", "--overwrite", is_flag=True, help="Allow replacing an existing --out file.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False), help="Path to a postfixcsv.yaml file.")
@click.option("--preview", is_flag=True, help="Print the result as a table instead of delimited text.")
def process(
    csv_path: str,
    separator: str | None,
    out_path: str | None,
    overwrite: bool,
    config_path: str | None,
    preview: bool,
) -> None:
    """Evaluate every cell of CSV_PATH and print or save the result."""
    from postfixcsv.logging import EventType, emit_error, emit_info
    from postfixcsv.sheet import SheetProcessor

    cfg = _load_settings(config_path, separator=separator, overwrite=overwrite or None)
    grid = _read_grid(csv_path, cfg["separator"])

    processor = SheetProcessor(grid, max_depth=cfg["max_depth"], error_token=cfg["error_token"])
    result = processor.process()

    if preview:
        click.echo(result.to_frame())
        return

    rendered = result.render()
    if out_path is None:
        click.echo(rendered)
        return

    target = Path(out_path)
    if target.exists() and not cfg["overwrite"]:
        raise click.ClickException(f"{target} already exists; use --overwrite to replace it")
    try:
        target.write_text(rendered + "\n", encoding="utf-8")
    except OSError as e:
        emit_error(
            EventType.file_written,
            f"Could not write {target}: {e}",
            {"path": str(target)},
            error_code=type(e).__name__,
        )
        raise click.ClickException(f"Could not write {target}: {e}")
    emit_info(EventType.file_written, f"Wrote {target}", {"path": str(target)})
    click.echo(f"Wrote {len(result)} row(s) to {target}")


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------


@main.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("label")
@click.option("-s", "--separator", default=None, help="Field separator (default from config, else ',').")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False), help="Path to a postfixcsv.yaml file.")
def cell(csv_path: str, label: str, separator: str | None, config_path: str | None) -> None:
    """Show the raw text and evaluated value of LABEL in CSV_PATH."""
    from postfixcsv.coord import parse
    from postfixcsv.postfix import PostfixError
    from postfixcsv.sheet import SheetProcessor, format_number

    coord = parse(label)
    if coord is None:
        raise click.ClickException(f"Not a cell label: {label!r}")

    cfg = _load_settings(config_path, separator=separator)
    grid = _read_grid(csv_path, cfg["separator"])

    raw = grid.get(coord)
    if raw is None:
        raise click.ClickException(f"Cell {coord.label} is outside the sheet")

    click.echo(f"Cell:  {coord.label}")
    click.echo(f"Raw:   {raw}")
    processor = SheetProcessor(grid, max_depth=cfg["max_depth"], error_token=cfg["error_token"])
    try:
        value = processor.evaluate(coord)
    except PostfixError as e:
        click.echo(f"Value: {cfg['error_token']}")
        click.echo(f"Error: {e.kind.value}: {e}")
        return
    click.echo(f"Value: {format_number(value)}")


# ---------------------------------------------------------------------------
# Convert
# ---------------------------------------------------------------------------


@main.command()
@click.argument("expression")
def convert(expression: str) -> None:
    """Print the postfix form of an infix EXPRESSION, e.g. "(A1 + 2) * 3"."""
    from postfixcsv.tools.infix import InfixSyntaxError, to_postfix

    try:
        click.echo(to_postfix(expression))
    except InfixSyntaxError as e:
        raise click.ClickException(str(e))
