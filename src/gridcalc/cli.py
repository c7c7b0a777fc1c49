"""Command-line interface for gridcalc."""

from __future__ import annotations

import csv
from pathlib import Path

import click
import yaml

from gridcalc import __version__
from gridcalc.config import load_config, write_default_config
from gridcalc.formulas.errors import GridSizeError, InvalidAddressError
from gridcalc.logging.events import EventType, emit_info, set_log_dir
from gridcalc.sheet import Spreadsheet

REPL_HELP = """\
Commands:
  put ADDR TEXT      store a literal or =formula in ADDR
  get ADDR           print the value of ADDR
  src ADDR           print the formula (or literal) stored in ADDR
  show               print the whole grid
  save PATH          export the grid to a CSV file
  load PATH [START]  import a CSV file, top-left at START (default A1)
  help               show this text
  quit               leave (also: exit)"""


@click.group()
@click.version_option(version=__version__, prog_name="gridcalc")
def main() -> None:
    """gridcalc -- integer spreadsheet with SUMME/MIN/MAX/MITTELWERT."""


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _setup(project_dir: str | None) -> dict:
    """Load config and enable event logging for *project_dir*, if given."""
    path = Path(project_dir) if project_dir is not None else Path.cwd()
    try:
        config = load_config(path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Bad config in {path}: {e}")
    if project_dir is not None:
        set_log_dir(path)
    return config


def _new_sheet(rows: int, cols: int) -> Spreadsheet:
    try:
        return Spreadsheet(rows, cols)
    except GridSizeError as e:
        raise click.ClickException(str(e))


def _load_csv(sheet: Spreadsheet, path: str, separator: str) -> None:
    from gridcalc.csv_io import read_csv

    try:
        read_csv(sheet, path, separator=separator)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise click.ClickException(f"Could not read {path}: {e}")


def _parse_assignments(assignments: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for item in assignments:
        if "=" not in item:
            raise click.ClickException(f"Invalid --set format: {item!r}. Use ADDR=VALUE.")
        addr, value = item.split("=", 1)
        pairs.append((addr.strip(), value))
    return pairs


_project_dir_option = click.option(
    "--project-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding gridcalc.yaml; enables event logging to its logs/.",
)


# ---------------------------------------------------------------------------
# Init
# ---------------------------------------------------------------------------


@main.command()
@click.argument("directory", type=click.Path(file_okay=False))
def init(directory: str) -> None:
    """Write a default gridcalc.yaml into DIRECTORY."""
    path = write_default_config(Path(directory))
    click.echo(f"Config at {path}")


# ---------------------------------------------------------------------------
# Show
# ---------------------------------------------------------------------------


@main.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--rows", type=int, default=None, help="Grid rows (default from config).")
@click.option("--cols", type=int, default=None, help="Grid columns (default from config).")
@click.option("--separator", default=None, help="CSV field separator.")
@_project_dir_option
def show(
    csv_path: str,
    rows: int | None,
    cols: int | None,
    separator: str | None,
    project_dir: str | None,
) -> None:
    """Load CSV_PATH into a fresh grid and print it."""
    config = _setup(project_dir)
    sheet = _new_sheet(
        rows if rows is not None else config["rows"],
        cols if cols is not None else config["cols"],
    )
    _load_csv(sheet, csv_path, separator or config["csv_separator"])
    click.echo(str(sheet))


# ---------------------------------------------------------------------------
# Eval
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("formula")
@click.option("--set", "assignments", multiple=True, help="Cell input as ADDR=VALUE.")
@click.option("--rows", type=int, default=None, help="Grid rows (default from config).")
@click.option("--cols", type=int, default=None, help="Grid columns (default from config).")
@_project_dir_option
def eval_cmd(
    formula: str,
    assignments: tuple[str, ...],
    rows: int | None,
    cols: int | None,
    project_dir: str | None,
) -> None:
    """Evaluate FORMULA after applying each --set in order."""
    config = _setup(project_dir)
    sheet = _new_sheet(
        rows if rows is not None else config["rows"],
        cols if cols is not None else config["cols"],
    )
    for addr, value in _parse_assignments(assignments):
        try:
            sheet.put(addr, value)
        except InvalidAddressError as e:
            raise click.ClickException(str(e))
    body = formula.strip()
    if body.startswith("="):
        body = body[1:]
    click.echo(sheet.evaluate(body))


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------


@main.command()
@click.option("--rows", type=int, default=None, help="Grid rows (default from config).")
@click.option("--cols", type=int, default=None, help="Grid columns (default from config).")
@click.option("--load", "load_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="CSV file to load before the first prompt.")
@_project_dir_option
def repl(
    rows: int | None,
    cols: int | None,
    load_path: str | None,
    project_dir: str | None,
) -> None:
    """Interactive command loop.  Type 'help' for commands."""
    config = _setup(project_dir)
    separator = config["csv_separator"]
    sheet = _new_sheet(
        rows if rows is not None else config["rows"],
        cols if cols is not None else config["cols"],
    )
    emit_info(
        EventType.session_started,
        "REPL started",
        {"rows": sheet.rows, "cols": sheet.cols},
    )
    if load_path:
        _load_csv(sheet, load_path, separator)

    stdin = click.get_text_stream("stdin")
    while True:
        click.echo("> ", nl=False)
        line = stdin.readline()
        if not line:
            click.echo()
            break
        if not run_command(sheet, line, separator=separator):
            break


def run_command(sheet: Spreadsheet, line: str, separator: str = ",") -> bool:
    """Execute one REPL command line; return False to stop the loop."""
    from gridcalc.csv_io import read_csv, save_csv

    parts = line.strip().split(maxsplit=2)
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]

    try:
        if cmd in ("quit", "exit"):
            return False
        if cmd == "help":
            click.echo(REPL_HELP)
        elif cmd == "show":
            click.echo(str(sheet))
        elif cmd == "put" and args:
            sheet.put(args[0], args[1] if len(args) > 1 else "")
            click.echo(f"{args[0].upper()} = {sheet.get(args[0])}")
        elif cmd == "get" and len(args) == 1:
            click.echo(sheet.get(args[0]))
        elif cmd == "src" and len(args) == 1:
            click.echo(sheet.formula_source(args[0]))
        elif cmd == "save" and len(args) == 1:
            save_csv(sheet, args[0], separator=separator)
            click.echo(f"Saved to {args[0]}")
        elif cmd == "load" and args:
            start = args[1] if len(args) > 1 else "A1"
            count = read_csv(sheet, args[0], separator=separator, start=start)
            click.echo(f"Loaded {count} cells from {args[0]}")
        else:
            click.echo(f"error: unknown command {line.strip()!r} (try 'help')")
    except InvalidAddressError as e:
        click.echo(f"error: {e}")
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        click.echo(f"error: {e}")
    return True


if __name__ == "__main__":
    main()
