import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from decouple import config as env_config
from rich.console import Console

from . import __version__
from .models import NameMode, ParseResult
from .parsing import InteractionParser, find_interactions

app = typer.Typer(help="askdown: parse ?[...] interaction blocks")

logger = logging.getLogger(__name__)

QUIT_WORDS = {"q", "quit", "exit"}


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def setup_logging(verbosity: int):
    """Set up logging based on verbosity level.

    Levels:
        0 (no -v): ASKDOWN_LOG_LEVEL, WARNING unless set
        1 (-v): INFO logs
        2+ (-vv): DEBUG logs
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = env_config("ASKDOWN_LOG_LEVEL", default="WARNING").upper()

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase log output (-v, -vv)"
    ),
):
    """askdown: parse ?[...] interaction blocks"""
    setup_logging(verbose)


def format_result(result: ParseResult) -> str:
    """Human-readable summary of a parse result."""
    if result.is_error:
        return f"Error: {result.message}"

    lines = [f"Type: {result.type.value}"]
    variable = getattr(result, "variable", None)
    if variable:
        lines.append(f"  Variable: {variable}")
    buttons = getattr(result, "buttons", None)
    if buttons:
        lines.append(f"  Buttons: [{', '.join(str(b) for b in buttons)}]")
    question = getattr(result, "question", None)
    if question is not None:
        lines.append(f'  Question: "{question}"')
    is_multi = getattr(result, "is_multi_select", None)
    if is_multi is not None:
        lines.append(f"  Multi-select: {'Yes' if is_multi else 'No'}")
    return "\n".join(lines)


def _render(parser: InteractionParser, block: str, as_json: bool, remark: bool) -> str:
    if remark:
        return json.dumps(
            parser.parse_to_remark_format(block).to_dict(), ensure_ascii=False
        )
    result = parser.parse(block)
    if as_json:
        return json.dumps(result.model_dump(mode="json"), ensure_ascii=False)
    return format_result(result)


@app.command()
def parse(
    blocks: List[str] = typer.Argument(..., help="Blocks to parse, e.g. '?[A | B]'"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    remark: bool = typer.Option(
        False, "--remark", help="Print the flattened renderer properties as JSON"
    ),
    names: Optional[NameMode] = typer.Option(
        None, "--names", help="Variable name rules (default: ASKDOWN_VARIABLE_NAMES)"
    ),
):
    """Parse one or more interaction blocks.

    Examples:
        askdown parse '?[%{{color}} Red//r | Blue//b]'
        askdown parse --remark '?[Continue]'
    """
    parser = InteractionParser(names)
    for block in blocks:
        typer.echo(_render(parser, block, as_json, remark))


@app.command()
def scan(
    text_file: Path = typer.Argument(..., help="Markdown or text file to scan"),
    names: Optional[NameMode] = typer.Option(
        None, "--names", help="Variable name rules (default: ASKDOWN_VARIABLE_NAMES)"
    ),
):
    """List every interaction block in a file as JSON lines.

    Each line holds the 1-based line number, the block text and the renderer
    properties. Blocks that fail to parse are left out.
    """
    console = Console(stderr=True)

    if not text_file.exists():
        console.print(f"[red]Error: {text_file} not found[/red]")
        raise typer.Exit(1)

    text = text_file.read_text(encoding="utf-8")
    matches = find_interactions(text, names)
    logger.info(f"Found {len(matches)} interaction blocks in {text_file}")

    for match in matches:
        record = {
            "line": text.count("\n", 0, match.start) + 1,
            "block": text[match.start : match.end],
            "properties": match.remark_properties(),
        }
        typer.echo(json.dumps(record, ensure_ascii=False))


@app.command(name="try")
def try_blocks(
    names: Optional[NameMode] = typer.Option(
        None, "--names", help="Variable name rules (default: ASKDOWN_VARIABLE_NAMES)"
    ),
):
    """Interactively parse blocks typed at the prompt.

    Enter 'q', 'quit' or 'exit' to stop.
    """
    console = Console()
    parser = InteractionParser(names)
    console.print("[cyan]Enter a ?[...] block to parse, or 'q' to quit[/cyan]")

    while True:
        try:
            block = typer.prompt("block", prompt_suffix="> ").strip()
        except typer.Abort:
            break
        if block.lower() in QUIT_WORDS:
            break
        if not block:
            continue
        console.print(format_result(parser.parse(block)), markup=False, soft_wrap=True)
        remark = parser.parse_to_remark_format(block).to_dict()
        console.print(json.dumps(remark, ensure_ascii=False), markup=False, soft_wrap=True)


if __name__ == "__main__":
    app()
