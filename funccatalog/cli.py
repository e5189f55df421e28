"""
funccatalog CLI - Function Catalog Builder and Tokenizer Demo

Two independent commands:
1. catalog: reflect allow-listed functions of a module and print them as JSON
2. tokens: tokenize a source string and dump the token stream
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich import print as rprint

from funccatalog import __version__
from funccatalog.catalog import CatalogBuilder, load_module_from_file
from funccatalog.config import CatalogSettings
from funccatalog.tokens import DEMO_SOURCE, render_tokens, tokenize_source

app = typer.Typer(
    name="funccatalog",
    help="Function catalog builder and tokenizer demo",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Log debug output to stderr",
    ),
):
    """Function catalog builder and tokenizer demo."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr,
        )


@app.command()
def catalog(
    module: Optional[str] = typer.Option(
        None,
        "--module",
        "-m",
        help="Import path of the module to catalog (default: funccatalog.sample_functions)",
    ),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Path to a .py file to catalog instead of an importable module",
    ),
    allow: Optional[List[str]] = typer.Option(
        None,
        "--allow",
        "-a",
        help="Allowed function name, repeatable (default: add, multiply)",
    ),
    indent: Optional[int] = typer.Option(None, "--indent", help="JSON indentation (default: 4)"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON to this file",
    ),
):
    """
    Print a JSON catalog of the allow-listed functions of a module.

    Each record has the function name, return type, parameters
    (name, type, default) and exact source text.

    Example:
        funccatalog catalog --file ./functions.py --allow add --allow multiply
    """
    if module and file:
        err_console.print("[red]❌ Error: Cannot specify both --module and --file[/red]")
        raise typer.Exit(1)

    try:
        settings = CatalogSettings.from_env(allow_list=allow or None, indent=indent, module=module)
        builder = CatalogBuilder(settings)
        target = load_module_from_file(file) if file else None
        text = builder.to_json(builder.build(target))
    except Exception as e:
        err_console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    typer.echo(text)

    if output:
        output.write_text(text + "\n", encoding="utf-8")
        err_console.print(f"[bold green]✅ Catalog saved to:[/bold green] [cyan]{escape(str(output))}[/cyan]")


@app.command()
def tokens(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help=f"Source text to tokenize (default: {DEMO_SOURCE!r})",
    ),
    table: bool = typer.Option(False, "--table", "-t", help="Render a table with token positions"),
    no_whitespace: bool = typer.Option(
        False,
        "--no-whitespace",
        help="Drop WHITESPACE tokens",
    ),
):
    """
    Dump the token stream of a source string.

    Multi-character tokens print as "CATEGORY : text", single-character
    operators as the bare character.
    """
    try:
        records = tokenize_source(
            DEMO_SOURCE if source is None else source,
            include_whitespace=not no_whitespace,
        )
    except Exception as e:
        err_console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not table:
        rprint(render_tokens(records))
        return

    token_table = Table(title="Tokens")
    token_table.add_column("#", justify="right", style="dim")
    token_table.add_column("Category", style="cyan")
    token_table.add_column("Text", style="yellow")
    token_table.add_column("Start", justify="right")
    token_table.add_column("End", justify="right")

    for i, record in enumerate(records):
        token_table.add_row(
            str(i),
            record.category,
            Text(repr(record.text)),
            "{}:{}".format(*record.start),
            "{}:{}".format(*record.end),
        )

    console.print(token_table)


@app.command()
def version():
    """Show the version of funccatalog."""
    console.print(f"[bold cyan]funccatalog[/bold cyan] v{__version__}")
    console.print("Function Catalog Builder and Tokenizer Demo")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
