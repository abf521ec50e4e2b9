"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from epub_reader.commands.extract import (
    display_book_info,
    display_chapters,
    execute_extract,
)
from epub_reader.core.epub_parser import load_path
from epub_reader.errors import LoadError

app = typer.Typer(
    name="epub-reader",
    help="Read EPUB files as plain text: metadata, cover and chapters.",
    add_completion=False,
)

console = Console()

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log pipeline details to stderr",
        ),
    ] = False,
) -> None:
    """Read EPUB files as plain text: metadata, cover and chapters."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def info(book_path: BookPath) -> None:
    """Display book metadata and the chapter list."""
    try:
        book = load_path(book_path)
    except LoadError as e:
        console.print(f"[red]Invalid EPUB: {e.message}[/]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error reading file: {e}[/]")
        raise typer.Exit(1)

    console.print()
    display_book_info(book, console, title="Book Information")
    console.print()
    display_chapters(book.chapters, console)
    console.print()


@app.command()
def read(
    book_path: BookPath,
    chapter: Annotated[
        int,
        typer.Option(
            "--chapter",
            "-c",
            help="Chapter number to print (1-based)",
            min=1,
        ),
    ] = 1,
) -> None:
    """Print one chapter as plain text."""
    try:
        book = load_path(book_path)
    except LoadError as e:
        console.print(f"[red]Invalid EPUB: {e.message}[/]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error reading file: {e}[/]")
        raise typer.Exit(1)

    if chapter > len(book.chapters):
        console.print(
            f"[red]Chapter {chapter} out of range (book has {len(book.chapters)})[/]"
        )
        raise typer.Exit(1)

    selected = book.chapters[chapter - 1]
    console.print(
        Panel(
            Text(selected.content),
            title=Text(selected.title, style="bold"),
            subtitle=f"{chapter} / {len(book.chapters)}",
            border_style="blue",
        )
    )


@app.command()
def extract(
    book_path: BookPath,
    sections: Annotated[
        Optional[str],
        typer.Option(
            "--sections",
            "-s",
            help="Chapters to extract by index: '1,3,5-7' or 'all' (use 'epub-reader info' to see indices)",
        ),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive",
            "-i",
            help="Interactive mode: display chapters and select",
        ),
    ] = False,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Output directory (default: {book_name}_chapters/)",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: text or json",
        ),
    ] = "text",
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-w",
            help="Chapters to convert in parallel",
            min=1,
        ),
    ] = 1,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output",
        ),
    ] = False,
) -> None:
    """Extract chapters to plain text or JSON files."""
    if output_format not in ("text", "json"):
        console.print(f"[red]Invalid format: {output_format}. Use text or json.[/]")
        raise typer.Exit(1)

    try:
        execute_extract(
            book_path=book_path,
            chapters=sections,
            interactive=interactive,
            output_dir=output_dir,
            output_format=output_format,  # type: ignore
            quiet=quiet,
            console=console,
            workers=workers,
        )
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@app.command()
def cover(
    book_path: BookPath,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Where to save the cover (default: {book_name}_cover.jpg/.png)",
        ),
    ] = None,
    data_uri: Annotated[
        bool,
        typer.Option(
            "--data-uri",
            help="Print the cover as a data: URI instead of saving it",
        ),
    ] = False,
) -> None:
    """Save the cover image."""
    try:
        book = load_path(book_path)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    image = book.metadata.cover_image
    if image is None:
        console.print("[yellow]No cover image found[/]")
        raise typer.Exit(1)

    if data_uri:
        typer.echo(image.data_uri)
        return

    suffix = ".jpg" if image.media_type == "image/jpeg" else ".png"
    target = output or book_path.with_name(f"{book_path.stem}_cover{suffix}")
    target.write_bytes(image.data)
    console.print(f"[green]Saved cover to {target}[/]")


if __name__ == "__main__":
    app()
