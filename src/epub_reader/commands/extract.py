"""Extract command implementation."""

import re
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from epub_reader.core.epub_parser import load_path
from epub_reader.core.output_writer import OutputWriter, get_stats
from epub_reader.models.book import Chapter, LoadedBook


def parse_chapter_selection(selection: str, total_chapters: int) -> list[int]:
    """Parse user chapter selection string to list of indices.

    Supports: "1,3,5-7", "all", "1-10", etc.
    Returns 0-based indices.
    """
    selection = selection.strip().lower()

    if selection == "all":
        return list(range(total_chapters))

    indices = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue

        if "-" in part:
            match = re.match(r"(\d+)\s*-\s*(\d+)", part)
            if match:
                start, end = int(match.group(1)), int(match.group(2))
                indices.update(range(start - 1, end))  # Convert to 0-based
        else:
            try:
                indices.add(int(part) - 1)  # Convert to 0-based
            except ValueError:
                continue

    # Filter valid indices
    return sorted(i for i in indices if 0 <= i < total_chapters)


def display_chapters(chapters: list[Chapter], console: Console) -> None:
    """Display the chapter list."""
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Words", justify="right", style="green")

    for chapter in chapters:
        words = get_stats(chapter.content)["word_count"]
        table.add_row(str(chapter.index + 1), chapter.title, f"{words:,}")

    console.print(table)


def display_book_info(book: LoadedBook, console: Console, title: str) -> None:
    """Display metadata panel."""
    cover = book.metadata.cover_image
    info_lines = [
        f"[bold]{book.metadata.title}[/]",
        f"[dim]Author:[/] {book.metadata.author}",
        f"[dim]Chapters:[/] {len(book.chapters)}",
        f"[dim]Cover:[/] "
        + (f"{cover.media_type}, {len(cover.data):,} bytes" if cover else "none"),
    ]

    if book.warnings:
        info_lines.append("")
        for warning in book.warnings:
            info_lines.append(f"[yellow]! {warning}[/]")

    console.print(Panel("\n".join(info_lines), title=title, border_style="green"))


def interactive_select(chapters: list[Chapter], console: Console) -> list[int]:
    """Interactively select chapters."""
    console.print()
    console.print(
        Panel(
            "[bold]Select chapters to extract:[/]\n"
            "  - Enter chapter numbers (e.g., [cyan]1,3,5-7[/])\n"
            "  - Enter [cyan]all[/] for all chapters\n"
            "  - Enter [cyan]q[/] to quit",
            title="Selection",
            border_style="blue",
        )
    )
    console.print()

    while True:
        selection = Prompt.ask("Your selection", console=console)

        if selection.lower() == "q":
            return []

        indices = parse_chapter_selection(selection, len(chapters))

        if indices:
            console.print(f"\n[green]Selected {len(indices)} chapter(s)[/]")
            return indices
        else:
            console.print("[red]Invalid selection. Please try again.[/]")


def get_default_output_dir(book_path: Path) -> Path:
    """Get default output directory based on book filename."""
    stem = book_path.stem
    # Clean up the filename for directory name
    clean_stem = re.sub(r"[^\w\s-]", "", stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem)
    return book_path.parent / f"{clean_stem}_chapters"


def execute_extract(
    book_path: Path,
    chapters: str | None,
    interactive: bool,
    output_dir: Path | None,
    output_format: Literal["text", "json"],
    quiet: bool,
    console: Console,
    workers: int = 1,
) -> None:
    """Execute the extract command."""
    if not quiet:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Loading EPUB...", total=None)
            book = load_path(book_path, workers=workers)
    else:
        book = load_path(book_path, workers=workers)

    if not quiet:
        console.print()
        display_book_info(book, console, title="Book Info")
        console.print()

    # Determine which chapters to extract
    if interactive or chapters is None:
        if not quiet:
            display_chapters(book.chapters, console)
        selected_indices = interactive_select(book.chapters, console)
    else:
        selected_indices = parse_chapter_selection(chapters, len(book.chapters))

    if not selected_indices:
        console.print("[yellow]No chapters selected. Exiting.[/]")
        return

    final_output_dir = output_dir or get_default_output_dir(book_path)

    writer = OutputWriter(final_output_dir, book_path)
    chapter_metadata = []

    if not quiet:
        console.print()
        with Progress(console=console) as progress:
            task = progress.add_task(
                "Extracting chapters...", total=len(selected_indices)
            )

            for idx in selected_indices:
                chapter = book.chapters[idx]
                _, metadata = writer.write_chapter(chapter, output_format)
                chapter_metadata.append(metadata)
                progress.update(
                    task, advance=1, description=f"Extracting: {chapter.title[:40]}..."
                )
    else:
        for idx in selected_indices:
            chapter = book.chapters[idx]
            _, metadata = writer.write_chapter(chapter, output_format)
            chapter_metadata.append(metadata)

    cover_path = None
    if book.metadata.cover_image is not None:
        cover_path = writer.write_cover(book.metadata.cover_image)

    manifest_path = writer.write_manifest(
        book, selected_indices, chapter_metadata, cover_path
    )

    if not quiet:
        console.print()

        summary_lines = [
            f"[green]Successfully extracted {len(selected_indices)} chapter(s)[/]",
            "",
            f"[dim]Output directory:[/] {final_output_dir}",
            f"[dim]Manifest:[/] {manifest_path.name}",
        ]
        if cover_path is not None:
            summary_lines.append(f"[dim]Cover:[/] {cover_path.name}")

        console.print(
            Panel(
                "\n".join(summary_lines),
                title="Complete",
                border_style="green",
            )
        )
