"""Command-line interface for lazy-latex.

Usage:
    lazy-latex convert notes.tex               # print the converted document
    lazy-latex convert notes.md --in-place     # rewrite the file
    lazy-latex line notes.tex 12               # convert markers on line 12 only
    lazy-latex selection "x squared over 2"    # print LaTeX for a snippet
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from lazylatex import __version__, _setup_logging
from lazylatex.config import get_settings
from lazylatex.editor.memory import InMemoryDocument, InMemoryEditor
from lazylatex.editor.notify import ConsoleNotifier
from lazylatex.errors import ConfigurationError, friendly_error_message
from lazylatex.handlers import UNSUPPORTED_KIND_MESSAGE, LazyLatexController
from lazylatex.models.document import DocumentKind, Selection

if TYPE_CHECKING:
    from lazylatex.config import Settings

console = Console(stderr=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazy-latex",
        description="Convert ;;markers;; in LaTeX/Markdown files with an LLM.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--provider",
        choices=["openai", "anthropic", "mock"],
        help="Override LLM__PROVIDER for this run.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Convert every marker in a file.")
    convert.add_argument("path", type=Path)
    convert.add_argument(
        "-i", "--in-place", action="store_true", help="Write the result back."
    )
    convert.add_argument(
        "--max-passes", type=int, help="Override CONVERSION__MAX_PASSES."
    )

    line = sub.add_parser("line", help="Convert the markers on one line.")
    line.add_argument("path", type=Path)
    line.add_argument("line", type=int, help="1-based line number.")
    line.add_argument(
        "-i", "--in-place", action="store_true", help="Write the result back."
    )

    selection = sub.add_parser("selection", help="Print LaTeX for a math snippet.")
    selection.add_argument("text")

    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line overrides applied."""
    if args.provider:
        llm = settings.llm.model_copy(update={"provider": args.provider})
        settings = settings.model_copy(update={"llm": llm})
    max_passes = getattr(args, "max_passes", None)
    if max_passes is not None:
        if max_passes < 1:
            msg = "--max-passes must be at least 1"
            raise ConfigurationError(msg)
        conversion = settings.conversion.model_copy(update={"max_passes": max_passes})
        settings = settings.model_copy(update={"conversion": conversion})
    return settings


def _load_document(path: Path) -> InMemoryDocument | None:
    """Read a LaTeX or Markdown file; report and return None otherwise."""
    if not path.is_file():
        console.print(f"[red]Error:[/] {path} is not a file")
        return None
    document = InMemoryDocument.from_path(path)
    if not document.kind.is_supported:
        console.print(f"[red]Error:[/] {UNSUPPORTED_KIND_MESSAGE}")
        return None
    return document


async def _finish(
    document: InMemoryDocument, *, in_place: bool, changed: bool
) -> None:
    if in_place:
        if changed:
            await document.save()
            console.print(f"[green]Wrote[/] {document.path}")
    else:
        print(document.text, end="")


async def _dispatch(
    args: argparse.Namespace, editor: InMemoryEditor, controller: LazyLatexController
) -> int:
    if args.command == "convert":
        document = _load_document(args.path)
        if document is None:
            return 1
        editor.active_document = document
        outcome = await controller.convert_document(document)
        console.print(
            f"Converted {len(outcome.lines_converted)} line(s) "
            f"in {outcome.passes} pass(es)."
        )
        if outcome.hit_pass_limit:
            console.print("[yellow]Stopped at the pass limit.[/]")
        await _finish(document, in_place=args.in_place, changed=outcome.converted)
        return 1 if outcome.errors else 0

    if args.command == "line":
        document = _load_document(args.path)
        if document is None:
            return 1
        if not 1 <= args.line <= document.line_count:
            console.print(f"[red]Error:[/] line {args.line} is out of range")
            return 1
        editor.active_document = document
        editor.selection = Selection.cursor(args.line - 1)
        result = await controller.convert_current_line()
        changed = result is not None and result.applied
        await _finish(document, in_place=args.in_place, changed=changed)
        return 1 if result is not None and result.errors else 0

    # selection: the whole snippet is the selection
    document = InMemoryDocument(args.text, kind=DocumentKind.LATEX)
    editor.active_document = document
    last = document.line_count - 1
    editor.selection = Selection(0, 0, last, len(document.line_at(last)))
    latex = await controller.convert_selection()
    if latex is None:
        return 1
    print(latex)
    return 0


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    editor = InMemoryEditor()
    controller = LazyLatexController(editor, ConsoleNotifier(console), settings)
    try:
        return await _dispatch(args, editor, controller)
    finally:
        await controller.aclose()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    _setup_logging(
        settings.app.log_dir if settings.app.file_logging else None,
        verbose=args.verbose,
    )

    try:
        settings = _apply_overrides(settings, args)
        status = asyncio.run(_run(args, settings))
    except ConfigurationError as exc:
        console.print(f"[red]{escape(friendly_error_message(exc))}[/]", highlight=False)
        sys.exit(1)

    sys.exit(status)
