"""CLI entry point."""

from __future__ import annotations

# CA bundle must be set before any HTTP library loads
import os

import certifi

os.environ.setdefault("SSL_CERT_FILE", certifi.where())

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from doi_finder.config import DEFAULT_SETTINGS_PATH, load_settings, validate_secret_env
from doi_finder.display.render import EXAMPLE_CITATION, render_history, render_view
from doi_finder.models import OrchestratorState, ResolutionStatus, SettingsConfig
from doi_finder.orchestration import ResolutionOrchestrator, is_submittable, project
from doi_finder.utils import structured_log
from doi_finder.utils.ids import new_id
from doi_finder.utils.logging_config import LogLevel, setup_logging

logger = logging.getLogger(__name__)

_QUIT_COMMANDS = {":quit", ":q", "quit", "exit"}

_INTERACTIVE_HELP = (
    "Paste a citation and press Enter to find its DOI.\n"
    "Commands: [cyan]:history[/cyan] list past searches, [cyan]:use N[/cyan] load entry N, "
    "[cyan]:again[/cyan] search the loaded text, [cyan]:example[/cyan] load a sample citation, "
    "[cyan]:quit[/cyan] exit."
)


class _HelpfulParser(argparse.ArgumentParser):
    """Parser that points at the resolve subcommand when a bare citation is passed."""

    def error(self, message: str) -> None:
        if "invalid choice" in message:
            sys.stderr.write(f"doi-finder: {message}\n")
            sys.stderr.write(
                '\nHint: quote the citation and pass it to the resolve subcommand.\n'
                'Use: doi-finder resolve "Smith, J. (2020). Title. Journal, 1(1), 1-10."\n'
            )
            sys.exit(2)
        super().error(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _HelpfulParser(prog="doi-finder")
    sub = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--settings", default=DEFAULT_SETTINGS_PATH)
    common.add_argument("--verbose", "-v", action="store_true", help="Log submissions, timings and sources")
    common.add_argument("--debug", "-d", action="store_true", help="Verbose plus module/line context")
    common.add_argument("--log-dir", default=None, help="Write a structured session.jsonl audit trail here")

    resolve = sub.add_parser("resolve", parents=[common], help="Resolve one citation and exit")
    resolve.add_argument("citation", nargs="+", help="Citation text (quote it)")
    resolve.add_argument("--raw", action="store_true", help="Also print the model's full answer")

    interactive = sub.add_parser("interactive", parents=[common], help="Resolve citations in a session")
    interactive.add_argument("--raw", action="store_true", help="Also print the model's full answer")

    return parser


def _load_settings(path: str) -> SettingsConfig:
    """Explicit paths must exist; the default path falls back to built-in defaults."""
    if path == DEFAULT_SETTINGS_PATH and not Path(path).exists():
        return load_settings(None)
    return load_settings(path)


def _configure_logging(settings: SettingsConfig, args: argparse.Namespace) -> None:
    setup_logging(
        level=LogLevel(settings.logging.level),
        log_to_file=settings.logging.log_to_file,
        log_file=settings.logging.log_file,
        verbose=args.verbose,
        debug=args.debug,
    )
    jsonl_dir = args.log_dir or settings.logging.jsonl_dir
    if jsonl_dir:
        path = structured_log.configure_session_logging(jsonl_dir)
        structured_log.bind_session(new_id())
        logger.debug("Structured session log at %s", path)


def _attach_renderer(
    orchestrator: ResolutionOrchestrator, console: Console, show_raw: bool
) -> None:
    def _on_change(state: OrchestratorState) -> None:
        render_view(console, project(state), show_raw=show_raw)

    orchestrator.add_listener(_on_change)


async def _resolve_once(orchestrator: ResolutionOrchestrator, citation: str) -> OrchestratorState:
    orchestrator.set_input(citation)
    orchestrator.submit_pending()
    return await orchestrator.wait_until_settled()


async def _interactive(orchestrator: ResolutionOrchestrator, console: Console) -> None:
    console.print(_INTERACTIVE_HELP)
    while True:
        try:
            line = (await asyncio.to_thread(console.input, "[bold]> [/bold]")).strip()
        except (EOFError, KeyboardInterrupt):
            logger.info("Input closed; ending session.")
            break

        if not line:
            continue
        if line.lower() in _QUIT_COMMANDS:
            break
        if line == ":history":
            render_history(console, orchestrator.history.entries())
            continue
        if line.startswith(":use"):
            _use_history_entry(orchestrator, console, line)
            continue
        if line == ":example":
            orchestrator.set_input(EXAMPLE_CITATION)
            console.print(f"[dim]Loaded:[/dim] {escape(EXAMPLE_CITATION)}\nType [cyan]:again[/cyan] to search it.")
            continue
        if line == ":again":
            if orchestrator.submit_pending() is None:
                console.print("[yellow]Nothing to search.[/yellow] Paste a citation first.")
            await orchestrator.wait_until_settled()
            continue
        if line.startswith(":"):
            console.print(f"[yellow]Unknown command:[/yellow] {escape(line)}")
            continue

        orchestrator.set_input(line)
        orchestrator.submit_pending()
        await orchestrator.wait_until_settled()

    console.print("Goodbye!")


def _use_history_entry(orchestrator: ResolutionOrchestrator, console: Console, line: str) -> None:
    parts = line.split()
    entries = orchestrator.history.entries()
    try:
        index = int(parts[1]) - 1
        if index < 0:
            raise IndexError(index)
        entry = entries[index]
    except (IndexError, ValueError):
        if entries:
            console.print(f"[yellow]Usage:[/yellow] :use N  (1-{len(entries)})")
        else:
            console.print("[dim]History is empty.[/dim]")
        return
    orchestrator.select_history(entry)
    console.print(f"[dim]Loaded:[/dim] {escape(orchestrator.pending_input)}\nType [cyan]:again[/cyan] to search it.")


def main(argv: Sequence[str] | None = None) -> int:
    console = Console()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = _load_settings(args.settings)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        return 1
    _configure_logging(settings, args)

    if args.command == "resolve":
        citation = " ".join(args.citation)
        if not is_submittable(citation):
            console.print("[red]Error:[/] citation text is empty.")
            return 2

    missing = validate_secret_env()
    if missing:
        console.print(f"[red]Error:[/] missing environment variables: {', '.join(missing)}")
        return 1

    orchestrator = ResolutionOrchestrator.from_settings(settings)
    _attach_renderer(orchestrator, console, show_raw=args.raw)

    if args.command == "resolve":
        state = asyncio.run(_resolve_once(orchestrator, citation))
        return 0 if state.status is ResolutionStatus.SUCCEEDED else 1

    if args.command == "interactive":
        try:
            asyncio.run(_interactive(orchestrator, console))
        except KeyboardInterrupt:
            console.print("\nGoodbye!")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
