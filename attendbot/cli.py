"""CLI commands for the attendbot assistant.

Provides subcommands that drive a chat session over a directory seed file.

Commands:
    attendbot chat      - Interactive chat with the portal assistant
    attendbot ask       - Answer a single query and exit
    attendbot directory - Show what the seed file contains
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from .config import AppConfig
from .core.directory import Directory, load_directory
from .core.intent import IntentResolver, Portal
from .core.session import ChatMessage, ChatSession, format_message_time

console = Console()

EXIT_WORDS = {"quit", "exit", "bye"}


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply command-line overrides."""
    config = AppConfig.load(Path(args.project_path).resolve())
    if getattr(args, "portal", None):
        config.portal = args.portal
    if getattr(args, "data", None):
        config.data_file = Path(args.data)
    if getattr(args, "hod_id", None):
        config.hod_id = args.hod_id
    if getattr(args, "faculty_id", None):
        config.faculty_id = args.faculty_id
    if getattr(args, "mask_credentials", False):
        config.resolver.expose_credentials = False
    return config


def build_session(config: AppConfig, usn: str | None = None) -> ChatSession:
    """Create a chat session from configuration.

    Raises:
        SeedFileError: If the configured seed file is invalid
    """
    directory = load_directory(config.data_file) if config.data_file else Directory()
    resolver = IntentResolver(portal=config.portal, settings=config.resolver)
    return ChatSession(
        resolver,
        directory,
        hod_id=config.hod_id,
        usn=usn,
        faculty_id=config.faculty_id,
    )


def print_message(message: ChatMessage) -> None:
    """Render one transcript entry."""
    stamp = format_message_time(message.timestamp)
    if message.is_user:
        console.print(f"[dim]{stamp}[/dim] [bold cyan]You:[/bold cyan] {message.content}")
        return

    console.print(f"[dim]{stamp}[/dim] [bold green]Assistant:[/bold green]")
    console.print(Markdown(message.content))
    if message.quick_replies:
        replies = "  ".join(f"[{r.text}]" for r in message.quick_replies)
        console.print(f"[dim]Suggestions: {replies}[/dim]")


async def _chat_loop(session: ChatSession) -> None:
    for message in session.messages:
        print_message(message)

    actions = ", ".join(session.quick_actions)
    console.print(f"[dim]Quick actions: {actions}. Type 'quit' to leave.[/dim]")

    while True:
        text = console.input("[bold cyan]> [/bold cyan]").strip()
        if text.lower() in EXIT_WORDS:
            break
        if text in session.quick_actions:
            reply = await session.quick_action(text)
        else:
            reply = await session.submit(text)
        if reply is not None:
            print_message(reply)


def run_chat(args: argparse.Namespace) -> int:
    """Run an interactive chat session.

    Args:
        args: Parsed arguments (portal, data, hod_id, usn, faculty_id)

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    session = build_session(config, usn=args.usn)
    try:
        asyncio.run(_chat_loop(session))
    except EOFError:
        console.print()
    return 0


def run_ask(args: argparse.Namespace) -> int:
    """Answer one query.

    Args:
        args: Parsed arguments (query, portal, data, hod_id, usn, faculty_id)

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    session = build_session(config, usn=args.usn)
    reply = asyncio.run(session.submit(" ".join(args.query)))
    if reply is None:
        console.print("[yellow]Nothing to ask.[/yellow]")
        return 0
    console.print(Markdown(reply.content))
    return 0


def show_directory(args: argparse.Namespace) -> int:
    """Show the faculty and subjects in the seed file.

    Args:
        args: Parsed arguments (data, hod_id)

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    if not config.data_file:
        console.print("[yellow]No seed file given.[/yellow] Use --data or ATTENDBOT_DATA_FILE.")
        return 0

    directory = load_directory(config.data_file)

    async def _read() -> tuple[list, list]:
        return (
            await directory.faculty.list(config.hod_id),
            await directory.subjects.list(config.hod_id),
        )

    faculty, subjects = asyncio.run(_read())

    table = Table(title="Faculty")
    table.add_column("Faculty ID", style="cyan")
    table.add_column("Name")
    table.add_column("Email", style="dim")
    table.add_column("Subjects", justify="right")
    for record in faculty:
        table.add_row(
            record.faculty_id, record.name, record.email, str(len(record.assigned_subjects))
        )
    console.print(table)

    table = Table(title="Subjects")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Sem", justify="right")
    table.add_column("Credits", justify="right")
    table.add_column("Faculty", style="dim")
    for subject in subjects:
        table.add_row(
            subject.code,
            subject.name,
            str(subject.semester),
            str(subject.credits),
            subject.faculty_name or "-",
        )
    console.print(table)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="attendbot",
        description="attendbot: Smart Attendance chat assistant",
    )
    parser.add_argument(
        "--project",
        "-p",
        dest="project_path",
        default=".",
        help="Directory holding .attendbot/config.yaml (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_session_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--portal",
            choices=[portal.value for portal in Portal],
            help="Assistant to talk to (default: from config, else hod)",
        )
        p.add_argument(
            "--data",
            "-d",
            help="Directory seed file (YAML)",
        )
        p.add_argument(
            "--hod-id",
            help="Only include faculty and subjects of this HOD",
        )
        p.add_argument(
            "--usn",
            help="Signed-in student USN (student portal)",
        )
        p.add_argument(
            "--faculty-id",
            help="Signed-in faculty ID (faculty portal)",
        )
        p.add_argument(
            "--mask-credentials",
            action="store_true",
            help="Mask passwords in credential answers",
        )

    chat_parser = subparsers.add_parser("chat", help="Interactive chat session")
    add_session_args(chat_parser)
    chat_parser.set_defaults(func=run_chat)

    ask_parser = subparsers.add_parser("ask", help="Answer a single query")
    ask_parser.add_argument("query", nargs="+", help="Question to ask")
    add_session_args(ask_parser)
    ask_parser.set_defaults(func=run_ask)

    directory_parser = subparsers.add_parser("directory", help="Show the seed directory")
    directory_parser.add_argument("--data", "-d", help="Directory seed file (YAML)")
    directory_parser.add_argument("--hod-id", help="Only include this HOD's records")
    directory_parser.set_defaults(func=show_directory)

    return parser


def run_cli(args: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    try:
        return parsed.func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


__all__ = [
    "build_session",
    "create_parser",
    "load_config",
    "run_ask",
    "run_chat",
    "run_cli",
    "show_directory",
]
