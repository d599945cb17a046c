#!/usr/bin/env python3
"""
MeghAIna - Script Engine
========================

Main entry point for the MeghScript interpreter.

Usage:
    python main.py                         # Interactive text mode
    python main.py "play lofi beats"       # Run one input and exit
    python main.py '{"plan": [{"do": "get_notes"}]}'
    python main.py --serve                 # Local HTTP service bus
    python main.py --help                  # Show help
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape
from rich.text import Text

from core import AppContext, EntryStatus, ExecutionReport, build_context
from infra import ConfigError, configure_logging, load_config


console = Console()

STATUS_STYLES = {
    EntryStatus.OK: "green",
    EntryStatus.NO_HANDLER: "yellow",
    EntryStatus.ERROR: "red",
    EntryStatus.NO_INPUT: "dim",
    EntryStatus.MALFORMED: "red",
}


def print_banner() -> None:
    """Print the MeghAIna banner."""
    banner = Text()
    banner.append("MeghAIna", style="bold cyan")
    banner.append(" - MeghScript Engine\n\n", style="dim")
    banner.append("Type a command or a JSON plan. ", style="dim")
    banner.append("help", style="bold green")
    banner.append(" for commands, ", style="dim")
    banner.append("quit", style="bold red")
    banner.append(" to exit", style="dim")

    console.print(Panel(banner, title="Welcome", border_style="blue"))


def print_report(report: ExecutionReport) -> None:
    """Print each entry of a report in plan order."""
    for entry in report:
        console.print(entry.text, style=STATUS_STYLES.get(entry.status), markup=False)


def print_skills(context: AppContext) -> None:
    """Print registered skills and their verbs."""
    table = Table(title="Skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Verbs")

    owned = context.registry.verbs()
    for skill in context.registry.list_skills():
        verbs = sorted(v for v, owner in owned.items() if owner == skill.name)
        table.add_row(skill.name, ", ".join(verbs))

    console.print(table)


def print_suggestion(context: AppContext) -> Optional[str]:
    """Show the smart suggestion, if there is one."""
    shortcut = context.usage.recommend_shortcut()
    if shortcut:
        console.print(f"[bold magenta]✨ Smart suggestion:[/bold magenta] {escape(shortcut)}  [dim](type 'again' to run it)[/dim]")
    return shortcut


def run_once(context: AppContext, text: str) -> int:
    """Run one input; exit code 1 if any entry failed."""
    report = asyncio.run(context.submit(text))
    print_report(report)
    return 0 if report.ok else 1


def run_text_mode(context: AppContext) -> None:
    """Run in interactive text mode."""
    print_banner()
    print_suggestion(context)

    while True:
        try:
            text = console.input("\n[bold cyan]>[/bold cyan] ")
        except (KeyboardInterrupt, EOFError):
            break

        command = text.strip().lower()

        if command in ("quit", "exit", "q"):
            break

        if command == "skills":
            print_skills(context)
            continue

        if command == "suggest":
            if not print_suggestion(context):
                console.print("[dim]No suggestion yet[/dim]")
            continue

        if command == "again":
            shortcut = context.usage.recommend_shortcut()
            if not shortcut:
                console.print("[dim]No suggestion yet[/dim]")
                continue
            text = shortcut

        if command == "help":
            console.print("""
[bold]Examples:[/bold]
  - note buy milk
  - play lofi beats
  - {"plan": [{"do": "save_note", "text": "x"}, {"do": "get_notes"}]}
  - {"do": "ohms_i", "V": 12, "R": 4}

[bold]Shell commands:[/bold]
  - help      (show this)
  - skills    (list skills and verbs)
  - suggest   (show the smart suggestion)
  - again     (run the smart suggestion)
  - quit      (exit)
""")
            continue

        report = asyncio.run(context.submit(text))
        print_report(report)

    console.print("\n[yellow]Shutting down...[/yellow]")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="MeghAIna - MeghScript Engine"
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Run this input once and exit"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the local HTTP service bus"
    )
    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        console.print(f"[bold red]Config error:[/bold red] {e}")
        return 2

    level = args.log_level or config.logging.level
    configure_logging(
        level=getattr(logging, level.upper()),
        log_dir=config.logging.dir,
        file=config.logging.file,
    )
    logger = logging.getLogger("megh.main")

    try:
        context = build_context(config)

        if args.serve:
            from infra.server import serve
            serve(context, config.server.host, config.server.port, level)
            return 0

        if args.input is not None:
            return run_once(context, args.input)

        run_text_mode(context)
        return 0

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except Exception as e:
        logger.exception("Fatal error")
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
