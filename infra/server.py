#!/usr/bin/env python3
"""
Megh Service Bus Server
-----------------------
Runs the FastAPI service bus around an application context.

Usage:
    python -m infra.server --port 8765
    python -m infra.server --config config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from rich.console import Console

from infra.config import load_config
from infra.logging import configure_logging
from infra.service_bus import ServiceBus

console = Console()


def serve(context, host: str, port: int, log_level: str = "info") -> None:
    """Run the service bus until interrupted."""
    app = ServiceBus(context).create_app()

    console.print(f"\n[bold green]MeghAIna Service Bus[/bold green]")
    console.print(f"Running on http://{host}:{port}")
    console.print(f"API docs: http://{host}:{port}/docs")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


def main() -> int:
    parser = argparse.ArgumentParser(description="MeghAIna Service Bus Server")
    parser.add_argument("--config", "-c", default="config.yaml", help="Path to configuration file")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args()

    config = load_config(args.config)
    level = args.log_level or config.logging.level
    configure_logging(
        level=getattr(logging, level.upper()),
        log_dir=config.logging.dir,
        file=config.logging.file,
    )

    from core.context import build_context

    console.print("[dim]Building context...[/dim]")
    context = build_context(config)

    serve(
        context,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level=level,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
