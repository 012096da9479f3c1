"""Process entry point for ``slackgate-run``.

Loads settings, configures logging, connects to Slack, and dispatches
messages until SIGINT or SIGTERM.

Usage::

    slackgate-run
    slackgate-run --env-file /etc/slackgate.env
    slackgate-run --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys

from rich.console import Console

from slackgate import __version__
from slackgate.runtime.app import run_bot
from slackgate.runtime.config import settings
from slackgate.runtime.errors import SlackGateError
from slackgate.runtime.services.otel import configure_otel

logger = logging.getLogger(__name__)
console = Console(stderr=True)

# slack_sdk logs every socket-mode frame at DEBUG/INFO.
_NOISY_LOGGERS = (
    "slack_sdk.socket_mode",
    "slack_sdk.web.async_base_client",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slackgate-run",
        description="Run the Slack bot until interrupted.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Read settings from this .env file (default: $DOTENV_PATH or ./.env).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override the log level (default: from LOG_LEVEL env / INFO).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


async def _run() -> int:
    """Core async flow: wire signals, run the bot, map errors to exit codes."""
    cfg = settings.cfg
    configure_otel(cfg.otel_enabled)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    console.print("[bold green]slackgate[/bold green] connecting ...")
    try:
        await run_bot(cfg.slack, stop)
    except SlackGateError as exc:
        logger.error("[cli] startup failed: %s", exc)
        console.print(f"[red]Error:[/red] {exc}")
        return 1
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

    console.print("[dim]Done.[/dim]")
    return 0


def main() -> None:
    """CLI entry point for ``slackgate-run``."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.env_file:
        os.environ["DOTENV_PATH"] = args.env_file
    settings.cfg.reload()

    _configure_logging(args.log_level or settings.cfg.log_level)

    try:
        code = asyncio.run(_run())
    except KeyboardInterrupt:
        code = 130

    sys.exit(code)


if __name__ == "__main__":
    main()
