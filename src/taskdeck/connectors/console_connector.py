# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import format_overdue_alert
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class _OverdueNotifier:
    """Print the overdue alert once each time it transitions to open."""

    def __init__(self) -> None:
        self._shown = False

    def maybe_show(self, state: AppState) -> None:
        if not state.overdue.is_open:
            self._shown = False
            return
        if self._shown:
            return
        self._shown = True
        _print_ts(format_overdue_alert(state))


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (authenticated=%s).", state.session.is_authenticated)
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")
    if not state.session.is_authenticated:
        _print_ts("Not logged in. Use /login <username> <password>.")

    notifier = _OverdueNotifier()
    notifier.maybe_show(state)

    while True:
        try:
            # input() blocks; keep the event loop free for in-flight requests.
            user_input = (await asyncio.to_thread(input, PROMPT)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list available commands."

        _print_ts(reply)
        notifier.maybe_show(state)

    logger.info("Console connector finished.")
