"""Terminal front end: banner, interactive loop and single-query mode."""
from __future__ import annotations

import contextlib
import logging
from typing import Optional

from pyfiglet import Figlet
from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from commands import handle_slash_command
from completion import CompletionRequester
from config import ChatConfig, SETUP_INSTRUCTIONS
from errors import ChatError, ConfigurationError
from input_handler import InputHandler
from session import ChatSession

logger = logging.getLogger(__name__)

ASSISTANT_LABEL = "DUSZEK ▸"
THINKING_MESSAGE = "DUSZEK is thinking..."
GOODBYE_MESSAGE = "Goodbye! DUSZEK signing off."


def make_console(use_color: bool = True) -> Console:
    return Console(no_color=not use_color, highlight=False, soft_wrap=False)


def print_banner(console: Console, *, use_color: bool = True) -> None:
    figlet = Figlet(font="standard")
    art_lines = figlet.renderText("DUSZEK").rstrip("\n").split("\n")
    subtitle = "Lightweight CLI AI Assistant"
    max_len = max([len(line) for line in art_lines] + [len(subtitle)])
    border = "+" + "=" * (max_len + 2) + "+"
    style = "cyan" if use_color else ""

    console.print(Text(border, style=style))
    for line in art_lines + ["", subtitle]:
        console.print(Text("| " + line.ljust(max_len) + " |", style=style))
    console.print(Text(border, style=style))


def print_configuration_error(console: Console, error: ConfigurationError, *, use_color: bool = True) -> None:
    console.print(Text(f"\n⚠️  Error: {error.message}", style="bold red" if use_color else ""))
    console.print(Text(f"\n{SETUP_INSTRUCTIONS}\n", style="yellow" if use_color else ""))


def print_configuration_loaded(console: Console, config: ChatConfig, *, use_color: bool = True) -> None:
    console.print(Text("✓ Configuration loaded", style="green" if use_color else ""))
    console.print(Text(f"Model: {config.model}\n", style="dim" if use_color else ""))


def _print_reply(console: Console, text: str, *, use_color: bool) -> None:
    console.print(Text(ASSISTANT_LABEL, style="bold blue" if use_color else ""))
    if console.is_terminal:
        console.print(Markdown(text))
    else:
        console.print(Text(text))
    console.print()


def _print_failure(console: Console, error: ChatError, *, use_color: bool) -> None:
    console.print(Text(f"❌ Error: {error.message}", style="bold red" if use_color else ""))


def _print_diagnostics(
    console: Console, session: ChatSession, requester: CompletionRequester, *, use_color: bool
) -> None:
    exchange = requester.last_exchange
    if exchange is None:
        return
    line = f"[debug] key={requester.config.masked_key()} turns={session.turns} {exchange.describe()}"
    console.print(Text(line, style="dim" if use_color else ""))


def _thinking(console: Console):
    if console.is_terminal:
        return console.status(THINKING_MESSAGE, spinner="dots")
    return contextlib.nullcontext()


def run_turn(
    text: str,
    session: ChatSession,
    requester: CompletionRequester,
    console: Console,
    *,
    use_color: bool = True,
) -> bool:
    """Send one user line and display the outcome; return True on success.

    The user message stays in the transcript when the request fails.
    """

    session.add_user_message(text)
    try:
        with _thinking(console):
            reply = requester.complete(session.transcript.snapshot())
    except ChatError as exc:
        if not exc.recoverable:
            raise
        logger.debug("Turn failed: %s", exc.message)
        _print_failure(console, exc, use_color=use_color)
        if session.verbose:
            _print_diagnostics(console, session, requester, use_color=use_color)
        return False

    session.add_assistant_message(reply)
    _print_reply(console, reply, use_color=use_color)
    if session.verbose:
        _print_diagnostics(console, session, requester, use_color=use_color)
    return True


def run_single_query(
    query: str,
    session: ChatSession,
    requester: CompletionRequester,
    *,
    console: Optional[Console] = None,
    use_color: bool = True,
) -> int:
    console = console or make_console(use_color)
    return 0 if run_turn(query, session, requester, console, use_color=use_color) else 1


def run_interactive(
    session: ChatSession,
    requester: CompletionRequester,
    *,
    console: Optional[Console] = None,
    input_handler: Optional[InputHandler] = None,
    use_color: bool = True,
) -> int:
    console = console or make_console(use_color)
    input_handler = input_handler or InputHandler()
    prompt = "\x1b[1;92mYou ▸ \x1b[0m" if use_color else "You ▸ "
    exit_message = GOODBYE_MESSAGE

    console.print(Text("✨ Interactive mode started. Type your questions or requests.", style="cyan" if use_color else ""))
    console.print(
        Text(
            "Commands: /help - show help, /clear - clear history, /debug - diagnostics, /exit - quit\n",
            style="dim" if use_color else "",
        )
    )

    try:
        while True:
            try:
                line = input_handler.get_input(prompt)
            except EOFError:
                break
            stripped = line.strip()
            if not stripped:
                continue

            result = handle_slash_command(stripped, session)
            if result.handled:
                if result.exit_session:
                    exit_message = result.message
                    break
                if result.message:
                    console.print(Text(result.message, style="yellow" if use_color else ""))
                continue

            run_turn(stripped, session, requester, console, use_color=use_color)
    except KeyboardInterrupt:
        console.print()
    finally:
        input_handler.cleanup()

    console.print(Text(f"👋 {exit_message}", style="cyan" if use_color else ""))
    return 0


__all__ = [
    "make_console",
    "print_banner",
    "print_configuration_error",
    "print_configuration_loaded",
    "run_interactive",
    "run_single_query",
    "run_turn",
]
