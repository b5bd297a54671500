"""Slash directive handling for interactive sessions."""
from __future__ import annotations

from dataclasses import dataclass

from session import ChatSession

HELP_TEXT = """DUSZEK Help:
  - Ask any coding or automation question
  - Request code examples or explanations
  - Get help with command-line tasks

  Commands:
    /help  - Show this help message
    /clear - Clear conversation history
    /debug - Toggle verbose diagnostics
    /exit  - Exit DUSZEK"""

EXIT_COMMANDS = frozenset({"exit", "quit"})


@dataclass(frozen=True)
class CommandResult:
    handled: bool
    message: str = ""
    exit_session: bool = False


NOT_HANDLED = CommandResult(handled=False)


def handle_slash_command(line: str, session: ChatSession) -> CommandResult:
    """Apply a directive to *session*; unrecognized input is left for the model."""

    line = line.strip()
    if not line.startswith("/"):
        return NOT_HANDLED
    parts = line[1:].split()
    if len(parts) != 1:
        return NOT_HANDLED
    command = parts[0]

    if command in EXIT_COMMANDS:
        return CommandResult(True, "Goodbye! DUSZEK signing off.", exit_session=True)

    if command == "clear":
        session.clear()
        return CommandResult(True, "✓ Conversation history cleared.")

    if command == "help":
        return CommandResult(True, HELP_TEXT)

    if command in ("debug", "verbose"):
        enabled = session.toggle_verbose()
        return CommandResult(True, f"Verbose diagnostics {'on' if enabled else 'off'}.")

    return NOT_HANDLED


__all__ = ["CommandResult", "HELP_TEXT", "handle_slash_command"]
