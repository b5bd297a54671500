"""Line input for the chat loop using prompt_toolkit, with a stdin fallback."""

import re
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory
from prompt_toolkit.input import Input


DEFAULT_HISTORY_DIR = Path.home() / ".duszek"
DEFAULT_HISTORY_FILE = DEFAULT_HISTORY_DIR / "history.txt"
MAX_HISTORY_ENTRIES = 100

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _format_prompt_for_toolkit(prompt: str) -> Union[ANSI, str]:
    """Wrap prompts carrying ANSI colour codes so prompt_toolkit renders them."""
    if ANSI_ESCAPE_PATTERN.search(prompt):
        return ANSI(prompt)
    return prompt


class HistoryManager:
    """File-backed input history trimmed to the most recent entries."""

    def __init__(self, history_file: Optional[Path] = None, max_entries: int = MAX_HISTORY_ENTRIES):
        self.history_file = history_file or DEFAULT_HISTORY_FILE
        self.max_entries = max_entries
        self._ensure_history_dir()

    def _ensure_history_dir(self) -> None:
        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Without a writable directory the session simply has no saved history.
            pass

    def rotate_history(self) -> None:
        """Keep only the last ``max_entries`` lines of the history file."""
        if not self.history_file.exists():
            return

        try:
            with open(self.history_file, "r", encoding="utf-8") as f:
                lines = f.readlines()
            if len(lines) > self.max_entries:
                with open(self.history_file, "w", encoding="utf-8") as f:
                    f.writelines(lines[-self.max_entries:])
        except (OSError, UnicodeDecodeError):
            pass

    def get_file_history(self) -> Optional[FileHistory]:
        try:
            return FileHistory(str(self.history_file))
        except OSError:
            return None


class InputHandler:
    """Reads one line per call, with history and editing when a terminal is present."""

    def __init__(
        self,
        history_manager: Optional[HistoryManager] = None,
        custom_input: Optional[Input] = None,
        *,
        stream: Optional[TextIO] = None,
    ):
        """
        Args:
            history_manager: HistoryManager instance. Creates default if None.
            custom_input: Custom input for prompt_toolkit. Used for testing.
            stream: Stream checked for a terminal; plain ``readline`` is used
                when it is not a TTY and no ``custom_input`` is given.
        """
        self.history_manager = history_manager or HistoryManager()
        self._session: Optional[PromptSession] = None
        self._custom_input = custom_input
        self._stream = stream
        self._fallback_mode = False

    def _stdin(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdin

    def _interactive(self) -> bool:
        if self._custom_input is not None:
            return True
        isatty = getattr(self._stdin(), "isatty", None)
        if not callable(isatty):
            return False
        try:
            return bool(isatty())
        except (OSError, ValueError):
            return False

    def _get_session(self) -> Optional[PromptSession]:
        """Return the PromptSession, or None once fallback mode is active."""
        if self._fallback_mode:
            return None
        if not self._interactive():
            self._fallback_mode = True
            return None

        if self._session is None:
            try:
                kwargs = {
                    "history": self.history_manager.get_file_history(),
                    "enable_history_search": True,
                    "multiline": False,
                }
                if self._custom_input is not None:
                    kwargs["input"] = self._custom_input
                self._session = PromptSession(**kwargs)
            except Exception:
                # prompt_toolkit refuses some consoles; plain readline still works there.
                self._fallback_mode = True
                return None
        return self._session

    def get_input(self, prompt: str = "") -> str:
        """
        Read one line of user input.

        Raises:
            EOFError: When input is exhausted (Ctrl+D or closed stdin)
            KeyboardInterrupt: When user sends interrupt (Ctrl+C)
        """
        session = self._get_session()

        try:
            if session is None:
                if prompt:
                    print(prompt, end="", flush=True)
                line = self._stdin().readline()
                if not line:
                    raise EOFError
                result = line.rstrip("\n")
            else:
                result = session.prompt(_format_prompt_for_toolkit(prompt))
        finally:
            self.history_manager.rotate_history()
        return result

    def cleanup(self) -> None:
        self.history_manager.rotate_history()
