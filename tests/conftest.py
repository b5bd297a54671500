"""Shared pytest fixtures for the DUSZEK test suite."""
from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import Iterable

import pytest
from rich.console import Console

from completion import CompletionRequester
from config import ChatConfig
from input_handler import HistoryManager, InputHandler
from session import ChatSession
from tests.mocking import MockCompletionServer


@dataclass
class ConsoleCapture:
    """A non-terminal rich console whose output can be read back."""

    console: Console
    buffer: io.StringIO

    @property
    def text(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture(autouse=True)
def _restore_root_log_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(api_key="gsk_test_key_1234567890", model="test-model", api_url="https://api.test/v1/chat/completions")


@pytest.fixture
def mock_server() -> MockCompletionServer:
    return MockCompletionServer()


@pytest.fixture
def requester(chat_config, mock_server):
    with CompletionRequester(chat_config, client=mock_server.client()) as req:
        yield req


@pytest.fixture
def session() -> ChatSession:
    return ChatSession(system_prompt="You are a test assistant.")


@pytest.fixture
def capture() -> ConsoleCapture:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, highlight=False, width=120)
    return ConsoleCapture(console=console, buffer=buffer)


@pytest.fixture
def stdin_stub(monkeypatch):
    """Patch ``sys.stdin`` with a simple line-based stub."""

    def factory(*lines: str):
        class _Stub:
            def __init__(self, values: Iterable[str]):
                self._values = list(values)

            def readline(self) -> str:
                return self._values.pop(0) if self._values else ""

        stub = _Stub(lines)
        monkeypatch.setattr(sys, "stdin", stub)
        return stub

    return factory


@pytest.fixture
def input_handler(tmp_path) -> InputHandler:
    return InputHandler(HistoryManager(history_file=tmp_path / "history.txt"))
