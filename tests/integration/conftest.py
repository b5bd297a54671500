"""Integration test fixtures."""
from __future__ import annotations

from pathlib import Path

import pytest

import main
from completion import CompletionRequester
from tests.mocking import MockCompletionServer


@pytest.fixture
def fake_figlet(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace the banner font renderer with a deterministic stub."""

    class _Figlet:
        def __init__(self, font: str = "standard") -> None:
            self.font = font

        def renderText(self, text: str) -> str:
            return f"{text}\n"

    monkeypatch.setattr("chat.Figlet", lambda font="standard": _Figlet(font))


@pytest.fixture
def cli_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_figlet) -> MockCompletionServer:
    """Run ``main.main`` against a mock endpoint with an isolated history file."""

    for name in ("MODEL", "GROQ_API_URL", "DUSZEK_TEMPERATURE", "DUSZEK_MAX_TOKENS", "DUSZEK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GROQ_API_KEY", "gsk_integration")
    monkeypatch.setattr(main, "load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.setattr("input_handler.DEFAULT_HISTORY_FILE", tmp_path / "history" / "history.txt")

    server = MockCompletionServer()
    monkeypatch.setattr(
        main,
        "CompletionRequester",
        lambda config: CompletionRequester(config, client=server.client()),
    )
    return server

