"""Assertion helpers shared by the integration tests."""
from __future__ import annotations

from typing import List

from tests.mocking import MockCompletionServer


def payload_roles(server: MockCompletionServer) -> List[str]:
    """Roles of the messages sent with the most recent request."""
    return [message["role"] for message in server.last_payload()["messages"]]
