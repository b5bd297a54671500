import json

import httpx
import pytest

from completion import USER_AGENT, CompletionRequester
from errors import ApiError, NetworkError, ParseError
from session import Role, Transcript


def _snapshot(*user_lines: str):
    transcript = Transcript("sys")
    for line in user_lines:
        transcript.append(Role.USER, line)
    return transcript.snapshot()


def test_complete_returns_first_choice_content(requester, mock_server):
    mock_server.add_reply("Hi there!")

    reply = requester.complete(_snapshot("Say hi"))

    assert reply == "Hi there!"
    assert mock_server.request_count == 1


def test_request_carries_headers_and_body(requester, mock_server, chat_config):
    mock_server.add_reply("ok")

    requester.complete(_snapshot("hello"), model="other-model", temperature=0.2, max_tokens=64)

    request = mock_server.last_request()
    assert request.method == "POST"
    assert str(request.url) == chat_config.api_url
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == f"Bearer {chat_config.api_key}"
    assert request.headers["User-Agent"] == USER_AGENT
    assert mock_server.last_payload() == {
        "model": "other-model",
        "messages": [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hello"},
        ],
        "temperature": 0.2,
        "max_tokens": 64,
    }


def test_request_defaults_come_from_config(requester, mock_server, chat_config):
    mock_server.add_reply("ok")

    requester.complete(_snapshot("hello"))

    payload = mock_server.last_payload()
    assert payload["model"] == chat_config.model
    assert payload["temperature"] == chat_config.temperature
    assert payload["max_tokens"] == chat_config.max_tokens


def test_zero_temperature_is_sent_as_is(requester, mock_server):
    mock_server.add_reply("ok")

    requester.complete(_snapshot("hello"), temperature=0.0)

    assert mock_server.last_payload()["temperature"] == 0.0


def test_api_error_uses_embedded_message(requester, mock_server):
    mock_server.add_raw(429, {"error": {"message": "boom"}})

    with pytest.raises(ApiError) as excinfo:
        requester.complete(_snapshot("hello"))

    assert excinfo.value.status_code == 429
    assert "429" in str(excinfo.value)
    assert "boom" in str(excinfo.value)


@pytest.mark.parametrize(
    "body",
    [b"<html>bad gateway</html>", b"", {"error": "flat string"}, {"detail": "other shape"}, [1, 2]],
)
def test_api_error_falls_back_to_reason_phrase(requester, mock_server, body):
    mock_server.add_raw(502, body)

    with pytest.raises(ApiError) as excinfo:
        requester.complete(_snapshot("hello"))

    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == "Bad Gateway"


def test_zero_max_tokens_is_rejected_before_sending(requester, mock_server):
    with pytest.raises(ValueError):
        requester.complete(_snapshot("hello"), max_tokens=0)

    assert mock_server.request_count == 0


@pytest.mark.parametrize("temperature", [-0.1, 3.0])
def test_out_of_range_temperature_is_rejected_before_sending(requester, mock_server, temperature):
    with pytest.raises(ValueError):
        requester.complete(_snapshot("hello"), temperature=temperature)

    assert mock_server.request_count == 0
    assert requester.last_exchange is None


def test_missing_choices_is_parse_error(requester, mock_server):
    mock_server.add_raw(200, {"id": "x", "object": "chat.completion"})

    with pytest.raises(ParseError):
        requester.complete(_snapshot("hello"))


@pytest.mark.parametrize(
    "body",
    [
        b"not json at all",
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": "nope"},
    ],
)
def test_malformed_success_bodies_are_parse_errors(requester, mock_server, body):
    mock_server.add_raw(200, body)

    with pytest.raises(ParseError):
        requester.complete(_snapshot("hello"))


@pytest.mark.parametrize(
    "extra_choice",
    [{"message": {"content": None}}, {"finish_reason": "length"}, "garbage"],
)
def test_only_first_choice_is_validated(requester, mock_server, extra_choice):
    mock_server.add_raw(200, {"choices": [{"message": {"content": "first"}}, extra_choice]})

    assert requester.complete(_snapshot("hello")) == "first"
    assert requester.last_exchange.outcome == "ok"


def test_malformed_usage_does_not_discard_reply(requester, mock_server):
    mock_server.add_raw(200, {"choices": [{"message": {"content": "still here"}}], "usage": "n/a"})

    assert requester.complete(_snapshot("hello")) == "still here"
    assert requester.last_exchange.usage == {}


def test_connect_failure_is_network_error(requester, mock_server):
    mock_server.add_exception(httpx.ConnectError("Name or service not known"))

    with pytest.raises(NetworkError) as excinfo:
        requester.complete(_snapshot("hello"))

    assert "Network error" in str(excinfo.value)
    assert requester.last_exchange.outcome == "network_error"


def test_timeout_is_network_error(requester, mock_server, chat_config):
    mock_server.add_exception(httpx.ReadTimeout("timed out"))

    with pytest.raises(NetworkError) as excinfo:
        requester.complete(_snapshot("hello"))

    assert "timed out" in str(excinfo.value)


def test_no_retry_after_failure(requester, mock_server):
    mock_server.add_error(500, "server exploded")
    mock_server.add_reply("never sent")

    with pytest.raises(ApiError):
        requester.complete(_snapshot("hello"))

    assert mock_server.request_count == 1


def test_complete_does_not_mutate_transcript(requester, mock_server):
    transcript = Transcript("sys")
    transcript.append(Role.USER, "hello")
    mock_server.add_reply("hi")

    requester.complete(transcript.snapshot())

    assert len(transcript) == 2


def test_exchange_records_usage(requester, mock_server):
    mock_server.add_reply("hi", usage={"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15})

    requester.complete(_snapshot("hello"))

    exchange = requester.last_exchange
    assert exchange.status_code == 200
    assert exchange.outcome == "ok"
    assert exchange.message_count == 2
    assert exchange.usage["total_tokens"] == 15
    described = exchange.describe()
    assert "status=200" in described
    assert "total_tokens=15" in described


def test_injected_client_is_left_open(chat_config, mock_server):
    client = mock_server.client()
    with CompletionRequester(chat_config, client=client):
        pass
    assert not client.is_closed


def test_owned_client_is_closed(chat_config):
    requester = CompletionRequester(chat_config)
    requester.close()
    assert requester._client.is_closed
