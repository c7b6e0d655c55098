from __future__ import annotations

import json
from typing import Optional

import pytest
import requests

from universeapi.domain.config.client import ClientConfig
from universeapi.domain.config.retry import RetryConfig
from universeapi.domain.errors import BadStatus, ParseError, RequestFailed
from universeapi.domain.models.request_spec import RequestSpec
from universeapi.infrastructure.http_client import RequestExecutor, merge_headers


def _make_response(status_code: int, payload=None, text: Optional[str] = None) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://example.test"
    if text is None:
        text = json.dumps(payload if payload is not None else {})
    r._content = text.encode("utf-8")  # type: ignore[attr-defined]
    r.headers["Content-Type"] = "application/json"
    return r


class FakeTransport:
    """Replays a list of responses/exceptions and records each call"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _executor(transport, sleeps=None, **retry_kwargs) -> RequestExecutor:
    if sleeps is None:
        sleeps = []
    return RequestExecutor(
        client_config=ClientConfig(),
        retry_config=RetryConfig(**retry_kwargs),
        transport=transport,
        sleep=sleeps.append,
    )


def test_retries_transport_failures_with_linear_backoff():
    transport = FakeTransport(
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("timed out"),
        _make_response(200, {"ok": True}),
    )
    sleeps = []

    result = _executor(transport, sleeps, max_attempts=3).execute(RequestSpec("https://api.example.com", "v3/aurora"))

    assert result == {"ok": True}
    assert len(transport.calls) == 3
    assert [call["timeout"] for call in transport.calls] == [30, 30, 30]
    assert sleeps == [2, 4]


def test_exhausted_attempts_raise_request_failed():
    error = requests.exceptions.ConnectionError("refused")
    transport = FakeTransport(error, error, error)
    sleeps = []

    with pytest.raises(RequestFailed) as exc_info:
        _executor(transport, sleeps, max_attempts=3).execute(RequestSpec("https://api.example.com", "status"))

    assert exc_info.value.attempts == 3
    assert exc_info.value.last_error is error
    assert exc_info.value.url == "https://api.example.com/status"
    assert len(transport.calls) == 3
    # No sleep after the final attempt
    assert sleeps == [2, 4]


def test_invalid_url_is_not_retried():
    sleeps = []
    executor = RequestExecutor(retry_config=RetryConfig(max_attempts=3), sleep=sleeps.append)

    with pytest.raises(RequestFailed) as exc_info:
        executor.execute(RequestSpec("http://", "status"))

    assert exc_info.value.attempts == 1
    assert isinstance(exc_info.value.last_error, requests.exceptions.InvalidURL)
    assert sleeps == []


def test_invalid_header_is_not_retried():
    transport = FakeTransport(requests.exceptions.InvalidHeader("bad header"))
    sleeps = []

    with pytest.raises(RequestFailed) as exc_info:
        _executor(transport, sleeps).execute(RequestSpec("https://api.example.com", "status"))

    assert exc_info.value.attempts == 1
    assert len(transport.calls) == 1
    assert sleeps == []


def test_single_attempt_does_not_sleep():
    transport = FakeTransport(requests.exceptions.ConnectionError("refused"))
    sleeps = []

    with pytest.raises(RequestFailed):
        _executor(transport, sleeps, max_attempts=1).execute(RequestSpec("https://api.example.com", "status"))

    assert sleeps == []


def test_custom_backoff_base():
    transport = FakeTransport(
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.ConnectionError("refused"),
        _make_response(200, [1, 2]),
    )
    sleeps = []

    result = _executor(transport, sleeps, max_attempts=3, backoff_base=5).execute(
        RequestSpec("https://api.example.com", "list")
    )

    assert result == [1, 2]
    assert sleeps == [5, 10]


def test_404_is_not_retried():
    transport = FakeTransport(_make_response(404, {"error": "not found"}))
    sleeps = []

    with pytest.raises(BadStatus) as exc_info:
        _executor(transport, sleeps).execute(RequestSpec("https://api.example.com", "missing"))

    assert exc_info.value.status_code == 404
    assert len(transport.calls) == 1
    assert sleeps == []


def test_503_is_not_retried():
    transport = FakeTransport(_make_response(503, text="unavailable"))

    with pytest.raises(BadStatus, match="503"):
        _executor(transport).execute(RequestSpec("https://api.example.com", "status"))

    assert len(transport.calls) == 1


def test_empty_body_returns_none():
    transport = FakeTransport(_make_response(200, text=""))

    assert _executor(transport).execute(RequestSpec("https://api.example.com", "status")) is None


def test_whitespace_body_returns_none():
    transport = FakeTransport(_make_response(204, text="  \n"))

    assert _executor(transport).execute(RequestSpec("https://api.example.com", "status")) is None


def test_malformed_json_raises_parse_error():
    transport = FakeTransport(_make_response(200, text="<html>oops</html>"))

    with pytest.raises(ParseError) as exc_info:
        _executor(transport).execute(RequestSpec("https://api.example.com", "status"))

    assert exc_info.value.detail
    assert exc_info.value.detail in str(exc_info.value)
    assert len(transport.calls) == 1


def test_default_headers_and_caller_override():
    transport = FakeTransport(_make_response(200, {}))
    spec = RequestSpec(
        "https://api.example.com",
        "status",
        headers={"User-Agent": "custom/2.0", "X-Extra": "1"},
    )

    _executor(transport).execute(spec)

    headers = transport.calls[0]["headers"]
    assert headers["User-Agent"] == "custom/2.0"
    assert headers["Accept"] == "application/json"
    assert headers["X-Extra"] == "1"
    assert "Content-Type" not in headers


def test_body_adds_json_content_type():
    transport = FakeTransport(_make_response(200, {}))
    spec = RequestSpec("https://api.example.com", "towns", method="POST", body='{"query": ["a"]}')

    _executor(transport).execute(spec)

    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["data"] == '{"query": ["a"]}'
    assert call["headers"]["Content-Type"] == "application/json"


def test_body_keeps_caller_content_type():
    transport = FakeTransport(_make_response(200, {}))
    spec = RequestSpec(
        "https://api.example.com",
        "upload",
        method="PUT",
        headers={"Content-Type": "text/plain"},
        body="hello",
    )

    _executor(transport).execute(spec)

    assert transport.calls[0]["headers"]["Content-Type"] == "text/plain"


def test_body_keeps_lowercase_caller_content_type():
    transport = FakeTransport(_make_response(200, {}))
    spec = RequestSpec(
        "https://api.example.com",
        "upload",
        method="POST",
        headers={"content-type": "text/plain"},
        body="hi",
    )

    _executor(transport).execute(spec)

    headers = transport.calls[0]["headers"]
    assert headers["content-type"] == "text/plain"
    assert "Content-Type" not in headers

    prepared = requests.Request("POST", "https://api.example.com/upload", headers=headers, data="hi").prepare()
    assert prepared.headers["Content-Type"] == "text/plain"


def test_timeout_default_and_per_call_override():
    transport = FakeTransport(_make_response(200, {}), _make_response(200, {}))
    executor = _executor(transport)

    executor.execute(RequestSpec("https://api.example.com", "a"))
    executor.execute(RequestSpec("https://api.example.com", "b", timeout=5))

    assert transport.calls[0]["timeout"] == 30
    assert transport.calls[1]["timeout"] == 5


def test_configure_applies_to_subsequent_calls():
    transport = FakeTransport(
        _make_response(200, {}),
        requests.exceptions.ConnectionError("refused"),
    )
    sleeps = []
    executor = _executor(transport, sleeps)

    executor.execute(RequestSpec("https://api.example.com", "a"))
    executor.configure(timeout=10, user_agent="Bot/0.1", max_attempts=1)

    with pytest.raises(RequestFailed):
        executor.execute(RequestSpec("https://api.example.com", "b"))

    assert transport.calls[0]["headers"]["User-Agent"] == "UniverseAPI/1.0.0"
    assert transport.calls[1]["headers"]["User-Agent"] == "Bot/0.1"
    assert transport.calls[1]["timeout"] == 10
    assert len(transport.calls) == 2
    assert sleeps == []


def test_configure_rejects_invalid_values():
    executor = _executor(FakeTransport())

    with pytest.raises(ValueError):
        executor.configure(timeout=0)
    assert executor.client_config.timeout == 30


def test_default_transport_is_requests_request(monkeypatch):
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url))
        return _make_response(200, {"online": True})

    monkeypatch.setattr(requests, "request", fake_request)

    executor = RequestExecutor(sleep=lambda *_: None)
    result = executor.execute(RequestSpec("https://api.mcsrvstat.us/", "/3/play.example.net"))

    assert result == {"online": True}
    assert calls == [("GET", "https://api.mcsrvstat.us/3/play.example.net")]


def test_merge_headers_last_write_wins():
    merged = merge_headers({"A": "1", "B": "2"}, {"B": "3", "C": "4"})

    assert merged == {"A": "1", "B": "3", "C": "4"}


def test_merge_headers_is_case_sensitive():
    merged = merge_headers({"Accept": "application/json"}, {"accept": "text/plain"})

    assert merged == {"Accept": "application/json", "accept": "text/plain"}


def test_merge_headers_handles_none():
    assert merge_headers(None, {"A": "1"}) == {"A": "1"}
    assert merge_headers({"A": "1"}, None) == {"A": "1"}
