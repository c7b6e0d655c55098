"""Request executor (requests + retry/backoff).

We keep HTTP logic centralized so every server goes through the same
header, retry and JSON handling.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import requests
from pydantic import ValidationError

from universeapi.domain.config.client import ClientConfig
from universeapi.domain.config.retry import RetryConfig
from universeapi.domain.errors import BadStatus, ParseError, RequestFailed
from universeapi.domain.models.request_spec import RequestSpec
from universeapi.infrastructure.retry import call_with_retries, linear_backoff

logger = logging.getLogger(__name__)

Transport = Callable[..., requests.Response]

# Retried; any other RequestException (bad URL, bad header) fails after one attempt
TRANSPORT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


def merge_headers(
    defaults: Optional[Dict[str, str]], overrides: Optional[Dict[str, str]]
) -> Dict[str, str]:
    """Merge two header maps; keys from ``overrides`` win (case-sensitive)."""
    merged: Dict[str, str] = dict(defaults or {})
    merged.update(overrides or {})
    return merged


class RequestExecutor:
    """Executes RequestSpecs with retry on transport failures.

    Only transport-level errors (connection refused, DNS failure, timeout) are
    retried. A received response with a non-2xx status fails immediately.
    """

    def __init__(
        self,
        client_config: Optional[ClientConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[Transport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize executor

        Args:
            client_config: Timeout and User-Agent settings
            retry_config: Attempt count and backoff base
            transport: Callable with the signature of ``requests.request`` (for tests)
            sleep: Sleep function used between retries (for tests)
        """
        self.client_config = client_config or ClientConfig()
        self.retry_config = retry_config or RetryConfig()
        self._transport = transport
        self._sleep = sleep

    def configure(
        self,
        timeout: Optional[int] = None,
        user_agent: Optional[str] = None,
        max_attempts: Optional[int] = None,
        backoff_base: Optional[int] = None,
    ) -> None:
        """Update settings for subsequent calls

        Raises:
            ValueError: If a value fails validation
        """
        client_updates = {k: v for k, v in {"timeout": timeout, "user_agent": user_agent}.items() if v is not None}
        retry_updates = {
            k: v for k, v in {"max_attempts": max_attempts, "backoff_base": backoff_base}.items() if v is not None
        }
        try:
            if client_updates:
                self.client_config = ClientConfig(**{**self.client_config.model_dump(), **client_updates})
            if retry_updates:
                self.retry_config = RetryConfig(**{**self.retry_config.model_dump(), **retry_updates})
        except ValidationError as e:
            raise ValueError(f"Invalid client settings: {e}") from e
        logger.debug(f"Client settings updated: {self.client_config!r}, {self.retry_config!r}")

    def build_headers(self, spec: RequestSpec) -> Dict[str, str]:
        """Base headers overlaid with the request's own headers"""
        base = {
            "User-Agent": self.client_config.user_agent,
            "Accept": "application/json",
        }
        headers = merge_headers(base, spec.headers)
        if spec.body is not None and not any(k.lower() == "content-type" for k in headers):
            headers["Content-Type"] = "application/json"
        return headers

    def execute(self, spec: RequestSpec) -> Any:
        """Send the request and return the parsed JSON body

        Args:
            spec: Request to send

        Returns:
            Parsed JSON value, or None for an empty body

        Raises:
            RequestFailed: If every attempt failed at the transport level
            BadStatus: If the response status is outside [200, 300)
            ParseError: If the body is not valid JSON
        """
        url = spec.url
        method = spec.method.value
        headers = self.build_headers(spec)
        timeout = spec.timeout or self.client_config.timeout
        max_attempts = self.retry_config.max_attempts
        attempts = {"n": 0}

        def _attempt() -> requests.Response:
            attempts["n"] += 1
            logger.debug(f"HTTP {method} {url} (attempt {attempts['n']}/{max_attempts}, timeout {timeout}s)")
            transport = self._transport or requests.request
            return transport(method, url, headers=headers, data=spec.body, timeout=timeout)

        def _log_retry(attempt: int, error: BaseException, delay: float) -> None:
            logger.warning(
                f"HTTP {method} {url} failed (attempt {attempt}/{max_attempts}): {error}. "
                f"Retrying in {delay:g}s..."
            )

        try:
            response = call_with_retries(
                _attempt,
                max_attempts=max_attempts,
                backoff=linear_backoff(self.retry_config.backoff_base),
                retry_on=TRANSPORT_ERRORS,
                sleep=self._sleep,
                before_sleep=_log_retry,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"HTTP {method} {url} failed after {attempts['n']} attempt(s): {e}")
            raise RequestFailed(url, attempts["n"], e) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"HTTP {method} {url} returned status {response.status_code}")
            raise BadStatus(url, response.status_code, response.text)

        logger.info(f"HTTP {method} {url} -> {response.status_code}")
        return self._parse_body(url, response)

    def _parse_body(self, url: str, response: requests.Response) -> Any:
        if not response.content or not response.content.strip():
            logger.debug(f"Empty response body from {url}")
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise ParseError(url, str(e)) from e
