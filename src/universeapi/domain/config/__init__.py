"""Configuration models with Pydantic validation."""

from universeapi.domain.config.app import AppConfig
from universeapi.domain.config.client import ClientConfig
from universeapi.domain.config.retry import RetryConfig
from universeapi.domain.config.server import AuthDefinition, ServerDefinition
from universeapi.domain.config.servers import KNOWN_SERVERS

__all__ = [
    "AppConfig",
    "ClientConfig",
    "RetryConfig",
    "AuthDefinition",
    "ServerDefinition",
    "KNOWN_SERVERS",
]
