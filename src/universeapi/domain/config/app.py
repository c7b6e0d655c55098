"""Main application configuration model."""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from universeapi.domain.config.client import ClientConfig
from universeapi.domain.config.retry import RetryConfig
from universeapi.domain.config.server import ServerDefinition


class AppConfig(BaseModel):
    """Main application configuration.

    Attributes:
        client: HTTP client settings
        retry: Retry logic configuration
        servers: Extra or overriding server definitions, keyed by name
    """

    client: ClientConfig = Field(default_factory=ClientConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    servers: Dict[str, ServerDefinition] = Field(default_factory=dict)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "client": {"timeout": 30, "user_agent": "UniverseAPI/1.0.0"},
                "retry": {"max_attempts": 3, "backoff_base": 2},
                "servers": {
                    "MyServer": {
                        "base_url": "https://api.example.com",
                        "version": "v1",
                        "endpoints": {"status": "status"},
                        "headers": {"X-Client": "universeapi"},
                    }
                },
            }
        },
    )
