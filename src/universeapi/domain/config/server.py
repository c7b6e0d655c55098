"""Server definition models."""

from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class AuthDefinition(BaseModel):
    """Auth metadata for a server.

    Attributes:
        header: Header name carrying the API key
        env_var: Environment variable the key is read from
        description: Free-form note (where to get a key, etc.)
    """

    header: str = "API-Key"
    env_var: Optional[str] = None
    description: Optional[str] = None


class ServerDefinition(BaseModel):
    """Static definition of an API server.

    Attributes:
        base_url: Root URL of the API
        version: Version path segment prepended to every endpoint
        endpoints: Logical endpoint name -> path segment
        headers: Headers sent with every request to this server
        auth: Optional auth metadata
    """

    base_url: str = Field(..., min_length=1)
    version: Optional[str] = None
    endpoints: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    auth: Optional[AuthDefinition] = None

    @field_validator("base_url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value.rstrip("/")
