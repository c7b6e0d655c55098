"""HTTP client configuration model."""

from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """Process-wide client settings.

    Attributes:
        timeout: Per-attempt timeout in seconds
        user_agent: Client identifier sent as User-Agent
    """

    timeout: int = Field(30, gt=0)
    user_agent: str = Field("UniverseAPI/1.0.0", min_length=1)
