"""ServerConfig model - connection metadata for one external API"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass(frozen=True)
class AuthInfo:
    """Where an API key travels; the key itself is never stored here"""

    header: str = "API-Key"
    env_var: Optional[str] = None  # Environment variable holding the key
    description: Optional[str] = None


@dataclass
class ServerConfig:
    """Registry entry for one API"""

    name: str
    base_url: str
    version: Optional[str] = None
    endpoints: Dict[str, str] = field(default_factory=dict)
    default_headers: Dict[str, str] = field(default_factory=dict)
    auth: Optional[AuthInfo] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.name:
            raise ValueError("Server name must not be empty")
        if not self.base_url:
            raise ValueError("Server base URL must not be empty")
        self.base_url = self.base_url.rstrip("/")
