"""Domain models"""

from universeapi.domain.models.request_spec import HttpMethod, RequestSpec
from universeapi.domain.models.server_config import AuthInfo, ServerConfig

__all__ = ["HttpMethod", "RequestSpec", "AuthInfo", "ServerConfig"]
