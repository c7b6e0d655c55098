"""Universe service - fetches data from registered API servers"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, List, Optional

from universeapi.domain.errors import UnknownServer
from universeapi.domain.models.request_spec import HttpMethod, RequestSpec
from universeapi.domain.models.server_config import AuthInfo, ServerConfig
from universeapi.infrastructure.config.config_manager import ConfigManager
from universeapi.infrastructure.http_client import RequestExecutor, Transport
from universeapi.infrastructure.registry import ServerRegistry, merge_headers, resolve_endpoint

logger = logging.getLogger(__name__)


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


class UniverseService:
    """Composes the server registry with the request executor"""

    def __init__(self, registry: ServerRegistry, executor: RequestExecutor):
        self.registry = registry
        self.executor = executor

    @classmethod
    def from_config(
        cls,
        config_manager: ConfigManager,
        transport: Optional[Transport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> "UniverseService":
        """Build registry and executor from configuration

        Args:
            config_manager: Loaded configuration
            transport: Optional replacement for ``requests.request``
            sleep: Optional sleep function used between retries
        """
        registry = ServerRegistry.from_definitions(config_manager.get_server_definitions())
        executor = RequestExecutor(
            client_config=config_manager.get_client_config(),
            retry_config=config_manager.get_retry_config(),
            transport=transport,
            sleep=sleep,
        )
        logger.debug(f"Loaded {len(registry)} servers: {', '.join(registry.names())}")
        return cls(registry, executor)

    def register(
        self,
        name: str,
        base_url: str,
        version: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        endpoints: Optional[Dict[str, str]] = None,
        auth: Optional[AuthInfo] = None,
    ) -> ServerConfig:
        return self.registry.register(
            name, base_url, version=version, headers=headers, endpoints=endpoints, auth=auth
        )

    def servers(self) -> List[ServerConfig]:
        return list(self.registry)

    def resolve_server(self, server: str) -> ServerConfig:
        """Registered server by name, or an ad-hoc config when given a base URL

        Raises:
            UnknownServer: If ``server`` is neither registered nor an http(s) URL
        """
        config = self.registry.get(server)
        if config is not None:
            return config
        if _is_url(server):
            logger.debug(f"Using {server} as a custom base URL")
            return ServerConfig(name=server, base_url=server)
        raise UnknownServer(server, self.registry.names())

    def fetch_from_server(
        self,
        server: str,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        suffix: Optional[str] = None,
        method: str = HttpMethod.GET,
        body: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Any:
        """Fetch JSON from a server

        Args:
            server: Registered server name or a custom base URL
            endpoint: Logical endpoint name or raw path
            headers: Extra headers (win over server defaults)
            suffix: Extra path segment appended after the endpoint
            method: HTTP method
            body: Optional request body
            timeout: Per-attempt timeout override in seconds

        Returns:
            Parsed JSON value (None for an empty body)
        """
        config = self.resolve_server(server)
        path = resolve_endpoint(config, endpoint, suffix)
        merged = merge_headers(config.default_headers, self._auth_headers(config))
        merged = merge_headers(merged, headers)

        spec = RequestSpec(
            base_url=config.base_url,
            endpoint_path=path,
            method=method,
            headers=merged,
            body=body,
            timeout=timeout,
        )
        logger.info(f"Fetching {endpoint} from {config.name}")
        return self.executor.execute(spec)

    def _auth_headers(self, config: ServerConfig) -> Dict[str, str]:
        """API key header from the environment, if configured and not already a default"""
        auth = config.auth
        if auth is None or not auth.env_var or auth.header in config.default_headers:
            return {}
        key = os.getenv(auth.env_var)
        if not key:
            logger.debug(f"{auth.env_var} is not set; calling {config.name} without an API key")
            return {}
        return {auth.header: key}
