"""Registry of named API server configurations"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Mapping, Optional

from universeapi.domain.config.server import ServerDefinition
from universeapi.domain.errors import UnknownServer
from universeapi.domain.models.server_config import AuthInfo, ServerConfig
from universeapi.infrastructure.http_client import merge_headers

logger = logging.getLogger(__name__)

__all__ = ["ServerRegistry", "resolve_endpoint", "merge_headers"]


def resolve_endpoint(server: ServerConfig, endpoint: str, suffix: Optional[str] = None) -> str:
    """Resolve a logical endpoint name (or raw path) to a path under the server's base URL

    Args:
        server: Server configuration
        endpoint: Key of ``server.endpoints`` or a raw path
        suffix: Optional extra segment appended after the endpoint (e.g. a player name)

    Returns:
        Path without leading slash, e.g. ``v3/aurora/towns``
    """
    segment = server.endpoints.get(endpoint, endpoint)
    parts = [server.version, segment, suffix]
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


class ServerRegistry:
    """Mutable mapping from server name to ServerConfig"""

    def __init__(self, servers: Optional[Mapping[str, ServerConfig]] = None):
        self._servers: Dict[str, ServerConfig] = dict(servers or {})
        self._lock = threading.Lock()

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, ServerDefinition]) -> "ServerRegistry":
        """Build a registry from validated server definitions"""
        registry = cls()
        for name, definition in definitions.items():
            auth = None
            if definition.auth is not None:
                auth = AuthInfo(
                    header=definition.auth.header,
                    env_var=definition.auth.env_var,
                    description=definition.auth.description,
                )
            registry.register(
                name,
                definition.base_url,
                version=definition.version,
                headers=definition.headers,
                endpoints=definition.endpoints,
                auth=auth,
            )
        return registry

    def register(
        self,
        name: str,
        base_url: str,
        version: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        endpoints: Optional[Dict[str, str]] = None,
        auth: Optional[AuthInfo] = None,
    ) -> ServerConfig:
        """Create and store a server config, replacing any entry with the same name

        Returns:
            The stored ServerConfig
        """
        server = ServerConfig(
            name=name,
            base_url=base_url,
            version=version,
            endpoints=dict(endpoints or {}),
            default_headers=dict(headers or {}),
            auth=auth,
        )
        self.add(server)
        return server

    def add(self, server: ServerConfig) -> None:
        """Store a prebuilt server config"""
        with self._lock:
            replaced = server.name in self._servers
            self._servers[server.name] = server
        action = "Replaced" if replaced else "Registered"
        logger.info(f"{action} server {server.name} -> {server.base_url}")

    def lookup(self, name: str) -> ServerConfig:
        """Get server config by name

        Raises:
            UnknownServer: If no server is registered under ``name``
        """
        server = self._servers.get(name)
        if server is None:
            logger.error(f"Unknown server requested: {name}")
            raise UnknownServer(name, self.names())
        return server

    def get(self, name: str) -> Optional[ServerConfig]:
        return self._servers.get(name)

    def names(self) -> List[str]:
        return list(self._servers)

    def __contains__(self, name: object) -> bool:
        return name in self._servers

    def __len__(self) -> int:
        return len(self._servers)

    def __iter__(self) -> Iterator[ServerConfig]:
        return iter(list(self._servers.values()))
