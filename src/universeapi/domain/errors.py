"""Error types raised by the request executor and server registry"""

from typing import Iterable, List, Optional


class UniverseAPIError(Exception):
    """Base class for all UniverseAPI errors"""

    pass


class RequestFailed(UniverseAPIError):
    """All attempts failed at the transport level (timeout, DNS, refused)"""

    def __init__(self, url: str, attempts: int, last_error: BaseException):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Request to {url} failed after {attempts} attempt(s): {last_error}")


class BadStatus(UniverseAPIError):
    """A response was received but its status code is outside [200, 300)"""

    def __init__(self, url: str, status_code: int, body: Optional[str] = None):
        self.url = url
        self.status_code = status_code
        self.body = body
        message = f"HTTP {status_code} from {url}"
        if body:
            message += f": {body[:200]}"
        super().__init__(message)


class ParseError(UniverseAPIError):
    """Response body is not valid JSON"""

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to parse JSON response from {url}: {detail}")


class UnknownServer(UniverseAPIError):
    """Lookup of a server name that is not registered"""

    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known: List[str] = sorted(known)
        available = ", ".join(self.known) if self.known else "<none>"
        super().__init__(f"Unknown server: {name}. Registered servers: {available}")
