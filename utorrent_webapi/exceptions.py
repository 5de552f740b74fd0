"""
Exceptions raised by the uTorrent WebUI client.

- UTorrentError: Base exception for all library errors
- TransportError: Network or HTTP failure reported by the transport
- BadRequestError: HTTP 4xx response, the signal of a stale or rejected token
- AuthenticationError: Token refresh did not help, credentials are wrong
- ProtocolError: Server returned nothing, or something that cannot be parsed
- URIConstructionError: Connection parameters do not form a valid URL
"""


class UTorrentError(Exception):
    """Base exception for uTorrent WebUI client errors."""
    pass


class TransportError(UTorrentError):
    """Raised when the HTTP request fails for a reason other than a 4xx status."""
    pass


class BadRequestError(TransportError):
    """Raised when the WebUI answers with a 4xx status."""

    def __init__(self, status_code, body="", url=None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"HTTP {status_code} from {url or 'server'}")


class AuthenticationError(UTorrentError):
    """Raised when a request is still rejected after fetching a fresh token."""
    pass


class ProtocolError(UTorrentError):
    """Raised when the server response is missing or malformed."""
    pass


class URIConstructionError(UTorrentError, RuntimeError):
    """Raised when the configured scheme, host or port cannot form a URL."""
    pass
