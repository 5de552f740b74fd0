"""
Session token handling for the uTorrent WebUI.

Every WebUI request must carry the token served by ``token.html``. The token
is fetched lazily and shared by all requests of one client; when the server
rejects it, it is invalidated and fetched again on next use.
"""

import re
import threading
from typing import Callable, Optional

from .exceptions import ProtocolError
from .logger import logger


TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_token_markup(raw: Optional[str]) -> str:
    """Remove the HTML wrapping ``token.html`` puts around the token."""
    if raw is None:
        raise ProtocolError("Token received is null")
    token = TAG_PATTERN.sub("", raw).strip()
    if not token:
        raise ProtocolError("Token received is empty")
    return token


class TokenProvider:
    """
    Single-flight cache for the session token.

    Concurrent callers that find no token wait on one fetch and all receive
    its result. Once a token is held, ``get`` returns it without locking.
    """

    def __init__(self, fetch: Callable[[], Optional[str]]):
        self._fetch = fetch
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    def get(self) -> str:
        token = self._token
        if token is not None:
            return token

        with self._lock:
            if self._token is None:
                logger.debug("Fetching WebUI token")
                self._token = strip_token_markup(self._fetch())
            return self._token

    def invalidate(self, stale: Optional[str] = None):
        """
        Forget the current token.

        When ``stale`` is given, the token is only dropped if it is still the
        one that was rejected.
        """
        with self._lock:
            if stale is None or self._token == stale:
                self._token = None

    @property
    def has_token(self) -> bool:
        return self._token is not None
