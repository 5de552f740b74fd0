"""
HTTP transport for the uTorrent WebUI.

Wraps a requests.Session so the GUID cookie issued together with the token is
sent back on every call. HTTP 4xx responses raise BadRequestError, which the
client treats as an authentication failure; every other failure is reported as
TransportError.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

import requests

from .exceptions import BadRequestError, TransportError
from .logger import logger


BITTORRENT_CONTENT_TYPE = "application/x-bittorrent"


@dataclass
class FilePart:
    """A file attached to a multipart POST."""
    field_name: str
    path: str
    content_type: str = BITTORRENT_CONTENT_TYPE


class RESTClient:
    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        if username:
            self.session.auth = (username, password or "")

    def _request(self, method: str, url: str, **kwargs) -> str:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.text
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code
            if 400 <= status < 500:
                raise BadRequestError(status, e.response.text, url=_redact(url)) from e
            logger.error(f"WebUI returned HTTP {status} for {_redact(url)}")
            raise TransportError(f"HTTP {status} from server: {e}") from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Could not connect to {_redact(url)}: {e}")
            raise TransportError(f"Could not connect to server: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Request to {_redact(url)} timed out after {self.timeout}s")
            raise TransportError(f"Request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

    def get(self, url: str) -> str:
        return self._request("GET", url)

    def post(self, url: str, files: List[FilePart]) -> str:
        handles = []
        try:
            parts = {}
            for part in files:
                try:
                    f = open(part.path, "rb")
                except OSError as e:
                    logger.error(f"Could not open {part.path} for upload: {e}")
                    raise TransportError(f"Could not read {part.path}: {e}") from e
                handles.append(f)
                parts[part.field_name] = (os.path.basename(part.path), f, part.content_type)
            return self._request("POST", url, files=parts)
        finally:
            for f in handles:
                f.close()

    def close(self):
        self.session.close()


def _redact(url: str) -> str:
    """Drop the query string so tokens never reach the log."""
    return url.split("?", 1)[0]
