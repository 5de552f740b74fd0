"""
uTorrent WebUI API client.

Provides token-authenticated access to the uTorrent WebUI, with action
dispatch for torrent operations and a torrent list cache kept up to date
from server-side deltas.
"""

from .client import UTorrentClient, get_result
from .config import Config
from .exceptions import AuthenticationError, ProtocolError, TransportError, UTorrentError
from .models import Action, ConnectionParams, Priority, RequestResult, SettingsKey

__version__ = "0.1.0"
__all__ = [
    "UTorrentClient",
    "get_result",
    "Config",
    "ConnectionParams",
    "Action",
    "Priority",
    "RequestResult",
    "SettingsKey",
    "UTorrentError",
    "AuthenticationError",
    "ProtocolError",
    "TransportError",
]
