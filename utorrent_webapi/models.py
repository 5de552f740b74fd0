"""
Domain models for the uTorrent WebUI API.

Includes the closed sets of wire-level names (Action, SettingsKey, Priority,
TorrentStatus, SettingType, RequestResult), the connection parameters used to
build request URLs, and the typed snapshots produced by the message parser
(Torrent, TorrentFile, TorrentProperties, ClientSettings, TorrentListSnapshot).
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Any, Dict, Iterator, List, Optional, Set
from urllib.parse import urlunsplit

from .config import Config
from .exceptions import URIConstructionError


class Action(Enum):
    ADD_URL = "add-url"
    ADD_FILE = "add-file"
    GET_FILES = "getfiles"
    GET_PROP = "getprops"
    SET_PROP = "setprops"
    START = "start"
    STOP = "stop"
    PAUSE = "pause"
    FORCE_START = "forcestart"
    UN_PAUSE = "unpause"
    RECHECK = "recheck"
    REMOVE = "remove"
    REMOVE_DATA = "removedata"
    SET_PRIORITY = "setprio"
    GET_SETTINGS = "getsettings"
    SET_SETTING = "setsetting"

    @property
    def wire_name(self) -> str:
        return self.value


class SettingsKey(Enum):
    """Well-known uTorrent setting names accepted by the setsetting action."""
    BIND_PORT = "bind_port"
    MAX_UPLOAD_RATE = "max_ul_rate"
    MAX_DOWNLOAD_RATE = "max_dl_rate"
    MAX_CONNECTIONS_GLOBAL = "conns_globally"
    MAX_CONNECTIONS_PER_TORRENT = "conns_per_torrent"
    UPLOAD_SLOTS_PER_TORRENT = "ul_slots_per_torrent"
    MAX_ACTIVE_TORRENTS = "max_active_torrent"
    MAX_ACTIVE_DOWNLOADS = "max_active_downloads"
    DIR_ACTIVE_DOWNLOAD_FLAG = "dir_active_download_flag"
    DIR_ACTIVE_DOWNLOAD = "dir_active_download"
    DIR_COMPLETED_DOWNLOAD_FLAG = "dir_completed_download_flag"
    DIR_COMPLETED_DOWNLOAD = "dir_completed_download"
    DHT = "dht"
    PEX = "pex"
    LOCAL_PEER_DISCOVERY = "lsd"
    UPNP = "upnp"
    NATPMP = "natpmp"
    ENCRYPTION_MODE = "encryption_mode"
    SEED_RATIO = "seed_ratio"
    SEED_TIME = "seed_time"
    SEED_PRIORITIZED = "seeds_prioritized"
    WEBUI_ENABLE = "webui.enable"
    WEBUI_PORT = "webui.port"
    WEBUI_USERNAME = "webui.username"
    WEBUI_PASSWORD = "webui.password"

    @property
    def key_value(self) -> str:
        return self.value


class Priority(IntEnum):
    SKIP = 0
    LOW = 1
    NORMAL = 2
    HIGH = 3


class TorrentStatus(IntFlag):
    """Bits of the status field in a torrent list row."""
    STARTED = 1
    CHECKING = 2
    START_AFTER_CHECK = 4
    CHECKED = 8
    ERROR = 16
    PAUSED = 32
    QUEUED = 64
    LOADED = 128


class SettingType(IntEnum):
    INTEGER = 0
    BOOLEAN = 1
    STRING = 2


class RequestResult(Enum):
    SUCCESS = "success"
    FAIL = "fail"


@dataclass
class ConnectionParams:
    scheme: str = Config.UTORRENT_SCHEME
    host: str = Config.UTORRENT_HOST
    port: int = Config.UTORRENT_PORT
    username: Optional[str] = Config.UTORRENT_USERNAME
    password: Optional[str] = Config.UTORRENT_PASSWORD
    timeout: float = Config.UTORRENT_TIMEOUT

    @classmethod
    def from_config(cls, config=Config) -> "ConnectionParams":
        return cls(
            scheme=config.UTORRENT_SCHEME,
            host=config.UTORRENT_HOST,
            port=config.UTORRENT_PORT,
            username=config.UTORRENT_USERNAME,
            password=config.UTORRENT_PASSWORD,
            timeout=config.UTORRENT_TIMEOUT,
        )

    def base_url(self, path: str = "/gui/") -> str:
        """Build the WebUI base URL, rejecting parameters that cannot form one."""
        if self.scheme not in ("http", "https"):
            raise URIConstructionError(f"Unsupported scheme: {self.scheme!r}")
        if not self.host or any(c in self.host for c in "/?#@ "):
            raise URIConstructionError(f"Invalid host: {self.host!r}")
        try:
            port = int(self.port)
        except (TypeError, ValueError) as e:
            raise URIConstructionError(f"Invalid port: {self.port!r}") from e
        if not 1 <= port <= 65535:
            raise URIConstructionError(f"Port out of range: {port}")
        return urlunsplit((self.scheme, f"{self.host}:{port}", path, "", ""))


@dataclass(frozen=True)
class Torrent:
    """One row of the WebUI torrent list."""
    hash: str
    status: int
    name: str
    size: int
    progress: int  # per mille
    downloaded: int
    uploaded: int
    ratio: int  # per mille
    upload_speed: int
    download_speed: int
    eta: int
    label: str
    peers_connected: int
    peers_in_swarm: int
    seeds_connected: int
    seeds_in_swarm: int
    availability: int  # in 1/65536ths
    queue_order: int
    remaining: int
    download_url: Optional[str] = None
    rss_feed_url: Optional[str] = None
    status_message: Optional[str] = None
    stream_id: Optional[str] = None
    added_on: Optional[int] = None
    completed_on: Optional[int] = None
    save_path: Optional[str] = None

    @property
    def statuses(self) -> Set[TorrentStatus]:
        return {flag for flag in TorrentStatus if self.status & flag}

    @property
    def progress_percent(self) -> float:
        return self.progress / 10

    @property
    def ratio_value(self) -> float:
        return self.ratio / 1000

    @property
    def is_started(self) -> bool:
        return bool(self.status & TorrentStatus.STARTED)

    @property
    def is_paused(self) -> bool:
        return bool(self.status & TorrentStatus.PAUSED)

    @property
    def is_complete(self) -> bool:
        return self.progress >= 1000


@dataclass
class TorrentListSnapshot:
    """
    A parsed list response.

    A full snapshot carries ``torrents``; a delta carries ``changed`` and
    ``removed`` relative to the cache id sent with the request.
    """
    cache_id: Optional[str]
    build: Optional[int] = None
    labels: List[List[Any]] = field(default_factory=list)
    torrents: Optional[List[Torrent]] = None
    changed: List[Torrent] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return self.torrents is not None


@dataclass(frozen=True)
class TorrentFile:
    name: str
    size: int
    downloaded: int
    priority: Priority

    @property
    def progress(self) -> float:
        return self.downloaded / self.size if self.size > 0 else 0.0


@dataclass
class TorrentFileList:
    build: Optional[int] = None
    files: Dict[str, List[TorrentFile]] = field(default_factory=dict)

    def get(self, info_hash: str) -> List[TorrentFile]:
        return self.files.get(info_hash, [])

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class TorrentProperties:
    hash: str
    trackers: List[str]
    upload_rate: int
    download_rate: int
    superseed: int
    dht: int
    pex: int
    seed_override: int
    seed_ratio: int
    seed_time: int
    upload_slots: int


@dataclass
class TorrentPropertiesList:
    build: Optional[int] = None
    properties: Dict[str, TorrentProperties] = field(default_factory=dict)

    def get(self, info_hash: str) -> Optional[TorrentProperties]:
        return self.properties.get(info_hash)

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)

    def __len__(self) -> int:
        return len(self.properties)


@dataclass(frozen=True)
class ClientSetting:
    name: str
    type: SettingType
    raw_value: str

    @property
    def value(self):
        if self.type == SettingType.INTEGER:
            try:
                return int(self.raw_value)
            except ValueError:
                return self.raw_value
        if self.type == SettingType.BOOLEAN:
            return self.raw_value.lower() in ("true", "1")
        return self.raw_value


@dataclass
class ClientSettings:
    build: Optional[int] = None
    settings: Dict[str, ClientSetting] = field(default_factory=dict)

    def get(self, key) -> Optional[ClientSetting]:
        if isinstance(key, SettingsKey):
            key = key.key_value
        return self.settings.get(key)

    def __getitem__(self, key):
        setting = self.get(key)
        if setting is None:
            raise KeyError(key)
        return setting.value

    def __contains__(self, key) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.settings)

    def __len__(self) -> int:
        return len(self.settings)
