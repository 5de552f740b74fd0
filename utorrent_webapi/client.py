"""
Client for the uTorrent WebUI API.

Provides programmatic access to the WebUI including:
- Token authentication with a single retry when the token expires
- Torrent operations (add by URL or file, start, stop, pause, remove, recheck)
- File priorities, torrent properties and client settings
- A torrent list cache refreshed with server-side deltas

Usage:
    from utorrent_webapi import ConnectionParams, UTorrentClient

    params = ConnectionParams(host="192.168.1.10", port=8080,
                              username="admin", password="secret")
    with UTorrentClient(params) as client:
        for torrent in client.get_torrent_list():
            print(torrent.name, torrent.progress_percent)
"""

import os
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode, urljoin

from .auth import TokenProvider
from .base_client import BaseTorrentClient, Hashes
from .cache import TorrentsCache
from .exceptions import AuthenticationError, BadRequestError, ProtocolError, UTorrentError
from .logger import logger
from .message_parser import (
    parse_client_settings,
    parse_torrent_file_list,
    parse_torrent_list_snapshot,
    parse_torrent_properties,
)
from .models import (
    Action,
    ClientSettings,
    ConnectionParams,
    Priority,
    RequestResult,
    SettingsKey,
    Torrent,
    TorrentFileList,
    TorrentPropertiesList,
)
from .rest_client import BITTORRENT_CONTENT_TYPE, FilePart, RESTClient
from .torrent_file import TorrentFileError, TorrentMetainfo


ACTION_QUERY_PARAM_NAME = "action"
TOKEN_PARAM_NAME = "token"
URL_PARAM_NAME = "s"
VALUE_PARAM_NAME = "v"
LIST_QUERY_PARAM_NAME = "list"
CACHE_ID_QUERY_PARAM = "cid"
HASH_QUERY_PARAM_NAME = "hash"
FILE_INDEX_QUERY_PARAM_NAME = "f"
PRIORITY_QUERY_PARAM_NAME = "p"
TORRENT_FILE_PART_NAME = "torrent_file"
TOKEN_PATH = "token.html"

# One request plus one retry with a fresh token
MAX_AUTH_ATTEMPTS = 2

# Canned acknowledgment: every successful action response carries the build number
SUCCESS_MARKER = "build"

QueryParams = List[Tuple[str, str]]


def get_result(result: Optional[str]) -> RequestResult:
    """
    Interpret the raw text of an action response.

    The WebUI has no explicit status field; a response containing "build"
    is its acknowledgment and anything else counts as a failure.
    """
    if result is not None and SUCCESS_MARKER in result:
        return RequestResult.SUCCESS
    return RequestResult.FAIL


def _as_hash_list(hashes: Hashes) -> List[str]:
    if isinstance(hashes, str):
        return [hashes]
    return list(hashes)


def _setting_name(key) -> str:
    if isinstance(key, SettingsKey):
        return key.key_value
    return key


def _setting_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UTorrentClient(BaseTorrentClient):
    def __init__(
        self,
        connection_params: Optional[ConnectionParams] = None,
        rest_client: Optional[RESTClient] = None
    ):
        self.connection_params = connection_params or ConnectionParams.from_config()
        self.server_url = self.connection_params.base_url()
        self.client = rest_client or RESTClient(
            username=self.connection_params.username,
            password=self.connection_params.password,
            timeout=self.connection_params.timeout
        )
        self.torrents_cache = TorrentsCache()
        self.token_provider = TokenProvider(self._fetch_token)

    def _fetch_token(self) -> Optional[str]:
        return self.client.get(urljoin(self.server_url, TOKEN_PATH))

    def _build_url(self, params: QueryParams) -> str:
        return f"{self.server_url}?{urlencode(params)}"

    def _invoke_with_authentication(self, params: QueryParams, executor: Callable[[str], Optional[str]]) -> str:
        """
        Run ``executor`` on the URL built from ``params`` plus the current token.

        A 4xx answer invalidates the token and the request is repeated once with
        a fresh one. A second 4xx means the credentials themselves are rejected.
        """
        for attempt in range(1, MAX_AUTH_ATTEMPTS + 1):
            token = None
            try:
                token = self.token_provider.get()
                response = executor(self._build_url(params + [(TOKEN_PARAM_NAME, token)]))
            except BadRequestError as e:
                if token is not None:
                    self.token_provider.invalidate(token)
                if attempt < MAX_AUTH_ATTEMPTS:
                    logger.warning(f"WebUI rejected the request (HTTP {e.status_code}), refreshing token")
                    continue
                logger.error(f"WebUI rejected the request again after a token refresh (HTTP {e.status_code})")
                raise AuthenticationError(
                    "Impossible to connect to uTorrent, wrong username or password"
                ) from e

            if response is None:
                raise ProtocolError(f"Received null response from server for {params!r}")
            return response

    def check_connection(self) -> bool:
        """Test if the connection to the WebUI is working."""
        try:
            self.token_provider.get()
            return True
        except UTorrentError as e:
            logger.error(f"Failed to connect to uTorrent at {self.server_url}: {e}")
            return False

    def execute_action(
        self,
        action: Action,
        hashes: Hashes = (),
        params: Sequence[Tuple[str, object]] = ()
    ) -> str:
        query = [(ACTION_QUERY_PARAM_NAME, action.wire_name)]
        query.extend((name, str(value)) for name, value in params)
        query.extend((HASH_QUERY_PARAM_NAME, info_hash) for info_hash in _as_hash_list(hashes))
        logger.debug(f"Executing {action.wire_name} on {len(_as_hash_list(hashes))} torrent(s)")
        return self._invoke_with_authentication(query, self.client.get)

    def _execute_base_torrent_action(self, action: Action, hashes: Hashes) -> RequestResult:
        return get_result(self.execute_action(action, hashes))

    def add_torrent_url(self, url: str) -> RequestResult:
        logger.info(f"Adding torrent from {url}")
        return get_result(self.execute_action(Action.ADD_URL, params=[(URL_PARAM_NAME, url)]))

    def add_torrent_file(self, path) -> RequestResult:
        path = os.fspath(path)
        try:
            metainfo = TorrentMetainfo(path)
        except TorrentFileError as e:
            logger.error(f"Refusing to upload {path}: {e}")
            raise ValueError(f"Invalid torrent file: {e}") from e

        logger.info(f"Uploading {metainfo.name} ({metainfo.info_hash()})")
        parts = [FilePart(TORRENT_FILE_PART_NAME, path, BITTORRENT_CONTENT_TYPE)]
        query = [(ACTION_QUERY_PARAM_NAME, Action.ADD_FILE.wire_name)]
        result = self._invoke_with_authentication(query, lambda url: self.client.post(url, parts))
        return get_result(result)

    def _update_torrent_cache(self):
        query = [(LIST_QUERY_PARAM_NAME, "1")]
        if self.torrents_cache.cache_id is not None:
            query.append((CACHE_ID_QUERY_PARAM, self.torrents_cache.cache_id))

        message = self._invoke_with_authentication(query, self.client.get)
        self.torrents_cache.update(parse_torrent_list_snapshot(message))

    def get_torrent_list(self) -> List[Torrent]:
        self._update_torrent_cache()
        return self.torrents_cache.list()

    def get_torrent(self, info_hash: str) -> Optional[Torrent]:
        self._update_torrent_cache()
        return self.torrents_cache.get(info_hash)

    def get_torrent_files(self, hashes: Hashes) -> TorrentFileList:
        return parse_torrent_file_list(self.execute_action(Action.GET_FILES, hashes))

    def get_torrent_properties(self, hashes: Hashes) -> TorrentPropertiesList:
        return parse_torrent_properties(self.execute_action(Action.GET_PROP, hashes))

    def set_torrent_property(self, info_hash: str, name: str, value) -> RequestResult:
        params = [(URL_PARAM_NAME, name), (VALUE_PARAM_NAME, _setting_value(value))]
        return get_result(self.execute_action(Action.SET_PROP, info_hash, params))

    def start_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.START, hashes)

    def stop_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.STOP, hashes)

    def pause_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.PAUSE, hashes)

    def force_start_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.FORCE_START, hashes)

    def unpause_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.UN_PAUSE, hashes)

    def recheck_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.RECHECK, hashes)

    def remove_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.REMOVE, hashes)

    def remove_data_torrent(self, hashes: Hashes) -> RequestResult:
        return self._execute_base_torrent_action(Action.REMOVE_DATA, hashes)

    def set_torrent_file_priority(
        self, info_hash: str, priority: Priority, file_indices: Sequence[int]
    ) -> RequestResult:
        params = [(PRIORITY_QUERY_PARAM_NAME, int(priority))]
        params.extend((FILE_INDEX_QUERY_PARAM_NAME, int(index)) for index in file_indices)
        return get_result(self.execute_action(Action.SET_PRIORITY, info_hash, params))

    def set_client_setting(self, key: Union[SettingsKey, str], value) -> RequestResult:
        return self.set_client_settings([(key, value)])

    def set_client_settings(
        self, settings: Union[Mapping[str, object], Sequence[Tuple[str, object]]]
    ) -> RequestResult:
        if isinstance(settings, Mapping):
            settings = list(settings.items())
        params = [(_setting_name(name), _setting_value(value)) for name, value in settings]
        return get_result(self.execute_action(Action.SET_SETTING, params=params))

    def get_client_settings(self) -> ClientSettings:
        return parse_client_settings(self.execute_action(Action.GET_SETTINGS))

    def close(self):
        self.client.close()
