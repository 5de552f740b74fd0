"""
Conversion of WebUI JSON payloads into typed snapshots.

The WebUI encodes torrents and files as positional arrays rather than
objects. Columns are documented on the models; anything that does not have
the expected shape raises ProtocolError.
"""

import json
from typing import Any, Dict, List, Optional

from .exceptions import ProtocolError
from .models import (
    ClientSetting,
    ClientSettings,
    Priority,
    SettingType,
    Torrent,
    TorrentFile,
    TorrentFileList,
    TorrentListSnapshot,
    TorrentProperties,
    TorrentPropertiesList,
)


# Leading columns of a list row that every WebUI version sends
REQUIRED_TORRENT_COLUMNS = 19
OPTIONAL_TORRENT_FIELDS = [
    "download_url",
    "rss_feed_url",
    "status_message",
    "stream_id",
    "added_on",
    "completed_on",
    None,  # app update url
    "save_path",
]


def _load(message: Optional[str]) -> Dict[str, Any]:
    if message is None:
        raise ProtocolError("Cannot parse a null message")
    try:
        data = json.loads(message)
    except ValueError as e:
        raise ProtocolError(f"Malformed JSON message: {e}") from e
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _list_field(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ProtocolError(f"Expected a list for {key!r}, got {value!r}")
    return value


def _torrent_from_row(row: List[Any]) -> Torrent:
    if not isinstance(row, list) or len(row) < REQUIRED_TORRENT_COLUMNS:
        raise ProtocolError(f"Torrent row has unexpected shape: {row!r}")

    (info_hash, status, name, size, progress, downloaded, uploaded, ratio,
     upload_speed, download_speed, eta, label, peers_connected, peers_in_swarm,
     seeds_connected, seeds_in_swarm, availability, queue_order,
     remaining) = row[:REQUIRED_TORRENT_COLUMNS]

    extra = {}
    for name_, value in zip(OPTIONAL_TORRENT_FIELDS, row[REQUIRED_TORRENT_COLUMNS:]):
        if name_:
            extra[name_] = value

    return Torrent(
        hash=info_hash,
        status=status,
        name=name,
        size=size,
        progress=progress,
        downloaded=downloaded,
        uploaded=uploaded,
        ratio=ratio,
        upload_speed=upload_speed,
        download_speed=download_speed,
        eta=eta,
        label=label,
        peers_connected=peers_connected,
        peers_in_swarm=peers_in_swarm,
        seeds_connected=seeds_connected,
        seeds_in_swarm=seeds_in_swarm,
        availability=availability,
        queue_order=queue_order,
        remaining=remaining,
        **extra,
    )


def parse_torrent_list_snapshot(message: Optional[str]) -> TorrentListSnapshot:
    """
    Parse a ``list=1`` response.

    A response holding ``torrents`` is a full snapshot. Otherwise the server
    answered a ``cid`` request with ``torrentp`` (added or changed rows) and
    ``torrentm`` (removed hashes).
    """
    data = _load(message)

    cache_id = data.get("torrentc")
    snapshot = TorrentListSnapshot(
        cache_id=str(cache_id) if cache_id is not None else None,
        build=data.get("build"),
        labels=data.get("label") or [],
    )

    if "torrents" in data:
        snapshot.torrents = [_torrent_from_row(row) for row in _list_field(data, "torrents")]
    else:
        snapshot.changed = [_torrent_from_row(row) for row in _list_field(data, "torrentp")]
        snapshot.removed = list(_list_field(data, "torrentm"))

    return snapshot


def parse_torrent_file_list(message: Optional[str]) -> TorrentFileList:
    """Parse a ``getfiles`` response, where ``files`` alternates hash and rows."""
    data = _load(message)
    entries = data.get("files")
    if not isinstance(entries, list) or len(entries) % 2:
        raise ProtocolError(f"Unexpected files payload: {entries!r}")

    result = TorrentFileList(build=data.get("build"))
    for info_hash, rows in zip(entries[0::2], entries[1::2]):
        if not isinstance(rows, list):
            raise ProtocolError(f"Unexpected file rows for {info_hash!r}: {rows!r}")
        files = []
        for row in rows:
            try:
                name, size, downloaded, priority = row[:4]
                files.append(TorrentFile(name, size, downloaded, Priority(priority)))
            except (TypeError, ValueError) as e:
                raise ProtocolError(f"Unexpected file row {row!r}: {e}") from e
        result.files[info_hash] = files
    return result


def parse_torrent_properties(message: Optional[str]) -> TorrentPropertiesList:
    data = _load(message)
    result = TorrentPropertiesList(build=data.get("build"))
    for props in _list_field(data, "props"):
        try:
            trackers = [t for t in props.get("trackers", "").replace("\r", "").split("\n") if t]
            result.properties[props["hash"]] = TorrentProperties(
                hash=props["hash"],
                trackers=trackers,
                upload_rate=props.get("ulrate", 0),
                download_rate=props.get("dlrate", 0),
                superseed=props.get("superseed", 0),
                dht=props.get("dht", 0),
                pex=props.get("pex", 0),
                seed_override=props.get("seed_override", 0),
                seed_ratio=props.get("seed_ratio", 0),
                seed_time=props.get("seed_time", 0),
                upload_slots=props.get("ulslots", 0),
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise ProtocolError(f"Unexpected properties entry {props!r}: {e}") from e
    return result


def parse_client_settings(message: Optional[str]) -> ClientSettings:
    """Parse a ``getsettings`` response of ``[name, type, value]`` rows."""
    data = _load(message)
    result = ClientSettings(build=data.get("build"))
    for row in _list_field(data, "settings"):
        try:
            name, setting_type, value = row[:3]
            result.settings[name] = ClientSetting(name, SettingType(setting_type), str(value))
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"Unexpected setting row {row!r}: {e}") from e
    return result
