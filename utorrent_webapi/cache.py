"""
Local cache of the WebUI torrent list.

The server tags every list response with a cache id. Sending that id back as
``cid`` makes the server answer with a delta, which is merged here into the
last known set of torrents.
"""

from typing import Dict, List, Optional

from .logger import logger
from .models import Torrent, TorrentListSnapshot


class TorrentsCache:
    def __init__(self):
        self._torrents: Dict[str, Torrent] = {}
        self._cache_id: Optional[str] = None

    @property
    def cache_id(self) -> Optional[str]:
        return self._cache_id

    def update(self, snapshot: TorrentListSnapshot):
        if snapshot.is_full:
            self._torrents = {torrent.hash: torrent for torrent in snapshot.torrents}
            logger.debug(f"Torrent cache reset with {len(self._torrents)} torrents")
        else:
            for torrent in snapshot.changed:
                self._torrents[torrent.hash] = torrent
            for info_hash in snapshot.removed:
                self._torrents.pop(info_hash, None)
            logger.debug(
                f"Torrent cache delta applied: {len(snapshot.changed)} changed, "
                f"{len(snapshot.removed)} removed"
            )
        self._cache_id = snapshot.cache_id

    def get(self, info_hash: str) -> Optional[Torrent]:
        return self._torrents.get(info_hash)

    def list(self) -> List[Torrent]:
        return list(self._torrents.values())

    def clear(self):
        self._torrents = {}
        self._cache_id = None

    def __len__(self):
        return len(self._torrents)

    def __contains__(self, info_hash):
        return info_hash in self._torrents
