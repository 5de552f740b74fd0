"""
Abstract base class defining the interface of a uTorrent WebUI client.

UTorrentClient implements it over HTTP; tests and callers that only need the
interface can depend on this class instead.

Methods taking ``hashes`` accept a single info hash or a list of them. Methods
that trigger a remote action return a RequestResult.
"""

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from .models import (
    ClientSettings,
    Priority,
    RequestResult,
    SettingsKey,
    Torrent,
    TorrentFileList,
    TorrentPropertiesList,
)


Hashes = Union[str, Sequence[str]]


class BaseTorrentClient(ABC):
    """Abstract base class for uTorrent WebUI client implementations."""

    @abstractmethod
    def check_connection(self) -> bool:
        """Test if the WebUI is reachable and hands out a token."""
        pass

    @abstractmethod
    def add_torrent_url(self, url: str) -> RequestResult:
        """
        Add a torrent from a URL or magnet link.

        Args:
            url: HTTP/HTTPS URL to a .torrent file, or a magnet URI

        Returns:
            RequestResult.SUCCESS if the server acknowledged the request
        """
        pass

    @abstractmethod
    def add_torrent_file(self, path: str) -> RequestResult:
        """
        Upload a local .torrent file.

        Args:
            path: Path to the .torrent file

        Returns:
            RequestResult.SUCCESS if the server acknowledged the upload
        """
        pass

    @abstractmethod
    def get_torrent_list(self) -> List[Torrent]:
        """Refresh the torrent cache and return the current torrents."""
        pass

    @abstractmethod
    def get_torrent(self, info_hash: str) -> Optional[Torrent]:
        """Refresh the torrent cache and return one torrent, or None."""
        pass

    @abstractmethod
    def get_torrent_files(self, hashes: Hashes) -> TorrentFileList:
        """Get the files of one or more torrents."""
        pass

    @abstractmethod
    def get_torrent_properties(self, hashes: Hashes) -> TorrentPropertiesList:
        """Get trackers, rate limits and seeding options of one or more torrents."""
        pass

    @abstractmethod
    def start_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def stop_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def pause_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def force_start_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def unpause_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def recheck_torrent(self, hashes: Hashes) -> RequestResult:
        pass

    @abstractmethod
    def remove_torrent(self, hashes: Hashes) -> RequestResult:
        """Remove torrents from the client, keeping downloaded data."""
        pass

    @abstractmethod
    def remove_data_torrent(self, hashes: Hashes) -> RequestResult:
        """Remove torrents from the client together with their data."""
        pass

    @abstractmethod
    def set_torrent_file_priority(
        self, info_hash: str, priority: Priority, file_indices: Sequence[int]
    ) -> RequestResult:
        """
        Set the download priority of files within a torrent.

        Args:
            info_hash: The torrent's info hash
            priority: Priority to apply
            file_indices: Zero-based indices of the files, as listed by get_torrent_files

        Returns:
            Result of the operation
        """
        pass

    @abstractmethod
    def set_client_setting(self, key: Union[SettingsKey, str], value) -> RequestResult:
        """Change one client setting."""
        pass

    @abstractmethod
    def set_client_settings(
        self, settings: Union[Mapping[str, object], Sequence[Tuple[str, object]]]
    ) -> RequestResult:
        """Change several client settings in one request."""
        pass

    @abstractmethod
    def get_client_settings(self) -> ClientSettings:
        """Get all client settings with their declared types."""
        pass

    @abstractmethod
    def close(self):
        """Release the underlying HTTP session."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
