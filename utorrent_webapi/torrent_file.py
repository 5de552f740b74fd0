"""
Reader for .torrent metainfo files.

Used to reject files that are not valid torrents before they are uploaded to
the WebUI, and to report the info hash the server will list them under.

Custom exceptions:
- TorrentFileError: Base exception for all torrent file errors
- InvalidTorrentFileError: Raised when file is not valid bencode format
- MissingRequiredKeyError: Raised when required keys are missing
"""

import hashlib
import os

import bencodepy


class TorrentFileError(Exception):
    """Base exception for torrent file parsing errors."""
    pass


class InvalidTorrentFileError(TorrentFileError):
    """Raised when torrent file is not valid bencode format."""
    pass


class MissingRequiredKeyError(TorrentFileError):
    """Raised when torrent file is missing required keys."""
    pass


class TorrentMetainfo:
    def __init__(self, torrent_path):
        self.path = torrent_path
        try:
            with open(torrent_path, 'rb') as f:
                file_content = f.read()
        except FileNotFoundError:
            raise TorrentFileError(f"Torrent file not found: {torrent_path}")
        except PermissionError:
            raise TorrentFileError(f"Permission denied reading torrent file: {torrent_path}")
        except OSError as e:
            raise TorrentFileError(f"Failed to read torrent file: {e}")

        try:
            decoded = bencodepy.decode(file_content)
        except bencodepy.DecodingError as e:
            raise InvalidTorrentFileError(f"Invalid bencode format: {e}")
        except Exception as e:
            raise InvalidTorrentFileError(f"Failed to decode torrent file: {e}")

        if not isinstance(decoded, dict):
            raise InvalidTorrentFileError("Torrent data is not a dictionary")
        if b'info' not in decoded:
            raise MissingRequiredKeyError("Torrent file missing required 'info' dictionary")

        # Raw info dict is kept for hashing, which needs the original bytes
        self._raw_info = decoded[b'info']
        if not isinstance(self._raw_info, dict):
            raise InvalidTorrentFileError("'info' field is not a dictionary")
        if b'name' not in self._raw_info:
            raise MissingRequiredKeyError("Torrent info missing required 'name' key")

        self.is_multi_file = b'files' in self._raw_info

    @property
    def name(self):
        return self._raw_info[b'name'].decode('utf-8', errors='replace')

    def info_hash(self):
        return hashlib.sha1(bencodepy.encode(self._raw_info)).hexdigest().upper()

    def files(self):
        if self.is_multi_file:
            return [
                os.path.join(self.name, *(p.decode('utf-8', errors='replace') for p in f[b'path']))
                for f in self._raw_info[b'files']
            ]
        return [self.name]

    def size(self):
        if self.is_multi_file:
            return sum(f[b'length'] for f in self._raw_info[b'files'])
        return self._raw_info.get(b'length', 0)
