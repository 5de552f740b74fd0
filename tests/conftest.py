import os
import tempfile

# Keep test runs from writing the default log file
os.environ.setdefault("LOG_PATH", tempfile.NamedTemporaryFile().name)

import bencodepy
import pytest
from unittest.mock import MagicMock

from utorrent_webapi.client import UTorrentClient
from utorrent_webapi.config import TestConfig
from utorrent_webapi.models import ConnectionParams
from utorrent_webapi.rest_client import RESTClient


TOKEN = "gS0iXk2bsVHRgQ1N2uKfDxxMoGGCBKG3t0c6OfMJ7-8B_ql1LhAxmlLNBFU="
TOKEN_HTML = f"<html><div id='token' style='display:none;'>{TOKEN}</div></html>"
BASE_URL = f"http://{TestConfig.UTORRENT_HOST}:{TestConfig.UTORRENT_PORT}/gui/"


def torrent_row(info_hash, name="debian.iso", status=201, progress=1000, queue_order=-1):
    return [
        info_hash, status, name, 661651456, progress, 661651456, 1323302912, 2000,
        1024, 0, 0, "linux", 3, 12, 5, 40, 65536, queue_order, 0,
    ]


@pytest.fixture
def connection_params():
    return ConnectionParams.from_config(TestConfig)


@pytest.fixture
def rest_client():
    return MagicMock(spec=RESTClient)


@pytest.fixture
def client(connection_params, rest_client):
    return UTorrentClient(connection_params, rest_client=rest_client)


@pytest.fixture
def torrent_path(tmp_path):
    path = tmp_path / "debian.iso.torrent"
    path.write_bytes(bencodepy.encode({
        b"announce": b"http://bttracker.debian.org:6969/announce",
        b"info": {
            b"name": b"debian.iso",
            b"length": 1048576,
            b"piece length": 262144,
            b"pieces": b"\x00" * 80,
        },
    }))
    return str(path)
