import json

import pytest

from utorrent_webapi.exceptions import ProtocolError
from utorrent_webapi.message_parser import (
    parse_client_settings,
    parse_torrent_file_list,
    parse_torrent_list_snapshot,
    parse_torrent_properties,
)
from utorrent_webapi.models import Priority, SettingsKey, SettingType, TorrentStatus

from conftest import torrent_row


class TestTorrentListSnapshot:
    def test_full_snapshot(self):
        message = json.dumps({
            "build": 46407,
            "label": [["linux", 2]],
            "torrents": [torrent_row("A"), torrent_row("B", name="ubuntu.iso")],
            "torrentc": "1536924436",
        })

        snapshot = parse_torrent_list_snapshot(message)

        assert snapshot.is_full
        assert snapshot.cache_id == "1536924436"
        assert snapshot.build == 46407
        assert snapshot.labels == [["linux", 2]]
        assert [t.hash for t in snapshot.torrents] == ["A", "B"]
        assert snapshot.torrents[1].name == "ubuntu.iso"

    def test_delta(self):
        message = json.dumps({
            "build": 46407,
            "label": [],
            "torrentp": [torrent_row("A")],
            "torrentm": ["B"],
            "torrentc": "1536924437",
        })

        snapshot = parse_torrent_list_snapshot(message)

        assert not snapshot.is_full
        assert [t.hash for t in snapshot.changed] == ["A"]
        assert snapshot.removed == ["B"]
        assert snapshot.cache_id == "1536924437"

    def test_numeric_cache_id_is_kept_as_string(self):
        snapshot = parse_torrent_list_snapshot(json.dumps({"torrents": [], "torrentc": 42}))
        assert snapshot.cache_id == "42"

    def test_null_labels_become_empty(self):
        snapshot = parse_torrent_list_snapshot(json.dumps({"label": None, "torrents": [], "torrentc": "1"}))
        assert snapshot.labels == []

    def test_torrent_fields(self):
        row = torrent_row("A", status=TorrentStatus.STARTED | TorrentStatus.CHECKED | TorrentStatus.LOADED)
        row += ["http://example.com/a.torrent", "", "Seeding", "", 1700000000, 1700003600, "", "C:\\Downloads"]
        torrent = parse_torrent_list_snapshot(json.dumps({"torrents": [row], "torrentc": "1"})).torrents[0]

        assert torrent.size == 661651456
        assert torrent.progress_percent == 100.0
        assert torrent.ratio_value == 2.0
        assert torrent.label == "linux"
        assert torrent.is_started
        assert not torrent.is_paused
        assert torrent.is_complete
        assert torrent.statuses == {TorrentStatus.STARTED, TorrentStatus.CHECKED, TorrentStatus.LOADED}
        assert torrent.download_url == "http://example.com/a.torrent"
        assert torrent.status_message == "Seeding"
        assert torrent.added_on == 1700000000
        assert torrent.save_path == "C:\\Downloads"

    def test_short_row_raises(self):
        with pytest.raises(ProtocolError):
            parse_torrent_list_snapshot(json.dumps({"torrents": [["A", 201, "name"]]}))

    @pytest.mark.parametrize("message", [None, "", "not json", "[1, 2]"])
    def test_invalid_message_raises(self, message):
        with pytest.raises(ProtocolError):
            parse_torrent_list_snapshot(message)


class TestTorrentFileList:
    def test_files_for_several_torrents(self):
        message = json.dumps({
            "build": 46407,
            "files": [
                "A", [["poster.jpg", 100, 100, 0], ["movie.mp4", 1000, 250, 3]],
                "B", [["debian.iso", 2048, 0, 2]],
            ],
        })

        file_list = parse_torrent_file_list(message)

        assert len(file_list) == 2
        poster, movie = file_list.get("A")
        assert poster.priority == Priority.SKIP
        assert movie.priority == Priority.HIGH
        assert movie.progress == 0.25
        assert file_list.get("B")[0].name == "debian.iso"
        assert file_list.get("missing") == []

    def test_odd_files_array_raises(self):
        with pytest.raises(ProtocolError):
            parse_torrent_file_list(json.dumps({"files": ["A"]}))

    def test_unknown_priority_raises(self):
        with pytest.raises(ProtocolError):
            parse_torrent_file_list(json.dumps({"files": ["A", [["x", 1, 0, 9]]]}))


class TestTorrentProperties:
    def test_properties(self):
        message = json.dumps({
            "build": 46407,
            "props": [{
                "hash": "A",
                "trackers": "http://tracker.one/announce\r\n\r\nhttp://tracker.two/announce\r\n",
                "ulrate": 1024,
                "dlrate": 0,
                "superseed": 0,
                "dht": 1,
                "pex": 1,
                "seed_override": 0,
                "seed_ratio": 1500,
                "seed_time": 0,
                "ulslots": 4,
            }],
        })

        props = parse_torrent_properties(message).get("A")

        assert props.trackers == ["http://tracker.one/announce", "http://tracker.two/announce"]
        assert props.upload_rate == 1024
        assert props.dht == 1
        assert props.seed_ratio == 1500
        assert props.upload_slots == 4

    def test_entry_without_hash_raises(self):
        with pytest.raises(ProtocolError):
            parse_torrent_properties(json.dumps({"props": [{"dht": 1}]}))


class TestClientSettings:
    def test_settings_are_typed(self):
        message = json.dumps({
            "build": 46407,
            "settings": [
                ["max_dl_rate", 0, "500"],
                ["dht", 1, "true"],
                ["dir_active_download", 2, "C:\\Downloads"],
            ],
        })

        settings = parse_client_settings(message)

        assert settings[SettingsKey.MAX_DOWNLOAD_RATE] == 500
        assert settings["dht"] is True
        assert settings.get("dir_active_download").type == SettingType.STRING
        assert settings["dir_active_download"] == "C:\\Downloads"
        assert "missing" not in settings
        with pytest.raises(KeyError):
            settings["missing"]

    def test_malformed_row_raises(self):
        with pytest.raises(ProtocolError):
            parse_client_settings(json.dumps({"settings": [["dht", 7, "true"]]}))


@pytest.mark.parametrize("parse, payload", [
    (parse_torrent_list_snapshot, {"torrents": None}),
    (parse_torrent_list_snapshot, {"torrentp": None}),
    (parse_torrent_list_snapshot, {"torrentp": [], "torrentm": "B"}),
    (parse_torrent_file_list, {"files": ["A", None]}),
    (parse_torrent_properties, {"props": None}),
    (parse_client_settings, {"settings": {"dht": 1}}),
])
def test_collections_of_wrong_type_raise(parse, payload):
    with pytest.raises(ProtocolError):
        parse(json.dumps(payload))
