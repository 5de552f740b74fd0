"""
Command-line interface for the uTorrent WebUI client.

Provides terminal access to the client operations:
- Torrent listing and details (list, info, files, props)
- Torrent operations (add, start, stop, pause, unpause, force-start, recheck, remove)
- File priorities and client settings

Usage:
    utorrent-webapi list
    utorrent-webapi add <magnet/url/file>
    utorrent-webapi stop <info_hash> [<info_hash> ...]
    utorrent-webapi priority <info_hash> high 0 2
    utorrent-webapi settings max_dl_rate
    utorrent-webapi set max_dl_rate 500

Connection defaults come from the UTORRENT_* environment variables.
"""

import argparse
import dataclasses
import json
import os
import sys

from .client import UTorrentClient
from .config import Config
from .exceptions import UTorrentError
from .models import ConnectionParams, Priority, RequestResult


SIMPLE_ACTIONS = {
    "start": "start_torrent",
    "stop": "stop_torrent",
    "pause": "pause_torrent",
    "unpause": "unpause_torrent",
    "force-start": "force_start_torrent",
    "recheck": "recheck_torrent",
}


def format_bytes(size):
    """Format bytes as human-readable string."""
    if size is None:
        return "N/A"
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} PB"


def format_state(torrent):
    if torrent.is_paused:
        return "paused"
    if torrent.is_started:
        return "seeding" if torrent.is_complete else "downloading"
    return "finished" if torrent.is_complete else "stopped"


def build_parser():
    parser = argparse.ArgumentParser(
        prog="utorrent-webapi",
        description="uTorrent WebUI CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s add magnet:?xt=...
  %(prog)s add ./debian.iso.torrent
  %(prog)s remove <info_hash> --data
  %(prog)s priority <info_hash> skip 1 2
"""
    )
    parser.add_argument("--scheme", default=Config.UTORRENT_SCHEME, choices=["http", "https"])
    parser.add_argument("--host", default=Config.UTORRENT_HOST, help="WebUI host")
    parser.add_argument("--port", type=int, default=Config.UTORRENT_PORT, help="WebUI port")
    parser.add_argument("--username", default=Config.UTORRENT_USERNAME, help="WebUI username")
    parser.add_argument("--password", default=Config.UTORRENT_PASSWORD, help="WebUI password")
    parser.add_argument("--timeout", type=float, default=Config.UTORRENT_TIMEOUT,
                        help="HTTP timeout in seconds")
    parser.add_argument("--json", action="store_true", help="Print raw JSON output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("list", help="List all torrents")

    info_parser = subparsers.add_parser("info", help="Show torrent details")
    info_parser.add_argument("info_hash", help="Torrent info hash")

    files_parser = subparsers.add_parser("files", help="List files of a torrent")
    files_parser.add_argument("info_hash", help="Torrent info hash")

    props_parser = subparsers.add_parser("props", help="Show torrent properties")
    props_parser.add_argument("info_hash", help="Torrent info hash")

    add_parser = subparsers.add_parser("add", help="Add a torrent")
    add_parser.add_argument("uri", help="Magnet URI, HTTP URL, or .torrent file path")

    for command in SIMPLE_ACTIONS:
        action_parser = subparsers.add_parser(command, help=f"{command.capitalize()} torrents")
        action_parser.add_argument("hashes", nargs="+", help="Torrent info hashes")

    rm_parser = subparsers.add_parser("remove", help="Remove torrents")
    rm_parser.add_argument("hashes", nargs="+", help="Torrent info hashes")
    rm_parser.add_argument("--data", action="store_true", help="Also delete downloaded data")

    prio_parser = subparsers.add_parser("priority", help="Set file priority")
    prio_parser.add_argument("info_hash", help="Torrent info hash")
    prio_parser.add_argument("priority", choices=[p.name.lower() for p in Priority])
    prio_parser.add_argument("indices", nargs="+", type=int, help="File indices")

    settings_parser = subparsers.add_parser("settings", help="Show client settings")
    settings_parser.add_argument("names", nargs="*", help="Only show these settings")

    set_parser = subparsers.add_parser("set", help="Change a client setting")
    set_parser.add_argument("name", help="Setting name")
    set_parser.add_argument("value", help="Setting value")

    return parser


def print_result(result):
    if result == RequestResult.SUCCESS:
        print("OK")
        return 0
    print("Request failed", file=sys.stderr)
    return 1


def run(client, args):
    if args.command == "list":
        torrents = sorted(client.get_torrent_list(), key=lambda t: t.queue_order)
        if args.json:
            print(json.dumps([dataclasses.asdict(t) for t in torrents], indent=2))
        elif not torrents:
            print("No torrents found.")
        else:
            print(f"{'HASH':<20} {'STATE':<12} {'PROGRESS':<10} {'SIZE':<12} {'NAME'}")
            print("-" * 90)
            for t in torrents:
                progress = f"{t.progress_percent:.1f}%"
                print(f"{t.hash[:20]:<20} {format_state(t):<12} {progress:<10} "
                      f"{format_bytes(t.size):<12} {t.name[:40]}")
        return 0

    if args.command == "info":
        torrent = client.get_torrent(args.info_hash)
        if torrent is None:
            print(f"Torrent not found: {args.info_hash}", file=sys.stderr)
            return 1
        print(json.dumps(dataclasses.asdict(torrent), indent=2))
        return 0

    if args.command == "files":
        files = client.get_torrent_files(args.info_hash).get(args.info_hash)
        if args.json:
            print(json.dumps([dataclasses.asdict(f) for f in files], indent=2))
        elif not files:
            print("No files found.")
        else:
            print(f"{'INDEX':<6} {'PRIORITY':<9} {'PROGRESS':<10} {'SIZE':<12} {'PATH'}")
            print("-" * 80)
            for index, f in enumerate(files):
                print(f"{index:<6} {f.priority.name.lower():<9} {f.progress * 100:<9.1f}% "
                      f"{format_bytes(f.size):<12} {f.name}")
        return 0

    if args.command == "props":
        props = client.get_torrent_properties(args.info_hash).get(args.info_hash)
        if props is None:
            print(f"Torrent not found: {args.info_hash}", file=sys.stderr)
            return 1
        print(json.dumps(dataclasses.asdict(props), indent=2))
        return 0

    if args.command == "add":
        if os.path.exists(args.uri):
            return print_result(client.add_torrent_file(args.uri))
        return print_result(client.add_torrent_url(args.uri))

    if args.command in SIMPLE_ACTIONS:
        return print_result(getattr(client, SIMPLE_ACTIONS[args.command])(args.hashes))

    if args.command == "remove":
        if args.data:
            return print_result(client.remove_data_torrent(args.hashes))
        return print_result(client.remove_torrent(args.hashes))

    if args.command == "priority":
        priority = Priority[args.priority.upper()]
        return print_result(client.set_torrent_file_priority(args.info_hash, priority, args.indices))

    if args.command == "settings":
        settings = client.get_client_settings()
        names = args.names or sorted(settings)
        values = {name: settings[name] for name in names if name in settings}
        if args.json:
            print(json.dumps(values, indent=2))
        else:
            for name, value in values.items():
                print(f"{name} = {value}")
        return 0

    if args.command == "set":
        return print_result(client.set_client_setting(args.name, args.value))

    return 1


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    params = ConnectionParams(
        scheme=args.scheme,
        host=args.host,
        port=args.port,
        username=args.username,
        password=args.password,
        timeout=args.timeout
    )

    try:
        with UTorrentClient(params) as client:
            code = run(client, args)
    except (UTorrentError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
