# rmtop/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

from rmtop import APP, DESC
from rmtop.app.config import INTERVAL_BOUNDS, TIMEOUT_BOUNDS, MonitorConfig

DEFAULT_COMMAND = "MONITOR"

EXAMPLES = (
    (
        "-h 192.168.0.123 -p 6821 -t 15 MONITOR",
        "Start monitoring instance on 192.168.0.123:6821 with 15 second timeout",
    ),
    (
        "-h 192.168.0.123 -p 6821 -i 30 MY_MONITOR",
        "Start monitoring instance on 192.168.0.123:6821 with 30 second interval and renamed MONITOR command",
    ),
    (
        "--url socket://10.0.0.5:7000 --records-file hashes.jsonl",
        "Monitor through a pyserial URL and write decoded HSET/GEOADD records to hashes.jsonl",
    ),
)


def bounded_int(lo: int, hi: int):
    def _parse(v: str) -> int:
        try:
            n = int(v)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid int value '{v}'") from None
        if not lo <= n <= hi:
            raise argparse.ArgumentTypeError(f"value {n} out of range {lo}-{hi}")
        return n

    return _parse


def build_parser() -> argparse.ArgumentParser:
    # -h is the host flag, so help lives on --help / -u
    epilog = "Examples:\n" + "\n".join(f"  {APP} {ex}\n      {desc}" for ex, desc in EXAMPLES)
    parser = argparse.ArgumentParser(
        prog=APP,
        description=DESC,
        add_help=False,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("command", nargs="?", default=DEFAULT_COMMAND,
                        help="MONITOR command name, if renamed on the server (default: MONITOR)")

    parser.add_argument("-h", "--host", default="127.0.0.1", help="Server hostname (127.0.0.1 by default)")
    parser.add_argument("-p", "--port", type=bounded_int(1, 65535), default=6379,
                        help="Server port (6379 by default)")
    parser.add_argument("-a", "--password", default=None, help="Password to use when connecting to the server")
    parser.add_argument("-t", "--timeout", type=bounded_int(*TIMEOUT_BOUNDS), default=3, metavar="1-300",
                        help="Connection timeout in seconds (3 by default)")
    parser.add_argument("-i", "--interval", type=bounded_int(*INTERVAL_BOUNDS), default=60, metavar="1-3600",
                        help="Interval in seconds (60 by default)")
    parser.add_argument("--url", default=None,
                        help="pyserial URL to connect through instead of host/port (e.g. socket://host:port)")
    parser.add_argument("--commands", default=None, metavar="FILE",
                        help="YAML command table for argument decoding (packaged table by default)")
    parser.add_argument("--records-file", default=None, metavar="FILE",
                        help="Append decoded records as JSON lines to FILE")
    parser.add_argument("--workers", type=bounded_int(1, 64), default=1,
                        help="Argument decoding worker threads (1 by default)")
    parser.add_argument("-nc", "--no-color", action="store_true", help="Disable colors in output")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="stderr log level")
    parser.add_argument("--log-file", default=None, metavar="FILE", help="Also write logs to FILE")
    parser.add_argument("-u", "--usage", "--help", dest="help", action="store_true",
                        help="Show this help message")
    parser.add_argument("-v", "--version", "--ver", dest="version", action="store_true",
                        help="Show version")

    return parser


def resolve_command(command: str) -> str:
    """Positional command renames MONITOR; any spelling of 'monitor' keeps the default."""
    if command.upper() == DEFAULT_COMMAND:
        return DEFAULT_COMMAND
    return command


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> MonitorConfig:
    return MonitorConfig(
        host=args.host,
        port=args.port,
        password=args.password or None,
        timeout_s=args.timeout,
        interval_s=args.interval,
        monitor_command=resolve_command(args.command),
        url=args.url,
        commands_path=args.commands,
        records_file=args.records_file,
        decode_workers=args.workers,
        color=not args.no_color,
    )
