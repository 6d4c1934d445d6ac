"""syswatch command line: system summary, network diagnosis, Windows checks."""

import argparse
import asyncio
import ipaddress
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from syswatch import __version__
from syswatch.core import InterfaceCollectionError, NetworkDiagnoser, Settings, probe_tcp, render, render_json
from syswatch.core.snapshot import render_snapshot, take_snapshot
from syswatch.core.windows_tweaks import evaluate, read_registry, render_recommendations
from syswatch.utils.logger import setup_logger


ONLINE_PROBE = ("8.8.8.8", 53)


def _ipv4_address(text: str) -> ipaddress.IPv4Address:
    try:
        return ipaddress.IPv4Address(text.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an IPv4 address: {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="syswatch",
        description="Basic tool to offer system insights on usage and suggestions to improve performance",
        epilog="Calling syswatch with no mode flag prints a short summary of everything.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-n", "--net", action="store_true", help="Show network connectivity + info")
    mode.add_argument("-l", "--long", action="store_true", help="Show longform system information")
    mode.add_argument("-w", "--win", action="store_true", help="Check Windows UI/privacy improvements")

    parser.add_argument("--gateway", type=_ipv4_address, help="Gateway IPv4 address to probe on TCP/80")
    parser.add_argument("--subnet", help="CIDR range to sweep for reachable hosts, e.g. 192.168.1.0/24")
    parser.add_argument("--json", action="store_true", help="Emit the network report as JSON")
    parser.add_argument("--settings", type=Path, help="Path to a JSON settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _run_network(args, settings: Settings) -> int:
    diagnoser = NetworkDiagnoser(settings)
    try:
        diag = asyncio.run(diagnoser.diagnose(args.gateway, args.subnet))
    except InterfaceCollectionError as e:
        logger.error(f"Network diagnosis aborted: {e}")
        return 1
    print(render_json(diag) if args.json else render(diag), end="")
    return 0


def _run_summary(settings: Settings) -> int:
    snapshot = take_snapshot()
    online = asyncio.run(probe_tcp(*ONLINE_PROBE, settings.external_timeout))
    print(render_snapshot(snapshot, online=online), end="")
    return 0


def _run_windows_check() -> int:
    try:
        registry = read_registry()
    except OSError as e:
        logger.warning(f"Windows checks unavailable: {e}")
        print("Windows checks are only available on Windows.")
        return 0
    print(render_recommendations(evaluate(registry)), end="")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.gateway is not None or args.subnet is not None) and not (args.net or args.long):
        parser.error("--gateway and --subnet require --net or --long")
    settings = Settings(args.settings)
    setup_logger(
        level="DEBUG" if args.verbose else settings.get('log_level', 'WARNING'),
        log_dir=settings.get('log_dir'),
    )

    if args.net:
        return _run_network(args, settings)
    if args.win:
        return _run_windows_check()
    if args.long:
        print(render_snapshot(take_snapshot()), end="")
        print()
        return _run_network(args, settings)
    return _run_summary(settings)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
