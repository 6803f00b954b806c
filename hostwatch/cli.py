# hostwatch/cli.py
# Usage examples:
#   sudo hostwatch google.com
#   sudo python3 -m hostwatch.cli 2001:4860:4860::8888

import argparse
import logging
import signal
import sys
import threading

from hostwatch import report
from hostwatch.config import Settings
from hostwatch.errors import ResolutionError
from hostwatch.prober.icmp import IcmpProber
from hostwatch.resolver import resolve
from hostwatch.watch.controller import WatchController

EXAMPLES = """Examples:
  hostwatch google.com
  hostwatch 8.8.8.8
  hostwatch 2001:4860:4860::8888"""

LOOPBACK_NOTE = """Note: each attempt reads a single ICMP message. Against 127.0.0.1 or ::1
the raw socket reads back its own echo request first, so every attempt is
reported as a protocol mismatch and the watch never ends."""


def build_argparser():
    ap = argparse.ArgumentParser(
        prog="hostwatch",
        description="Ping a host until it responds.",
        epilog=EXAMPLES + "\n\n" + LOOPBACK_NOTE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("host", nargs="?", help="Hostname, IPv4 or IPv6 address")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return ap


def main(argv=None, prober=None, resolver=resolve, cancel=None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.host:
        ap.print_usage()
        print()
        print(EXAMPLES)
        return 1

    host = args.host
    print(report.watching_line(host))

    try:
        target, was_hostname = resolver(host)
    except ResolutionError as e:
        print(f"Error resolving address '{host}': {e}")
        return 1

    if was_hostname:
        print(report.resolved_line(target))

    settings = Settings()
    if prober is None:
        prober = IcmpProber(settings)

    if cancel is None:
        cancel = threading.Event()
        signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())

    print(report.banner())
    ctrl = WatchController(prober, settings)
    res = ctrl.run(target, cancel=cancel,
                   on_outcome=lambda o: print(report.describe(o, target), flush=True))

    if res["stop_reason"] == "success":
        print(report.success_line(host))
        return 0
    print("\nStopped.")
    return 130


if __name__ == "__main__":
    sys.exit(main())
