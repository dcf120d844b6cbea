"""
main.py: Dependency Wiring (Composition Root)
----------------------------------------------
The one place that knows which concrete client implements each interface.

It does NOT contain any lookup logic. It just:
  1. Reads configuration from the environment and the command line
  2. Opens one shared httpx.AsyncClient
  3. Builds both store clients around it and injects them into LookupService
  4. Prints one JSON line per lookup and exits non-zero if any failed

Usage:
    storelookup appstore --id 340368403 --lang ja_jp --country JP
    storelookup appstore --bundle-id com.cookpad --bundle-id com.example
    storelookup playstore com.cookpad.android.activities --lang ja
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

import httpx

from storelookup.application.lookup_service import LookupService
from storelookup.domain.config import country, http_client, lang
from storelookup.domain.entities import LookupKey, LookupReport
from storelookup.infrastructure.appstore_client import AppStoreClient
from storelookup.infrastructure.playstore_client import PlayStoreClient
from storelookup.infrastructure.transport import REQUEST_TIMEOUT

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_LOG_LEVEL = "INFO"


def _read_env() -> tuple[str, float]:
    """Read optional defaults from the environment. Fails fast on a bad timeout."""
    level = os.environ.get("STORELOOKUP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    raw_timeout = os.environ.get("STORELOOKUP_TIMEOUT")
    if not raw_timeout:
        return level, REQUEST_TIMEOUT
    try:
        return level, float(raw_timeout)
    except ValueError:
        print(f"STORELOOKUP_TIMEOUT must be a number, got {raw_timeout!r}", file=sys.stderr)
        sys.exit(2)


def build_parser(default_level: str, default_timeout: float) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = "storelookup",
        description = "Look up app metadata on the App Store or the Play Store",
    )
    parser.add_argument("--timeout", type=float, default=default_timeout,
                        help=f"Seconds per lookup (default: {default_timeout:g})")
    parser.add_argument("--log-level", default=default_level,
                        help=f"Logging level (default: {default_level})")

    sub = parser.add_subparsers(dest="store", required=True)

    ios = sub.add_parser("appstore", help="iTunes lookup API")
    ios.add_argument("--id", dest="store_ids", type=int, action="append", default=[],
                     help="Numeric store id (repeatable)")
    ios.add_argument("--bundle-id", dest="bundle_ids", action="append", default=[],
                     help="Bundle id (repeatable)")
    ios.add_argument("--lang", default="", help="e.g. ja_jp")
    ios.add_argument("--country", default="", help="ISO 3166-1 alpha-2, e.g. JP")

    play = sub.add_parser("playstore", help="Play Store details page")
    play.add_argument("bundle_ids", nargs="+", help="Bundle id(s)")
    play.add_argument("--lang", default="", help="e.g. ja")

    return parser


# ---------------------------------------------------------------------------
# Dependency wiring
# ---------------------------------------------------------------------------

async def build_and_run(args: argparse.Namespace) -> list[LookupReport]:
    async with httpx.AsyncClient(follow_redirects=True) as client:
        appstore_opts = [http_client(client)]
        playstore_opts = [http_client(client)]
        if args.lang:
            appstore_opts.append(lang(args.lang))
            playstore_opts.append(lang(args.lang))
        if getattr(args, "country", ""):
            appstore_opts.append(country(args.country))

        service = LookupService(
            appstore  = AppStoreClient(*appstore_opts),
            playstore = PlayStoreClient(*playstore_opts),
            timeout   = args.timeout,
        )

        if args.store == "appstore":
            keys = [LookupKey.store(v) for v in args.store_ids]
            keys += [LookupKey.bundle(v) for v in args.bundle_ids]
            return await service.lookup_appstore(keys)
        return await service.lookup_playstore(args.bundle_ids)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    level, timeout = _read_env()
    parser = build_parser(level, timeout)
    args = parser.parse_args(argv)

    if args.store == "appstore" and not (args.store_ids or args.bundle_ids):
        parser.error("appstore: give at least one --id or --bundle-id")

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    reports = asyncio.run(build_and_run(args))
    for report in reports:
        print(json.dumps(report.to_dict(), ensure_ascii=False))

    failed = sum(1 for r in reports if r.status != "success")
    if failed:
        log.error("%d of %d lookup(s) failed", failed, len(reports))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
