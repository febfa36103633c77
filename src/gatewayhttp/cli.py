"""
gatewayhttp CLI entrypoint.

This CLI is intended for quick local debugging of gateway routes without writing a caller.
It delegates all request logic to `gatewayhttp.core.http.GatewayClient`.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any

from gatewayhttp.config.settings import get_settings
from gatewayhttp.core.http import GatewayClient
from gatewayhttp.core.logging import configure_logging
from gatewayhttp.core.urls import parse_url
from gatewayhttp.domain.models import RequestSpec
from gatewayhttp.errors import GatewayHttpError


def _parse_header_pairs(pairs: list[str]) -> dict[str, str]:
    """Parse `NAME=VALUE` CLI arguments into a header dict."""
    out: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid --header '{pair}', expected NAME=VALUE")
        name, value = pair.split("=", 1)
        out[name.strip()] = value
    return out


def _cmd_parse_url(args: argparse.Namespace) -> int:
    try:
        parsed = parse_url(args.url)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    print(json.dumps(dataclasses.asdict(parsed)))
    return 0


def _cmd_request(args: argparse.Namespace) -> int:
    """Handle the `request` subcommand."""
    settings = get_settings()
    client = GatewayClient.from_settings(settings)

    spec = RequestSpec(
        method=args.method,
        path=args.path,
        cluster_name=args.cluster,
        source=args.source,
        host=args.host,
        headers=_parse_header_pairs(args.header),
    )
    payload: Any = json.loads(args.data) if args.data is not None else None

    try:
        if args.retry is not None:
            result = client.do_http_with_retry(
                spec, payload, wait_seconds=args.wait, max_attempts=args.retry
            )
        else:
            result = client.do_http(spec, payload)
    except GatewayHttpError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the gatewayhttp CLI."""
    parser = argparse.ArgumentParser(prog="gatewayhttp")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse-url", help="Split a URL into protocol, host, port and path.")
    p.add_argument("url")
    p.set_defaults(func=_cmd_parse_url)

    req = sub.add_parser("request", help="Send one JSON request through the internal gateway.")
    req.add_argument("--method", type=str, default="GET")
    req.add_argument("--path", required=True, help="Path appended to the internal server (e.g. /api/v1/ping)")
    req.add_argument("--cluster", type=str, default="", help="Cluster identity header value")
    req.add_argument("--source", type=str, default="", help="Source identity header value")
    req.add_argument("--host", type=str, default="", help="Destination host identity header value")
    req.add_argument("--header", action="append", default=[], help="Extra header: NAME=VALUE (repeatable)")
    req.add_argument("--data", type=str, default=None, help="JSON request body (ignored for GET)")
    req.add_argument("--retry", type=int, default=None, help="Max attempts; omit for a single attempt")
    req.add_argument("--wait", type=float, default=None, help="Seconds between attempts (with --retry)")
    req.set_defaults(func=_cmd_request)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m gatewayhttp.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
