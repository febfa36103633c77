"""
URL parsing.

`parse_url` splits a gateway-style URL (`scheme://host[:port][/path]`) into its parts.
It is purely textual (no DNS, no normalization) and only accepts `http` and `https`.
"""

from __future__ import annotations

from dataclasses import dataclass

from gatewayhttp.errors import InvalidHostError, InvalidPortError

DEFAULT_PORTS = {"http": 80, "https": 443}
MAX_PORT = 65535


@dataclass(frozen=True)
class ParsedURL:
    protocol: str
    host: str
    port: int
    path: str


def parse_url(url: str) -> ParsedURL:
    """Split `url` into (protocol, host, port, path).

    The path keeps its leading `/` and is empty when the URL has none. The port
    defaults to 80 for `http` and 443 for `https`.

    Raises:
        InvalidHostError: Unknown scheme, empty host, or more than one `:` in the host part.
        InvalidPortError: Explicit port that is not a base-10 integer in 0..65535.
    """
    if url.startswith("http://"):
        protocol = "http"
    elif url.startswith("https://"):
        protocol = "https"
    else:
        raise InvalidHostError(url)

    remainder = url[len(protocol) + len("://"):]
    host_port, sep, rest = remainder.partition("/")
    path = "/" + rest if sep else ""

    fields = host_port.split(":")
    if len(fields) > 2:
        raise InvalidHostError(url)

    host = fields[0]
    if not host:
        raise InvalidHostError(url)

    if len(fields) == 1:
        return ParsedURL(protocol=protocol, host=host, port=DEFAULT_PORTS[protocol], path=path)

    raw_port = fields[1]
    # str.isdigit() also accepts non-ASCII digits such as "²".
    if not raw_port or not (raw_port.isascii() and raw_port.isdigit()):
        raise InvalidPortError(url, raw_port)
    port = int(raw_port, 10)
    if port > MAX_PORT:
        raise InvalidPortError(url, raw_port)

    return ParsedURL(protocol=protocol, host=host, port=port, path=path)
