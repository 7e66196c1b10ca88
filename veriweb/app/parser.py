"""
parser.py

Splits a raw URL string into the parts the heuristics look at.

Public function:
    parse_url(raw) -> ParsedUrl

The parser never raises. Input that cannot be read as a URL (None, numbers,
empty or whitespace-only strings) comes back as a ParsedUrl with an empty
host, which the heuristics treat as a risk indicator of its own.

Example:
    >>> parse_url("HTTP://192.168.1.5:8080/login?next=1#top")
    ParsedUrl(scheme='HTTP', host='192.168.1.5:8080', is_ip_literal=True,
              path='/login', query='next=1', raw='HTTP://192.168.1.5:8080/login?next=1#top')
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger("parser")

SCHEME_SEPARATOR = "://"
HOST_TERMINATORS = re.compile(r"[/?#]")
PORT_SUFFIX = re.compile(r":[0-9]+$")
OCTET = re.compile(r"[0-9]{1,3}")


class InputError(ValueError):
    """Raised for input that is not a usable URL string."""


@dataclass(frozen=True)
class ParsedUrl:
    scheme: str
    host: str
    is_ip_literal: bool
    path: str
    query: str
    raw: str


EMPTY = ParsedUrl(scheme="", host="", is_ip_literal=False, path="", query="", raw="")


def _coerce(raw) -> str:
    if not isinstance(raw, str):
        raise InputError(f"expected a string, got {type(raw).__name__}")
    text = raw.strip()
    if not text:
        raise InputError("empty url")
    return text


def is_ip_literal(host: str) -> bool:
    """Return True if host is a dotted-quad IPv4 address (with optional port)."""
    host = PORT_SUFFIX.sub("", host)
    parts = host.split(".")
    if len(parts) != 4:
        return False
    # ASCII digits only
    return all(OCTET.fullmatch(p) and int(p) <= 255 for p in parts)


def _split_rest(rest: str):
    """Split everything after the scheme into (host, path, query)."""
    match = HOST_TERMINATORS.search(rest)
    if match is None:
        return rest, "", ""
    host, tail = rest[:match.start()], rest[match.start():]

    # the fragment is never looked at
    tail = tail.split("#", 1)[0]
    path, _, query = tail.partition("?")
    return host, path, query


def parse_url(raw) -> ParsedUrl:
    try:
        text = _coerce(raw)
    except InputError as e:
        logger.debug("Unusable url input (%s); treating as empty host", e)
        return EMPTY

    if SCHEME_SEPARATOR in text:
        scheme, rest = text.split(SCHEME_SEPARATOR, 1)
    else:
        scheme, rest = "", text

    host, path, query = _split_rest(rest)
    host = host.lower()

    return ParsedUrl(
        scheme=scheme,
        host=host,
        is_ip_literal=is_ip_literal(host),
        path=path,
        query=query,
        raw=text,
    )
