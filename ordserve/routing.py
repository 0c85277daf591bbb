"""Parsing and checking of request paths, and where searches and redirects lead."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from ordserve.errors import BadRequest

MAX_JSON_INSCRIPTIONS = 1000

_U64_MAX = 2**64 - 1

_HASH = re.compile(r"[0-9a-fA-F]{64}")
_OUTPOINT = re.compile(r"[0-9a-fA-F]{64}:\d+")
_INSCRIPTION_ID = re.compile(r"[0-9a-fA-F]{64}i\d+")
_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class BlockQuery:
    """A block named either by its height or by its hash."""

    height: int | None = None
    block_hash: str | None = None

    def __post_init__(self) -> None:
        if (self.height is None) == (self.block_hash is None):
            raise ValueError("a block query needs exactly one of height or hash")

    @property
    def is_hash(self) -> bool:
        """True when the block is named by its hash."""
        return self.block_hash is not None

    def __str__(self) -> str:
        return self.block_hash if self.block_hash is not None else str(self.height)


def _parse_height(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not text:
        raise BadRequest("Invalid URL: cannot parse integer from empty string")
    if not _DIGITS.fullmatch(digits) or not digits.isascii():
        raise BadRequest("Invalid URL: invalid digit found in string")
    value = int(digits)
    if value > _U64_MAX:
        raise BadRequest("Invalid URL: number too large to fit in target type")
    return value


def _parse_hash(text: str) -> str:
    if not _HASH.fullmatch(text):
        raise BadRequest("Invalid URL: invalid hex character")
    return text.lower()


def parse_block_query(text: str) -> BlockQuery:
    """Read a block path segment: 64 characters name a hash, anything else a height."""
    if len(text) == 64:
        return BlockQuery(block_hash=_parse_hash(text))
    return BlockQuery(height=_parse_height(text))


def search_location(query: str, has_block: Callable[[str], bool]) -> str:
    """Path that a search for ``query`` redirects to.

    ``has_block`` is asked whether a 64-digit hex query names a known block;
    if not, the query is taken to be a transaction id.
    """
    query = query.strip()
    if _HASH.fullmatch(query):
        if has_block(query):
            return f"/block/{query}"
        return f"/tx/{query}"
    if _OUTPOINT.fullmatch(query):
        return f"/output/{query}"
    if _INSCRIPTION_ID.fullmatch(query):
        return f"/inscription/{query}"
    return f"/sat/{query}"


def check_sat_range(start: int, end: int) -> range:
    """The sats from ``start`` up to but not including ``end``; the range must not be empty."""
    if start == end:
        raise BadRequest("empty range")
    if start > end:
        raise BadRequest("range start greater than range end")
    return range(start, end)


def check_json_range(start: int, end: int) -> range:
    """Inscription numbers requested as JSON, at most ``MAX_JSON_INSCRIPTIONS`` of them."""
    if start == end:
        raise BadRequest("range length == 0")
    if start > end:
        raise BadRequest("range length < 0")
    if end - start > MAX_JSON_INSCRIPTIONS:
        raise BadRequest(f"range length > {MAX_JSON_INSCRIPTIONS}")
    return range(start, end)


def redirect_target(destination: str, path_and_query: str | None) -> str:
    """URL an HTTP request is sent on to: the HTTPS base followed by the request's path."""
    if path_and_query:
        return destination + path_and_query
    return destination