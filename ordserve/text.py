"""Plain-text, JSON and RSS bodies served by the explorer."""

from __future__ import annotations

import json
from collections.abc import Iterable
from http import HTTPStatus
from xml.sax.saxutils import escape

REORG_MESSAGE = "reorg detected, please rebuild the database."
FEED_GENERATOR = "ord"
UNBOUND_ADDRESS = "unbound"
UNKNOWN_ADDRESS = "error"


def status_text(reorged: bool) -> str:
    """Body of the status endpoint: a reorg warning, or the OK reason phrase."""
    if reorged:
        return REORG_MESSAGE
    return HTTPStatus.OK.phrase


def stats_json(
    highest_block_indexed: int | None,
    lowest_inscription_number: int | None,
    highest_inscription_number: int | None,
) -> str:
    """Pretty-printed JSON summary of how far the index has got."""
    return json.dumps(
        {
            "highest_block_indexed": highest_block_indexed,
            "lowest_inscription_number": lowest_inscription_number,
            "highest_inscription_number": highest_inscription_number,
        },
        indent=2,
    )


def _feed_title(chain_name: str) -> str:
    if chain_name.lower() in ("mainnet", "bitcoin", "main"):
        return "Inscriptions"
    return f"Inscriptions – {chain_name.capitalize()}"


def _element(tag: str, text: str) -> str:
    return f"<{tag}>{escape(text)}</{tag}>"


def feed_xml(chain_name: str, items: Iterable[tuple[int, str]]) -> str:
    """RSS 2.0 document listing inscriptions, given as ``(number, id)`` pairs."""
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0">',
        "<channel>",
        _element("title", _feed_title(chain_name)),
        "<link></link>",
        "<description></description>",
        _element("generator", FEED_GENERATOR),
    ]
    for number, inscription_id in items:
        link = f"/inscription/{inscription_id}"
        parts.extend(
            [
                "<item>",
                _element("title", f"Inscription {number}"),
                _element("link", link),
                _element("guid", link),
                "</item>",
            ]
        )
    parts.extend(["</channel>", "</rss>"])
    return "".join(parts)


def transfers_text(entries: Iterable[tuple[str, str | None]]) -> str:
    """One ``<inscription id> <address>`` line per entry.

    An address of None means it could not be derived from the output script
    and is written as ``error``; unbound inscriptions are passed as ``unbound``.
    """
    return "".join(
        f"{inscription_id} {UNKNOWN_ADDRESS if address is None else address}\n"
        for inscription_id, address in entries
    )