"""The explorer's web application and a small HTTP server to run it."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from http import HTTPStatus
from itertools import islice
from pathlib import Path
from typing import Union
from urllib.parse import unquote

from starlette.applications import Starlette
from starlette.datastructures import MutableHeaders
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from ordserve.content import INLINE_CSP, content_response
from ordserve.errors import BadRequest, InternalError, ServerError, ok_or_not_found
from ordserve.routing import redirect_target, search_location
from ordserve.settings import parse_server_args
from ordserve.text import feed_xml, stats_json, status_text

DEFAULT_CSP = "default-src 'self'"
STRICT_TRANSPORT_SECURITY = "max-age=31536000; includeSubDomains; preload"
INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/casey/ord/master/install.sh"
FAQ_URL = "https://docs.ordinals.com/faq/"
BOUNTIES_URL = "https://docs.ordinals.com/bounty/"
FEED_LIMIT = 300

_U64_LIMIT = 2**64

ContentType = Union[str, bytes, None]


@dataclass
class ChainIndex:
    """Blocks and inscriptions known to the explorer.

    ``blocks`` holds ``(hash, unix timestamp)`` pairs by height, and
    ``inscriptions`` holds ``(id, content type, body)`` triples by number.
    """

    blocks: list[tuple[str, int]] = field(default_factory=list)
    inscriptions: list[tuple[str, ContentType, Union[bytes, None]]] = field(
        default_factory=list
    )
    reorged: bool = False

    def block_count(self) -> int:
        """Number of blocks indexed, the genesis block included."""
        return len(self.blocks)

    def block_height(self) -> int | None:
        """Height of the tip, or None before the genesis block is indexed."""
        return len(self.blocks) - 1 if self.blocks else None

    def block_hash(self, height: int | None = None) -> str | None:
        """Hash of the block at ``height``, or of the tip when height is None."""
        if height is None:
            height = self.block_height()
            if height is None:
                return None
        if 0 <= height < len(self.blocks):
            return self.blocks[height][0]
        return None

    def block_time(self, height: int) -> int | None:
        """Unix timestamp of the block at ``height``, if it is indexed."""
        if 0 <= height < len(self.blocks):
            return self.blocks[height][1]
        return None

    def has_block(self, block_hash: str) -> bool:
        """Whether a block with this hash is indexed."""
        wanted = block_hash.lower()
        return any(known.lower() == wanted for known, _ in self.blocks)

    def is_reorged(self) -> bool:
        """Whether a chain reorganisation has made the index stale."""
        return self.reorged

    def stats(self) -> tuple[int | None, int | None, int | None]:
        """Highest block indexed, and lowest and highest inscription numbers."""
        if self.inscriptions:
            return self.block_height(), 0, len(self.inscriptions) - 1
        return self.block_height(), None, None

    def inscription_content(
        self, inscription_id: str
    ) -> tuple[ContentType, Union[bytes, None]] | None:
        """Content type and body of an inscription, or None if it is unknown."""
        for known_id, content_type, body in self.inscriptions:
            if known_id == inscription_id:
                return content_type, body
        return None

    def feed_inscriptions(self, limit: int) -> list[tuple[int, str]]:
        """The newest ``limit`` inscriptions as ``(number, id)``, newest first."""
        numbered = reversed(list(enumerate(entry[0] for entry in self.inscriptions)))
        return list(islice(numbered, max(limit, 0)))


def _path_u64(text: str) -> int:
    if not text:
        raise BadRequest("Invalid URL: cannot parse integer from empty string")
    digits = text[1:] if text.startswith("+") else text
    if not (digits.isascii() and digits.isdigit()):
        raise BadRequest("Invalid URL: invalid digit found in string")
    value = int(digits)
    if value >= _U64_LIMIT:
        raise BadRequest("Invalid URL: number too large to fit in target type")
    return value


class _SecurityHeaders:
    """Adds a default content security policy and forces strict transport security."""

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                if "content-security-policy" not in headers:
                    headers["content-security-policy"] = DEFAULT_CSP
                headers["strict-transport-security"] = STRICT_TRANSPORT_SECURITY
            await send(message)

        await self.app(scope, receive, send_with_headers)


async def _server_error(request: Request, exc: Exception) -> Response:
    if not isinstance(exc, ServerError):
        exc = InternalError(exc)
    if isinstance(exc, InternalError):
        print(f"error serving request: {exc.error}", file=sys.stderr)
    return PlainTextResponse(exc.body(), status_code=exc.status)


def _see_other(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=HTTPStatus.SEE_OTHER)


def _redirect_app(destination: str) -> Starlette:
    async def redirect(request: Request) -> Response:
        path_and_query = request.url.path
        if request.url.query:
            path_and_query += f"?{request.url.query}"
        return _see_other(redirect_target(destination, path_and_query))

    return Starlette(routes=[Route("/{path:path}", redirect)])


def create_app(
    index: ChainIndex,
    chain_name: str = "mainnet",
    redirect_destination: str | None = None,
) -> Starlette:
    """Build the explorer application, or one that redirects to HTTPS when
    ``redirect_destination`` is given."""
    if redirect_destination is not None:
        return _redirect_app(redirect_destination)

    async def status(request: Request) -> Response:
        return PlainTextResponse(status_text(index.is_reorged()))

    async def block_count(request: Request) -> Response:
        return PlainTextResponse(str(index.block_count()))

    async def block_height(request: Request) -> Response:
        return PlainTextResponse(str(ok_or_not_found(index.block_height(), "blockheight")))

    async def block_hash(request: Request) -> Response:
        return PlainTextResponse(ok_or_not_found(index.block_hash(None), "blockhash"))

    async def block_hash_from_height(request: Request) -> Response:
        height = _path_u64(request.path_params["height"])
        return PlainTextResponse(ok_or_not_found(index.block_hash(height), "blockhash"))

    async def block_time(request: Request) -> Response:
        height = ok_or_not_found(index.block_height(), "blocktime")
        return PlainTextResponse(str(ok_or_not_found(index.block_time(height), "blocktime")))

    async def stats(request: Request) -> Response:
        return PlainTextResponse(stats_json(*index.stats()))

    async def search_by_query(request: Request) -> Response:
        query = request.query_params.get("query")
        if query is None:
            raise BadRequest("Failed to deserialize query string: missing field `query`")
        return _see_other(search_location(query, index.has_block))

    async def search_by_path(request: Request) -> Response:
        return _see_other(search_location(request.path_params["query"], index.has_block))

    async def ordinal(request: Request) -> Response:
        return _see_other(f"/sat/{request.path_params['sat']}")

    async def install_script(request: Request) -> Response:
        return _see_other(INSTALL_SCRIPT_URL)

    async def faq(request: Request) -> Response:
        return _see_other(FAQ_URL)

    async def bounties(request: Request) -> Response:
        return _see_other(BOUNTIES_URL)

    async def content(request: Request) -> Response:
        inscription_id = request.path_params["inscription_id"]
        content_type, body = ok_or_not_found(
            index.inscription_content(inscription_id), f"inscription {inscription_id}"
        )
        served = ok_or_not_found(
            content_response(content_type, body), f"inscription {inscription_id} content"
        )
        response = Response(content=served.body)
        for name, value in served.headers:
            response.headers.append(name, value)
        return response

    async def feed(request: Request) -> Response:
        document = feed_xml(chain_name, index.feed_inscriptions(FEED_LIMIT))
        return Response(
            content=document,
            media_type="application/rss+xml",
            headers={"content-security-policy": INLINE_CSP},
        )

    routes = [
        Route("/blockcount", block_count),
        Route("/blockheight", block_height),
        Route("/blockhash", block_hash),
        Route("/blockhash/{height}", block_hash_from_height),
        Route("/blocktime", block_time),
        Route("/bounties", bounties),
        Route("/content/{inscription_id}", content),
        Route("/faq", faq),
        Route("/feed.xml", feed),
        Route("/install.sh", install_script),
        Route("/ordinal/{sat}", ordinal),
        Route("/search", search_by_query),
        Route("/search/{query:path}", search_by_path),
        Route("/stats", stats),
        Route("/status", status),
    ]
    middleware = [
        Middleware(GZipMiddleware, minimum_size=32),
        Middleware(CORSMiddleware, allow_methods=["GET"], allow_origins=["*"]),
        Middleware(_SecurityHeaders),
    ]
    return Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={ServerError: _server_error},
    )


def _load_index(path: Path) -> ChainIndex:
    data = json.loads(path.read_text(encoding="utf-8"))
    blocks = [(str(block_hash), int(timestamp)) for block_hash, timestamp in data.get("blocks", [])]
    inscriptions = []
    for entry in data.get("inscriptions", []):
        body = entry.get("body")
        inscriptions.append(
            (
                str(entry["id"]),
                entry.get("content_type"),
                None if body is None else body.encode("utf-8"),
            )
        )
    return ChainIndex(blocks=blocks, inscriptions=inscriptions, reorged=bool(data.get("reorged")))


async def _handle(app, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        request_line = await reader.readline()
        if not request_line:
            return
        try:
            method, target, _version = request_line.decode("latin-1").rstrip("\r\n").split(" ", 2)
        except ValueError:
            writer.write(b"HTTP/1.1 400 Bad Request\r\nconnection: close\r\n\r\n")
            await writer.drain()
            return
        headers: list[tuple[bytes, bytes]] = []
        while True:
            line = await reader.readline()
            if line in (b"\r\n", b"\n", b""):
                break
            name, _, value = line.decode("latin-1").partition(":")
            headers.append((name.strip().lower().encode("latin-1"), value.strip().encode("latin-1")))
        length = int(dict(headers).get(b"content-length", b"0") or 0)
        request_body = await reader.readexactly(length) if length else b""

        path, _, query = target.partition("?")
        peer = writer.get_extra_info("peername")
        local = writer.get_extra_info("sockname")
        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": unquote(path),
            "raw_path": path.encode("latin-1"),
            "query_string": query.encode("latin-1"),
            "root_path": "",
            "headers": headers,
            "client": tuple(peer[:2]) if peer else None,
            "server": tuple(local[:2]) if local else None,
        }

        finished = asyncio.Event()
        delivered = False

        async def receive():
            nonlocal delivered
            if not delivered:
                delivered = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            await finished.wait()
            return {"type": "http.disconnect"}

        status = 500
        response_headers: list[tuple[bytes, bytes]] = []
        chunks: list[bytes] = []

        async def send(message) -> None:
            nonlocal status, response_headers
            if message["type"] == "http.response.start":
                status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))

        try:
            await app(scope, receive, send)
        finally:
            finished.set()

        try:
            phrase = HTTPStatus(status).phrase
        except ValueError:
            phrase = ""
        head = [f"HTTP/1.1 {status} {phrase}".encode("latin-1")]
        head.extend(
            name + b": " + value
            for name, value in response_headers
            if name.lower() != b"connection"
        )
        head.append(b"connection: close")
        writer.write(b"\r\n".join(head) + b"\r\n\r\n" + b"".join(chunks))
        await writer.drain()
    finally:
        writer.close()


async def _serve(app, host: str, port: int) -> None:
    server = await asyncio.start_server(
        lambda reader, writer: _handle(app, reader, writer), host, port
    )
    async with server:
        await server.serve_forever()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the explorer over HTTP until interrupted."""
    extra = argparse.ArgumentParser(add_help=False)
    extra.add_argument("--index-file", type=Path, default=None)
    extra.add_argument("--chain", default="mainnet")
    known, rest = extra.parse_known_args(None if argv is None else list(argv))
    settings = parse_server_args(rest)

    if settings.https_port() is not None:
        print(
            "error: serving HTTPS needs ACME certificates, which this server cannot obtain",
            file=sys.stderr,
        )
        return 1

    port = settings.http_port()
    if port is None:
        print("error: no port to listen on", file=sys.stderr)
        return 1

    try:
        index = ChainIndex() if known.index_file is None else _load_index(known.index_file)
    except (OSError, ValueError, KeyError, TypeError) as error:
        print(f"error: could not load index: {error}", file=sys.stderr)
        return 1

    app = create_app(index, known.chain, settings.redirect_destination())
    print(f"Listening on http://{settings.address}:{port}", file=sys.stderr)
    try:
        asyncio.run(_serve(app, settings.address, port))
    except KeyboardInterrupt:
        pass
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0