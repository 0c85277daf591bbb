"""Command-line settings for the HTTP/HTTPS server."""

from __future__ import annotations

import argparse
import shlex
import socket
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid port: {text}") from error
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {text}")
    return value


@dataclass
class ServerSettings:
    """Options controlling where and how the server listens."""

    address: str = "0.0.0.0"
    acme_domain: list[str] = field(default_factory=list)
    requested_http_port: int | None = None
    requested_https_port: int | None = None
    acme_cache: Path | None = None
    acme_contact: list[str] = field(default_factory=list)
    http: bool = False
    https: bool = False
    redirect_http_to_https: bool = False

    def http_port(self) -> int | None:
        """Port for plain HTTP, or None when HTTP is disabled."""
        if (
            self.http
            or self.requested_http_port is not None
            or (self.requested_https_port is None and not self.https)
        ):
            return 80 if self.requested_http_port is None else self.requested_http_port
        return None

    def https_port(self) -> int | None:
        """Port for HTTPS, or None when HTTPS is disabled."""
        if self.https or self.requested_https_port is not None:
            return 443 if self.requested_https_port is None else self.requested_https_port
        return None

    def acme_domains(self) -> list[str]:
        """Domains to request certificates for, defaulting to the host name."""
        if self.acme_domain:
            return list(self.acme_domain)
        hostname = socket.gethostname()
        if not hostname:
            raise RuntimeError("no hostname found")
        return [hostname]

    def redirect_destination(self) -> str | None:
        """Base URL that HTTP requests are redirected to, if redirection applies."""
        https_port = self.https_port()
        if self.http_port() is None or https_port is None or not self.redirect_http_to_https:
            return None
        domain = self.acme_domains()[0]
        if https_port == 443:
            return f"https://{domain}"
        return f"https://{domain}:{https_port}"


def acme_cache(acme_cache: str | Path | None, data_dir: str | Path) -> Path:
    """Directory for ACME certificates: the given one, or one inside the data dir."""
    if acme_cache is not None:
        return Path(acme_cache)
    return Path(data_dir) / "acme-cache"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the server options."""
    parser = argparse.ArgumentParser(prog="server", description="Run the explorer server.")
    parser.add_argument(
        "--address",
        default="0.0.0.0",
        help="Listen on <ADDRESS> for incoming requests.",
    )
    parser.add_argument(
        "--acme-domain",
        action="append",
        default=[],
        help="Request ACME TLS certificate for <ACME_DOMAIN>.",
    )
    parser.add_argument(
        "--http-port",
        type=_port,
        default=None,
        help="Listen on <HTTP_PORT> for incoming HTTP requests. [default: 80].",
    )
    parser.add_argument(
        "--https-port",
        type=_port,
        default=None,
        help="Listen on <HTTPS_PORT> for incoming HTTPS requests. [default: 443].",
    )
    parser.add_argument(
        "--acme-cache",
        type=Path,
        default=None,
        help="Store ACME TLS certificates in <ACME_CACHE>.",
    )
    parser.add_argument(
        "--acme-contact",
        action="append",
        default=[],
        help="Provide ACME contact <ACME_CONTACT>.",
    )
    parser.add_argument("--http", action="store_true", help="Serve HTTP traffic on <HTTP_PORT>.")
    parser.add_argument(
        "--https", action="store_true", help="Serve HTTPS traffic on <HTTPS_PORT>."
    )
    parser.add_argument(
        "--redirect-http-to-https",
        action="store_true",
        help="Redirect HTTP traffic to HTTPS.",
    )
    return parser


def parse_server_args(argv: str | Sequence[str] | None = None) -> ServerSettings:
    """Parse server options from a list of arguments or a command string."""
    if isinstance(argv, str):
        argv = shlex.split(argv)
    namespace = build_parser().parse_args(None if argv is None else list(argv))
    return ServerSettings(
        address=namespace.address,
        acme_domain=namespace.acme_domain,
        requested_http_port=namespace.http_port,
        requested_https_port=namespace.https_port,
        acme_cache=namespace.acme_cache,
        acme_contact=namespace.acme_contact,
        http=namespace.http,
        https=namespace.https,
        redirect_http_to_https=namespace.redirect_http_to_https,
    )