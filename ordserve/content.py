"""Responses that serve an inscription's raw content, and the favicon choice."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

CONTENT_SECURITY_POLICIES = (
    "default-src 'self' 'unsafe-eval' 'unsafe-inline' data: blob:",
    "default-src *:*/content/ *:*/blockheight *:*/blockhash *:*/blockhash/ "
    "*:*/blocktime 'unsafe-eval' 'unsafe-inline' data: blob:",
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
IMMUTABLE_CACHE_CONTROL = "max-age=31536000, immutable"
SHORT_CACHE_CONTROL = "max-age=600"
INLINE_CSP = "default-src 'unsafe-inline'"


@dataclass(frozen=True)
class ContentResponse:
    """Headers and body of a content response; a header name may repeat."""

    headers: tuple[tuple[str, str], ...]
    body: bytes


def _decode_content_type(content_type: Union[str, bytes, None]) -> str | None:
    if isinstance(content_type, bytes):
        try:
            return content_type.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return content_type


def content_response(
    content_type: Union[str, bytes, None], body: bytes | None
) -> ContentResponse | None:
    """Build the response serving an inscription's body, or None if it has no body.

    A missing or undecodable content type is served as ``application/octet-stream``.
    """
    declared = _decode_content_type(content_type)
    cache_control = SHORT_CACHE_CONTROL if body is None else IMMUTABLE_CACHE_CONTROL
    if body is None:
        return None
    headers = (
        ("content-type", declared if declared is not None else DEFAULT_CONTENT_TYPE),
        *(("content-security-policy", policy) for policy in CONTENT_SECURITY_POLICIES),
        ("cache-control", cache_control),
    )
    return ContentResponse(headers=headers, body=bytes(body))


def favicon_asset(user_agent: str | None) -> tuple[str, str | None]:
    """Static asset to serve as the favicon, with the extra policy header it needs.

    Safari (but not Chrome or Chromium) gets the PNG; everyone else the SVG,
    which needs inline styles allowed.
    """
    if (
        user_agent is not None
        and "Safari/" in user_agent
        and "Chrome/" not in user_agent
        and "Chromium/" not in user_agent
    ):
        return "/favicon.png", None
    return "/favicon.svg", INLINE_CSP