"""Errors raised while serving a request, each mapped to an HTTP status."""

from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus
from typing import TypeVar, Union

T = TypeVar("T")


class ServerError(Exception):
    """An error that becomes an HTTP response with a status and a text body."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def body(self) -> str:
        """Text sent to the client as the response body."""
        return self.message


class InternalError(ServerError):
    """An unexpected failure; the client only sees the generic reason phrase."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, error: Union[BaseException, str]) -> None:
        super().__init__(str(error))
        self.error = error

    def body(self) -> str:
        return self.status.phrase


class BadRequest(ServerError):
    """The request could not be understood; the message is sent back."""

    status = HTTPStatus.BAD_REQUEST


class NotFound(ServerError):
    """The requested object does not exist; the message is sent back."""

    status = HTTPStatus.NOT_FOUND


def ok_or_not_found(value: T | None, describe: Union[Callable[[], str], str]) -> T:
    """Return ``value``, or raise :class:`NotFound` naming what is missing."""
    if value is not None:
        return value
    what = describe() if callable(describe) else describe
    raise NotFound(f"{what} not found")