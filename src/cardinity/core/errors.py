"""
Errors raised by the signed request executor.

Every failure surfaces as exactly one subclass of :class:`CardinityError`, so
callers can either catch the base class or handle each outcome separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

__all__ = [
    "APIError",
    "CardinityError",
    "DecodeError",
    "FieldError",
    "TransportError",
    "UnexpectedError",
]


class CardinityError(Exception):
    """Base class for all errors produced while talking to the API."""


class TransportError(CardinityError):
    """The request could not be sent or the response could not be read."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"making request: {cause}")
        self.cause = cause


class UnexpectedError(CardinityError):
    """
    The API answered with an error status but the body was not a valid error
    document. Only the status line is kept.
    """

    def __init__(self, status_line: str) -> None:
        super().__init__(f"unexpected error: {status_line}")
        self.status_line = status_line


class DecodeError(CardinityError):
    """A successful response body could not be decoded into the target."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"decoding json: {cause}")
        self.cause = cause


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class FieldError:
    field: str
    rejected: str
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> "FieldError":
        if not isinstance(payload, Mapping):
            raise ValueError("field error must be a JSON object")
        return cls(
            field=_text(payload, "field"),
            rejected=_text(payload, "rejected"),
            message=_text(payload, "message"),
        )


class APIError(CardinityError):
    """
    Structured error document returned by the API for 4xx/5xx responses.

    The rendered message follows the API's own format: ``title: detail (type)``
    followed by one ``field: message rejected`` line per field error, all
    lowercased.
    """

    def __init__(
        self,
        type: str,
        title: str,
        status: int,
        detail: str,
        errors: Tuple[FieldError, ...] = (),
    ) -> None:
        self.type = type
        self.title = title
        self.status = status
        self.detail = detail
        self.errors = tuple(errors)
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [f"{self.title}: {self.detail} ({self.type})"]
        for error in self.errors:
            lines.append(f"{error.field}: {error.message} {error.rejected}")
        return "\n".join(lines).lower()

    @classmethod
    def from_payload(cls, payload: Any) -> "APIError":
        """
        Build an error from a decoded JSON body.

        Missing keys fall back to empty values; anything that is not shaped
        like an error document raises :class:`ValueError`.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("error body must be a JSON object")

        status = payload.get("status", 0)
        if status is None:
            status = 0
        if isinstance(status, bool) or not isinstance(status, int):
            raise ValueError("'status' must be an integer")

        raw_errors = payload.get("errors")
        if raw_errors is None:
            raw_errors = []
        if not isinstance(raw_errors, list):
            raise ValueError("'errors' must be a list")

        return cls(
            type=_text(payload, "type"),
            title=_text(payload, "title"),
            status=status,
            detail=_text(payload, "detail"),
            errors=tuple(FieldError.from_payload(item) for item in raw_errors),
        )

    def __repr__(self) -> str:
        return (
            f"APIError(type={self.type!r}, title={self.title!r}, "
            f"status={self.status!r}, detail={self.detail!r}, errors={self.errors!r})"
        )
