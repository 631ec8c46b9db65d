"""
Error taxonomy for Ethos API operations.

Every failure surfaces as an EthosError whose ``kind`` tells callers how to
react:

    try:
        profile = client.profiles.get(42)
    except EthosError as e:
        if e.kind is ErrorKind.RATE_LIMIT:
            time.sleep(e.retry_after or 60)
        elif e.kind is ErrorKind.NOT_FOUND:
            ...
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorKind(Enum):
    """Discriminant for EthosError."""

    TRANSPORT = "transport"
    API = "api"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"


# Kinds that were produced from an HTTP response.
API_KINDS = frozenset({
    ErrorKind.API,
    ErrorKind.NOT_FOUND,
    ErrorKind.RATE_LIMIT,
    ErrorKind.AUTHENTICATION,
})


class EthosError(Exception):
    """
    Base exception for all Ethos SDK errors.

    Attributes:
        kind: Which variant of the taxonomy this error is
        message: Human-readable message
        status_code: HTTP status code, for API-derived errors
        response_body: Parsed response body, when the server sent one
        retry_after: Seconds suggested by the server (rate limit only)
        errors: Field errors (validation only)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
        retry_after: Optional[int] = None,
        errors: Optional[Sequence[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.retry_after = retry_after
        self.errors: List[Dict[str, Any]] = list(errors or [])

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"EthosError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )

    @property
    def is_client_error(self) -> bool:
        """True for API-derived errors with a 4xx status; these are never retried."""
        return (
            self.kind in API_KINDS
            and self.status_code is not None
            and 400 <= self.status_code < 500
        )

    @classmethod
    def transport(cls, message: str) -> "EthosError":
        return cls(ErrorKind.TRANSPORT, message)

    @classmethod
    def api(
        cls,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
    ) -> "EthosError":
        return cls(ErrorKind.API, message, status_code, response_body)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "EthosError":
        return cls(ErrorKind.NOT_FOUND, message, 404)

    @classmethod
    def rate_limited(
        cls,
        message: str = "Rate limited",
        retry_after: Optional[int] = None,
    ) -> "EthosError":
        return cls(ErrorKind.RATE_LIMIT, message, 429, retry_after=retry_after)

    @classmethod
    def authentication(cls, message: str = "Authentication failed") -> "EthosError":
        return cls(ErrorKind.AUTHENTICATION, message, 401)

    @classmethod
    def validation(
        cls,
        message: str,
        errors: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> "EthosError":
        """Raised by caller-side validation; the transport never raises it."""
        return cls(ErrorKind.VALIDATION, message, errors=errors)

    @classmethod
    def from_response(cls, response) -> "EthosError":
        """
        Classify a non-2xx response.

        Args:
            response: A requests.Response (or anything with status_code,
                headers, json() and text)

        Returns:
            The matching EthosError variant
        """
        status = response.status_code

        if status == 404:
            return cls.not_found()

        if status == 429:
            return cls.rate_limited(
                retry_after=_parse_retry_after(response.headers.get("Retry-After"))
            )

        if status in (401, 403):
            return cls.authentication()

        body = None
        try:
            body = response.json()
        except ValueError:
            message = response.text or f"HTTP {status}"
        else:
            message = _extract_message(body)

        return cls.api(message, status, body)


def _extract_message(body: Any) -> str:
    """Pick the most useful message out of a parsed error body."""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if value is not None:
                return str(value)
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value.strip(), 10)
    except ValueError:
        return None
