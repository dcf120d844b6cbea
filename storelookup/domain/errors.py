from __future__ import annotations
from enum import Enum


class ErrorKind(str, Enum):
    """Failure classes a caller can match on after a lookup."""
    VALIDATION = "validation"
    TRANSPORT  = "transport"
    STATUS     = "status"
    PARSE      = "parse"
    CANCELLED  = "cancelled"


class StoreError(Exception):
    """
    Base error raised by both store clients.

    code is the HTTP status for status failures and 0 for anything
    detected locally (bad key, unparsable body).
    """
    kind = ErrorKind.VALIDATION

    def __init__(self, store: str, message: str, code: int = 0) -> None:
        super().__init__(f"{store}: {message}")
        self.store   = store
        self.message = message
        self.code    = code


class ValidationError(StoreError):
    """Lookup key is empty or malformed. Raised before any network call."""
    kind = ErrorKind.VALIDATION


class StatusError(StoreError):
    """Upstream answered with a non-2xx status."""
    kind = ErrorKind.STATUS

    def __init__(self, store: str, code: int) -> None:
        super().__init__(store, "response status code error", code)


class ParseError(StoreError):
    """Body could not be decoded (JSON) or built into a tree (HTML)."""
    kind = ErrorKind.PARSE
