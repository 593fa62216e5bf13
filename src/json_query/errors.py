"""Custom exception hierarchy for json-query.

All exceptions inherit from QueryProcessorError so callers can catch
broadly or narrowly as needed. Configuration errors surface to the
caller of ``configure``; RecordError subclasses are local to a single
record and never escape ``process``.
"""

from __future__ import annotations

from enum import Enum


class QueryProcessorError(Exception):
    """Base for all json-query errors."""


class ConfigError(QueryProcessorError):
    """Configuration is missing a key, has an unknown key, or names an
    unsupported query type."""


class CompileError(ConfigError):
    """The query expression failed to compile for its backend."""

    def __init__(self, query_type: str, expression: str, message: str) -> None:
        self.query_type = query_type
        self.expression = expression
        super().__init__(f"invalid {query_type} expression {expression!r}: {message}")


class ProcessorStateError(QueryProcessorError):
    """A lifecycle hook was called out of order."""


class RecordError(QueryProcessorError):
    """A single record could not be processed.

    ``position`` identifies the record for logging; it is filled in by
    whichever layer knows it.
    """

    def __init__(self, reason: str, position: bytes | None = None) -> None:
        self.reason = reason
        self.position = position
        super().__init__(reason)


class PayloadErrorKind(str, Enum):
    MISSING = "missing"
    MALFORMED = "malformed"


class PayloadError(RecordError):
    """The record payload is absent or cannot be decoded."""

    def __init__(
        self,
        kind: PayloadErrorKind,
        reason: str,
        position: bytes | None = None,
    ) -> None:
        self.kind = kind
        super().__init__(reason, position)


class EvaluationError(RecordError):
    """The query produced no result or the backend reported a failure."""


class EncodingError(RecordError):
    """A scalar result could not be serialized back to JSON text."""
