"""Payload normalization: turn either payload variant into a value tree."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, NoReturn

from json_query.errors import PayloadError, PayloadErrorKind
from json_query.models import Payload, RawPayload, StructuredPayload, Value


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"non-standard JSON constant {name}")


def to_value(data: Any) -> Value:
    """Recursively copy *data* into plain dicts and lists.

    Any mapping becomes a dict with string keys and any list or tuple
    becomes a list, at every depth. Leaves are returned unchanged.
    """
    if isinstance(data, Mapping):
        return {str(k): to_value(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_value(v) for v in data]
    return data


def decode_json(raw: bytes) -> Value:
    """Decode UTF-8 JSON text, rejecting NaN and Infinity literals."""
    return json.loads(raw, parse_constant=_reject_constant)


def normalize(payload: Payload | None) -> Value:
    """Convert a record payload into the canonical value tree.

    Raises:
        PayloadError: MISSING when there is no payload (or raw bytes are
            empty), MALFORMED when raw bytes are not valid JSON or the
            tree is nested too deeply to walk.
    """
    match payload:
        case StructuredPayload(data=data):
            try:
                return to_value(data)
            except RecursionError as e:
                raise PayloadError(
                    PayloadErrorKind.MALFORMED, "structured payload is nested too deeply"
                ) from e
        case RawPayload(data=raw) if raw:
            try:
                return decode_json(raw)
            except (ValueError, RecursionError) as e:
                raise PayloadError(
                    PayloadErrorKind.MALFORMED, f"invalid JSON payload: {e}"
                ) from e
        case RawPayload():
            raise PayloadError(PayloadErrorKind.MISSING, "raw payload is empty")
        case None:
            raise PayloadError(PayloadErrorKind.MISSING, "record has no payload")
        case _:
            raise PayloadError(
                PayloadErrorKind.MALFORMED,
                f"unsupported payload type: {type(payload).__name__}",
            )
