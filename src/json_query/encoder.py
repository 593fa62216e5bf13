"""Result encoding: map a query result back onto a payload variant.

Maps are stored as structured payloads unchanged, lists are wrapped
under ``RESULT_KEY`` so they stay structured, and everything else is
serialized to compact JSON text in a raw payload.
"""

from __future__ import annotations

import json

from json_query.errors import EncodingError
from json_query.models import Payload, RawPayload, StructuredPayload, Value

RESULT_KEY = "result"


def encode_json(value: Value) -> bytes:
    """Serialize *value* to compact UTF-8 JSON, refusing NaN and Infinity."""
    text = json.dumps(
        value, ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )
    return text.encode("utf-8")


def encode(result: Value) -> Payload:
    """Build the output payload for *result* based on its runtime shape.

    Raises:
        EncodingError: If a scalar result cannot be serialized.
    """
    if isinstance(result, dict):
        return StructuredPayload(data=result)
    if isinstance(result, list):
        return StructuredPayload(data={RESULT_KEY: result})
    try:
        return RawPayload(data=encode_json(result))
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodingError(f"failed to marshal result: {e}") from e
