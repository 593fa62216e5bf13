"""Query evaluation: run the configured compiled query over one value."""

from __future__ import annotations

from json_query.backends import CompiledQuery
from json_query.errors import ConfigError, EvaluationError
from json_query.models import ProcessorConfig, Value


def run(
    config: ProcessorConfig,
    query: CompiledQuery,
    value: Value,
    position: bytes | None = None,
) -> Value:
    """Evaluate *query* against *value*.

    Args:
        config: The processor configuration *query* was compiled from.
        query: Compiled query for ``config.type``.
        value: Normalized record payload.
        position: Record position, attached to any error raised.

    Raises:
        ConfigError: If *query* was compiled for a different backend.
        EvaluationError: If the backend fails or produces no result.
    """
    if query.query_type != config.type:
        raise ConfigError(
            f"compiled query is {query.query_type}, configuration says {config.type}"
        )
    try:
        return query.evaluate(value)
    except EvaluationError as e:
        raise EvaluationError(
            f"{config.type} query failed: {e.reason}", position=position
        ) from e
