"""The json.query processor: configuration and batch orchestration.

Drives each record through normalize -> evaluate -> encode and drops
records that fail at any stage. A failing record never fails the batch.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from json_query import processor_logger
from json_query.backends import CompiledQuery, compile_query
from json_query.encoder import encode
from json_query.errors import ProcessorStateError, RecordError
from json_query.evaluator import run
from json_query.loader import parse_config
from json_query.models import ProcessorConfig, Record, Specification
from json_query.normalizer import normalize
from json_query.specification import specification


@dataclass(frozen=True)
class RecordOutcome:
    """Result of processing one record: a new record or the reason it
    was dropped."""

    position: bytes
    record: Record | None = None
    error: RecordError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class JSONQueryProcessor:
    """Replaces each record's payload with the result of a JMESPath or
    jq query.

    ``config`` and ``query`` are set once by ``configure`` and only read
    afterwards.
    """

    def __init__(self) -> None:
        self.config: ProcessorConfig | None = None
        self.query: CompiledQuery | None = None

    @staticmethod
    def specification() -> Specification:
        return specification()

    def configure(self, raw_config: Mapping[str, Any]) -> None:
        """Validate the configuration and compile its query.

        Raises:
            ConfigError: If a key is missing or unknown, or the type is
                unsupported.
            CompileError: If the query does not compile.
        """
        self.config = None
        self.query = None
        config = parse_config(raw_config)
        query = compile_query(config.query, config.type)

        self.config = config
        self.query = query
        processor_logger.log_configured(config.type, config.query)

    def open(self) -> None:
        self._require_configured()
        processor_logger.log_opened()

    def process(self, records: Iterable[Record]) -> list[Record]:
        """Apply the configured query to each record's payload.

        Returns the transformed records in input order. Records that
        fail are logged and left out.
        """
        self._require_configured()

        received = 0
        results: list[Record] = []
        for record in records:
            received += 1
            outcome = self.process_record(record)
            if outcome.ok:
                results.append(outcome.record)
            else:
                processor_logger.log_record_dropped(outcome.position, outcome.error)

        processor_logger.log_batch_complete(received, len(results))
        return results

    def process_record(self, record: Record) -> RecordOutcome:
        """Process one record without raising for per-record failures."""
        config, query = self._require_configured()
        try:
            value = normalize(record.payload)
            result = run(config, query, value, position=record.position)
            payload = encode(result)
        except RecordError as e:
            if e.position is None:
                e.position = record.position
            return RecordOutcome(position=record.position, error=e)

        processor_logger.log_record_processed(record.position, config.type, result)
        return RecordOutcome(
            position=record.position,
            record=record.model_copy(
                update={"payload": payload, "metadata": dict(record.metadata)}
            ),
        )

    def teardown(self) -> None:
        processor_logger.log_teardown()

    def _require_configured(self) -> tuple[ProcessorConfig, CompiledQuery]:
        if self.config is None or self.query is None:
            raise ProcessorStateError("processor is not configured")
        return self.config, self.query
