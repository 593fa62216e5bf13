"""json-query: per-record JSON transformation with JMESPath or jq."""

from json_query.backends import (
    BACKENDS,
    CompiledQuery,
    JMESPathQuery,
    JqQuery,
    compile_query,
)
from json_query.encoder import RESULT_KEY, encode
from json_query.errors import (
    CompileError,
    ConfigError,
    EncodingError,
    EvaluationError,
    PayloadError,
    PayloadErrorKind,
    ProcessorStateError,
    QueryProcessorError,
    RecordError,
)
from json_query.evaluator import run
from json_query.loader import load_config, parse_config
from json_query.models import (
    Payload,
    ProcessorConfig,
    RawPayload,
    Record,
    Specification,
    StructuredPayload,
    Value,
)
from json_query.normalizer import normalize
from json_query.processor import JSONQueryProcessor, RecordOutcome
from json_query.processor_logger import configure_logging
from json_query.specification import specification

__all__ = [
    "BACKENDS",
    "CompiledQuery",
    "CompileError",
    "compile_query",
    "ConfigError",
    "configure_logging",
    "encode",
    "EncodingError",
    "EvaluationError",
    "JMESPathQuery",
    "JqQuery",
    "JSONQueryProcessor",
    "load_config",
    "normalize",
    "parse_config",
    "Payload",
    "PayloadError",
    "PayloadErrorKind",
    "ProcessorConfig",
    "ProcessorStateError",
    "QueryProcessorError",
    "RawPayload",
    "Record",
    "RecordError",
    "RecordOutcome",
    "RESULT_KEY",
    "run",
    "Specification",
    "specification",
    "StructuredPayload",
    "Value",
]
