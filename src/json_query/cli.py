"""Command-line interface for json-query.

A stand-alone runner for debugging queries outside a pipeline host.
Enables execution via ``json-query`` after install.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import IO, Any

# ── Human-readable help strings ──────────────────────────────────────────────

_TOP_DESCRIPTION = """\
Query and transform JSON records with JMESPath or jq.

Reads records as JSON lines, replaces each record's payload with the
result of the configured query, and writes the surviving records back
out as JSON lines. Records whose payload is missing, is not valid JSON,
or makes the query fail are dropped and logged.
"""

_TOP_EPILOG = """\
For a machine-readable JSON description of this CLI:

  json-query schema

Quick examples:
  json-query run --type jmespath --query user.name --input records.jsonl
  json-query run --config query.yaml < records.jsonl > out.jsonl
  json-query validate --type jq --query '.items | map(.price) | add'
"""

_RUN_DESCRIPTION = """\
Process a batch of JSON-lines records and emit the transformed records.

Every input line is one record. The whole input is processed as a
single batch, in order.
"""

_RUN_EPILOG = """\
Record format (one JSON object per line, input and output):

  {
    "position":  <str>            -- record identity, used in logs
    "payload":   <object|str|null> -- object = structured, string = raw JSON text
    "operation": <str>            -- optional, carried through (default "create")
    "metadata":  {<str>: <str>}   -- optional, carried through
    "key":       <object|str|null> -- optional, carried through
  }

Result shapes:
  map result        -> payload is the map
  list result       -> payload is {"result": [...]}
  scalar/null       -> payload is the JSON text of the value, e.g. "\\"John Doe\\""

Examples:
  json-query run --type jmespath --query status --input in.jsonl
  json-query run --type jq --query '{name: .user.name}' --output out.jsonl
  json-query run --config query.yaml --log-dir ./logs < in.jsonl
"""

_VALIDATE_DESCRIPTION = """\
Check a query configuration without processing any records.

Verifies that both parameters are present, that the type is supported,
and that the query compiles for that type.
"""

_SCHEMA_DESCRIPTION = """\
Print a machine-readable JSON description of this CLI to stdout.
"""


# ── Structured JSON schema (for `json-query schema`) ─────────────────────────

_CONFIG_ARGUMENTS: dict[str, Any] = {
    "--type": {
        "short": "-t",
        "type": "string",
        "enum": ["jmespath", "jq"],
        "required": False,
        "description": "Query engine. Required unless --config is given.",
    },
    "--query": {
        "short": "-q",
        "type": "string",
        "required": False,
        "description": "Query expression. Required unless --config is given.",
    },
    "--config": {
        "short": "-c",
        "type": "string",
        "format": "file path",
        "required": False,
        "description": (
            "YAML file with 'type' and 'query' keys. "
            "--type and --query override its values."
        ),
    },
}


def _cli_schema() -> dict[str, Any]:
    """Return a structured JSON description of the entire CLI."""
    return {
        "tool": "json-query",
        "description": (
            "Query and transform JSON records with JMESPath or jq. "
            "Each record's payload is replaced by the query result."
        ),
        "commands": [
            {
                "name": "run",
                "description": "Process JSON-lines records as one batch.",
                "arguments": {
                    **_CONFIG_ARGUMENTS,
                    "--input": {
                        "short": "-i",
                        "type": "string",
                        "format": "file path",
                        "required": False,
                        "description": "JSON-lines input file (default: stdin).",
                    },
                    "--output": {
                        "short": "-o",
                        "type": "string",
                        "format": "file path",
                        "required": False,
                        "description": "JSON-lines output file (default: stdout).",
                    },
                    "--log-dir": {
                        "type": "string",
                        "format": "directory path",
                        "required": False,
                        "description": "Directory for processor.log (JSON lines).",
                    },
                },
                "exit_codes": {
                    "0": "batch processed; dropped records are only logged",
                    "1": "invalid configuration or unreadable input line",
                },
            },
            {
                "name": "validate",
                "description": "Check a configuration without processing records.",
                "arguments": dict(_CONFIG_ARGUMENTS),
                "exit_codes": {
                    "0": "configuration is valid",
                    "1": "configuration is invalid",
                },
            },
            {
                "name": "spec",
                "description": "Print the processor specification as JSON.",
                "arguments": {},
                "exit_codes": {"0": "always succeeds"},
            },
            {
                "name": "schema",
                "description": "Print this document.",
                "arguments": {},
                "exit_codes": {"0": "always succeeds"},
            },
        ],
    }


# ── Argument parser ───────────────────────────────────────────────────────────

def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type", "-t",
        dest="query_type",
        metavar="TYPE",
        help="Query engine: jmespath or jq.",
    )
    parser.add_argument(
        "--query", "-q",
        metavar="EXPR",
        help="Query expression to evaluate against each payload.",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        metavar="FILE",
        help="YAML file with 'type' and 'query'. Flags override its values.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-query",
        description=_TOP_DESCRIPTION,
        epilog=_TOP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command")

    # ── run ──────────────────────────────────────────────────────────────────
    run_p = sub.add_parser(
        "run",
        help="Process JSON-lines records and emit the results",
        description=_RUN_DESCRIPTION,
        epilog=_RUN_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_config_arguments(run_p)
    run_p.add_argument(
        "--input", "-i",
        type=Path,
        metavar="FILE",
        help="Read records from FILE instead of stdin.",
    )
    run_p.add_argument(
        "--output", "-o",
        type=Path,
        metavar="FILE",
        help="Write records to FILE instead of stdout.",
    )
    run_p.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help="Write JSONL processor logs to DIR/processor.log.",
    )

    # ── validate ─────────────────────────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Check a configuration without processing records",
        description=_VALIDATE_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_config_arguments(val_p)

    # ── spec / schema ────────────────────────────────────────────────────────
    sub.add_parser("spec", help="Print the processor specification as JSON")
    sub.add_parser(
        "schema",
        help="Print a machine-readable JSON schema of this CLI to stdout",
        description=_SCHEMA_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    return parser


# ── Record (de)serialization ─────────────────────────────────────────────────

def _decode_payload(raw: Any) -> dict[str, Any] | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return {"kind": "structured", "data": raw}
    if isinstance(raw, str):
        return {"kind": "raw", "data": raw.encode("utf-8")}
    raise ValueError(f"payload must be an object, string or null, got {type(raw).__name__}")


def _decode_position(raw: Any) -> bytes:
    if raw is None:
        return b""
    if not isinstance(raw, str):
        raise ValueError(f"position must be a string, got {type(raw).__name__}")
    return raw.encode("utf-8")


def _decode_record(line: str) -> Any:
    """Parse one JSON line into a Record."""
    from json_query.models import Record

    obj = json.loads(line)
    if not isinstance(obj, dict):
        raise ValueError(f"record must be a JSON object, got {type(obj).__name__}")
    return Record.model_validate({
        "position": _decode_position(obj.get("position")),
        "operation": obj.get("operation", "create"),
        "metadata": obj.get("metadata") or {},
        "key": _decode_payload(obj.get("key")),
        "payload": _decode_payload(obj.get("payload")),
    })


def _encode_payload(payload: Any) -> Any:
    if payload is None:
        return None
    if payload.kind == "structured":
        return payload.data
    return payload.text()


def _encode_record(record: Any) -> str:
    return json.dumps({
        "position": record.position.decode("utf-8", errors="replace"),
        "operation": record.operation,
        "metadata": record.metadata,
        "key": _encode_payload(record.key),
        "payload": _encode_payload(record.payload),
    }, ensure_ascii=False)


def _read_records(stream: IO[str]) -> list[Any]:
    records = []
    for lineno, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            records.append(_decode_record(line))
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from e
    return records


# ── Command handlers ──────────────────────────────────────────────────────────

def _raw_config(args: argparse.Namespace) -> dict[str, Any]:
    """Merge --config file values with --type/--query flags."""
    from json_query.loader import load_config

    data: dict[str, Any] = {}
    if args.config is not None:
        data.update(load_config(args.config))
    if args.query_type is not None:
        data["type"] = args.query_type
    if args.query is not None:
        data["query"] = args.query
    return data


def _configured_processor(args: argparse.Namespace) -> Any:
    from json_query import JSONQueryProcessor, QueryProcessorError

    processor = JSONQueryProcessor()
    try:
        processor.configure(_raw_config(args))
    except QueryProcessorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    return processor


def _cmd_run(args: argparse.Namespace) -> int:
    from json_query import configure_logging

    if args.log_dir:
        configure_logging(args.log_dir)

    processor = _configured_processor(args)
    if processor is None:
        return 1

    try:
        if args.input:
            with open(args.input, encoding="utf-8") as f:
                records = _read_records(f)
        else:
            records = _read_records(sys.stdin)
    except ValueError as e:
        print(f"Error: invalid input record, {e}", file=sys.stderr)
        return 1

    processor.open()
    try:
        results = processor.process(records)
    finally:
        processor.teardown()

    text = "".join(_encode_record(r) + "\n" for r in results)

    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(
            f"{len(results)} of {len(records)} record(s) written to {args.output}",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(text)

    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    processor = _configured_processor(args)
    if processor is None:
        return 1
    print(f"Configuration is valid ({processor.config.type})")
    return 0


def _cmd_spec() -> int:
    from json_query import specification

    print(specification().model_dump_json(indent=2))
    return 0


def _cmd_schema() -> int:
    print(json.dumps(_cli_schema(), indent=2))
    return 0


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        sys.exit(_cmd_run(args))
    elif args.command == "validate":
        sys.exit(_cmd_validate(args))
    elif args.command == "spec":
        sys.exit(_cmd_spec())
    elif args.command == "schema":
        sys.exit(_cmd_schema())


if __name__ == "__main__":
    main()
