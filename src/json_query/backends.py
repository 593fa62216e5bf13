"""Query backends: JMESPath and jq.

Each backend compiles an expression once at configuration time and
evaluates the compiled form against a canonical value tree per record.
Compiled queries are never mutated after construction, so a single
instance can be shared by every record of every batch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, ClassVar

import jmespath
import jq
from jmespath.exceptions import JMESPathError

from json_query.errors import CompileError, ConfigError, EvaluationError
from json_query.models import Value

NO_RESULTS = "no results"


class CompiledQuery(ABC):
    """A compiled query expression bound to one backend."""

    query_type: ClassVar[str]

    def __init__(self, expression: str) -> None:
        self.expression = expression

    @classmethod
    @abstractmethod
    def compile(cls, expression: str) -> CompiledQuery:
        """Compile *expression*, raising CompileError on bad syntax."""

    @abstractmethod
    def evaluate(self, value: Value) -> Value:
        """Evaluate against *value*, raising EvaluationError on failure."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.expression!r})"


class JMESPathQuery(CompiledQuery):
    """Path-expression backend. A path that matches nothing yields None."""

    query_type = "jmespath"

    def __init__(self, expression: str, parsed: Any) -> None:
        super().__init__(expression)
        self._parsed = parsed

    @classmethod
    def compile(cls, expression: str) -> JMESPathQuery:
        try:
            parsed = jmespath.compile(expression)
        except JMESPathError as e:
            raise CompileError(cls.query_type, expression, str(e)) from e
        return cls(expression, parsed)

    def evaluate(self, value: Value) -> Value:
        try:
            return self._parsed.search(value)
        except (JMESPathError, RecursionError) as e:
            raise EvaluationError(str(e)) from e


class JqQuery(CompiledQuery):
    """Pipeline-filter backend.

    A jq program yields a stream of values. Only the first one is used;
    the stream is pulled lazily so later outputs are never computed.
    """

    query_type = "jq"

    def __init__(self, expression: str, program: Any) -> None:
        super().__init__(expression)
        self._program = program

    @classmethod
    def compile(cls, expression: str) -> JqQuery:
        try:
            program = jq.compile(expression)
        except ValueError as e:
            raise CompileError(cls.query_type, expression, str(e)) from e
        return cls(expression, program)

    def iter_results(self, value: Value) -> Iterator[Value]:
        """Return a lazy iterator over every value the program emits."""
        try:
            return iter(self._program.input_value(value))
        except (TypeError, ValueError, RecursionError) as e:
            # input_value serializes the tree up front
            raise EvaluationError(str(e)) from e

    def evaluate(self, value: Value) -> Value:
        results = self.iter_results(value)
        try:
            return next(results)
        except StopIteration:
            raise EvaluationError(NO_RESULTS) from None
        except (ValueError, RecursionError) as e:
            raise EvaluationError(str(e)) from e


BACKENDS: dict[str, type[CompiledQuery]] = {
    JMESPathQuery.query_type: JMESPathQuery,
    JqQuery.query_type: JqQuery,
}


def compile_query(expression: str, query_type: str) -> CompiledQuery:
    """Compile *expression* with the backend registered for *query_type*.

    Raises:
        ConfigError: If no backend is registered for *query_type*.
        CompileError: If the expression syntax is invalid.
    """
    backend = BACKENDS.get(query_type)
    if backend is None:
        raise ConfigError(
            f"unsupported query type: {query_type!r} "
            f"(expected one of {', '.join(sorted(BACKENDS))})"
        )
    return backend.compile(expression)
