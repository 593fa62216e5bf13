"""Pydantic models for records, payloads, configuration and the
processor specification.

All data structures live here. No business logic, just shapes.
Payloads use a discriminated union on the ``kind`` field so a record
always carries exactly one payload variant.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Canonical value tree used during query evaluation.
Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]

QueryType = Literal["jmespath", "jq"]


# ── Payloads ──────────────────────────────────────────────────────


class StructuredPayload(BaseModel):
    kind: Literal["structured"] = "structured"
    data: dict[str, Any]


class RawPayload(BaseModel):
    kind: Literal["raw"] = "raw"
    data: bytes

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


Payload = Annotated[
    StructuredPayload | RawPayload,
    Field(discriminator="kind"),
]


# ── Records ───────────────────────────────────────────────────────


class Record(BaseModel):
    position: bytes
    operation: str = "create"
    metadata: dict[str, str] = Field(default_factory=dict)
    key: Payload | None = None
    payload: Payload | None = None


# ── Configuration ─────────────────────────────────────────────────


class ProcessorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: QueryType
    query: str = Field(min_length=1)


# ── Specification ─────────────────────────────────────────────────


class Validation(BaseModel):
    type: Literal["required", "inclusion"]
    values: list[str] | None = None


class Parameter(BaseModel):
    description: str
    type: Literal["string"] = "string"
    default: str = ""
    validations: list[Validation] = Field(default_factory=list)

    @property
    def required(self) -> bool:
        return any(v.type == "required" for v in self.validations)

    @property
    def allowed_values(self) -> list[str] | None:
        for v in self.validations:
            if v.type == "inclusion":
                return v.values
        return None


class Specification(BaseModel):
    name: str
    summary: str
    description: str
    version: str
    author: str
    parameters: dict[str, Parameter]
