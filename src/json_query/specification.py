"""Static processor description registered with the host for discovery."""

from __future__ import annotations

from json_query.backends import BACKENDS
from json_query.models import Parameter, Specification, Validation

NAME = "json.query"
VERSION = "v0.1.0"


def specification() -> Specification:
    return Specification(
        name=NAME,
        summary="Query and transform JSON payloads using JMESPath or jq expressions",
        description=(
            "This processor allows filtering and transformation of JSON "
            "messages using either JMESPath or jq syntax. It evaluates the "
            "specified query against each message's JSON payload and "
            "replaces the payload with the query result."
        ),
        version=VERSION,
        author="json-query contributors",
        parameters={
            "type": Parameter(
                description="Query engine type: 'jmespath' or 'jq'",
                validations=[
                    Validation(type="required"),
                    Validation(type="inclusion", values=sorted(BACKENDS)),
                ],
            ),
            "query": Parameter(
                description="Query expression to evaluate against JSON payloads",
                validations=[Validation(type="required")],
            ),
        },
    )
