"""Output parser for ``lute lint -j``."""

from __future__ import annotations

import json

from pydantic import TypeAdapter, ValidationError

from lutels.core.errors import InvocationError, MalformedViolationError
from lutels.lint.models import Violation

_VIOLATION = TypeAdapter(Violation)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    loc = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{loc}: {first['msg']}"


def parse_violations(stdout: str) -> list[Violation]:
    """Decode a JSON array of violations.

    The batch is all-or-nothing: one bad record rejects every record.

    Raises:
        InvocationError: stdout is not a JSON array.
        MalformedViolationError: a record is missing or mistypes a field.
    """
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise InvocationError.bad_output(str(e)) from e

    if not isinstance(data, list):
        raise InvocationError.bad_output(f"expected array, got {type(data).__name__}")

    violations: list[Violation] = []
    for index, item in enumerate(data):
        try:
            violations.append(_VIOLATION.validate_python(item))
        except ValidationError as e:
            raise MalformedViolationError.from_validation(index, _describe(e)) from e
    return violations
