"""Checks persisted signoff records against their packaged schemas."""

from functools import cache
from typing import Any

from jsonschema.validators import Draft202012Validator

from signoff.schemas.registry import get_registry


class RecordInvalid(ValueError):
    """A state or governance record does not match its schema."""

    def __init__(self, schema_name: str, problems: list[str]) -> None:
        self.schema_name = schema_name
        self.problems = problems
        super().__init__(f"invalid {schema_name} record: {'; '.join(problems)}")


@cache
def _validator(schema_name: str) -> Draft202012Validator:
    return Draft202012Validator(get_registry().get_json(schema_name))


def record_problems(data: Any, schema_name: str) -> list[str]:
    """List schema violations in ``data`` as ``field.path: message`` strings, in path order."""
    errors = sorted(_validator(schema_name).iter_errors(data), key=lambda e: [str(p) for p in e.path])
    return [f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message for e in errors]


def check_record(data: Any, schema_name: str) -> None:
    """Raise RecordInvalid unless ``data`` satisfies the named schema.

    Raises:
        KeyError: If the schema is not shipped in package data
        RecordInvalid: If the record has any violations
    """
    problems = record_problems(data, schema_name)
    if problems:
        raise RecordInvalid(schema_name, problems)
