"""JSON schema validation of descriptor records."""

from __future__ import annotations

from functools import lru_cache
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schemas" / "descriptor.schema.json"

# lower sorts first; composite validators only report noise
_VALIDATOR_WEIGHT = {
    "required": 0,
    "type": 1,
    "enum": 2,
    "minimum": 3,
    "maximum": 3,
    "oneOf": 20,
}


@lru_cache(maxsize=1)
def descriptor_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def _format_path(path: Iterable[Any]) -> str:
    parts = [str(p) for p in path]
    return "/" + "/".join(parts) if parts else "/"


def _best_error(errors: list[ValidationError]) -> ValidationError:
    return min(errors, key=lambda e: (_VALIDATOR_WEIGHT.get(e.validator, 10), -len(list(e.path)), len(e.message)))


def iter_record_errors(record: Mapping[str, Any]) -> list[ValidationError]:
    validator = Draft7Validator(descriptor_schema())
    return list(validator.iter_errors(dict(record)))


def validate_record(record: Mapping[str, Any]) -> None:
    """Raise the most relevant :class:`ValidationError` of ``record``, if any."""
    errors = iter_record_errors(record)
    if not errors:
        return
    err = _best_error(errors)
    logger.error("descriptor validation failed at %s: %s", _format_path(err.path), err.message)
    if len(errors) > 1:
        logger.info("%d further schema violations", len(errors) - 1)
    raise err
