"""
Notes API — Note Payload Validator
===================================

What:  Turns a raw JSON payload into a NoteCreate / NotePatch, or raises a
       ValidationError listing every missing or malformed field.
Why:   Validation must finish before the service talks to the store, and it
       must be testable without a database or an HTTP client.
How:   Delegates type and rule checks to the pydantic schemas and rewrites
       pydantic's error list into the API's {"field", "message"} format.

Both functions are pure: same input, same output, no I/O.
"""

from typing import Any, Dict, List, Type, TypeVar

import pydantic

from notes_api.exceptions import ValidationError
from notes_api.schemas.note import NoteCreate, NotePatch

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)

_TYPE_NAMES = {
    "string_type": "a string",
    "bool_type": "a boolean",
}


def _describe(error: Dict[str, Any]) -> Dict[str, str]:
    """Convert one pydantic error dict into the API's field report."""
    loc = error.get("loc") or ()
    field = ".".join(str(part) for part in loc) or "body"
    kind = error.get("type", "")

    if kind == "missing":
        message = f"{field} is required"
    elif kind in _TYPE_NAMES:
        message = f"{field} must be {_TYPE_NAMES[kind]}"
    elif kind == "value_error":
        message = str(error.get("ctx", {}).get("error") or error.get("msg", "invalid value"))
    else:
        message = error.get("msg", "invalid value")
    return {"field": field, "message": message}


def _validate(schema: Type[SchemaT], payload: Any, action: str) -> SchemaT:
    if not isinstance(payload, dict):
        raise ValidationError(
            message=f"Note {action} payload must be a JSON object",
            errors=[{"field": "body", "message": "expected a JSON object"}],
        )
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        errors: List[Dict[str, str]] = [_describe(e) for e in exc.errors()]
        raise ValidationError(
            message=f"Note {action} payload is invalid: "
            + ", ".join(e["field"] for e in errors),
            errors=errors,
        ) from None


def validate_create(payload: Any) -> NoteCreate:
    """
    Validate a POST /api/notes body.

    Raises:
        ValidationError: title missing/blank, or any field of the wrong type.
    """
    return _validate(NoteCreate, payload, "create")


def validate_patch(payload: Any) -> NotePatch:
    """
    Validate a PATCH /api/notes/{id} body.

    Absent fields stay absent (see NotePatch.changes); an empty object is a
    valid patch that only refreshes updatedAt.

    Raises:
        ValidationError: blank title, null for a non-nullable field, or any
        field of the wrong type.
    """
    return _validate(NotePatch, payload, "update")
