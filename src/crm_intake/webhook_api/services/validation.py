"""Payload validation, markup stripping and PII masking."""

import re
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

TAG_RE = re.compile(r"<[^>]*>")

MASK = "***masked***"
PII_FIELDS = ("phone", "birthday")

# Fields checked for format only; markup stripping does not apply.
UNSTRIPPED_FIELDS = frozenset({"date"})

ModelT = TypeVar("ModelT", bound=BaseModel)


class PayloadValidationError(ValueError):
    """Raised when a webhook body fails the field schema."""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        super().__init__(f"Invalid fields: {', '.join(sorted(field_errors))}")


def strip_markup(text: Optional[str]) -> str:
    """Remove tag-shaped substrings and surrounding whitespace.

    A denylist strip: entities and malformed markup are not decoded.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()


def mask_pii(body: Any) -> Any:
    """Copy of ``body`` safe to log: phone and birthday are replaced."""
    if not isinstance(body, dict):
        return body
    masked = dict(body)
    for field in PII_FIELDS:
        if masked.get(field):
            masked[field] = MASK
    return masked


def validate_payload(model: Type[ModelT], body: Any) -> ModelT:
    """Validate a parsed JSON body against ``model``.

    Raises PayloadValidationError with messages grouped per field; errors
    not tied to a field (e.g. a body that is not an object) land under
    ``"_root"``.
    """
    try:
        return model.model_validate(body)
    except ValidationError as e:
        field_errors: Dict[str, List[str]] = {}
        for error in e.errors():
            loc = error.get("loc") or ()
            field = str(loc[0]) if loc else "_root"
            field_errors.setdefault(field, []).append(error["msg"])
        raise PayloadValidationError(field_errors) from None


def sanitize_fields(payload: BaseModel, skip: Iterable[str] = UNSTRIPPED_FIELDS) -> Dict[str, Any]:
    """Strip markup from every text field of a validated payload.

    Absent text fields become empty strings; skipped fields pass through
    unchanged (``None`` stays ``None``).
    """
    skip = set(skip)
    cleaned: Dict[str, Any] = {}
    for name, value in payload.model_dump().items():
        if name in skip:
            cleaned[name] = value or None
        else:
            cleaned[name] = strip_markup(value)
    return cleaned
