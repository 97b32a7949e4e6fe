"""
Field validators for user records, independent of the storage driver
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
NAME_MIN_LENGTH = 2
AGE_MIN = 0
# Upper bound of the INTEGER column
AGE_MAX = 2147483647

REQUIRED_FIELDS = ("name", "age", "email")


@dataclass
class FieldError:
    """Single failed constraint"""
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        details = ", ".join(f"{error.field}: {error.message}" for error in self.errors)
        return f"User validation failed: {details}"


def _validate_name(value: Any) -> List[FieldError]:
    if not isinstance(value, str) or not value.strip():
        return [FieldError("name", "Name is required")]
    if "\x00" in value:
        return [FieldError("name", "Name must not contain NUL characters")]
    if len(value.strip()) < NAME_MIN_LENGTH:
        return [FieldError("name", f"Name must be at least {NAME_MIN_LENGTH} characters")]
    return []


def _validate_age(value: Any) -> List[FieldError]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return [FieldError("age", "Age must be a number")]
    if value != int(value):
        return [FieldError("age", "Age must be a whole number")]
    if value < AGE_MIN:
        return [FieldError("age", f"Age must be >= {AGE_MIN}")]
    if value > AGE_MAX:
        return [FieldError("age", f"Age must be <= {AGE_MAX}")]
    return []


def _validate_email(value: Any) -> List[FieldError]:
    if not isinstance(value, str) or not value:
        return [FieldError("email", "Email is required")]
    if "\x00" in value:
        return [FieldError("email", "Email must not contain NUL characters")]
    if not EMAIL_PATTERN.match(value):
        return [FieldError("email", "Email is invalid")]
    return []


def _validate_address(value: Any) -> List[FieldError]:
    if not isinstance(value, str):
        return [FieldError("address", "Address must be text")]
    if "\x00" in value:
        return [FieldError("address", "Address must not contain NUL characters")]
    return []


VALIDATORS = {
    "name": _validate_name,
    "age": _validate_age,
    "email": _validate_email,
    "address": _validate_address,
}


def validate_user_fields(fields: Dict[str, Any], partial: bool = False) -> ValidationResult:
    """
    Check normalized user fields against the record constraints.

    With ``partial=True`` only the supplied fields are checked, which is what
    an update needs; otherwise the required fields must all be present.
    """
    result = ValidationResult()

    if not partial:
        for name in REQUIRED_FIELDS:
            if fields.get(name) is None:
                result.errors.append(FieldError(name, f"{name.capitalize()} is required"))

    for name, value in fields.items():
        if value is None or name not in VALIDATORS:
            continue
        result.errors.extend(VALIDATORS[name](value))

    return result
