"""
Input normalization for user payloads and list query parameters
"""

import logging
import math
import re
from typing import Any, Dict, Mapping, Optional

from config.settings import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from models.user import UserFields

logger = logging.getLogger(__name__)

USER_FIELDS = ("name", "age", "email", "address")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_PREFIXED_INT = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

# Largest OFFSET a BIGINT can hold
MAX_OFFSET = 2 ** 63 - 1


def _parse_number(text: str):
    """
    Parse numeric text the way JSON clients coerce it.

    Blank text is 0 and 0x, 0o and 0b prefixes are accepted. Digit
    separators, nan and inf spellings are not numbers.
    """
    text = text.strip()
    if not text:
        return 0.0
    if _PREFIXED_INT.match(text):
        return int(text, 0)
    if _DECIMAL.match(text):
        return float(text)
    return math.nan


def _to_floored_number(value: Any):
    """Convert to a number and floor it; anything non-numeric becomes NaN"""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        number = _parse_number(value)
    else:
        return math.nan
    if not math.isfinite(number):
        return math.nan
    return math.floor(number)


def normalize_user_data(data: Mapping[str, Any]) -> UserFields:
    """
    Coerce and trim a raw payload into canonical user fields.

    Keys that are missing or null are left unset. Unknown keys are dropped.
    No validation happens here.
    """
    normalized: Dict[str, Any] = {}

    if data.get("name") is not None:
        normalized["name"] = str(data["name"]).strip()
    if data.get("age") is not None:
        normalized["age"] = _to_floored_number(data["age"])
    if data.get("email") is not None:
        normalized["email"] = str(data["email"]).strip().lower()
    if data.get("address") is not None:
        normalized["address"] = str(data["address"]).strip()

    ignored = [key for key in data if key not in USER_FIELDS]
    if ignored:
        logger.debug(f"Ignoring unrecognized user fields: {ignored}")

    return UserFields(**normalized)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def build_update_set(fields: UserFields) -> Dict[str, Any]:
    """Keep only the provided fields that are usable for a partial update"""
    provided = fields.provided()
    updates = {}

    if provided.get("name"):
        updates["name"] = provided["name"]
    if "age" in provided and not is_nan(provided["age"]):
        updates["age"] = provided["age"]
    if provided.get("email"):
        updates["email"] = provided["email"]
    # An empty address is a legitimate way to clear it
    if "address" in provided:
        updates["address"] = provided["address"]

    return updates


def _parse_leading_int(value: Optional[str]) -> int:
    """Parse the leading integer of a string, 0 when there is none"""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def validate_pagination(page: Optional[str], limit: Optional[str]) -> tuple[int, int]:
    """
    Clamp page and limit query parameters.

    Unparsable or zero values fall back to the defaults; page is at least 1
    and limit stays within [1, MAX_PAGE_LIMIT]. Page is capped so the
    resulting offset stays within MAX_OFFSET.
    """
    valid_limit = min(MAX_PAGE_LIMIT, max(1, _parse_leading_int(limit) or DEFAULT_PAGE_LIMIT))
    valid_page = max(1, _parse_leading_int(page) or DEFAULT_PAGE)
    valid_page = min(valid_page, MAX_OFFSET // valid_limit + 1)
    return valid_page, valid_limit
