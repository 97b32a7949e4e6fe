"""
Utility functions and helpers
"""

import logging
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)

def parse_identifier(value: str) -> Optional[UUID]:
    """Parse a user identifier, returning None when it is not a well-formed UUID"""
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        logger.debug(f"Rejected malformed identifier: {value!r}")
        return None
