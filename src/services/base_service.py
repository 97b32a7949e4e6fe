"""
Base service layer types shared by resource services
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from models.enums import ErrorType

logger = logging.getLogger(__name__)

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None

    @classmethod
    def ok(cls, data: List[Dict[str, Any]], count: Optional[int] = None) -> "ServiceResult":
        return cls(success=True, data=data, count=len(data) if count is None else count)

    @classmethod
    def fail(cls, error_type: ErrorType, error: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)
