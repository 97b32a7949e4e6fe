"""
User-related Pydantic models
"""

from typing import List, Optional, Union
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class UserFields(BaseModel):
    """
    Normalized, partial set of user fields.

    Only the keys that were present in the raw input are marked as set, so
    ``model_dump(exclude_unset=True)`` yields exactly the provided fields.
    ``age`` is an int after flooring, or a float NaN when the input was not
    numeric.
    """
    name: Optional[str] = None
    age: Optional[Union[int, float]] = None
    email: Optional[str] = None
    address: Optional[str] = None

    def provided(self) -> dict:
        return self.model_dump(exclude_unset=True)


class UserData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    age: int
    email: str
    address: Optional[str] = None


class UserListResponse(BaseModel):
    """Paginated list of users"""
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    data: List[UserData]


class UserMutationResponse(BaseModel):
    message: str
    data: UserData


class MessageResponse(BaseModel):
    message: str
