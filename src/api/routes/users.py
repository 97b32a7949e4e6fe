"""
User directory API routes
All data access goes through UsersService; handlers only map results to HTTP.
"""

import logging
import math
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from database.users_store import PostgresUserStore
from models.enums import ErrorType
from models.user import MessageResponse, UserData, UserListResponse, UserMutationResponse
from services.base_service import ServiceResult
from services.normalization import build_update_set, normalize_user_data, validate_pagination
from services.users_service import EMPTY_UPDATE_MESSAGE, INVALID_ID_MESSAGE, UsersService
from utils.helpers import parse_identifier

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.DUPLICATE_EMAIL: 400,
    ErrorType.INVALID_IDENTIFIER: 400,
    ErrorType.RESOURCE_NOT_FOUND: 404,
    ErrorType.DATABASE_ERROR: 500,
}


def get_users_service(request: Request) -> UsersService:
    """Build the service on top of the pool opened in the app lifespan"""
    return UsersService(PostgresUserStore(request.app.state.database.pool))


def raise_for_result(result: ServiceResult):
    if not result.success:
        raise HTTPException(status_code=ERROR_STATUS.get(result.error_type, 500), detail=result.error)


@router.get("", response_model=UserListResponse)
async def list_users(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    users_service: UsersService = Depends(get_users_service)
):
    """List users, optionally filtered by a search term"""
    valid_page, valid_limit = validate_pagination(page, limit)
    search_term = (search or "").strip()
    skip = (valid_page - 1) * valid_limit

    result = await users_service.list_users(search_term, skip, valid_limit)
    raise_for_result(result)

    return UserListResponse(
        page=valid_page,
        limit=valid_limit,
        total=result.count,
        total_pages=math.ceil(result.count / valid_limit),
        data=[UserData(**user) for user in result.data]
    )


@router.post("", status_code=201, response_model=UserMutationResponse)
async def create_user(
    payload: Dict[str, Any] = Body(...),
    users_service: UsersService = Depends(get_users_service)
):
    """Create a new user"""
    fields = normalize_user_data(payload)

    result = await users_service.create_user(fields)
    raise_for_result(result)

    return UserMutationResponse(
        message="User created successfully",
        data=UserData(**result.data[0])
    )


@router.put("/{user_id}", response_model=UserMutationResponse)
async def update_user(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    users_service: UsersService = Depends(get_users_service)
):
    """Partially update a user"""
    if parse_identifier(user_id) is None:
        raise HTTPException(status_code=400, detail=INVALID_ID_MESSAGE)

    updates = build_update_set(normalize_user_data(payload))
    if not updates:
        raise HTTPException(status_code=400, detail=EMPTY_UPDATE_MESSAGE)

    result = await users_service.update_user(user_id, updates)
    raise_for_result(result)

    return UserMutationResponse(
        message="User updated successfully",
        data=UserData(**result.data[0])
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    users_service: UsersService = Depends(get_users_service)
):
    """Permanently delete a user"""
    if parse_identifier(user_id) is None:
        raise HTTPException(status_code=400, detail=INVALID_ID_MESSAGE)

    result = await users_service.delete_user(user_id)
    raise_for_result(result)

    return MessageResponse(message="User deleted successfully")
