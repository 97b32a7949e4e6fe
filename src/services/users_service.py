"""
Users service - business logic for the user directory
"""

import asyncio
import logging
from typing import Any, Dict

import asyncpg

from models.enums import ErrorType
from models.user import UserFields
from services.base_service import ServiceResult
from services.validation import validate_user_fields
from utils.helpers import parse_identifier

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Email already exists"
INVALID_ID_MESSAGE = "Invalid ID"
NOT_FOUND_MESSAGE = "User not found"
EMPTY_UPDATE_MESSAGE = "No data to update"
STORE_ERROR_MESSAGE = "Database operation failed"


class UsersService:
    """
    Service for user management operations.

    Email uniqueness is checked before every write and enforced again by the
    store's unique index, since the pre-check and the write are not atomic.
    """

    def __init__(self, store):
        self.store = store

    async def list_users(self, search: str = "", skip: int = 0, limit: int = 5) -> ServiceResult:
        """
        List one page of users matching the search term

        Args:
            search: Case-insensitive substring matched against name, email or address
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            ServiceResult with the page in ``data`` and the total match count in ``count``
        """
        try:
            users, total = await asyncio.gather(
                self.store.find_page(search, skip, limit),
                self.store.count(search)
            )
        except Exception as e:
            logger.error(f"List operation failed for users: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.DATABASE_ERROR, STORE_ERROR_MESSAGE)

        return ServiceResult.ok(users, count=total)

    async def get_user(self, user_id: str) -> ServiceResult:
        parsed_id = parse_identifier(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.INVALID_IDENTIFIER, INVALID_ID_MESSAGE)

        try:
            user = await self.store.find_by_id(parsed_id)
        except Exception as e:
            logger.error(f"Read operation failed for user {user_id}: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.DATABASE_ERROR, STORE_ERROR_MESSAGE)

        if user is None:
            return ServiceResult.fail(ErrorType.RESOURCE_NOT_FOUND, NOT_FOUND_MESSAGE)
        return ServiceResult.ok([user])

    async def create_user(self, fields: UserFields) -> ServiceResult:
        """
        Create a new user

        Args:
            fields: Normalized user fields

        Returns:
            ServiceResult with created user data
        """
        values = fields.provided()

        try:
            if values.get("email"):
                existing = await self.store.find_by_email(values["email"])
                if existing:
                    logger.info(f"Rejected create, email already in use: {values['email']}")
                    return ServiceResult.fail(ErrorType.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

            validation = validate_user_fields(values)
            if not validation.ok:
                return ServiceResult.fail(ErrorType.VALIDATION_ERROR, validation.message)

            user = await self.store.insert(values)
        except Exception as e:
            return self._write_failure("Create", e)

        logger.info(f"Created user {user['id']}")
        return ServiceResult.ok([user])

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> ServiceResult:
        """
        Apply a partial update to a user

        Args:
            user_id: UUID of the user
            updates: Fields to change; omitted fields keep their value

        Returns:
            ServiceResult with updated user data
        """
        parsed_id = parse_identifier(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.INVALID_IDENTIFIER, INVALID_ID_MESSAGE)
        if not updates:
            return ServiceResult.fail(ErrorType.VALIDATION_ERROR, EMPTY_UPDATE_MESSAGE)

        try:
            if updates.get("email"):
                existing = await self.store.find_by_email(updates["email"], exclude_id=parsed_id)
                if existing:
                    logger.info(f"Rejected update of {user_id}, email already in use: {updates['email']}")
                    return ServiceResult.fail(ErrorType.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

            validation = validate_user_fields(updates, partial=True)
            if not validation.ok:
                return ServiceResult.fail(ErrorType.VALIDATION_ERROR, validation.message)

            user = await self.store.update(parsed_id, updates)
        except Exception as e:
            return self._write_failure("Update", e)

        if user is None:
            return ServiceResult.fail(ErrorType.RESOURCE_NOT_FOUND, NOT_FOUND_MESSAGE)

        logger.info(f"Updated user {user_id}: {sorted(updates)}")
        return ServiceResult.ok([user])

    async def delete_user(self, user_id: str) -> ServiceResult:
        """
        Permanently delete a user

        Args:
            user_id: UUID of the user

        Returns:
            ServiceResult indicating success/failure
        """
        parsed_id = parse_identifier(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.INVALID_IDENTIFIER, INVALID_ID_MESSAGE)

        try:
            deleted = await self.store.delete(parsed_id)
        except Exception as e:
            logger.error(f"Delete operation failed for user {user_id}: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.DATABASE_ERROR, STORE_ERROR_MESSAGE)

        if not deleted:
            return ServiceResult.fail(ErrorType.RESOURCE_NOT_FOUND, NOT_FOUND_MESSAGE)

        logger.info(f"Deleted user {user_id}")
        return ServiceResult(success=True, data=[], count=1)

    def _write_failure(self, operation: str, error: Exception) -> ServiceResult:
        """Translate store constraint violations into service errors"""
        if isinstance(error, asyncpg.UniqueViolationError):
            logger.warning(f"Unique constraint violation during {operation.lower()}: {error}")
            return ServiceResult.fail(ErrorType.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)
        if isinstance(error, (asyncpg.CheckViolationError, asyncpg.NotNullViolationError)):
            logger.warning(f"Constraint violation during {operation.lower()}: {error}")
            return ServiceResult.fail(ErrorType.VALIDATION_ERROR, f"User validation failed: {error}")
        if isinstance(error, asyncpg.DataError):
            # Values the column types cannot hold (int4 overflow, NUL bytes in text)
            logger.warning(f"Rejected value during {operation.lower()}: {error}")
            return ServiceResult.fail(ErrorType.VALIDATION_ERROR, f"User validation failed: {error}")

        logger.error(f"{operation} operation failed for users: {error}", exc_info=True)
        return ServiceResult.fail(ErrorType.DATABASE_ERROR, STORE_ERROR_MESSAGE)
