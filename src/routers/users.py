import logging
from typing import List, Optional

from fastapi import APIRouter, Body

from src.dependencies import UserServiceDep
from src.schemas.api.envelope import ApiResponse, envelope
from src.schemas.api.users import UserPayload, UserResponse

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Name and email are required"

router = APIRouter(tags=["users"])


@router.get("", response_model=ApiResponse[List[UserResponse]])
def list_users(users: UserServiceDep):
    result = users.list_users()
    if not result.success:
        logger.error(f"Failed to retrieve users: {result.error}")
        return envelope(500, success=False, error=result.error)

    logger.info(f"Retrieved {len(result.data)} users")
    return envelope(success=True, data=result.data, count=result.count)


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(user_id: str, users: UserServiceDep):
    result = users.get_user(user_id)
    if not result.success:
        if result.not_found:
            logger.warning(f"User not found: ID {user_id}")
            return envelope(404, success=False, error=result.error)
        logger.error(f"Error retrieving user: {result.error}")
        return envelope(500, success=False, error=result.error)

    logger.info(f"Retrieved user: ID {user_id}")
    return envelope(success=True, data=result.data)


@router.post("", status_code=201, response_model=ApiResponse[UserResponse])
def create_user(users: UserServiceDep, payload: Optional[UserPayload] = Body(None)):
    if payload is None or not payload.name or not payload.email:
        logger.info("Failed to create user: Missing required fields")
        return envelope(400, success=False, error=MISSING_FIELDS_ERROR)

    result = users.create_user(payload.name, payload.email)
    if not result.success:
        logger.error(f"Failed to create user: {result.error}")
        return envelope(500, success=False, error=result.error)

    logger.info(f"Created new user: ID {result.data.id}, Name: {payload.name}")
    return envelope(201, success=True, data=result.data, message="User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(user_id: str, users: UserServiceDep, payload: Optional[UserPayload] = Body(None)):
    if payload is None or not payload.name or not payload.email:
        logger.warning(f"Failed to update user: Missing required fields for ID {user_id}")
        return envelope(400, success=False, error=MISSING_FIELDS_ERROR)

    result = users.update_user(user_id, payload.name, payload.email)
    if not result.success:
        if result.not_found:
            logger.warning(f"Failed to update user: ID {user_id} not found")
            return envelope(404, success=False, error=result.error)
        logger.error(f"Failed to update user: {result.error}")
        return envelope(500, success=False, error=result.error)

    logger.info(f"Updated user: ID {user_id}")
    return envelope(success=True, data=result.data, message="User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[UserResponse])
def delete_user(user_id: str, users: UserServiceDep):
    result = users.delete_user(user_id)
    if not result.success:
        if result.not_found:
            logger.warning(f"Failed to delete user: ID {user_id} not found")
            return envelope(404, success=False, error=result.error)
        logger.error(f"Failed to delete user: {result.error}")
        return envelope(500, success=False, error=result.error)

    logger.info(f"Deleted user: ID {user_id}, Name: {result.data.name}")
    return envelope(success=True, data=result.data, message="User deleted successfully")
