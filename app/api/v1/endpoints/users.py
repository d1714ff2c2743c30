from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.core.dependencies import get_current_db_user, get_user_service
from app.database.models import User
from app.schemas.user import RegisterRequest, UserResponse
from app.services.user_service import UserService
from app.utils.logging import get_logger
from app.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="Create a local user record before the user's first login",
    operation_id="register_user",
)
async def register_user(
    request: Request,
    payload: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a user. Answers 409 when the email is already known."""
    user = await user_service.register_user(payload)
    return create_api_response(
        data=UserResponse.model_validate(user),
        message="User created successfully",
        request=request,
    )


@router.get(
    "",
    summary="List users",
    description="All users ordered by name, for assignment pickers",
    operation_id="list_users",
)
async def list_users(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    users = await user_service.list_users()
    return create_api_response(
        data=[UserResponse.model_validate(user) for user in users],
        message="Users retrieved successfully",
        request=request,
    )


@router.get(
    "/whoami",
    summary="Get current user profile",
    operation_id="get_current_user_profile",
)
async def get_current_user_profile(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
):
    LOGGER.info(f"User profile retrieved for user: {current_user.id}")
    return create_api_response(
        data=UserResponse.model_validate(current_user),
        message="User profile retrieved successfully",
        request=request,
    )
