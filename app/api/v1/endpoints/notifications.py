from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.dependencies import get_current_db_user
from app.database.models import User
from app.services.notification_service import NotificationService, get_notification_service
from app.utils.responses import create_api_response, create_error_detail

router = APIRouter()


@router.get(
    "",
    summary="List my notifications",
    description="Notifications for the current user, newest first",
    operation_id="list_notifications",
)
async def list_notifications(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
):
    return create_api_response(
        data=notifications.list_for_user(str(current_user.id)),
        message="Notifications retrieved successfully",
        request=request,
    )


@router.post(
    "/{notification_id}/read",
    summary="Mark a notification as read",
    operation_id="mark_notification_read",
)
async def mark_notification_read(
    request: Request,
    notification_id: str,
    current_user: Annotated[User, Depends(get_current_db_user)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
):
    if not notifications.mark_read(str(current_user.id), notification_id):
        error_detail = create_error_detail(
            title="Notification Not Found",
            status=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found",
            request=request,
        )
        raise HTTPException(status_code=404, detail=error_detail.model_dump(mode="json"))
    return create_api_response(
        data={"id": notification_id, "read": True},
        message="Notification marked as read",
        request=request,
    )
