"""
Notification endpoints for the signed-in user.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from uuid import UUID

from xpatly.models.user import User
from xpatly.services.notification import NotificationService
from xpatly.schemas.notification import NotificationResponse, NotificationListResponse
from xpatly.schemas.error import get_crud_error_responses, get_auth_error_responses
from xpatly.utils.dependencies import get_current_active_user, get_notification_service


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    status_code=status.HTTP_200_OK,
    summary="List notifications",
    responses=get_auth_error_responses()
)
async def list_notifications(
    unread_only: bool = Query(False, description="Only return unread notifications"),
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationListResponse:
    notifications, unread_count = await notification_service.get_notifications(
        current_user, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n.to_dict()) for n in notifications],
        unread_count=unread_count,
    )


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark notification read",
    responses=get_crud_error_responses()
)
async def mark_notification_read(
    notification_id: UUID = Path(..., description="Notification ID"),
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationResponse:
    notification = await notification_service.mark_read(notification_id, current_user)
    return NotificationResponse.model_validate(notification.to_dict())
