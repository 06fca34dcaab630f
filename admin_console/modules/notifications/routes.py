from fastapi import APIRouter, Depends
from admin_console.core import registry
from admin_console.core.dependencies import require_admin
from admin_console.core.notifications import Notification
from admin_console.core.session import ConsoleSession
from typing import List

router = APIRouter(prefix="/console/notifications", tags=["notifications"])


@router.get("", response_model=List[Notification])
async def drain_notifications(
    session: ConsoleSession = Depends(require_admin)
):
    """Pending toasts for the signed-in staff member, oldest first; returned once"""
    return registry.get_notifier(session.user_id).drain()
