from fastapi import APIRouter, Depends
from admin_console.core.dependencies import get_user_controller, ensure_ok
from admin_console.modules.users.controller import UserListController
from admin_console.modules.users.schemas import (
    EditingDialog, ProfileEditForm, ProfileEditUpdate, ToggleAdminRequest,
    UserProfile, UserScreenResponse
)
from typing import Optional

router = APIRouter(prefix="/console/users", tags=["users"])


@router.get("", response_model=UserScreenResponse)
async def get_user_screen(
    search: Optional[str] = None,
    status: Optional[str] = None,
    controller: UserListController = Depends(get_user_controller)
):
    """Loaded profiles filtered by name/email and payment status, with the "N of M" counters"""
    return controller.snapshot(search, status)


@router.post("/refresh", response_model=UserScreenResponse)
async def refresh_users(
    search: Optional[str] = None,
    status: Optional[str] = None,
    controller: UserListController = Depends(get_user_controller)
):
    """Re-read the profile list and total count"""
    await controller.activate()
    return controller.snapshot(search, status)


@router.post("/{user_id}/approve-payment", response_model=Optional[UserProfile])
async def approve_payment(
    user_id: str,
    controller: UserListController = Depends(get_user_controller)
):
    return ensure_ok(await controller.approve_payment(user_id))


@router.post("/{user_id}/toggle-admin", response_model=Optional[UserProfile])
async def toggle_admin(
    user_id: str,
    body: Optional[ToggleAdminRequest] = None,
    controller: UserListController = Depends(get_user_controller)
):
    """Grant or revoke admin rights; current_is_admin defaults to the loaded record's value"""
    current = body.current_is_admin if body else None
    return ensure_ok(await controller.toggle_admin(user_id, current))


@router.post("/{user_id}/edit", response_model=EditingDialog)
async def open_editor(
    user_id: str,
    controller: UserListController = Depends(get_user_controller)
):
    """Open the edit dialog seeded with the record's current values"""
    return ensure_ok(controller.open_editor(user_id))


@router.patch("/edit", response_model=EditingDialog)
async def update_editor(
    changes: ProfileEditUpdate,
    controller: UserListController = Depends(get_user_controller)
):
    return ensure_ok(controller.update_editor(changes))


@router.post("/edit/save", response_model=Optional[UserProfile])
async def save_edit(
    form: Optional[ProfileEditForm] = None,
    controller: UserListController = Depends(get_user_controller)
):
    """Save the edit dialog; the body, when sent, replaces the dialog's form"""
    return ensure_ok(await controller.save_edit(form))


@router.post("/edit/cancel", status_code=204)
async def cancel_edit(
    controller: UserListController = Depends(get_user_controller)
):
    controller.cancel_edit()
    return None
