from fastapi import APIRouter, Depends
from admin_console.core import registry
from admin_console.core.dependencies import get_auth_service, get_current_token, get_console_session
from admin_console.core.session import ConsoleSession
from admin_console.modules.auth.schemas import LoginRequest, TokenResponse
from admin_console.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.sign_in(login_data.email, login_data.password)


@router.post("/login/default-admin", response_model=TokenResponse)
async def login_default_admin(
    service: AuthService = Depends(get_auth_service)
):
    """Quick access with the configured default admin credentials"""
    return service.sign_in_default_admin()


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    session: ConsoleSession = Depends(get_console_session),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and drop the user's console screens"""
    registry.discard(session.user_id)
    service.sign_out(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=ConsoleSession)
async def get_current_user(
    session: ConsoleSession = Depends(get_console_session)
):
    """Current staff member and whether they can use the console"""
    return session
