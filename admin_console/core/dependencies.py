"""
Core dependencies for route protection and console controller wiring
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from admin_console.config import settings
from admin_console.core import registry
from admin_console.core.errors import DialogTransitionError, GatewayError, PreconditionFailure
from admin_console.core.mutations import ActionResult
from admin_console.core.session import ConsoleSession
from admin_console.database.record_store import RecordStore
from admin_console.database.supabase_client import get_supabase, get_record_store
from admin_console.modules.auth.service import AuthService
from admin_console.modules.crm.controller import DealPipelineController
from admin_console.modules.crm.service import DealService
from admin_console.modules.users.controller import UserListController
from admin_console.modules.users.service import UserService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


async def get_console_session(
    user_data: dict = Depends(get_current_user_id),
    store: RecordStore = Depends(get_record_store)
) -> ConsoleSession:
    """Build the capability object handed to controllers; admin flag comes from profiles.is_admin"""
    try:
        profile = await store.select_by_id(settings.profiles_table, user_data["id"], columns="id, email, is_admin")
    except GatewayError as e:
        logger.error(f"Error loading profile for session {user_data['id']}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load user profile"
        )
    return ConsoleSession(
        user_id=user_data["id"],
        email=user_data.get("email"),
        is_admin=bool(profile and profile.get("is_admin")),
    )


def require_admin(session: ConsoleSession = Depends(get_console_session)) -> ConsoleSession:
    """Dependency that only lets administrators reach the console screens"""
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required"
        )
    return session


async def get_user_controller(
    session: ConsoleSession = Depends(require_admin),
    store: RecordStore = Depends(get_record_store)
) -> UserListController:
    """Per-user controller of the user-administration screen, activated on first use"""
    notifier = registry.get_notifier(session.user_id)
    controller, created = registry.get_or_create(
        session.user_id,
        "users",
        lambda: UserListController(UserService(store), session, notifier)
    )
    controller.session = session
    if created:
        await controller.activate()
    return controller


async def get_deal_controller(
    session: ConsoleSession = Depends(require_admin),
    store: RecordStore = Depends(get_record_store)
) -> DealPipelineController:
    """Per-user controller of the deal-pipeline screen, activated on first use"""
    notifier = registry.get_notifier(session.user_id)
    controller, created = registry.get_or_create(
        session.user_id,
        "deals",
        lambda: DealPipelineController(DealService(store), session, notifier)
    )
    controller.session = session
    if created:
        await controller.activate()
    return controller


def ensure_ok(result: ActionResult):
    """Translate a failed controller action into an HTTP error; return the result's record otherwise"""
    if result.ok:
        return result.record
    error = result.error
    detail = {"title": error.title, "description": error.description}
    if isinstance(error, DialogTransitionError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
    if isinstance(error, PreconditionFailure):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
