import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from admin_console.config import settings
from admin_console.database.record_store import RecordStore
from admin_console.modules.users.schemas import UserProfile, PaymentStatus, ProfileEditForm

logger = logging.getLogger(__name__)


def to_profile(row: Optional[Dict[str, Any]]) -> Optional[UserProfile]:
    """Parse a profiles row; a row that does not validate is logged and skipped."""
    if not row:
        return None
    try:
        return UserProfile(**row)
    except ValidationError as e:
        logger.warning(f"Skipping malformed profile {row.get('id')}: {e.error_count()} invalid field(s)")
        return None


class UserService:
    def __init__(self, store: RecordStore, table: Optional[str] = None):
        self.store = store
        self.table = table or settings.profiles_table

    async def list_profiles(self) -> List[UserProfile]:
        """All profiles, newest first"""
        rows = await self.store.select_ordered(self.table, order_by="created_at", desc=True)
        return [profile for profile in map(to_profile, rows) if profile is not None]

    async def count_profiles(self) -> int:
        return await self.store.count(self.table)

    # Update echoes that do not validate come back as None, so callers fold
    # the values they already know instead.

    async def set_payment_status(self, user_id: str, status: PaymentStatus) -> Optional[UserProfile]:
        row = await self.store.update_by_id(self.table, user_id, {"payment_status": status.value})
        return to_profile(row)

    async def set_admin(self, user_id: str, is_admin: bool) -> Optional[UserProfile]:
        row = await self.store.update_by_id(self.table, user_id, {"is_admin": is_admin})
        return to_profile(row)

    async def update_profile(self, user_id: str, form: ProfileEditForm) -> Optional[UserProfile]:
        row = await self.store.update_by_id(self.table, user_id, form.to_update())
        return to_profile(row)
