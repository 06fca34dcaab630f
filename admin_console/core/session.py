from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ConsoleSession:
    """Capability handed to each screen controller in place of ambient auth state."""
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False

    @property
    def can_manage(self) -> bool:
        return self.is_admin
