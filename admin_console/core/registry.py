"""Thread-safe registry of (user_id, screen) -> screen controller, plus one notification center per user."""
import threading
import logging
from typing import Any, Callable, Dict, Tuple

from admin_console.config import settings
from admin_console.core.notifications import NotificationCenter

logger = logging.getLogger(__name__)
_lock = threading.Lock()
_controllers: Dict[Tuple[str, str], Any] = {}
_notifiers: Dict[str, NotificationCenter] = {}


def get_notifier(user_id: str) -> NotificationCenter:
    with _lock:
        center = _notifiers.get(user_id)
        if center is None:
            center = NotificationCenter(max_size=settings.notification_buffer_size)
            _notifiers[user_id] = center
        return center


def get_or_create(user_id: str, screen: str, factory: Callable[[], Any]) -> Tuple[Any, bool]:
    """Return (controller, created). A new controller still needs activate()."""
    with _lock:
        controller = _controllers.get((user_id, screen))
        if controller is not None:
            return controller, False
        controller = factory()
        _controllers[(user_id, screen)] = controller
    logger.debug(f"Created {screen} controller for user {user_id}")
    return controller, True


def discard(user_id: str) -> None:
    """Forget every controller and pending notification of a user (logout)."""
    with _lock:
        for key in [k for k in _controllers if k[0] == user_id]:
            _controllers.pop(key, None)
        _notifiers.pop(user_id, None)
    logger.debug(f"Discarded console state for user {user_id}")


def clear() -> None:
    with _lock:
        _controllers.clear()
        _notifiers.clear()
