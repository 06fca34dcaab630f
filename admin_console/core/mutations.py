"""
Mutation Gateway.

One backend write per call. The fold into local state runs only after the
backend confirms; on failure local state is left as it was and the user gets
an error notification carrying the backend's message when there is one.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Tuple, TypeVar, Union

from admin_console.core.errors import ConsoleError, GatewayError, PreconditionFailure, WriteFailure
from admin_console.core.notifications import Notifier, NotificationKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

SuccessMessage = Union[Tuple[str, str], Callable[[T], Tuple[str, str]]]


@dataclass
class ActionResult(Generic[T]):
    """Outcome of a controller action: the resulting record or state, or the failure."""
    ok: bool
    record: Optional[T] = None
    error: Optional[ConsoleError] = None

    @classmethod
    def success(cls, record: Optional[T] = None) -> "ActionResult[T]":
        return cls(ok=True, record=record)

    @classmethod
    def failure(cls, error: ConsoleError) -> "ActionResult[T]":
        return cls(ok=False, error=error)


class MutationGateway:
    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    def refuse(self, failure: PreconditionFailure) -> ActionResult:
        """Report a precondition failure without touching the backend."""
        logger.info(f"Refused: {failure.title} ({failure.description})")
        self.notifier.notify(NotificationKind.ERROR, failure.title, failure.description)
        return ActionResult.failure(failure)

    async def apply(
        self,
        write: Callable[[], Awaitable[T]],
        fold: Callable[[T], None],
        *,
        success: SuccessMessage,
        error_title: str,
        error_fallback: str,
    ) -> ActionResult[T]:
        try:
            record = await write()
        except GatewayError as e:
            failure = WriteFailure(error_title, e.message or error_fallback)
            self.notifier.notify(NotificationKind.ERROR, failure.title, failure.description)
            return ActionResult.failure(failure)
        except Exception as e:
            logger.exception(f"{error_title}: {e}")
            failure = WriteFailure(error_title, error_fallback)
            self.notifier.notify(NotificationKind.ERROR, failure.title, failure.description)
            return ActionResult.failure(failure)

        fold(record)
        title, description = success(record) if callable(success) else success
        self.notifier.notify(NotificationKind.SUCCESS, title, description)
        return ActionResult.success(record)
