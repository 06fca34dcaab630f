"""
Shared shape of a screen controller: one record family, a loading flag and the
fold step every mutation goes through.

Reads are tagged with an increasing sequence number. A response that is not
newer than the last applied one is dropped, so overlapping refreshes can never
put an older list on screen after a newer one.
"""

import logging
from operator import attrgetter
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from admin_console.core.errors import GatewayError, PreconditionFailure, ReadFailure
from admin_console.core.filtering import filter_records
from admin_console.core.mutations import ActionResult, MutationGateway
from admin_console.core.notifications import NotificationKind, Notifier
from admin_console.core.session import ConsoleSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ListController(Generic[T]):
    family: str = "registros"
    load_error_title: str = "Erro ao carregar registros"
    load_error_fallback: str = "Não foi possível carregar a lista."
    text_fields: Sequence[Callable[[T], Optional[str]]] = ()
    status_field: Optional[Callable[[T], Any]] = attrgetter("status")

    def __init__(self, session: ConsoleSession, notifier: Notifier):
        self.session = session
        self.notifier = notifier
        self.mutations = MutationGateway(notifier)
        self.records: List[T] = []
        self.loading = False
        self.total_count = 0
        self._issued_seq = 0
        self._applied_seq = 0

    async def _fetch(self) -> List[T]:
        raise NotImplementedError

    async def activate(self) -> None:
        await self.refresh()

    async def refresh(self) -> bool:
        """Re-read the whole family and replace the list. Returns True if the response was applied."""
        self._issued_seq += 1
        seq = self._issued_seq
        self.loading = True
        try:
            records = await self._fetch()
        except Exception as e:
            if seq != self._issued_seq:
                logger.debug(f"Ignoring failure of superseded {self.family} read #{seq}: {e}")
                return False
            self.loading = False
            message = e.message if isinstance(e, GatewayError) else None
            if not isinstance(e, GatewayError):
                logger.exception(f"Unexpected error loading {self.family}")
            failure = ReadFailure(self.load_error_title, message or self.load_error_fallback)
            self.notifier.notify(NotificationKind.ERROR, failure.title, failure.description)
            return False

        if seq <= self._applied_seq:
            logger.debug(f"Discarding stale {self.family} read #{seq} (applied #{self._applied_seq})")
            return False
        self._applied_seq = seq
        self.records = records
        if seq == self._issued_seq:
            self.loading = False
        logger.info(f"Loaded {len(records)} {self.family}")
        return True

    def visible(self, term: Optional[str] = None, status: Optional[str] = None) -> List[T]:
        return filter_records(
            self.records,
            term,
            status,
            text_fields=self.text_fields,
            status_field=self.status_field,
        )

    def find(self, record_id: str) -> Optional[T]:
        return next((r for r in self.records if r.id == record_id), None)

    def _fold(self, record: Optional[T]) -> None:
        """Replace the entry with the same id; every other entry is kept as the same object."""
        if record is None:
            return
        self.records = [record if r.id == record.id else r for r in self.records]

    def _prepend(self, record: T) -> None:
        self.records = [record] + [r for r in self.records if r.id != record.id]

    def _check_can_manage(self) -> Optional[ActionResult]:
        if self.session.can_manage:
            return None
        return self.mutations.refuse(PreconditionFailure(
            "Acesso negado",
            "Apenas administradores podem realizar esta ação.",
        ))
