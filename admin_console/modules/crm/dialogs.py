import logging
from typing import Optional, Sequence

from admin_console.core.dialogs import DialogMachine, Idle
from admin_console.core.errors import PreconditionFailure
from admin_console.modules.crm.schemas import (
    Customer, CustomerPickingDialog, DealDraft, DealEditingDialog, DealViewingDialog
)

logger = logging.getLogger(__name__)


class DealDialogs(DialogMachine):
    """
    Pipeline dialogs.

    Creation path: Idle -> CustomerPicking -> DealEditing(customer_id) -> Idle.
    Inspection: Idle <-> DealViewing(deal_id).
    """

    def start_creation(self, customers: Sequence[Customer]) -> CustomerPickingDialog:
        self._require(Idle, action="iniciar um novo negócio")
        if not any(c.is_eligible for c in customers):
            raise PreconditionFailure(
                "Nenhum cliente disponível",
                "Adicione clientes antes de criar negócios.",
            )
        return self._enter(CustomerPickingDialog())

    def select_customer(self, customer_id: str, customers: Sequence[Customer]) -> DealEditingDialog:
        self._require(CustomerPickingDialog, action="selecionar um cliente")
        if not any(c.id == customer_id and c.is_eligible for c in customers):
            raise PreconditionFailure(
                "Cliente inválido",
                "Selecione um cliente ativo da lista.",
            )
        return self._enter(DealEditingDialog(customer_id=customer_id))

    def keep_draft(self, editing: DealEditingDialog, draft: DealDraft):
        """Keep the form open after a failed save, unless the user already left it."""
        if self._state is not editing:
            return self._state
        return self._enter(DealEditingDialog(customer_id=editing.customer_id, draft=draft))

    def finish_creation(self, editing: DealEditingDialog):
        """Close the form the save was submitted from. Any later dialog stays as it is."""
        if self._state is not editing:
            logger.debug(f"Save finished after the form was left; keeping {self._state.state}")
            return self._state
        return self._enter(Idle())

    def cancel_creation(self):
        if self.is_idle:
            return self._state
        self._require(CustomerPickingDialog, DealEditingDialog, action="cancelar a criação")
        return self._enter(Idle())

    def view_deal(self, deal_id: str) -> DealViewingDialog:
        self._require(Idle, DealViewingDialog, action="abrir os detalhes")
        return self._enter(DealViewingDialog(deal_id=deal_id))

    def close_deal_view(self):
        if self.is_idle:
            return self._state
        self._require(DealViewingDialog, action="fechar os detalhes")
        return self._enter(Idle())

    @property
    def selected_customer_id(self) -> Optional[str]:
        return self._state.customer_id if isinstance(self._state, DealEditingDialog) else None

    @property
    def viewed_deal_id(self) -> Optional[str]:
        return self._state.deal_id if isinstance(self._state, DealViewingDialog) else None
