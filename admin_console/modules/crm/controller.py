"""
Deal-pipeline screen: deal list, eligible customers and the
pick-customer -> deal-form -> deal-detail dialog flow.
"""

import asyncio
import logging
from operator import attrgetter
from typing import List, Optional

from admin_console.core.errors import GatewayError, PreconditionFailure
from admin_console.core.list_controller import ListController
from admin_console.core.mutations import ActionResult
from admin_console.core.notifications import Notifier
from admin_console.core.session import ConsoleSession
from admin_console.modules.crm.dialogs import DealDialogs
from admin_console.modules.crm.schemas import Customer, Deal, DealDraft, DealScreenResponse
from admin_console.modules.crm.service import DealService

logger = logging.getLogger(__name__)


class DealPipelineController(ListController[Deal]):
    family = "negócios"
    load_error_title = "Erro ao carregar negócios"
    load_error_fallback = "Não foi possível carregar a lista de negócios."
    text_fields = (attrgetter("title"), attrgetter("customer_name"))
    status_field = attrgetter("status")

    def __init__(self, service: DealService, session: ConsoleSession, notifier: Notifier):
        super().__init__(session, notifier)
        self.service = service
        self.dialogs = DealDialogs()
        self.customers: List[Customer] = []
        self._saving = False

    async def _fetch(self):
        return await self.service.list_deals()

    async def activate(self) -> None:
        await asyncio.gather(self.refresh(), self.load_customers())

    async def load_customers(self) -> None:
        """Eligible counterparties for new deals. Failures are only logged."""
        try:
            self.customers = await self.service.list_eligible_customers()
        except GatewayError as e:
            logger.error(f"Error loading customers: {e.message}")

    def start_deal(self) -> ActionResult:
        """Open the customer picker; refused while no eligible customer is loaded."""
        try:
            return ActionResult.success(self.dialogs.start_creation(self.customers))
        except PreconditionFailure as e:
            return self.mutations.refuse(e)

    def select_customer(self, customer_id: str) -> ActionResult:
        try:
            return ActionResult.success(self.dialogs.select_customer(customer_id, self.customers))
        except PreconditionFailure as e:
            return self.mutations.refuse(e)

    def cancel_deal(self) -> ActionResult:
        try:
            return ActionResult.success(self.dialogs.cancel_creation())
        except PreconditionFailure as e:
            return self.mutations.refuse(e)

    async def save_deal(self, draft: DealDraft) -> ActionResult[Deal]:
        editing = self.dialogs.state
        customer_id = self.dialogs.selected_customer_id
        if customer_id is None:
            return self.mutations.refuse(PreconditionFailure(
                "Cliente não selecionado",
                "Selecione um cliente antes de criar o negócio.",
            ))
        if self._saving:
            return self.mutations.refuse(PreconditionFailure(
                "Salvamento em andamento",
                "Aguarde a conclusão do cadastro anterior.",
            ))
        refused = self._check_can_manage()
        if refused:
            return refused
        if not draft.title.strip():
            return self.mutations.refuse(PreconditionFailure(
                "Título obrigatório",
                "Informe o título do negócio.",
            ))
        customer = next((c for c in self.customers if c.id == customer_id), None)

        self._saving = True
        try:
            result = await self.mutations.apply(
                lambda: self.service.create_deal(customer_id, draft, customer),
                self._prepend,
                success=("Negócio adicionado", "O negócio foi adicionado com sucesso."),
                error_title="Erro ao adicionar negócio",
                error_fallback="Não foi possível adicionar o negócio.",
            )
        finally:
            self._saving = False
        # the user may have cancelled or opened another dialog meanwhile
        if result.ok:
            self.dialogs.finish_creation(editing)
        else:
            self.dialogs.keep_draft(editing, draft)
        return result

    def view_deal(self, deal_id: str) -> ActionResult:
        if self.find(deal_id) is None:
            return self.mutations.refuse(PreconditionFailure(
                "Negócio não encontrado",
                f"O negócio {deal_id} não está na lista carregada.",
            ))
        try:
            return ActionResult.success(self.dialogs.view_deal(deal_id))
        except PreconditionFailure as e:
            return self.mutations.refuse(e)

    def close_deal_view(self) -> ActionResult:
        try:
            return ActionResult.success(self.dialogs.close_deal_view())
        except PreconditionFailure as e:
            return self.mutations.refuse(e)

    @property
    def viewed_deal(self) -> Optional[Deal]:
        deal_id = self.dialogs.viewed_deal_id
        return self.find(deal_id) if deal_id else None

    def snapshot(self, term: Optional[str] = None, status: Optional[str] = None) -> DealScreenResponse:
        return DealScreenResponse(
            deals=self.visible(term, status),
            loaded_count=len(self.records),
            loading=self.loading,
            customers=self.customers,
            dialog=self.dialogs.state.model_dump(mode="json"),
        )
