"""
User-administration screen: profile list, payment approval, admin rights and
the edit dialog.
"""

import asyncio
import logging
from operator import attrgetter
from typing import Optional

from admin_console.core.errors import DialogTransitionError, GatewayError, PreconditionFailure
from admin_console.core.list_controller import ListController
from admin_console.core.mutations import ActionResult
from admin_console.core.notifications import Notifier
from admin_console.core.session import ConsoleSession
from admin_console.modules.users.dialogs import UserDialogs
from admin_console.modules.users.schemas import (
    EditingDialog, PaymentStatus, ProfileEditForm, ProfileEditUpdate, UserProfile, UserScreenResponse
)
from admin_console.modules.users.service import UserService

logger = logging.getLogger(__name__)


class UserListController(ListController[UserProfile]):
    family = "usuários"
    load_error_title = "Erro ao carregar usuários"
    load_error_fallback = "Não foi possível carregar a lista de usuários."
    text_fields = (attrgetter("full_name"), attrgetter("email"))
    status_field = attrgetter("payment_status")

    def __init__(self, service: UserService, session: ConsoleSession, notifier: Notifier):
        super().__init__(session, notifier)
        self.service = service
        self.dialogs = UserDialogs()

    async def _fetch(self):
        return await self.service.list_profiles()

    async def activate(self) -> None:
        await asyncio.gather(self.refresh(), self.count_total())

    async def count_total(self) -> None:
        """Unfiltered cardinality for the "N of M loaded" line. Failures are only logged."""
        try:
            self.total_count = await self.service.count_profiles()
        except GatewayError as e:
            logger.error(f"Error counting users: {e.message}")

    def _not_found(self, user_id: str) -> ActionResult:
        return self.mutations.refuse(PreconditionFailure(
            "Usuário não encontrado",
            f"O usuário {user_id} não está na lista carregada.",
        ))

    async def approve_payment(self, user_id: str) -> ActionResult[UserProfile]:
        refused = self._check_can_manage()
        if refused:
            return refused

        async def write():
            echoed = await self.service.set_payment_status(user_id, PaymentStatus.APROVADO)
            return echoed or self._with_fields(user_id, payment_status=PaymentStatus.APROVADO)

        return await self.mutations.apply(
            write,
            self._fold,
            success=("Pagamento aprovado", "O acesso do usuário foi liberado com sucesso."),
            error_title="Erro ao aprovar pagamento",
            error_fallback="Não foi possível aprovar o pagamento.",
        )

    async def toggle_admin(self, user_id: str, current_is_admin: Optional[bool] = None) -> ActionResult[UserProfile]:
        refused = self._check_can_manage()
        if refused:
            return refused
        if current_is_admin is None:
            profile = self.find(user_id)
            if profile is None:
                return self._not_found(user_id)
            current_is_admin = profile.is_admin
        new_value = not current_is_admin

        async def write():
            echoed = await self.service.set_admin(user_id, new_value)
            return echoed or self._with_fields(user_id, is_admin=new_value)

        if new_value:
            success = ("Permissão de admin concedida", "O usuário agora é um administrador.")
        else:
            success = ("Permissão de admin removida", "O usuário agora não é mais um administrador.")
        return await self.mutations.apply(
            write,
            self._fold,
            success=success,
            error_title="Erro ao alterar permissões",
            error_fallback="Não foi possível alterar as permissões do usuário.",
        )

    def open_editor(self, user_id: str) -> ActionResult[EditingDialog]:
        profile = self.find(user_id)
        if profile is None:
            return self._not_found(user_id)
        try:
            return ActionResult.success(self.dialogs.open_editor(profile))
        except DialogTransitionError as e:
            return self.mutations.refuse(e)

    def update_editor(self, changes: ProfileEditUpdate) -> ActionResult[EditingDialog]:
        try:
            return ActionResult.success(self.dialogs.update_form(changes))
        except DialogTransitionError as e:
            return self.mutations.refuse(e)

    def cancel_edit(self) -> ActionResult:
        return ActionResult.success(self.dialogs.close_editor())

    async def save_edit(self, form: Optional[ProfileEditForm] = None) -> ActionResult[UserProfile]:
        """Write the edit dialog's fields. The dialog closes only when the backend accepts them."""
        state = self.dialogs.state
        if not isinstance(state, EditingDialog):
            return self.mutations.refuse(DialogTransitionError(state.state, "salvar a edição"))
        refused = self._check_can_manage()
        if refused:
            return refused
        form = form or state.form
        if not form.email.strip():
            return self.mutations.refuse(PreconditionFailure("Dados inválidos", "O email é obrigatório."))
        user_id = state.user_id
        fields = form.to_update()

        async def write():
            echoed = await self.service.update_profile(user_id, form)
            return echoed or self._with_fields(
                user_id,
                full_name=fields["full_name"],
                email=fields["email"],
                payment_status=form.payment_status,
                whatsapp=fields["whatsapp"],
            )

        result = await self.mutations.apply(
            write,
            self._fold,
            success=("Usuário atualizado", "Os dados do usuário foram atualizados com sucesso."),
            error_title="Erro ao atualizar usuário",
            error_fallback="Não foi possível atualizar os dados do usuário.",
        )
        if result.ok:
            self.dialogs.finish_edit(user_id)
        return result

    def _with_fields(self, user_id: str, **fields) -> Optional[UserProfile]:
        """Locally known new value, used when the backend does not echo the row."""
        current = self.find(user_id)
        return current.model_copy(update=fields) if current else None

    def snapshot(self, term: Optional[str] = None, status: Optional[str] = None) -> UserScreenResponse:
        return UserScreenResponse(
            users=self.visible(term, status),
            loaded_count=len(self.records),
            total_count=self.total_count,
            loading=self.loading,
            dialog=self.dialogs.state.model_dump(mode="json"),
        )
