from admin_console.core.dialogs import DialogMachine, Idle
from admin_console.modules.users.schemas import EditingDialog, ProfileEditForm, ProfileEditUpdate, UserProfile


class UserDialogs(DialogMachine):
    """Idle <-> Editing(user_id). The form is a snapshot taken when the dialog opens."""

    def open_editor(self, profile: UserProfile) -> EditingDialog:
        self._require(Idle, action="editar outro usuário")
        return self._enter(EditingDialog(user_id=profile.id, form=ProfileEditForm.seed(profile)))

    def update_form(self, changes: ProfileEditUpdate) -> EditingDialog:
        self._require(EditingDialog, action="alterar o formulário")
        form = self._state.form.model_copy(update=changes.model_dump(exclude_unset=True, exclude_none=True))
        return self._enter(EditingDialog(user_id=self._state.user_id, form=form))

    def close_editor(self):
        if self.is_idle:
            return self._state
        self._require(EditingDialog, action="fechar o editor")
        return self._enter(Idle())

    def finish_edit(self, user_id: str):
        """Close the editor after a save, only if it is still editing that user."""
        if isinstance(self._state, EditingDialog) and self._state.user_id == user_id:
            return self._enter(Idle())
        return self._state
