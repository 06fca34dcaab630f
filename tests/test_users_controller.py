"""
Tests for the user-administration screen controller.
Driven against FakeStore; async operations run with asyncio.run.
"""

import asyncio

import pytest

from admin_console.core.notifications import NotificationKind
from admin_console.core.session import ConsoleSession
from admin_console.core.errors import PreconditionFailure, WriteFailure
from admin_console.modules.users.controller import UserListController
from admin_console.modules.users.schemas import (
    EditingDialog, PaymentStatus, ProfileEditForm, ProfileEditUpdate, UserProfile
)
from admin_console.modules.users.service import UserService
from tests.conftest import FakeStore, PROFILES


@pytest.fixture
def controller(store, admin_session, notifier):
    ctrl = UserListController(UserService(store), admin_session, notifier)
    asyncio.run(ctrl.activate())
    notifier.drain()
    store.calls.clear()
    return ctrl


class TestLoading:
    def test_activate_loads_newest_first_and_counts(self, controller):
        assert [u.id for u in controller.records] == ["u1", "u2", "u3"]
        assert controller.total_count == 5
        assert controller.loading is False

    def test_search_narrows_to_one_of_three_loaded(self, controller):
        snapshot = controller.snapshot("ana")
        assert len(controller.records) == 3
        assert snapshot.total_count == 5
        assert snapshot.loaded_count == 3
        assert [u.id for u in snapshot.users] == ["u1"]

    def test_failed_refresh_keeps_previous_records(self, controller, store, notifier):
        before = controller.records
        store.fail("select", "timeout")

        applied = asyncio.run(controller.refresh())

        assert applied is False
        assert controller.records is before
        assert controller.loading is False
        [note] = notifier.drain()
        assert note.kind == NotificationKind.ERROR
        assert note.title == "Erro ao carregar usuários"
        assert note.description == "timeout"

    def test_count_failure_is_not_notified(self, controller, store, notifier):
        store.fail("count")
        asyncio.run(controller.count_total())
        assert controller.total_count == 5
        assert notifier.drain() == []

    def test_stale_refresh_response_is_discarded(self, admin_session, notifier):
        old = [UserProfile(**PROFILES[0])]
        new = [UserProfile(**row) for row in PROFILES]

        async def scenario():
            gates = [asyncio.Event(), asyncio.Event()]
            responses = iter([(gates[0], old), (gates[1], new)])

            class GatedService:
                async def list_profiles(self):
                    gate, rows = next(responses)
                    await gate.wait()
                    return rows

            ctrl = UserListController(GatedService(), admin_session, notifier)
            first = asyncio.create_task(ctrl.refresh())
            second = asyncio.create_task(ctrl.refresh())
            await asyncio.sleep(0)
            gates[1].set()
            assert await second is True
            assert ctrl.loading is False
            gates[0].set()
            assert await first is False
            return ctrl

        ctrl = asyncio.run(scenario())
        assert [u.id for u in ctrl.records] == ["u1", "u2", "u3"]

    def test_null_columns_are_tolerated_and_bad_rows_skipped(self, admin_session, notifier):
        rows = [
            dict(PROFILES[0]),
            dict(PROFILES[1], email=None, payment_status=None, is_admin=None),
            dict(PROFILES[2], created_at=None),
        ]
        ctrl = UserListController(UserService(FakeStore(tables={"profiles": rows})), admin_session, notifier)

        asyncio.run(ctrl.activate())

        assert [u.id for u in ctrl.records] == ["u1", "u2"]
        bruno = ctrl.find("u2")
        assert bruno.email == ""
        assert bruno.payment_status == PaymentStatus.PENDENTE
        assert bruno.is_admin is False
        assert [u.id for u in ctrl.visible("bruno")] == ["u2"]
        assert notifier.drain() == []


class TestMutations:
    def test_approve_payment_folds_only_that_user(self, controller, store, notifier):
        before = list(controller.records)

        result = asyncio.run(controller.approve_payment("u1"))

        assert result.ok
        assert [c[0] for c in store.calls] == ["update"]
        assert [u.id for u in controller.records].count("u1") == 1
        assert controller.find("u1").payment_status == PaymentStatus.APROVADO
        for old, new in zip(before[1:], controller.records[1:]):
            assert old is new
        [note] = notifier.drain()
        assert note.title == "Pagamento aprovado"

    def test_approve_payment_rejected_leaves_list_untouched(self, controller, store, notifier):
        before = list(controller.records)
        store.fail("update", "network error")

        result = asyncio.run(controller.approve_payment("u1"))

        assert not result.ok
        assert isinstance(result.error, WriteFailure)
        assert controller.records == before
        assert all(a is b for a, b in zip(before, controller.records))
        [note] = notifier.drain()
        assert note.kind == NotificationKind.ERROR
        assert note.description == "network error"

    def test_toggle_admin_flips_back_and_forth(self, controller, notifier):
        assert controller.find("u1").is_admin is False

        asyncio.run(controller.toggle_admin("u1"))
        assert controller.find("u1").is_admin is True

        asyncio.run(controller.toggle_admin("u1"))
        assert controller.find("u1").is_admin is False

        titles = [n.title for n in notifier.drain()]
        assert titles == ["Permissão de admin concedida", "Permissão de admin removida"]

    def test_fold_uses_local_value_when_backend_does_not_echo(self, controller, store):
        store.echo = False
        result = asyncio.run(controller.toggle_admin("u3", current_is_admin=False))
        assert result.ok
        assert controller.find("u3").is_admin is True

    def test_unparseable_echo_falls_back_to_known_values(self, controller, store, notifier):
        store.tables["profiles"][0]["created_at"] = "not a date"

        result = asyncio.run(controller.approve_payment("u1"))

        assert result.ok
        assert controller.find("u1").payment_status == PaymentStatus.APROVADO
        assert notifier.drain()[-1].title == "Pagamento aprovado"

    @pytest.mark.parametrize("action", ["approve", "toggle", "edit"])
    def test_every_mutation_is_a_no_op_on_failure(self, controller, store, action):
        before = [u.model_dump() for u in controller.records]
        store.fail("update", "boom")
        if action == "approve":
            result = asyncio.run(controller.approve_payment("u2"))
        elif action == "toggle":
            result = asyncio.run(controller.toggle_admin("u2"))
        else:
            controller.open_editor("u2")
            result = asyncio.run(controller.save_edit())
        assert not result.ok
        assert [u.model_dump() for u in controller.records] == before

    def test_unexpected_error_uses_fallback_text(self, controller, notifier):
        async def explode(*args, **kwargs):
            raise RuntimeError("bug")

        controller.service.set_admin = explode
        result = asyncio.run(controller.toggle_admin("u1"))
        assert not result.ok
        assert notifier.drain()[-1].description == "Não foi possível alterar as permissões do usuário."

    def test_non_admin_session_is_refused_without_request(self, controller, store):
        controller.session = ConsoleSession(user_id="u3", is_admin=False)
        result = asyncio.run(controller.approve_payment("u1"))
        assert isinstance(result.error, PreconditionFailure)
        assert store.calls == []


class TestEditDialog:
    def test_open_seeds_snapshot_of_record(self, controller):
        result = controller.open_editor("u3")
        assert isinstance(result.record, EditingDialog)
        assert result.record.form == ProfileEditForm(
            full_name="", email="carla@example.com", payment_status="pendente", whatsapp=""
        )

    def test_seed_is_not_live_synced(self, controller):
        controller.open_editor("u1")
        asyncio.run(controller.approve_payment("u1"))
        assert controller.dialogs.state.form.payment_status == PaymentStatus.PENDENTE

    def test_save_overwrites_fields_and_stores_empty_whatsapp_as_none(self, controller, store):
        controller.open_editor("u1")
        controller.update_editor(ProfileEditUpdate(full_name="Ana S.", whatsapp="", payment_status="aprovado"))

        result = asyncio.run(controller.save_edit())

        assert result.ok
        saved = controller.find("u1")
        assert saved.full_name == "Ana S."
        assert saved.whatsapp is None
        assert saved.payment_status == PaymentStatus.APROVADO
        assert store.tables["profiles"][0]["whatsapp"] is None
        assert controller.dialogs.is_idle

    def test_failed_save_keeps_dialog_open(self, controller, store):
        controller.open_editor("u1")
        store.fail("update", "duplicate email")
        result = asyncio.run(controller.save_edit())
        assert not result.ok
        assert isinstance(controller.dialogs.state, EditingDialog)

    def test_save_requires_open_dialog(self, controller, store):
        result = asyncio.run(controller.save_edit(ProfileEditForm(email="x@example.com")))
        assert isinstance(result.error, PreconditionFailure)
        assert store.calls == []

    def test_save_requires_email(self, controller, store):
        controller.open_editor("u1")
        result = asyncio.run(controller.save_edit(ProfileEditForm(full_name="Ana", email="  ")))
        assert result.error.title == "Dados inválidos"
        assert store.writes == []

    def test_cannot_open_a_second_editor(self, controller):
        controller.open_editor("u1")
        result = controller.open_editor("u2")
        assert not result.ok
        assert controller.dialogs.state.user_id == "u1"

    def test_cancel_returns_to_idle(self, controller):
        controller.open_editor("u1")
        controller.cancel_edit()
        assert controller.dialogs.is_idle

    def test_late_save_leaves_another_users_editor_open(self, gated_store, admin_session, notifier):
        async def scenario():
            ctrl = UserListController(UserService(gated_store), admin_session, notifier)
            await ctrl.activate()
            ctrl.open_editor("u1")
            ctrl.update_editor(ProfileEditUpdate(full_name="Ana S."))
            gated_store.gate = asyncio.Event()
            saving = asyncio.create_task(ctrl.save_edit())
            await asyncio.sleep(0)
            ctrl.cancel_edit()
            ctrl.open_editor("u2")
            gated_store.gate.set()
            return ctrl, await saving

        ctrl, result = asyncio.run(scenario())

        assert result.ok
        assert ctrl.find("u1").full_name == "Ana S."
        state = ctrl.dialogs.state
        assert isinstance(state, EditingDialog)
        assert state.user_id == "u2"
