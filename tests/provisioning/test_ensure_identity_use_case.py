"""Tests for EnsureClientIdentityUseCase.

The workflow host is mocked by scripted operators that drive the workflow
the way a person at the console would.
"""

from typing import Optional

import pytest

from src.kiosk.api.exceptions import PersistenceError, SelectionCancelledError
from src.kiosk.provisioning.domain.entities import ClientIdentity
from src.kiosk.provisioning.domain.ports import IWorkflowHost
from src.kiosk.provisioning.use_cases.ensure_identity import EnsureClientIdentityUseCase
from src.kiosk.provisioning.use_cases.select_device import DeviceSelectionWorkflow


class ScriptedHost(IWorkflowHost):
    """Host that loads devices, picks one and confirms or cancels."""

    def __init__(self, pick: Optional[str] = None, cancel: bool = False, abandon: bool = False):
        self.pick = pick
        self.cancel = cancel
        self.abandon = abandon
        self.runs = 0

    async def run(self, workflow: DeviceSelectionWorkflow) -> None:
        self.runs += 1
        await workflow.start()
        if self.abandon:
            return
        if self.cancel:
            await workflow.cancel()
            return
        workflow.select_device(self.pick)
        await workflow.confirm_selection()


@pytest.fixture
def make_use_case(directory, store, progress):
    def make(host: IWorkflowHost) -> EnsureClientIdentityUseCase:
        return EnsureClientIdentityUseCase(
            identity_store=store,
            workflow_factory=lambda: DeviceSelectionWorkflow(directory, store, progress),
            host=host,
        )

    return make


class TestEnsureClientIdentity:
    """Tests for the identity bootstrap."""

    async def test_existing_identity_skips_selection(self, make_use_case, store):
        store.data = {"client_id": "X", "client_name": "Front desk", "client_type": "kiosk"}
        host = ScriptedHost(pick="A")

        identity = await make_use_case(host).execute()

        assert identity == ClientIdentity(client_id="X", client_name="Front desk", client_type="kiosk")
        assert host.runs == 0
        assert store.write_calls == []

    async def test_provisions_when_missing(self, make_use_case, store):
        host = ScriptedHost(pick="A")

        identity = await make_use_case(host).execute()

        assert host.runs == 1
        assert identity == ClientIdentity(client_id="A", client_name="Gate 1", client_type="kiosk")
        assert store.data["client_id"] == "A"

    async def test_cancelled_selection_raises(self, make_use_case, store):
        host = ScriptedHost(cancel=True)

        with pytest.raises(SelectionCancelledError):
            await make_use_case(host).execute()

        assert "client_id" not in store.data

    async def test_host_returning_without_outcome_counts_as_cancel(self, make_use_case):
        host = ScriptedHost(abandon=True)

        with pytest.raises(SelectionCancelledError):
            await make_use_case(host).execute()

    async def test_identity_missing_after_confirmation(self, directory, store, progress):
        """A store that silently drops the id is reported as a persistence failure."""

        class ForgetfulHost(ScriptedHost):
            async def run(self, workflow):
                await super().run(workflow)
                store.data.pop("client_id", None)

        use_case = EnsureClientIdentityUseCase(
            identity_store=store,
            workflow_factory=lambda: DeviceSelectionWorkflow(directory, store, progress),
            host=ForgetfulHost(pick="B"),
        )

        with pytest.raises(PersistenceError) as exc_info:
            await use_case.execute()

        assert exc_info.value.field == "client_id"

    async def test_failed_confirmation_then_cancel(self, make_use_case, store):
        """Operator gives up after a save failure; nothing is left behind."""
        store.fail_on.add("set_client_name")

        class GiveUpHost(ScriptedHost):
            async def run(self, workflow):
                await super().run(workflow)
                assert workflow.state.last_error == "disk full"
                await workflow.cancel()

        with pytest.raises(SelectionCancelledError):
            await make_use_case(GiveUpHost(pick="A")).execute()

        assert "client_id" not in store.data
