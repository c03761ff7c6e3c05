"""Ensure Client Identity Use Case - Provisions the client on first start.

Before a kiosk can open its local database it needs a committed client
identity. If none is stored yet, this use case presents a device selection
workflow to the operator and waits for its outcome.

Workflow:
1. Return the stored identity if a client_id already exists
2. Otherwise build a DeviceSelectionWorkflow and hand it to the host
3. Treat a cancelled workflow as a hard failure
4. Verify the identity was persisted and return it
"""

import logging
from typing import Callable

from ...api.exceptions import PersistenceError, SelectionCancelledError
from ..domain.entities import ClientIdentity
from ..domain.ports import IClientIdentityStore, IWorkflowHost
from .select_device import DeviceSelectionWorkflow

logger = logging.getLogger(__name__)

WorkflowFactory = Callable[[], DeviceSelectionWorkflow]


class EnsureClientIdentityUseCase:
    """Returns the committed client identity, provisioning it if needed.

    Example:
        use_case = EnsureClientIdentityUseCase(
            identity_store=store,
            workflow_factory=lambda: DeviceSelectionWorkflow(directory, store, progress),
            host=operator_console,
        )
        identity = await use_case.execute()
    """

    def __init__(
        self,
        identity_store: IClientIdentityStore,
        workflow_factory: WorkflowFactory,
        host: IWorkflowHost,
    ):
        """Initialize the use case with its dependencies.

        Args:
            identity_store: Port for the persisted client identity
            workflow_factory: Builds a fresh workflow for each provisioning run
            host: Port presenting the workflow to the operator
        """
        self.identity = identity_store
        self.workflow_factory = workflow_factory
        self.host = host

    async def execute(self) -> ClientIdentity:
        """Ensure a client identity exists.

        Returns:
            The persisted ClientIdentity

        Raises:
            SelectionCancelledError: If the operator cancelled selection
            PersistenceError: If no client_id is stored after confirmation
        """
        client_id = await self.identity.get_client_id()
        if client_id:
            logger.info(f"Client identity already provisioned: {client_id}")
            return await self._read_identity(client_id)

        logger.info("No client ID found, showing device selection")
        workflow = self.workflow_factory()
        await self.host.run(workflow)

        if not workflow.done:
            logger.warning("Workflow host returned before an outcome was delivered")
            await workflow.cancel()

        selected = await workflow.wait_for_outcome()
        if selected is None:
            raise SelectionCancelledError()

        logger.info(f"Device selected: {selected.id} ({selected.name})")

        client_id = await self.identity.get_client_id()
        if not client_id:
            raise PersistenceError("Failed to save device information", field="client_id")

        return await self._read_identity(client_id)

    async def _read_identity(self, client_id: str) -> ClientIdentity:
        return ClientIdentity(
            client_id=client_id,
            client_name=await self.identity.get_client_name(),
            client_type=await self.identity.get_stored_client_type(),
        )
