"""Device Selection Workflow - Discovers, selects and commits a device identity.

This use case coordinates the provisioning of a kiosk client: it lists the
devices registered for the client type, lets an operator pick one, and writes
the chosen device's id, name and type to the identity store. It depends on
ports (interfaces) for all external operations, making it fully testable
without infrastructure.

Workflow:
1. Discovery - list devices for the client type (via IDeviceDirectory)
2. Selection - hold one selected device id
3. Confirmation - show progress, write client_id -> client_name -> client_type
   (via IClientIdentityStore), hand the device back to the caller
4. Recovery - retry discovery; roll back identity writes if confirmation fails

No operation raises past this class: every failure lands in
WorkflowState.last_error with the workflow left in a retryable state.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator, Callable, Optional

from ...api.exceptions import (
    CONNECTIVITY_MESSAGE,
    SAVE_FAILED_MESSAGE,
    EmptyResultError,
    NoSelectionError,
    PersistenceError,
    SelectionCancelledError,
    StaleSelectionError,
    error_message,
)
from ...config import DEFAULT_SAVING_MESSAGE
from ..domain.entities import (
    ConfirmedDevice,
    Device,
    Phase,
    ProgressOptions,
    WorkflowState,
)
from ..domain.ports import (
    IClientIdentityStore,
    IDeviceDirectory,
    IDeviceRecordMapper,
    IProgressIndicator,
    IProgressIndicatorFactory,
    RawDeviceRecord,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[WorkflowState], None]


class DeviceSelectionWorkflow:
    """Finite-state coordinator for device provisioning.

    State is held in an immutable WorkflowState snapshot that is replaced on
    every transition; subscribers are notified with the new snapshot.

    Example:
        workflow = DeviceSelectionWorkflow(
            directory=FailoverDeviceDirectory(primary, secondary),
            identity_store=JsonFileIdentityStore(path, client_type="KIOSK"),
            progress=LoggingProgressIndicatorFactory(),
        )
        await workflow.start()
        workflow.select_device("A")
        confirmed = await workflow.confirm_selection()
    """

    def __init__(
        self,
        directory: IDeviceDirectory,
        identity_store: IClientIdentityStore,
        progress: IProgressIndicatorFactory,
        record_mapper: Optional[IDeviceRecordMapper] = None,
        saving_message: str = DEFAULT_SAVING_MESSAGE,
    ):
        """Initialize the workflow with its collaborators.

        Args:
            directory: Port for listing devices by client type
            identity_store: Port for the persisted client identity
            progress: Port for showing a blocking progress indicator
            record_mapper: Port for projecting directory records.
                           Defaults to DeviceRecordMapper if not provided.
            saving_message: Progress indicator text during confirmation
        """
        self.directory = directory
        self.identity = identity_store
        self.progress = progress
        self._record_mapper = record_mapper
        self.saving_message = saving_message

        self._state = WorkflowState()
        self._listeners: list[StateListener] = []

        # Monotonic discovery counter; only the newest call may publish
        self._discovery_seq = 0

        self._outcome: Optional[ConfirmedDevice] = None
        self._outcome_ready = asyncio.Event()

    @property
    def record_mapper(self) -> IDeviceRecordMapper:
        """Get the record mapper, importing the default if needed."""
        if self._record_mapper is None:
            from ..adapters.record_mapper import DeviceRecordMapper
            self._record_mapper = DeviceRecordMapper()
        return self._record_mapper

    # ============================================
    # State
    # ============================================

    @property
    def state(self) -> WorkflowState:
        """Current state snapshot."""
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback for state transitions.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.warning(f"State listener {listener!r} failed: {e}")

    # ============================================
    # Discovery
    # ============================================

    async def start(self) -> WorkflowState:
        """Run the initial discovery."""
        return await self.load_devices()

    async def retry(self) -> WorkflowState:
        """Re-run discovery from scratch after a failure."""
        logger.info("Retrying device discovery")
        return await self.load_devices()

    async def load_devices(self) -> WorkflowState:
        """Fetch candidate devices for the current client type.

        Every call restarts discovery and replaces the candidate list. If
        calls overlap, only the most recently started one publishes its
        result; older results are discarded.

        Returns:
            The state snapshot after this call
        """
        self._discovery_seq += 1
        seq = self._discovery_seq

        self._update(phase=Phase.LOADING, last_error=None, using_fallback_endpoint=False)

        client_type = ""
        try:
            client_type = self.identity.get_client_type()
            logger.info(f"Loading devices for type: {client_type}")
            records = await self.directory.list_devices_by_type(client_type)
        except Exception as e:
            if self._is_superseded(seq):
                return self._state
            logger.error(f"Error loading devices for type {client_type}: {e}")
            self._update(
                phase=Phase.ERROR,
                last_error=error_message(e, CONNECTIVITY_MESSAGE),
            )
            return self._state

        if self._is_superseded(seq):
            return self._state

        devices = self._project(records or [])

        if not devices:
            empty = EmptyResultError(client_type)
            logger.warning(f"No devices found for type: {client_type}")
            self._update(phase=Phase.ERROR, last_error=empty.message, candidates=())
            return self._state

        using_fallback = bool(self.directory.is_using_secondary_server())
        if using_fallback:
            logger.warning("Devices were served by the secondary server")

        self._update(
            candidates=tuple(devices),
            phase=Phase.READY,
            using_fallback_endpoint=using_fallback,
        )
        logger.info(f"Loaded {len(devices)} device(s) successfully")
        return self._state

    def _is_superseded(self, seq: int) -> bool:
        if seq != self._discovery_seq:
            logger.debug(
                f"Discarding discovery result #{seq}, newer call #{self._discovery_seq} started"
            )
            return True
        return False

    def _project(self, records: list[RawDeviceRecord]) -> list[Device]:
        devices: list[Device] = []
        for raw in records:
            try:
                devices.append(self.record_mapper.map_to_entity(raw))
            except Exception as e:
                record_id = raw.get("id", "unknown") if isinstance(raw, dict) else getattr(raw, "id", "unknown")
                logger.warning(f"Skipping device record {record_id}: {e}")
        return devices

    # ============================================
    # Selection
    # ============================================

    def select_device(self, device_id: str) -> None:
        """Select a device; the id is only checked at confirmation time."""
        self._update(selected_id=device_id)

    def is_selected(self, device_id: str) -> bool:
        return self._state.selected_id == device_id

    def selected_device_name(self) -> str:
        """Name of the selected candidate, or an empty string."""
        device = self._state.selected_device
        return device.name if device else ""

    # ============================================
    # Confirmation
    # ============================================

    async def confirm_selection(self) -> Optional[ConfirmedDevice]:
        """Commit the selected device to the identity store.

        Steps:
        1. Reject when nothing is selected, a confirmation is already in
           progress, or the workflow has already delivered its outcome
        2. Show the progress indicator (dismissed on every exit path)
        3. Resolve the selection against the current candidates
        4. Write client_id, client_name, client_type in that order
        5. Deliver the confirmed device

        On failure the identity writes are rolled back, last_error is set and
        the selection is kept so the operator can retry immediately. A
        cancel() that lands while the writes are pending also rolls them back.

        Returns:
            The confirmed device, or None if nothing was committed
        """
        state = self._state
        if not state.can_confirm:
            if state.closed:
                logger.debug("Workflow already closed, ignoring confirmation")
            elif not state.selected_id:
                self._update(last_error=NoSelectionError().message)
            else:
                logger.debug("Confirmation already in progress, ignoring")
            return None

        selected_id = state.selected_id

        self._update(confirming=True)
        attempted: list[str] = []
        previous_name: Optional[str] = None
        previous_type: Optional[str] = None

        try:
            async with self._progress_scope():
                device = self._state.find_candidate(selected_id)
                if device is None:
                    raise StaleSelectionError(selected_id)

                previous_name = await self.identity.get_client_name()
                previous_type = await self.identity.get_stored_client_type()

                await self._write("client_id", self.identity.set_client_id, device.id, attempted)
                await self._write("client_name", self.identity.set_client_name, device.name, attempted)
                await self._write("client_type", self.identity.set_client_type, device.type, attempted)

                if self._state.closed:
                    raise SelectionCancelledError("Device selection was cancelled while saving")

        except asyncio.CancelledError:
            self._update(confirming=False)
            raise

        except Exception as e:
            logger.error(f"Error during device selection: {e}")
            await self._rollback(attempted, previous_name, previous_type)
            self._update(
                confirming=False,
                last_error=error_message(e, SAVE_FAILED_MESSAGE),
            )
            return None

        logger.info(f"Device saved: {device.id} - {device.name}")
        confirmed = ConfirmedDevice.from_device(device)
        self._update(confirming=False, last_error=None)
        self._deliver(confirmed)
        return confirmed

    @asynccontextmanager
    async def _progress_scope(self) -> AsyncIterator[IProgressIndicator]:
        """Show a blocking progress indicator for the duration of the block."""
        indicator = self.progress.create(
            ProgressOptions(message=self.saving_message, block_interaction=True)
        )
        try:
            await indicator.present()
            yield indicator
        finally:
            try:
                await indicator.dismiss()
            except Exception as e:
                logger.warning(f"Failed to dismiss progress indicator: {e}")

    async def _write(self, field: str, setter, value: str, attempted: list[str]) -> None:
        attempted.append(field)
        try:
            await setter(value)
        except Exception as e:
            raise PersistenceError(str(e) or SAVE_FAILED_MESSAGE, field=field, cause=e) from e

    async def _rollback(
        self,
        attempted: list[str],
        previous_name: Optional[str],
        previous_type: Optional[str],
    ) -> None:
        """Undo identity writes in reverse order.

        client_id is always removed. client_name and client_type are restored
        to the values read before the first write, or removed when they were
        absent. Each step is best-effort.
        """
        steps = []
        if "client_type" in attempted:
            steps.append(("client_type", self._restore(
                previous_type, self.identity.set_client_type, self.identity.remove_client_type)))
        if "client_name" in attempted:
            steps.append(("client_name", self._restore(
                previous_name, self.identity.set_client_name, self.identity.remove_client_name)))
        steps.append(("client_id", self.identity.remove_client_id))

        for field, step in steps:
            try:
                await step()
            except Exception as e:
                logger.warning(f"Rollback of {field} failed: {e}")

        logger.info(f"Rolled back identity fields: {', '.join(f for f, _ in steps)}")

    @staticmethod
    def _restore(previous: Optional[str], setter, remover):
        async def restore() -> None:
            if previous is None:
                await remover()
            else:
                await setter(previous)
        return restore

    # ============================================
    # Outcome
    # ============================================

    async def cancel(self) -> None:
        """Exit the workflow without a device.

        In-flight discovery is not interrupted.
        """
        logger.info("Device selection cancelled")
        self._deliver(None)
        return None

    def _deliver(self, outcome: Optional[ConfirmedDevice]) -> None:
        if self._outcome_ready.is_set():
            return
        self._outcome = outcome
        self._outcome_ready.set()
        self._update(closed=True)

    @property
    def done(self) -> bool:
        """Whether the outcome has been delivered."""
        return self._outcome_ready.is_set()

    async def wait_for_outcome(self) -> Optional[ConfirmedDevice]:
        """Wait for confirmation (device) or cancellation (None)."""
        await self._outcome_ready.wait()
        return self._outcome
