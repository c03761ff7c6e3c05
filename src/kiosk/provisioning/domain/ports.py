"""Port interfaces for device provisioning.

Ports define the contracts between the workflow and its collaborators.
These are abstract base classes that adapters must implement.

Following the Hexagonal Architecture (Ports and Adapters) pattern:
- Ports are interfaces defined in the domain layer
- Adapters implement these ports in the adapters layer
- Use cases depend only on ports, not concrete implementations
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Union

from .entities import Device, DeviceRecord, ProgressOptions

if TYPE_CHECKING:
    from ..use_cases.select_device import DeviceSelectionWorkflow


RawDeviceRecord = Union[DeviceRecord, dict[str, Any]]


class IDeviceDirectory(ABC):
    """Port for the device directory.

    Implementations may be backed by a primary and a secondary endpoint;
    the workflow only sees a list or a failure.
    """

    @abstractmethod
    async def list_devices_by_type(self, client_type: str) -> list[RawDeviceRecord]:
        """List all devices registered for a client type.

        Args:
            client_type: Client class to filter on (e.g. "KIOSK")

        Returns:
            Device records in server order

        Raises:
            Exception: Any failure to reach the directory
        """
        ...

    @abstractmethod
    def is_using_secondary_server(self) -> bool:
        """Whether the most recent successful call was served by the fallback."""
        ...


class IDirectoryEndpoint(ABC):
    """Port for a single directory endpoint (primary or secondary)."""

    name: str = "endpoint"

    @abstractmethod
    async def list_devices_by_type(self, client_type: str) -> list[RawDeviceRecord]:
        """Query this endpoint for devices of a client type."""
        ...


class INetworkStatus(ABC):
    """Port reporting host connectivity."""

    @abstractmethod
    def is_online(self) -> bool:
        """Whether the host currently has network connectivity."""
        ...


class IClientIdentityStore(ABC):
    """Port for the local identity store.

    A key-value store holding client_id, client_name and client_type.
    Each write is independent; there is no transaction across fields.
    """

    @abstractmethod
    def get_client_type(self) -> str:
        """Ambient client type used for discovery filtering."""
        ...

    @abstractmethod
    async def get_client_id(self) -> Optional[str]:
        """Read the stored client id, or None."""
        ...

    @abstractmethod
    async def get_client_name(self) -> Optional[str]:
        """Read the stored client name, or None."""
        ...

    @abstractmethod
    async def get_stored_client_type(self) -> Optional[str]:
        """Read the stored client type, or None."""
        ...

    @abstractmethod
    async def set_client_id(self, value: str) -> None:
        ...

    @abstractmethod
    async def set_client_name(self, value: str) -> None:
        ...

    @abstractmethod
    async def set_client_type(self, value: str) -> None:
        ...

    @abstractmethod
    async def remove_client_id(self) -> None:
        ...

    @abstractmethod
    async def remove_client_name(self) -> None:
        ...

    @abstractmethod
    async def remove_client_type(self) -> None:
        ...


class IProgressIndicator(ABC):
    """Handle to a visible progress indicator."""

    @abstractmethod
    async def present(self) -> None:
        ...

    @abstractmethod
    async def dismiss(self) -> None:
        ...


class IProgressIndicatorFactory(ABC):
    """Port for the host that displays progress indicators."""

    @abstractmethod
    def create(self, options: ProgressOptions) -> IProgressIndicator:
        """Create (but do not show) a progress indicator."""
        ...


class IDeviceRecordMapper(ABC):
    """Port for projecting directory records to Device entities."""

    @abstractmethod
    def map_to_entity(self, raw: RawDeviceRecord) -> Device:
        """Project one directory record to a Device.

        Raises:
            ValueError: If the record has no usable id
        """
        ...


class IWorkflowHost(ABC):
    """Port for the host that presents a provisioning workflow to an operator.

    The host drives operator interaction (start, select, confirm, retry,
    cancel) and returns once the workflow has delivered its outcome.
    """

    @abstractmethod
    async def run(self, workflow: "DeviceSelectionWorkflow") -> None:
        ...
