"""Domain layer - Pure domain entities and port interfaces.

This layer contains:
- Entities: Pure data structures representing provisioning concepts
- Ports: Abstract interfaces defining contracts for adapters

No infrastructure dependencies allowed in this layer.
"""

from .entities import (
    ClientIdentity,
    ConfirmedDevice,
    Device,
    DeviceRecord,
    Phase,
    ProgressOptions,
    WorkflowState,
)
from .ports import (
    IClientIdentityStore,
    IDeviceDirectory,
    IDeviceRecordMapper,
    IDirectoryEndpoint,
    INetworkStatus,
    IProgressIndicator,
    IProgressIndicatorFactory,
    IWorkflowHost,
    RawDeviceRecord,
)

__all__ = [
    # Entities
    "ClientIdentity",
    "ConfirmedDevice",
    "Device",
    "DeviceRecord",
    "Phase",
    "ProgressOptions",
    "WorkflowState",
    # Ports
    "IClientIdentityStore",
    "IDeviceDirectory",
    "IDeviceRecordMapper",
    "IDirectoryEndpoint",
    "INetworkStatus",
    "IProgressIndicator",
    "IProgressIndicatorFactory",
    "IWorkflowHost",
    "RawDeviceRecord",
]
