"""Provisioning module - Clean Architecture implementation of device provisioning.

This module discovers the devices registered for a kiosk's client type, lets
an operator pick one, and commits that choice as the kiosk's local identity.

Architecture:
    domain/     - Pure domain entities and port interfaces
    use_cases/  - Workflow orchestration (selection, identity bootstrap)
    adapters/   - Infrastructure implementations (failover directory, JSON store)
"""

from .domain.entities import (
    ClientIdentity,
    ConfirmedDevice,
    Device,
    DeviceRecord,
    Phase,
    ProgressOptions,
    WorkflowState,
)
from .domain.ports import (
    IClientIdentityStore,
    IDeviceDirectory,
    IDeviceRecordMapper,
    IDirectoryEndpoint,
    INetworkStatus,
    IProgressIndicator,
    IProgressIndicatorFactory,
    IWorkflowHost,
)
from .use_cases import DeviceSelectionWorkflow, EnsureClientIdentityUseCase

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
    # Use cases
    "DeviceSelectionWorkflow",
    "EnsureClientIdentityUseCase",
]
