"""Use cases layer - Business logic orchestration for provisioning.

This layer contains use case classes that orchestrate provisioning:
- Discover devices (via IDeviceDirectory port)
- Commit the operator's choice (via IClientIdentityStore port)
- Bootstrap the client identity on first start (via IWorkflowHost port)

Use cases depend only on ports, not concrete implementations.
"""

from .ensure_identity import EnsureClientIdentityUseCase
from .select_device import DeviceSelectionWorkflow

__all__ = [
    "DeviceSelectionWorkflow",
    "EnsureClientIdentityUseCase",
]
