"""Dependency wiring for provisioning.

Builds the concrete adapters from ProvisioningSettings and returns ready to
use workflow factories and the identity bootstrap use case. Directory
endpoints are supplied by the host application.
"""

import logging
from typing import Optional

from ..config import ProvisioningSettings
from .adapters import (
    DeviceRecordMapper,
    FailoverDeviceDirectory,
    JsonFileIdentityStore,
    LoggingProgressIndicatorFactory,
)
from .domain.ports import (
    IClientIdentityStore,
    IDirectoryEndpoint,
    INetworkStatus,
    IProgressIndicatorFactory,
    IWorkflowHost,
)
from .use_cases import DeviceSelectionWorkflow, EnsureClientIdentityUseCase
from .use_cases.ensure_identity import WorkflowFactory

logger = logging.getLogger(__name__)


def create_identity_store(settings: ProvisioningSettings) -> JsonFileIdentityStore:
    """Create the JSON identity store configured by settings."""
    return JsonFileIdentityStore(settings.identity_file, client_type=settings.client_type)


def create_directory(
    settings: ProvisioningSettings,
    primary: IDirectoryEndpoint,
    secondary: Optional[IDirectoryEndpoint] = None,
    network_status: Optional[INetworkStatus] = None,
) -> FailoverDeviceDirectory:
    """Create the failover directory configured by settings."""
    if secondary is None:
        logger.warning("No secondary directory endpoint configured; using primary for both")
    return FailoverDeviceDirectory(
        primary=primary,
        secondary=secondary,
        network_status=network_status,
        attempts_per_endpoint=settings.directory_attempts,
        timeout_seconds=settings.directory_timeout_seconds or None,
    )


def create_workflow_factory(
    settings: ProvisioningSettings,
    primary: IDirectoryEndpoint,
    secondary: Optional[IDirectoryEndpoint] = None,
    network_status: Optional[INetworkStatus] = None,
    identity_store: Optional[IClientIdentityStore] = None,
    progress: Optional[IProgressIndicatorFactory] = None,
) -> WorkflowFactory:
    """Create a factory producing fresh DeviceSelectionWorkflow instances.

    The directory, store and mapper are shared between workflows; each call
    to the factory returns a workflow with its own state.
    """
    directory = create_directory(settings, primary, secondary, network_status)
    store = identity_store or create_identity_store(settings)
    progress_factory = progress or LoggingProgressIndicatorFactory()
    mapper = DeviceRecordMapper()

    def factory() -> DeviceSelectionWorkflow:
        return DeviceSelectionWorkflow(
            directory=directory,
            identity_store=store,
            progress=progress_factory,
            record_mapper=mapper,
            saving_message=settings.saving_message,
        )

    return factory


def create_ensure_identity_use_case(
    settings: ProvisioningSettings,
    host: IWorkflowHost,
    primary: IDirectoryEndpoint,
    secondary: Optional[IDirectoryEndpoint] = None,
    network_status: Optional[INetworkStatus] = None,
    progress: Optional[IProgressIndicatorFactory] = None,
) -> EnsureClientIdentityUseCase:
    """Create the identity bootstrap use case with all adapters wired."""
    store = create_identity_store(settings)
    factory = create_workflow_factory(
        settings,
        primary,
        secondary=secondary,
        network_status=network_status,
        identity_store=store,
        progress=progress,
    )
    return EnsureClientIdentityUseCase(identity_store=store, workflow_factory=factory, host=host)
