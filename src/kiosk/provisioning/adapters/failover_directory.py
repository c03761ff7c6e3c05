"""Failover directory adapter for primary/secondary device directories.

This adapter implements IDeviceDirectory on top of two IDirectoryEndpoint
ports. Every query goes to the primary endpoint first and falls back to the
secondary one when the primary fails; the adapter remembers which endpoint
answered so the workflow can tell the operator a fallback is in use.
"""

import logging
from typing import Optional

from ...api.exceptions import DeviceOfflineError, DirectoryUnavailableError
from ...api.resilience import retry_async, with_timeout
from ..domain.ports import IDeviceDirectory, IDirectoryEndpoint, INetworkStatus, RawDeviceRecord

logger = logging.getLogger(__name__)


class FailoverDeviceDirectory(IDeviceDirectory):
    """Device directory with automatic fallback to a secondary endpoint.

    When no secondary endpoint is configured the primary endpoint is used
    for both roles.

    Example:
        directory = FailoverDeviceDirectory(
            primary=main_server,
            secondary=backup_server,
            network_status=connectivity,
            timeout_seconds=10.0,
        )
        records = await directory.list_devices_by_type("KIOSK")
        if directory.is_using_secondary_server():
            ...
    """

    def __init__(
        self,
        primary: IDirectoryEndpoint,
        secondary: Optional[IDirectoryEndpoint] = None,
        network_status: Optional[INetworkStatus] = None,
        attempts_per_endpoint: int = 1,
        timeout_seconds: Optional[float] = None,
        retry_delay: float = 1.0,
    ):
        """Initialize the failover directory.

        Args:
            primary: Endpoint queried first
            secondary: Fallback endpoint. Defaults to primary.
            network_status: Optional connectivity check made before querying
            attempts_per_endpoint: Attempts on each endpoint before moving on
            timeout_seconds: Per-call timeout; None disables
            retry_delay: Initial backoff between attempts on one endpoint
        """
        if attempts_per_endpoint < 1:
            raise ValueError("attempts_per_endpoint must be at least 1")

        self.primary = primary
        self.secondary = secondary or primary
        self.network_status = network_status
        self.attempts_per_endpoint = attempts_per_endpoint
        self.timeout_seconds = timeout_seconds
        self.retry_delay = retry_delay

        self._current = self.primary

    @property
    def current_endpoint_name(self) -> str:
        """Name of the endpoint that served the most recent successful call."""
        return self._current.name

    def is_using_secondary_server(self) -> bool:
        return self.secondary is not self.primary and self._current is self.secondary

    async def list_devices_by_type(self, client_type: str) -> list[RawDeviceRecord]:
        """List devices for a client type, falling back on primary failure.

        Raises:
            DeviceOfflineError: If the host reports it is offline
            DirectoryUnavailableError: If both endpoints failed
        """
        if self.network_status is not None and not self.network_status.is_online():
            raise DeviceOfflineError()

        try:
            logger.info(f"Querying devices by type: {client_type} on PRIMARY server {self.primary.name}")
            records = await self._query(self.primary, client_type)
            self._current = self.primary
            logger.info(f"Found {len(records)} device(s) for type: {client_type}")
            return records
        except Exception as primary_error:
            logger.warning(f"PRIMARY server {self.primary.name} failed: {primary_error}")

        try:
            logger.info(f"Trying SECONDARY server {self.secondary.name} for type: {client_type}")
            records = await self._query(self.secondary, client_type)
            self._current = self.secondary
            logger.info(f"Found {len(records)} device(s) for type: {client_type} on SECONDARY")
            return records
        except Exception as secondary_error:
            logger.error(f"SECONDARY server {self.secondary.name} also failed: {secondary_error}")
            raise DirectoryUnavailableError(
                endpoints=[self.primary.name, self.secondary.name],
                cause=secondary_error,
            ) from secondary_error

    async def _query(self, endpoint: IDirectoryEndpoint, client_type: str) -> list[RawDeviceRecord]:
        records = await retry_async(
            with_timeout,
            endpoint.list_devices_by_type,
            self.timeout_seconds,
            client_type,
            max_attempts=self.attempts_per_endpoint,
            initial_delay=self.retry_delay,
            retryable_exceptions=(Exception,),
        )
        return list(records or [])
