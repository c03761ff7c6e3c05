"""Adapters layer - Infrastructure implementations for provisioning.

This layer contains concrete implementations of the ports defined in the domain layer:
- DeviceRecordMapper: Directory record projection (IDeviceRecordMapper)
- FailoverDeviceDirectory: Primary/secondary directory failover (IDeviceDirectory)
- JsonFileIdentityStore: JSON file identity store (IClientIdentityStore)
- LoggingProgressIndicatorFactory: Headless progress host (IProgressIndicatorFactory)
"""

from .failover_directory import FailoverDeviceDirectory
from .json_identity_store import JsonFileIdentityStore
from .progress import LoggingProgressIndicator, LoggingProgressIndicatorFactory
from .record_mapper import DeviceRecordMapper

__all__ = [
    "DeviceRecordMapper",
    "FailoverDeviceDirectory",
    "JsonFileIdentityStore",
    "LoggingProgressIndicator",
    "LoggingProgressIndicatorFactory",
]
