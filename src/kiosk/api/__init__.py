"""Shared infrastructure for kiosk provisioning.

Exceptions:
    ProvisioningError: Base exception for all provisioning errors
    ConfigurationError: Missing or invalid configuration
    DiscoveryError: Device discovery failures
    SelectionError: Operator selection problems
    PersistenceError: Identity store write failures

Resilience:
    retry_async: Retry with exponential backoff
    with_timeout: Optional per-call timeout
"""
from .exceptions import (
    BOTH_SERVERS_FAILED_MESSAGE,
    CONNECTIVITY_MESSAGE,
    NO_DEVICES_MESSAGE,
    NO_SELECTION_MESSAGE,
    OFFLINE_MESSAGE,
    SAVE_FAILED_MESSAGE,
    ConfigurationError,
    DeviceOfflineError,
    DirectoryUnavailableError,
    DiscoveryError,
    EmptyResultError,
    NoSelectionError,
    PersistenceError,
    ProvisioningError,
    SelectionCancelledError,
    SelectionError,
    StaleSelectionError,
    error_message,
)
from .resilience import DEFAULT_RETRYABLE_EXCEPTIONS, retry_async, with_timeout

__all__ = [
    # Messages
    "BOTH_SERVERS_FAILED_MESSAGE",
    "CONNECTIVITY_MESSAGE",
    "NO_DEVICES_MESSAGE",
    "NO_SELECTION_MESSAGE",
    "OFFLINE_MESSAGE",
    "SAVE_FAILED_MESSAGE",
    # Exceptions
    "ProvisioningError",
    "ConfigurationError",
    "DiscoveryError",
    "EmptyResultError",
    "DeviceOfflineError",
    "DirectoryUnavailableError",
    "SelectionError",
    "NoSelectionError",
    "StaleSelectionError",
    "SelectionCancelledError",
    "PersistenceError",
    "error_message",
    # Resilience
    "DEFAULT_RETRYABLE_EXCEPTIONS",
    "retry_async",
    "with_timeout",
]
