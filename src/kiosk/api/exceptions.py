#!/usr/bin/env python3
"""Exception Hierarchy for Kiosk Device Provisioning.

This module provides a structured exception hierarchy for the errors that can
occur while discovering devices, selecting one, and committing the choice to
the local identity store.

Design Principles:
    - All exceptions inherit from ProvisioningError base class
    - Exceptions preserve context (original error, timestamps, details)
    - Exceptions are categorized by recoverability
    - Each exception carries an operator-facing message

Exception Hierarchy:
    ProvisioningError (base)
    ├── ConfigurationError (unrecoverable - fix config)
    ├── DiscoveryError (recoverable - retry discovery)
    │   ├── EmptyResultError
    │   ├── DeviceOfflineError
    │   └── DirectoryUnavailableError
    ├── SelectionError (recoverable - pick again)
    │   ├── NoSelectionError
    │   ├── StaleSelectionError
    │   └── SelectionCancelledError
    └── PersistenceError (recoverable - retry confirmation)
"""
from datetime import datetime, timezone
from typing import Any, Optional

# Operator-facing messages
NO_DEVICES_MESSAGE = "No devices found for type {client_type}. Please contact staff."
CONNECTIVITY_MESSAGE = (
    "Unable to connect to the server. Please check your internet connection."
)
BOTH_SERVERS_FAILED_MESSAGE = (
    "Unable to reach the primary or secondary server. "
    "Please check your internet connection."
)
OFFLINE_MESSAGE = (
    "Network request failed: Device is offline. "
    "Internet connection is required for device selection."
)
NO_SELECTION_MESSAGE = "Please select a device."
SAVE_FAILED_MESSAGE = "Failed to save device information. Please try again."


# ============================================
# Base Exception
# ============================================

class ProvisioningError(Exception):
    """Base exception for all provisioning errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "EMPTY_RESULT")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether the operator can retry
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


def error_message(error: BaseException, default: str) -> str:
    """Extract the operator-facing message from any exception.

    ProvisioningError exposes its bare message (without code/details);
    other exceptions use str(). Falls back to default when empty.
    """
    if isinstance(error, ProvisioningError):
        return error.message or default
    return str(error) or default


# ============================================
# Configuration Errors (Unrecoverable)
# ============================================

class ConfigurationError(ProvisioningError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )


# ============================================
# Discovery Errors
# ============================================

class DiscoveryError(ProvisioningError):
    """Base class for device discovery failures.

    Discovery errors never terminate the workflow; the operator can retry.
    """

    def __init__(self, message: str = CONNECTIVITY_MESSAGE, **kwargs):
        kwargs.setdefault("recoverable", True)
        kwargs.setdefault("code", "DISCOVERY_ERROR")
        super().__init__(message, **kwargs)


class EmptyResultError(DiscoveryError):
    """Raised when the directory has no devices for the client type."""

    def __init__(self, client_type: str, **kwargs):
        details = kwargs.pop("details", {})
        details["client_type"] = client_type
        super().__init__(
            NO_DEVICES_MESSAGE.format(client_type=client_type),
            code="EMPTY_RESULT",
            details=details,
            **kwargs,
        )
        self.client_type = client_type


class DeviceOfflineError(DiscoveryError):
    """Raised when the host reports no network connectivity."""

    def __init__(self, message: str = OFFLINE_MESSAGE, **kwargs):
        super().__init__(message, code="DEVICE_OFFLINE", **kwargs)


class DirectoryUnavailableError(DiscoveryError):
    """Raised when neither the primary nor the secondary endpoint answered.

    Attributes:
        endpoints: Names of the endpoints that were tried, in order
    """

    def __init__(
        self,
        message: str = BOTH_SERVERS_FAILED_MESSAGE,
        endpoints: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if endpoints:
            details["endpoints"] = endpoints
        super().__init__(
            message,
            code="DIRECTORY_UNAVAILABLE",
            details=details,
            **kwargs,
        )
        self.endpoints = endpoints or []


# ============================================
# Selection Errors
# ============================================

class SelectionError(ProvisioningError):
    """Base class for operator selection problems."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class NoSelectionError(SelectionError):
    """Raised when confirmation is requested without a selected device."""

    def __init__(self, message: str = NO_SELECTION_MESSAGE, **kwargs):
        super().__init__(message, code="NO_SELECTION", **kwargs)


class StaleSelectionError(SelectionError):
    """Raised when the selected id is no longer in the candidate list."""

    def __init__(self, device_id: str, **kwargs):
        details = kwargs.pop("details", {})
        details["device_id"] = device_id
        super().__init__(
            "Selected device not found",
            code="STALE_SELECTION",
            details=details,
            **kwargs,
        )
        self.device_id = device_id


class SelectionCancelledError(SelectionError):
    """Raised by the identity bootstrap when the operator cancelled."""

    def __init__(
        self,
        message: str = (
            "Device selection was cancelled. "
            "Internet connection is required to select a device."
        ),
        **kwargs,
    ):
        super().__init__(message, code="SELECTION_CANCELLED", **kwargs)


# ============================================
# Persistence Errors
# ============================================

class PersistenceError(ProvisioningError):
    """Raised when the identity store rejects a write.

    Attributes:
        field: Identity field being written when the failure happened
    """

    def __init__(
        self,
        message: str = SAVE_FAILED_MESSAGE,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        kwargs.setdefault("recoverable", True)
        super().__init__(
            message,
            code="PERSISTENCE_ERROR",
            details=details,
            **kwargs,
        )
        self.field = field


# ============================================
# Exports
# ============================================

__all__ = [
    # Messages
    "BOTH_SERVERS_FAILED_MESSAGE",
    "CONNECTIVITY_MESSAGE",
    "NO_DEVICES_MESSAGE",
    "NO_SELECTION_MESSAGE",
    "OFFLINE_MESSAGE",
    "SAVE_FAILED_MESSAGE",
    # Base
    "ProvisioningError",
    "error_message",
    # Configuration
    "ConfigurationError",
    # Discovery
    "DiscoveryError",
    "EmptyResultError",
    "DeviceOfflineError",
    "DirectoryUnavailableError",
    # Selection
    "SelectionError",
    "NoSelectionError",
    "StaleSelectionError",
    "SelectionCancelledError",
    # Persistence
    "PersistenceError",
]
