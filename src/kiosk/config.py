"""Runtime configuration for kiosk provisioning.

Settings are read from the environment; a local .env file is loaded first
when present.

Environment Variables:
    - KIOSK_CLIENT_TYPE: Client class used to filter directory devices (default KIOSK)
    - KIOSK_IDENTITY_FILE: Path of the JSON identity store
    - KIOSK_DIRECTORY_ATTEMPTS: Attempts per directory endpoint (default 1)
    - KIOSK_DIRECTORY_TIMEOUT: Seconds per endpoint call, 0 disables (default 10)
    - KIOSK_SAVING_MESSAGE: Progress indicator text while saving
    - LOG_LEVEL: Logging level (default INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .api.exceptions import ConfigurationError

DEFAULT_CLIENT_TYPE = "KIOSK"
DEFAULT_SAVING_MESSAGE = "Saving device information..."
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _int_setting(env: Mapping[str, str], key: str, default: int, minimum: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", key=key, cause=e)
    if value < minimum:
        raise ConfigurationError(f"{key} must be >= {minimum}, got {value}", key=key)
    return value


def _float_setting(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}", key=key, cause=e)
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative, got {value}", key=key)
    return value


@dataclass(frozen=True)
class ProvisioningSettings:
    """Configuration for the device provisioning workflow."""

    # Client class used for directory filtering
    client_type: str = DEFAULT_CLIENT_TYPE

    # JSON identity store location
    identity_file: Path = Path(".kiosk/identity.json")

    # Directory endpoint behaviour
    directory_attempts: int = 1
    directory_timeout_seconds: float = 10.0

    # Progress indicator text shown while saving
    saving_message: str = DEFAULT_SAVING_MESSAGE

    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ) -> "ProvisioningSettings":
        """Build settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ (used by tests)
            load_env_file: Load a .env file into os.environ first

        Raises:
            ConfigurationError: If a numeric setting is malformed
        """
        if env is None:
            if load_env_file:
                load_dotenv()
            env = os.environ

        log_level = (env.get("LOG_LEVEL") or "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"Unknown LOG_LEVEL {log_level!r}", key="LOG_LEVEL")

        return cls(
            client_type=(env.get("KIOSK_CLIENT_TYPE") or DEFAULT_CLIENT_TYPE).strip(),
            identity_file=Path(env.get("KIOSK_IDENTITY_FILE") or ".kiosk/identity.json"),
            directory_attempts=_int_setting(env, "KIOSK_DIRECTORY_ATTEMPTS", 1, minimum=1),
            directory_timeout_seconds=_float_setting(env, "KIOSK_DIRECTORY_TIMEOUT", 10.0),
            saving_message=env.get("KIOSK_SAVING_MESSAGE") or DEFAULT_SAVING_MESSAGE,
            log_level=log_level,
        )


def configure_logging(settings: Optional[ProvisioningSettings] = None) -> None:
    """Configure root logging for a host application."""
    level = (settings.log_level if settings else "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
