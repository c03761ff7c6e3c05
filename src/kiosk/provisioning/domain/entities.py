"""Domain entities for device provisioning.

These are pure data structures with no infrastructure dependencies.
They represent the devices offered by the directory, the workflow's own
state, and the identity committed to local storage.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class Phase(str, Enum):
    """Discovery phase of the provisioning workflow."""

    IDLE = "idle"  # Constructed, discovery not started
    LOADING = "loading"  # Directory query in flight
    READY = "ready"  # Candidates available for selection
    ERROR = "error"  # Discovery failed or returned nothing; retryable


class DeviceRecord(BaseModel):
    """A device document as returned by the directory.

    Only id, name, type and status matter to provisioning; the metadata
    fields are accepted so that full directory documents validate, and any
    other keys are ignored.
    """

    id: str
    name: str = ""
    type: str = ""
    status: str = ""

    # Directory metadata (ignored by the workflow)
    meta_data: Optional[str] = None
    created_by: Optional[str] = None
    server_created_at: Optional[str] = None
    server_updated_at: Optional[str] = None
    cloud_created_at: Optional[str] = None
    cloud_updated_at: Optional[str] = None
    client_created_at: Optional[str] = None
    client_updated_at: Optional[str] = None


@dataclass(frozen=True)
class Device:
    """Identity-relevant projection of a directory record.

    Immutable; a discovery run replaces the whole candidate list.
    """

    id: str
    name: str
    type: str
    status: str = ""


@dataclass(frozen=True)
class ConfirmedDevice:
    """Payload handed back to the caller after a successful confirmation."""

    id: str
    name: str
    type: str

    @classmethod
    def from_device(cls, device: Device) -> "ConfirmedDevice":
        return cls(id=device.id, name=device.name, type=device.type)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the caller."""
        return {"id": self.id, "name": self.name, "type": self.type}


@dataclass(frozen=True)
class ClientIdentity:
    """Identity fields as persisted in the identity store."""

    client_id: str
    client_name: Optional[str] = None
    client_type: Optional[str] = None


@dataclass(frozen=True)
class ProgressOptions:
    """Options for a visible progress indicator."""

    message: str
    block_interaction: bool = True


@dataclass(frozen=True)
class WorkflowState:
    """Snapshot of the provisioning workflow's state.

    The selection is not checked against candidates when it is made;
    only confirmation resolves it.
    """

    candidates: tuple[Device, ...] = ()
    selected_id: Optional[str] = None
    phase: Phase = Phase.IDLE
    last_error: Optional[str] = None
    using_fallback_endpoint: bool = False

    # In-progress confirmation guard
    confirming: bool = False

    # Outcome delivered (confirmed or cancelled)
    closed: bool = False

    def find_candidate(self, device_id: Optional[str]) -> Optional[Device]:
        """Look up a candidate by id."""
        if not device_id:
            return None
        for device in self.candidates:
            if device.id == device_id:
                return device
        return None

    @property
    def selected_device(self) -> Optional[Device]:
        """The selected candidate, if it is in the current list."""
        return self.find_candidate(self.selected_id)

    @property
    def can_confirm(self) -> bool:
        """Business rule: a confirmation attempt would not be rejected outright."""
        return bool(self.selected_id) and not self.confirming and not self.closed
