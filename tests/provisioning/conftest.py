"""Mock ports and fixtures for provisioning tests.

The mocks implement the domain ports in memory so the workflow can be
tested in isolation.
"""

import asyncio
from typing import Any, Optional

import pytest

from src.kiosk.provisioning.domain.entities import ProgressOptions
from src.kiosk.provisioning.domain.ports import (
    IClientIdentityStore,
    IDeviceDirectory,
    IProgressIndicator,
    IProgressIndicatorFactory,
)
from src.kiosk.provisioning.use_cases.select_device import DeviceSelectionWorkflow


class MockDeviceDirectory(IDeviceDirectory):
    """Mock implementation of IDeviceDirectory for testing."""

    def __init__(
        self,
        records: Optional[list[Any]] = None,
        raise_error: Optional[Exception] = None,
        using_secondary: bool = False,
    ):
        self.records = records or []
        self.raise_error = raise_error
        self.using_secondary = using_secondary
        self.requested_types: list[str] = []

    async def list_devices_by_type(self, client_type: str) -> list[Any]:
        self.requested_types.append(client_type)
        if self.raise_error:
            raise self.raise_error
        return list(self.records)

    def is_using_secondary_server(self) -> bool:
        return self.using_secondary


class ControlledDeviceDirectory(IDeviceDirectory):
    """Directory whose calls stay pending until the test resolves them."""

    def __init__(self):
        self.pending: list[asyncio.Future] = []

    async def list_devices_by_type(self, client_type: str) -> list[Any]:
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    def is_using_secondary_server(self) -> bool:
        return False


class MockIdentityStore(IClientIdentityStore):
    """In-memory identity store recording every call.

    Attributes:
        fail_on: Names of methods that raise store_error
        gate: When set, set_client_id waits on this event before writing
    """

    def __init__(self, client_type: str = "kiosk", data: Optional[dict[str, str]] = None):
        self.client_type = client_type
        self.data: dict[str, str] = dict(data or {})
        self.calls: list[tuple[str, Optional[str]]] = []
        self.fail_on: set[str] = set()
        self.store_error: Exception = OSError("disk full")
        self.gate: Optional[asyncio.Event] = None

    def _check(self, op: str, value: Optional[str] = None) -> None:
        self.calls.append((op, value))
        if op in self.fail_on:
            raise self.store_error

    @property
    def write_calls(self) -> list[tuple[str, Optional[str]]]:
        return [c for c in self.calls if c[0].startswith("set_")]

    @property
    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]

    def get_client_type(self) -> str:
        return self.client_type

    async def get_client_id(self) -> Optional[str]:
        return self.data.get("client_id")

    async def get_client_name(self) -> Optional[str]:
        return self.data.get("client_name")

    async def get_stored_client_type(self) -> Optional[str]:
        return self.data.get("client_type")

    async def set_client_id(self, value: str) -> None:
        if self.gate is not None:
            await self.gate.wait()
        self._check("set_client_id", value)
        self.data["client_id"] = value

    async def set_client_name(self, value: str) -> None:
        self._check("set_client_name", value)
        self.data["client_name"] = value

    async def set_client_type(self, value: str) -> None:
        self._check("set_client_type", value)
        self.data["client_type"] = value

    async def remove_client_id(self) -> None:
        self._check("remove_client_id")
        self.data.pop("client_id", None)

    async def remove_client_name(self) -> None:
        self._check("remove_client_name")
        self.data.pop("client_name", None)

    async def remove_client_type(self) -> None:
        self._check("remove_client_type")
        self.data.pop("client_type", None)


class MockProgressIndicator(IProgressIndicator):
    """Progress indicator counting present/dismiss calls."""

    def __init__(self, options: ProgressOptions, fail_present: bool = False):
        self.options = options
        self.fail_present = fail_present
        self.present_count = 0
        self.dismiss_count = 0

    async def present(self) -> None:
        self.present_count += 1
        if self.fail_present:
            raise RuntimeError("overlay host unavailable")

    async def dismiss(self) -> None:
        self.dismiss_count += 1


class MockProgressFactory(IProgressIndicatorFactory):
    """Factory recording every indicator it creates."""

    def __init__(self, fail_present: bool = False):
        self.fail_present = fail_present
        self.created: list[MockProgressIndicator] = []

    def create(self, options: ProgressOptions) -> IProgressIndicator:
        indicator = MockProgressIndicator(options, fail_present=self.fail_present)
        self.created.append(indicator)
        return indicator


@pytest.fixture
def sample_records():
    """Sample directory documents, including fields the workflow ignores."""
    return [
        {
            "id": "A",
            "name": "Gate 1",
            "type": "kiosk",
            "status": "online",
            "meta_data": "{}",
            "server_updated_at": "1700000000000",
        },
        {
            "id": "B",
            "name": "Gate 2",
            "type": "kiosk",
            "status": "offline",
            "floor": 3,
        },
    ]


@pytest.fixture
def directory(sample_records):
    return MockDeviceDirectory(records=sample_records)


@pytest.fixture
def store():
    return MockIdentityStore()


@pytest.fixture
def progress():
    return MockProgressFactory()


@pytest.fixture
def workflow(directory, store, progress):
    return DeviceSelectionWorkflow(directory, store, progress)


@pytest.fixture
def failing_progress():
    """Progress host whose indicators fail to present."""
    return MockProgressFactory(fail_present=True)


@pytest.fixture
def controlled_directory():
    return ControlledDeviceDirectory()
