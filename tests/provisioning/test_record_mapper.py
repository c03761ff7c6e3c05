"""Tests for DeviceRecordMapper."""

import pytest
from pydantic import ValidationError

from src.kiosk.provisioning.adapters.record_mapper import DeviceRecordMapper
from src.kiosk.provisioning.domain.entities import Device, DeviceRecord


@pytest.fixture
def mapper():
    return DeviceRecordMapper()


class TestDeviceRecordMapper:

    def test_maps_full_document(self, mapper, sample_records):
        device = mapper.map_to_entity(sample_records[0])

        assert device == Device(id="A", name="Gate 1", type="kiosk", status="online")

    def test_unknown_fields_ignored(self, mapper, sample_records):
        device = mapper.map_to_entity(sample_records[1])

        assert device.id == "B"
        assert not hasattr(device, "floor")

    def test_accepts_record_model(self, mapper):
        record = DeviceRecord(id="C", name="Lobby", type="kiosk")

        assert mapper.map_to_entity(record) == Device(id="C", name="Lobby", type="kiosk")

    def test_missing_optional_fields_default_to_empty(self, mapper):
        device = mapper.map_to_entity({"id": "D"})

        assert device.name == ""
        assert device.type == ""
        assert device.status == ""

    def test_id_is_stripped(self, mapper):
        assert mapper.map_to_entity({"id": "  E  "}).id == "E"

    @pytest.mark.parametrize("raw", [{"id": ""}, {"id": "   "}])
    def test_empty_id_rejected(self, mapper, raw):
        with pytest.raises(ValueError):
            mapper.map_to_entity(raw)

    def test_missing_id_rejected(self, mapper):
        # ValidationError subclasses ValueError
        with pytest.raises(ValidationError):
            mapper.map_to_entity({"name": "No id"})
