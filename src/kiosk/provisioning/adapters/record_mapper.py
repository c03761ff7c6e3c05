"""Record mapper adapter for projecting directory documents to devices.

This adapter implements IDeviceRecordMapper: it validates a directory
document with the DeviceRecord schema and keeps only the fields that
provisioning needs.
"""

from ..domain.entities import Device, DeviceRecord
from ..domain.ports import IDeviceRecordMapper, RawDeviceRecord


class DeviceRecordMapper(IDeviceRecordMapper):
    """Maps directory device documents to Device entities.

    This class handles:
    - Schema validation of raw dictionaries (pydantic)
    - Dropping metadata and unknown fields
    - Rejecting records without an id
    """

    def map_to_entity(self, raw: RawDeviceRecord) -> Device:
        """Project a directory record to a Device.

        Args:
            raw: DeviceRecord or raw dictionary from the directory

        Returns:
            Device with id, name, type and status

        Raises:
            ValueError: If the record is malformed or has an empty id
        """
        record = raw if isinstance(raw, DeviceRecord) else DeviceRecord.model_validate(raw)

        device_id = record.id.strip()
        if not device_id:
            raise ValueError("Device record has an empty id")

        return Device(
            id=device_id,
            name=record.name,
            type=record.type,
            status=record.status,
        )
