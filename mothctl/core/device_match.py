"""Serial descriptor normalization and device-ID matching."""

from __future__ import annotations

from collections.abc import Iterable

from mothctl.core.errors import NonConformingDeviceError
from mothctl.core.model import DeviceRecord, SerialFormat

PLACEHOLDER = "?"


def to_ascii(text: str) -> str:
    """Replace every non-ASCII code point with a single placeholder."""
    return "".join(char if ord(char) < 128 else PLACEHOLDER for char in text)


def normalize_serial(descriptor: str, serial_format: SerialFormat) -> str:
    """Return the device ID suffix of a descriptor such as ``0048_24E144085F256CA3``."""
    separator_index = descriptor.find(serial_format.separator)
    suffix_start = separator_index + len(serial_format.separator)
    if separator_index < 0 or suffix_start != serial_format.offset:
        raise NonConformingDeviceError(
            f"Descriptor '{descriptor}' has no '{serial_format.separator}' at offset {serial_format.offset}"
        )
    suffix = descriptor[suffix_start:]
    if len(suffix) != serial_format.length:
        raise NonConformingDeviceError(
            f"Descriptor '{descriptor}' has a {len(suffix)} character ID, expected {serial_format.length}"
        )
    return suffix


def frequency_label(descriptor: str, serial_format: SerialFormat) -> str:
    """Strip leading characters <= '0' from the prefix before the separator, e.g. ``0048`` -> ``48``."""
    prefix = descriptor[: serial_format.offset - len(serial_format.separator)]
    for index, char in enumerate(prefix):
        if char > "0":
            return prefix[index:]
    return ""


def build_record(path: bytes | str, descriptor: str, serial_format: SerialFormat) -> DeviceRecord:
    narrow = to_ascii(descriptor)
    return DeviceRecord(
        path=path,
        descriptor=narrow,
        serial=normalize_serial(narrow, serial_format),
        label=frequency_label(narrow, serial_format),
    )


def devices_for_serial(serial: str, devices: Iterable[DeviceRecord]) -> list[DeviceRecord]:
    wanted = serial.upper()
    return [device for device in devices if device.serial == wanted]
