import pytest

from mothctl.core.device_match import (
    build_record,
    devices_for_serial,
    frequency_label,
    normalize_serial,
    to_ascii,
)
from mothctl.core.errors import NonConformingDeviceError
from mothctl.core.model import SerialFormat

FORMAT = SerialFormat(separator="_", offset=5, length=16)


def test_normalize_conforming_descriptor() -> None:
    assert normalize_serial("0048_24E144085F256CA3", FORMAT) == "24E144085F256CA3"


@pytest.mark.parametrize(
    "descriptor",
    [
        "048_24E144085F256CA3",
        "00048_24E144085F256CA3",
        "0048-24E144085F256CA3",
        "0048_24E144085F256CA",
        "0048_24E144085F256CA3A",
        "",
    ],
)
def test_non_conforming_descriptor_rejected(descriptor: str) -> None:
    with pytest.raises(NonConformingDeviceError):
        normalize_serial(descriptor, FORMAT)


def test_first_separator_must_be_at_offset() -> None:
    with pytest.raises(NonConformingDeviceError):
        normalize_serial("0_48_24E144085F256CA", FORMAT)


@pytest.mark.parametrize(
    ("descriptor", "label"),
    [
        ("0048_24E144085F256CA3", "48"),
        ("0384_24E144085F256CA3", "384"),
        ("0250_24E144085F256CA3", "250"),
        ("0008_24E144085F256CA3", "8"),
        ("1000_24E144085F256CA3", "1000"),
        ("0000_24E144085F256CA3", ""),
    ],
)
def test_frequency_label_strips_leading_zeros(descriptor: str, label: str) -> None:
    assert frequency_label(descriptor, FORMAT) == label


def test_to_ascii_replaces_each_non_ascii_code_point() -> None:
    assert to_ascii("0048_24E1é\U0001f3a4") == "0048_24E1??"


def test_build_record_narrows_descriptor() -> None:
    record = build_record(b"/dev/hidraw3", "0048_24E144085F256CA3", FORMAT)
    assert record.path == b"/dev/hidraw3"
    assert record.serial == "24E144085F256CA3"
    assert record.label == "48"


def test_devices_for_serial_matches_exactly() -> None:
    devices = [
        build_record(b"a", "0048_24E144085F256CA3", FORMAT),
        build_record(b"b", "0048_24E144085F256CA4", FORMAT),
        build_record(b"c", "0384_24E144085F256CA3", FORMAT),
    ]
    assert [d.path for d in devices_for_serial("24e144085f256ca3", devices)] == [b"a", b"c"]
    assert devices_for_serial("0000000000000000", devices) == []
