from __future__ import annotations

import pytest

from mothctl.core.errors import ProfileLoadError, ProfileValidationError
from mothctl.core.profile_loader import DEFAULT_PROFILE_ID, _build_profile, load_profile


def _doc(**overrides) -> dict:
    doc = {
        "id": "bench",
        "name": "Bench Microphone",
        "usb": {"vendor_id": 0x16D0, "product_id": 0x06F3},
        "serial": {"separator": "_", "offset": 5, "length": 16},
    }
    doc.update(overrides)
    return doc


def test_load_packaged_profile() -> None:
    profile = load_profile()
    assert profile.id == DEFAULT_PROFILE_ID
    assert profile.vendor_id == 0x16D0
    assert profile.product_id == 0x06F3
    assert profile.report_size == 64
    assert profile.read_timeout_ms == 100
    assert profile.serial.separator == "_"
    assert profile.serial.offset == 5
    assert profile.serial.length == 16


def test_unknown_profile_rejected() -> None:
    with pytest.raises(ProfileLoadError, match="no_such_model"):
        load_profile("no_such_model")


def test_usb_defaults_applied() -> None:
    profile = _build_profile(_doc(), "bench")
    assert profile.report_size == 64
    assert profile.read_timeout_ms == 100


def test_missing_required_keys_rejected() -> None:
    doc = _doc()
    del doc["serial"]
    with pytest.raises(ProfileValidationError):
        _build_profile(doc, "bench")


def test_out_of_range_vendor_id_rejected() -> None:
    with pytest.raises(ProfileValidationError, match="usb.vendor_id"):
        _build_profile(_doc(usb={"vendor_id": 70000, "product_id": 2}), "bench")


def test_separator_must_fit_before_offset() -> None:
    with pytest.raises(ProfileValidationError):
        _build_profile(_doc(serial={"separator": "__", "offset": 1, "length": 16}), "bench")


def test_non_mapping_document_rejected() -> None:
    with pytest.raises(ProfileValidationError):
        _build_profile(["id", "bench"], "bench")
