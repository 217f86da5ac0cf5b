"""Packaged device profile loading.

A profile fixes the USB identifiers, report geometry and serial descriptor
format of one microphone model. Profiles ship as YAML under
``mothctl/profiles`` and are checked against ``schemas/profile.schema.json``.
"""

from __future__ import annotations

import functools
import json
from importlib import resources
from typing import Any

import jsonschema
import yaml

from mothctl.core.errors import ProfileLoadError, ProfileValidationError
from mothctl.core.model import DeviceProfile, SerialFormat

DEFAULT_PROFILE_ID = "audiomoth_usb_microphone"
_DEFAULT_REPORT_SIZE = 64
_DEFAULT_READ_TIMEOUT_MS = 100


@functools.lru_cache(maxsize=1)
def _schema_validator() -> Any:
    schema = json.loads(
        resources.files("mothctl.schemas").joinpath("profile.schema.json").read_text(encoding="utf-8")
    )
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _build_profile(doc: Any, source: str) -> DeviceProfile:
    if not isinstance(doc, dict):
        raise ProfileValidationError(f"Profile {source} must contain a mapping at root")
    try:
        _schema_validator().validate(doc)
    except jsonschema.ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    usb = doc["usb"]
    serial = SerialFormat(
        separator=doc["serial"]["separator"],
        offset=doc["serial"]["offset"],
        length=doc["serial"]["length"],
    )
    if serial.offset < len(serial.separator):
        raise ProfileValidationError(f"{source}: serial.offset must leave room for '{serial.separator}'")

    return DeviceProfile(
        id=doc["id"],
        name=doc["name"],
        vendor_id=usb["vendor_id"],
        product_id=usb["product_id"],
        report_size=usb.get("report_size", _DEFAULT_REPORT_SIZE),
        read_timeout_ms=usb.get("read_timeout_ms", _DEFAULT_READ_TIMEOUT_MS),
        serial=serial,
    )


def load_profile(profile_id: str = DEFAULT_PROFILE_ID) -> DeviceProfile:
    """Load and validate the packaged profile named `profile_id`."""
    resource = resources.files("mothctl.profiles").joinpath(f"{profile_id}.yaml")
    source = f"profile '{profile_id}'"
    try:
        content = resource.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Unknown device profile '{profile_id}'") from exc

    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {source}: {exc}") from exc

    profile = _build_profile(doc, source)
    if profile.id != profile_id:
        raise ProfileValidationError(f"{source} declares mismatched id '{profile.id}'")
    return profile
