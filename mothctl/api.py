"""Stable public API for building tooling on top of mothctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Sequence

from mothctl.core.errors import (
    ArgumentParseError,
    CommunicationError,
    DeviceDiscoveryError,
    DeviceNotFoundError,
    MothctlError,
    NonConformingDeviceError,
    ProfileLoadError,
    ProfileValidationError,
    TransportConnectError,
    TransportError,
    ValidationError,
)
from mothctl.core.model import (
    ConfigSettings,
    DeviceOutcome,
    DeviceProfile,
    DeviceRecord,
    DispatchReport,
    OperationRequest,
)
from mothctl.core.parser import parse_arguments
from mothctl.core.protocol import decode_settings, encode_settings
from mothctl.core.service import MothService
from mothctl.transports.base import HIDTransport

__all__ = [
    "MothctlError",
    "ArgumentParseError",
    "ValidationError",
    "DeviceDiscoveryError",
    "DeviceNotFoundError",
    "NonConformingDeviceError",
    "ProfileLoadError",
    "ProfileValidationError",
    "TransportError",
    "TransportConnectError",
    "CommunicationError",
    "ConfigSettings",
    "DeviceOutcome",
    "DeviceProfile",
    "DeviceRecord",
    "DispatchReport",
    "OperationRequest",
    "HIDTransport",
    "decode_settings",
    "encode_settings",
    "Client",
]


class Client:
    """Public client for listing and configuring attached microphones.

    A `Client` wraps profile loading, HID enumeration and the packet exchange
    behind the same token grammar the command line accepts, e.g.
    ``client.run(["CONFIG", "48000", "LPF", "20000"])``.
    """

    def __init__(self, *, transport: HIDTransport | None = None) -> None:
        self._service = MothService(transport=transport)

    @property
    def profile(self) -> DeviceProfile:
        return self._service.profile

    def list_devices(self) -> list[DeviceRecord]:
        return self._service.list_devices()

    def parse(self, tokens: Sequence[str]) -> OperationRequest:
        return parse_arguments(tokens)

    def dispatch(self, request: OperationRequest) -> DispatchReport:
        return self._service.dispatch(request)

    def run(self, tokens: Sequence[str]) -> DispatchReport:
        return self.dispatch(self.parse(tokens))
