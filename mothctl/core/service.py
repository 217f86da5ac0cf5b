"""Service layer used by CLI and public API: enumeration and command dispatch."""

from __future__ import annotations

import logging

from mothctl.core import protocol
from mothctl.core.device_match import build_record, devices_for_serial
from mothctl.core.errors import (
    DeviceNotFoundError,
    NonConformingDeviceError,
    TransportConnectError,
    TransportError,
)
from mothctl.core.model import (
    LIST,
    DeviceOutcome,
    DeviceProfile,
    DeviceRecord,
    DispatchReport,
    OperationRequest,
)
from mothctl.core.profile_loader import DEFAULT_PROFILE_ID, load_profile
from mothctl.transports.base import HIDTransport
from mothctl.transports.usb_hid import USBHIDTransport

LOGGER = logging.getLogger(__name__)


class MothService:
    def __init__(
        self,
        *,
        transport: HIDTransport | None = None,
        profile_id: str = DEFAULT_PROFILE_ID,
    ) -> None:
        self.profile: DeviceProfile = load_profile(profile_id)
        self.transport = transport or USBHIDTransport()

    def list_devices(self) -> list[DeviceRecord]:
        """Return every attached device whose serial descriptor conforms."""
        _, devices = self._scan()
        return devices

    def resolve_serial(self, serial: str, devices: list[DeviceRecord]) -> list[DeviceRecord]:
        matches = devices_for_serial(serial, devices)
        if not matches:
            raise DeviceNotFoundError(f"Could not find device ID {serial}.")
        return matches

    def dispatch(self, request: OperationRequest) -> DispatchReport:
        """Send the request's command to every targeted device.

        Per-device failures are recorded as outcomes; they never abort the run.
        """
        if request.operation == LIST:
            raise ValueError("LIST requests are answered by list_devices()")

        enumerated, devices = self._scan()
        if not enumerated:
            return DispatchReport(operation=request.operation, outcomes=(), no_devices=True)

        outcomes: list[DeviceOutcome] = []
        if not request.serials:
            for device in devices:
                outcomes.append(self._send(request, device))
        else:
            for serial in request.serials:
                try:
                    targets = self.resolve_serial(serial, devices)
                except DeviceNotFoundError as exc:
                    outcomes.append(DeviceOutcome(serial=serial, status="not_found", detail=str(exc)))
                    continue
                for device in targets:
                    outcomes.append(self._send(request, device))

        return DispatchReport(operation=request.operation, outcomes=tuple(outcomes))

    def _send(self, request: OperationRequest, device: DeviceRecord) -> DeviceOutcome:
        try:
            protocol.exchange(
                self.transport,
                device.path,
                request.operation,
                request.settings,
                self.profile,
            )
        except TransportError as exc:
            LOGGER.debug("Exchange with %s failed: %s", device.serial, exc)
            return DeviceOutcome(serial=device.serial, status="failed", detail=str(exc))
        return DeviceOutcome(serial=device.serial, status="sent")

    def _scan(self) -> tuple[bool, list[DeviceRecord]]:
        infos = self.transport.enumerate(self.profile.vendor_id, self.profile.product_id)
        devices: list[DeviceRecord] = []
        for info in infos:
            path = info.get("path")
            if not path:
                continue

            descriptor = info.get("serial_number")
            if not descriptor:
                LOGGER.debug("No serial in enumeration data for %r, querying device", path)
                try:
                    descriptor = self.transport.read_serial(path)
                except TransportConnectError as exc:
                    LOGGER.debug("Serial query failed for %r: %s", path, exc)
                    continue
                if not descriptor:
                    continue

            try:
                devices.append(build_record(path, descriptor, self.profile.serial))
            except NonConformingDeviceError as exc:
                LOGGER.debug("Skipping %r: %s", path, exc)
        return bool(infos), devices
