"""USB HID transport implementation using hidapi."""

from __future__ import annotations

from typing import Any

from mothctl.core.errors import (
    CommunicationError,
    DeviceDiscoveryError,
    TransportConnectError,
)


def _load_backend() -> Any:
    try:
        import hid  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise TransportConnectError(
            "USB HID transport requires 'hidapi'. Install dependency and retry."
        ) from exc
    return hid


class USBHIDTransport:
    def __init__(self, backend: Any | None = None) -> None:
        self._backend = backend

    @property
    def backend(self) -> Any:
        if self._backend is None:
            self._backend = _load_backend()
        return self._backend

    def enumerate(self, vendor_id: int, product_id: int) -> list[dict[str, Any]]:
        try:
            return list(self.backend.enumerate(vendor_id, product_id))
        except OSError as exc:
            raise DeviceDiscoveryError(f"HID enumeration failed: {exc}") from exc

    def _open(self, path: bytes | str) -> Any:
        raw_path = path.encode() if isinstance(path, str) else path
        device = self.backend.device()
        try:
            device.open_path(raw_path)
        except OSError as exc:
            raise TransportConnectError(f"Could not open HID device {path!r}: {exc}") from exc
        return device

    def read_serial(self, path: bytes | str) -> str | None:
        device = self._open(path)
        try:
            return device.get_serial_number_string() or None
        except OSError as exc:
            raise TransportConnectError(f"Could not read serial number of {path!r}: {exc}") from exc
        finally:
            device.close()

    def send(
        self,
        path: bytes | str,
        payload: bytes,
        *,
        report_size: int,
        timeout_ms: int,
    ) -> bytes | None:
        device = self._open(path)
        try:
            try:
                written = device.write(payload)
            except (OSError, ValueError) as exc:
                raise CommunicationError(f"HID write failed: {exc}") from exc
            if written < 0:
                raise CommunicationError("HID write failed")

            try:
                data = device.read(report_size, timeout_ms=timeout_ms)
            except (OSError, ValueError) as exc:
                raise CommunicationError(f"HID read failed: {exc}") from exc
            return bytes(data) if data else None
        finally:
            device.close()
