"""Transport interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class HIDTransport(Protocol):
    def enumerate(self, vendor_id: int, product_id: int) -> list[dict[str, Any]]:
        """Return hidapi-style device info mappings for matching devices."""

    def read_serial(self, path: bytes | str) -> str | None:
        """Open the device, query its serial number string, and close it."""

    def send(
        self,
        path: bytes | str,
        payload: bytes,
        *,
        report_size: int,
        timeout_ms: int,
    ) -> bytes | None:
        """Write one report and return the response, or None on timeout."""
