"""Core data models used across parser, protocol, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass

LIST = "list"
CONFIG = "config"
UPDATE_GAIN = "update"
SET_LED = "led"
RESTORE = "restore"

NO_FILTER = "none"
LOW_PASS_FILTER = "low-pass"
HIGH_PASS_FILTER = "high-pass"
BAND_PASS_FILTER = "band-pass"


@dataclass(frozen=True)
class ConfigSettings:
    time: int = 0
    gain: int = 2
    clock_divider: int = 4
    acquisition_cycles: int = 16
    oversample_rate: int = 1
    sample_rate: int = 384000
    sample_rate_divider: int = 1
    lower_filter_freq: int = 0
    higher_filter_freq: int = 0
    energy_saver_mode: bool = False
    disable_48hz_dc_blocking_filter: bool = False
    low_gain_range: bool = False
    disable_led: bool = False


@dataclass(frozen=True)
class OperationRequest:
    operation: str
    settings: ConfigSettings
    serials: tuple[str, ...] = ()
    filter_type: str = NO_FILTER


@dataclass(frozen=True)
class SerialFormat:
    separator: str
    offset: int
    length: int


@dataclass(frozen=True)
class DeviceProfile:
    id: str
    name: str
    vendor_id: int
    product_id: int
    report_size: int
    read_timeout_ms: int
    serial: SerialFormat


@dataclass(frozen=True)
class DeviceRecord:
    path: bytes | str
    descriptor: str
    serial: str
    label: str


@dataclass(frozen=True)
class DeviceOutcome:
    serial: str
    status: str
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "sent"


@dataclass(frozen=True)
class DispatchReport:
    operation: str
    outcomes: tuple[DeviceOutcome, ...]
    no_devices: bool = False
