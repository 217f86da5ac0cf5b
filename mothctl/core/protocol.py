"""Fixed-size HID packet protocol: settings codec, packet builder and echo check."""

from __future__ import annotations

import logging
import struct

from mothctl.core.errors import CommunicationError
from mothctl.core.model import CONFIG, RESTORE, SET_LED, UPDATE_GAIN, ConfigSettings, DeviceProfile
from mothctl.transports.base import HIDTransport

LOGGER = logging.getLogger(__name__)

MESSAGE_CODES = {
    CONFIG: 0x01,
    UPDATE_GAIN: 0x02,
    SET_LED: 0x03,
    RESTORE: 0x04,
}

# time, gain, clock divider, acquisition cycles, oversample rate, sample rate,
# sample rate divider, lower filter, higher filter, flag bits
SETTINGS_STRUCT = struct.Struct("<IBBBBIBHHB")
SETTINGS_SIZE = SETTINGS_STRUCT.size

PAYLOAD_OFFSET = 2

ENERGY_SAVER_MODE_BIT = 0x01
DISABLE_48HZ_BIT = 0x02
LOW_GAIN_RANGE_BIT = 0x04
DISABLE_LED_BIT = 0x08


def encode_settings(settings: ConfigSettings) -> bytes:
    flags = 0
    if settings.energy_saver_mode:
        flags |= ENERGY_SAVER_MODE_BIT
    if settings.disable_48hz_dc_blocking_filter:
        flags |= DISABLE_48HZ_BIT
    if settings.low_gain_range:
        flags |= LOW_GAIN_RANGE_BIT
    if settings.disable_led:
        flags |= DISABLE_LED_BIT
    try:
        return SETTINGS_STRUCT.pack(
            settings.time,
            settings.gain,
            settings.clock_divider,
            settings.acquisition_cycles,
            settings.oversample_rate,
            settings.sample_rate,
            settings.sample_rate_divider,
            settings.lower_filter_freq,
            settings.higher_filter_freq,
            flags,
        )
    except struct.error as exc:
        raise ValueError(f"Settings do not fit the wire format: {exc}") from exc


def decode_settings(data: bytes) -> ConfigSettings:
    if len(data) < SETTINGS_SIZE:
        raise ValueError(f"Expected at least {SETTINGS_SIZE} bytes of settings, got {len(data)}")
    (
        time,
        gain,
        clock_divider,
        acquisition_cycles,
        oversample_rate,
        sample_rate,
        sample_rate_divider,
        lower_filter_freq,
        higher_filter_freq,
        flags,
    ) = SETTINGS_STRUCT.unpack_from(data)
    return ConfigSettings(
        time=time,
        gain=gain,
        clock_divider=clock_divider,
        acquisition_cycles=acquisition_cycles,
        oversample_rate=oversample_rate,
        sample_rate=sample_rate,
        sample_rate_divider=sample_rate_divider,
        lower_filter_freq=lower_filter_freq,
        higher_filter_freq=higher_filter_freq,
        energy_saver_mode=bool(flags & ENERGY_SAVER_MODE_BIT),
        disable_48hz_dc_blocking_filter=bool(flags & DISABLE_48HZ_BIT),
        low_gain_range=bool(flags & LOW_GAIN_RANGE_BIT),
        disable_led=bool(flags & DISABLE_LED_BIT),
    )


def build_packet(operation: str, settings: ConfigSettings, *, report_size: int = 64) -> bytes:
    """Build the zero-filled output report for an operation.

    Byte 0 is the report ID, byte 1 the message code and, for everything except
    RESTORE, the packed settings follow from byte 2.
    """
    code = MESSAGE_CODES.get(operation)
    if code is None:
        raise ValueError(f"Operation '{operation}' has no message code")
    if report_size < PAYLOAD_OFFSET + SETTINGS_SIZE:
        raise ValueError(f"Report size {report_size} cannot hold the settings payload")

    packet = bytearray(report_size)
    packet[1] = code
    if operation != RESTORE:
        packet[PAYLOAD_OFFSET : PAYLOAD_OFFSET + SETTINGS_SIZE] = encode_settings(settings)
    return bytes(packet)


def verify_response(operation: str, sent: bytes, received: bytes | None) -> None:
    """Raise CommunicationError unless the device echoed the sent message.

    The device drops the report ID, so received[i] is compared with sent[i + 1].
    """
    if received is None:
        raise CommunicationError("Timed out waiting for device response")
    if len(received) != len(sent):
        raise CommunicationError(f"Expected {len(sent)} byte response, got {len(received)}")

    length = 1 if operation == RESTORE else 1 + SETTINGS_SIZE
    for index in range(length):
        if sent[index + 1] != received[index]:
            raise CommunicationError(
                f"Response mismatch at byte {index}: "
                f"expected 0x{sent[index + 1]:02x}, got 0x{received[index]:02x}"
            )


def exchange(
    transport: HIDTransport,
    path: bytes | str,
    operation: str,
    settings: ConfigSettings,
    profile: DeviceProfile,
) -> bytes:
    """Send one command to the device at `path` and verify its echo."""
    packet = build_packet(operation, settings, report_size=profile.report_size)
    LOGGER.debug("-> %s", packet.hex(" "))
    response = transport.send(
        path,
        packet,
        report_size=profile.report_size,
        timeout_ms=profile.read_timeout_ms,
    )
    if response is not None:
        LOGGER.debug("<- %s", response.hex(" "))
    verify_response(operation, packet, response)
    return response
