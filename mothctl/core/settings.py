"""Default configuration snapshot and sample-rate lookup table."""

from __future__ import annotations

from mothctl.core.model import ConfigSettings

FILTER_FREQ_MULTIPLIER = 100
MAXIMUM_FILTER_FREQUENCY = 192000
UNBOUNDED_FILTER_FREQ = 0xFFFF
MAXIMUM_GAIN = 4

DEFAULT_SETTINGS = ConfigSettings()

# Requested rate -> (sample rate programmed into the ADC, divider).
SAMPLE_RATES: dict[int, tuple[int, int]] = {
    8000: (384000, 48),
    16000: (384000, 24),
    32000: (384000, 12),
    48000: (384000, 8),
    96000: (384000, 4),
    192000: (384000, 2),
    250000: (250000, 1),
    384000: (384000, 1),
}


def nyquist_frequency(settings: ConfigSettings) -> int:
    """Return the Nyquist limit in units of 100 Hz for the effective sample rate."""
    return settings.sample_rate // settings.sample_rate_divider // FILTER_FREQ_MULTIPLIER // 2
