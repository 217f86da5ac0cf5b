"""Command-line token parser producing a validated OperationRequest.

The grammar is keyword driven and case-insensitive. The first token selects the
operation; every following token must satisfy exactly one rule that is valid
for that operation, otherwise the whole run is rejected.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from mothctl.core.errors import ArgumentParseError, ValidationError
from mothctl.core.model import (
    BAND_PASS_FILTER,
    CONFIG,
    HIGH_PASS_FILTER,
    LIST,
    LOW_PASS_FILTER,
    NO_FILTER,
    RESTORE,
    SET_LED,
    UPDATE_GAIN,
    ConfigSettings,
    OperationRequest,
)
from mothctl.core.settings import (
    DEFAULT_SETTINGS,
    FILTER_FREQ_MULTIPLIER,
    MAXIMUM_FILTER_FREQUENCY,
    MAXIMUM_GAIN,
    SAMPLE_RATES,
    UNBOUNDED_FILTER_FREQ,
    nyquist_frequency,
)

_SERIAL_RE = re.compile(r"[0-9A-F]{16}")
_NUMBER_RE = re.compile(r"[0-9]{1,9}")

_OPERATIONS = {
    "LIST": LIST,
    "RESTORE": RESTORE,
    "CONFIG": CONFIG,
    "LED": SET_LED,
    "UPDATE": UPDATE_GAIN,
}

_LED_ON = frozenset({"TRUE", "ON", "1"})
_LED_OFF = frozenset({"FALSE", "OFF", "0"})


class _TokenStream:
    def __init__(self, tokens: Sequence[str]) -> None:
        self._tokens = list(tokens)
        self._cursor = 0

    def __bool__(self) -> bool:
        return self._cursor < len(self._tokens)

    def next(self) -> str:
        token = self._tokens[self._cursor]
        self._cursor += 1
        return token

    def value_for(self, keyword: str) -> str:
        if not self:
            raise ArgumentParseError(f"{keyword} requires a value")
        return self.next()


@dataclass
class _ParseState:
    operation: str
    settings: ConfigSettings = DEFAULT_SETTINGS
    serials: list[str] = field(default_factory=list)
    filter_type: str = NO_FILTER

    def update(self, **changes: object) -> None:
        self.settings = replace(self.settings, **changes)

    def freeze(self) -> OperationRequest:
        return OperationRequest(
            operation=self.operation,
            settings=self.settings,
            serials=tuple(self.serials),
            filter_type=self.filter_type,
        )


def _parse_number(token: str, *, keyword: str) -> int:
    if not _NUMBER_RE.fullmatch(token):
        raise ArgumentParseError(f"{keyword} expects a non-negative integer, got '{token}'")
    return int(token)


def _parse_filter_frequency(stream: _TokenStream, keyword: str) -> int:
    frequency = _parse_number(stream.value_for(keyword), keyword=keyword)
    if frequency > MAXIMUM_FILTER_FREQUENCY or frequency % FILTER_FREQ_MULTIPLIER != 0:
        raise ArgumentParseError(
            f"{keyword} frequency must be a multiple of {FILTER_FREQ_MULTIPLIER} "
            f"no greater than {MAXIMUM_FILTER_FREQUENCY}, got {frequency}"
        )
    return frequency // FILTER_FREQ_MULTIPLIER


def _claim_filter(state: _ParseState, filter_type: str, keyword: str) -> None:
    if state.filter_type != NO_FILTER:
        raise ArgumentParseError(f"{keyword} cannot be combined with an existing {state.filter_type} filter")
    state.filter_type = filter_type


def _gain(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    gain = _parse_number(stream.value_for(keyword), keyword=keyword)
    if gain > MAXIMUM_GAIN:
        raise ArgumentParseError(f"{keyword} must be between 0 and {MAXIMUM_GAIN}, got {gain}")
    state.update(gain=gain)


def _low_pass(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    _claim_filter(state, LOW_PASS_FILTER, keyword)
    higher = _parse_filter_frequency(stream, keyword)
    state.update(lower_filter_freq=UNBOUNDED_FILTER_FREQ, higher_filter_freq=higher)


def _high_pass(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    _claim_filter(state, HIGH_PASS_FILTER, keyword)
    lower = _parse_filter_frequency(stream, keyword)
    state.update(lower_filter_freq=lower, higher_filter_freq=UNBOUNDED_FILTER_FREQ)


def _band_pass(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    _claim_filter(state, BAND_PASS_FILTER, keyword)
    lower = _parse_filter_frequency(stream, keyword)
    higher = _parse_filter_frequency(stream, keyword)
    state.update(lower_filter_freq=lower, higher_filter_freq=higher)


def _low_gain_range(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    state.update(low_gain_range=True)


def _energy_saver_mode(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    state.update(energy_saver_mode=True)


def _disable_48hz(state: _ParseState, stream: _TokenStream, keyword: str) -> None:
    state.update(disable_48hz_dc_blocking_filter=True)


_Rule = Callable[[_ParseState, _TokenStream, str], None]

_KEYWORD_RULES: tuple[tuple[frozenset[str], frozenset[str], _Rule], ...] = (
    (frozenset({"GAIN", "G"}), frozenset({CONFIG, UPDATE_GAIN}), _gain),
    (frozenset({"LOWPASSFILTER", "LPF"}), frozenset({CONFIG}), _low_pass),
    (frozenset({"HIGHPASSFILTER", "HPF"}), frozenset({CONFIG}), _high_pass),
    (frozenset({"BANDPASSFILTER", "BPF"}), frozenset({CONFIG}), _band_pass),
    (frozenset({"LOWGAINRANGE", "LGR"}), frozenset({CONFIG, UPDATE_GAIN}), _low_gain_range),
    (frozenset({"ENERGYSAVERMODE", "ESM"}), frozenset({CONFIG}), _energy_saver_mode),
    (frozenset({"DISABLE48HZ", "D48"}), frozenset({CONFIG}), _disable_48hz),
)


def _consume(state: _ParseState, stream: _TokenStream) -> None:
    token = stream.next()
    keyword = token.upper()

    if state.operation != LIST and _SERIAL_RE.fullmatch(keyword):
        state.serials.append(keyword)
        return

    if state.operation == CONFIG and _NUMBER_RE.fullmatch(token) and int(token) in SAMPLE_RATES:
        sample_rate, divider = SAMPLE_RATES[int(token)]
        state.update(sample_rate=sample_rate, sample_rate_divider=divider)
        return

    for names, operations, rule in _KEYWORD_RULES:
        if keyword in names and state.operation in operations:
            rule(state, stream, keyword)
            return

    raise ArgumentParseError(f"Unexpected argument '{token}' for {state.operation.upper()}")


def _parse_led_value(stream: _TokenStream) -> bool:
    """Return the disable_led flag for the LED operation's required boolean."""
    token = stream.value_for("LED")
    value = token.upper()
    if value in _LED_ON:
        return False
    if value in _LED_OFF:
        return True
    raise ArgumentParseError(f"LED expects one of TRUE, FALSE, ON, OFF, 1, 0, got '{token}'")


def parse_arguments(tokens: Sequence[str]) -> OperationRequest:
    """Turn command-line tokens into a frozen, validated OperationRequest."""
    stream = _TokenStream(tokens)
    if not stream:
        raise ArgumentParseError("No operation given. Expected one of: " + ", ".join(_OPERATIONS))

    first = stream.next()
    operation = _OPERATIONS.get(first.upper())
    if operation is None:
        raise ArgumentParseError(
            f"Unknown operation '{first}'. Expected one of: " + ", ".join(_OPERATIONS)
        )

    state = _ParseState(operation=operation)
    if operation == SET_LED:
        state.update(disable_led=_parse_led_value(stream))

    while stream:
        _consume(state, stream)

    request = state.freeze()
    validate_request(request)
    return request


def validate_request(request: OperationRequest) -> None:
    """Check filter ordering, Nyquist limits and duplicate serial IDs."""
    settings = request.settings
    lower = settings.lower_filter_freq
    higher = settings.higher_filter_freq

    if request.filter_type == BAND_PASS_FILTER and lower >= higher:
        raise ValidationError("Band-pass lower frequency is not less than higher frequency.")

    nyquist = nyquist_frequency(settings)
    if request.filter_type == LOW_PASS_FILTER and higher > nyquist:
        raise ValidationError("Low-pass frequency is not compatible with sample rate.")
    if request.filter_type == HIGH_PASS_FILTER and lower > nyquist:
        raise ValidationError("High-pass frequency is not compatible with sample rate.")
    if request.filter_type == BAND_PASS_FILTER:
        if lower > nyquist:
            raise ValidationError("Band-pass lower frequency is not compatible with sample rate.")
        if higher > nyquist:
            raise ValidationError("Band-pass higher frequency is not compatible with sample rate.")

    seen: set[str] = set()
    for serial in request.serials:
        if serial in seen:
            raise ValidationError(f"Repeated device ID {serial}.")
        seen.add(serial)
