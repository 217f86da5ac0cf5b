"""Domain-specific errors for mothctl."""


class MothctlError(Exception):
    """Base error for mothctl."""


class ArgumentParseError(MothctlError):
    """Raised when the command-line tokens do not follow the grammar."""


class ValidationError(MothctlError):
    """Raised when parsed settings or serial IDs are inconsistent."""


class ProfileValidationError(MothctlError):
    """Raised when a device profile does not conform to schema or semantics."""


class ProfileLoadError(MothctlError):
    """Raised when loading profile sources fails."""


class DeviceDiscoveryError(MothctlError):
    """Raised when HID enumeration fails."""


class DeviceNotFoundError(MothctlError):
    """Raised when a requested device ID is not attached."""


class NonConformingDeviceError(MothctlError):
    """Raised when a serial descriptor does not have the expected format."""


class TransportError(MothctlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when a HID device path cannot be opened."""


class CommunicationError(TransportError):
    """Raised on write failures, read timeouts, short reads or echo mismatches."""
