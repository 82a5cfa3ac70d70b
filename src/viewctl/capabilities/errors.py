"""Shared error types for the capability providers."""


class CapabilityError(Exception):
    """Base error for all device-level failures."""


class CapabilityUnavailableError(CapabilityError):
    """The input/display backend could not be loaded (e.g. no display)."""


class ScreenCaptureError(CapabilityError):
    """A screenshot could not be taken or written to disk."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Screen capture failed" + (f": {detail}" if detail else ""))
