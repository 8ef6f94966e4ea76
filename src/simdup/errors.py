from __future__ import annotations


class SimdupError(Exception):
    """Base class for every error raised by simdup."""


class InvalidConfiguration(SimdupError, ValueError):
    """A window size, threshold, key or option value is not usable."""


class KeyNotFound(SimdupError, KeyError):
    """No bucket of a SimDict lies within ``max_diff`` of the key."""

    def __init__(self, key: object) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"no near-duplicate bucket for key {self.key!r}"


class MalformedText(SimdupError, ValueError):
    """Input is not valid UTF-8 text where a text-based feature mode needs it."""
