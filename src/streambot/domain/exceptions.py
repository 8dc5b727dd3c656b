"""Stream resolution exceptions."""

from __future__ import annotations


class StreamBotError(Exception):
    """Base class for all stream routing errors."""


class InvalidStreamTargetError(StreamBotError):
    """Raised when a request is missing ids or carries malformed ones."""


class UnsupportedMediaTypeError(InvalidStreamTargetError):
    """Raised when the media type is neither ``movie`` nor ``tv``."""


class UnknownProviderError(StreamBotError):
    """Raised when a provider slug is not known to the registry."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Unsupported provider: {slug}")
        self.slug = slug
