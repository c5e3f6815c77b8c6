"""Exceptions raised inside vision providers.

None of these escape :class:`pantry.gateway.VisionAnalysisGateway`; providers
turn them into :class:`pantry.vision.ProviderFailure` values.
"""

from __future__ import annotations


class VisionError(Exception):
    """Base class for provider-level failures."""


class ProviderNotConfigured(VisionError):
    """The provider has no credential and was skipped."""


class ProviderTransportError(VisionError):
    """Network failure or non-2xx response from the provider."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(VisionError):
    """The provider answered, but not with a usable JSON item array."""

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text
