"""
Exception hierarchy for the matching pipeline.

Configuration and source-image failures abort a run; template failures are
collected per template by the orchestrator.
"""


class TolmatchError(Exception):
    """Base exception for all matching errors."""


class ConfigurationError(TolmatchError, ValueError):
    """Invalid paths, search zone or matching parameters."""


class ImageDecodeError(TolmatchError):
    """An image file could not be decoded."""

    def __init__(self, path, reason: str = "unable to decode image") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class MatchCancelledError(TolmatchError):
    """A search was stopped through its cancellation event."""
