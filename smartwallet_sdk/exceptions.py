"""
Exceptions for the SmartWallet SDK.
"""
from typing import Optional, Union


class SmartWalletError(Exception):
    """Base exception for all SmartWallet SDK errors."""

    step: Optional[str] = None

    def __init__(self, message: str, code: Optional[Union[int, str]] = None):
        self.code = code
        super().__init__(message)


class ConfigurationError(SmartWalletError):
    """Raised when required configuration is missing or invalid."""
    step = "configuration"


class EncodingError(SmartWalletError, ValueError):
    """Raised when a function signature or its arguments cannot be encoded."""
    step = "encoding"


class PreparationError(SmartWalletError):
    """Raised when the relayer fails to prepare a batch of calls."""
    step = "prepare"


class SigningError(SmartWalletError):
    """Raised when a prepared unit cannot be signed."""
    step = "sign"


class SubmissionError(SmartWalletError):
    """Raised when signed calls cannot be submitted to the relayer."""
    step = "submit"


class PollError(SmartWalletError):
    """
    Raised when a call reaches a terminal non-success status.

    The ``code`` attribute carries the status code returned by the relayer,
    or None when the status could not be fetched at all.
    """
    step = "poll"


class PollTimeoutError(PollError, TimeoutError):
    """Raised when polling exceeds its deadline before a terminal status."""


class PollCancelledError(PollError):
    """Raised when polling is cancelled through its cancellation event."""
