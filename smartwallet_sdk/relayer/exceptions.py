"""
Exceptions for the relayer module.
"""
from typing import Optional, Union


class RelayerError(Exception):
    """Base exception for relayer-related errors."""
    pass


class RelayerConnectionError(RelayerError):
    """Raised when connection to the relaying service fails."""
    pass


class RelayerResponseError(RelayerError):
    """Raised when the relaying service returns an error response."""

    def __init__(self, message: str, error_code: Optional[Union[int, str]] = None):
        self.error_code = error_code
        super().__init__(message)


class RelayerTimeoutError(RelayerError):
    """Raised when a relayer request times out."""
    pass
