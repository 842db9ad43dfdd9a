"""
Relayer module for the SmartWallet SDK.

This module provides the transports that carry wallet API requests
(prepare, send, status) to the relaying service.
"""
from .exceptions import (
    RelayerError, RelayerConnectionError, RelayerResponseError, RelayerTimeoutError
)
from .transport import RelayerTransport, get_transport, get_http_transport, get_stub_transport

__all__ = [
    'RelayerTransport',
    'RelayerError',
    'RelayerConnectionError',
    'RelayerResponseError',
    'RelayerTimeoutError',
    'get_transport',
    'get_http_transport',
    'get_stub_transport',
]
