"""
Transport layer for the relaying service.

This module provides an abstraction over how wallet API requests reach the
relaying service, with an HTTP JSON-RPC implementation and an in-memory stub
used for development and tests.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RelayerTransport(ABC):
    """
    Abstract base class for relayer transport implementations.

    Every method maps one-to-one onto a wallet API JSON-RPC method and returns
    the decoded ``result`` member of the response.
    """

    @abstractmethod
    def request_account(self, signer_address: str) -> Dict[str, Any]:
        """
        Look up (or create) the smart-wallet account owned by a signer.

        Raises:
            RelayerError: If the request fails
        """
        pass

    @abstractmethod
    def prepare_calls(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Prepare a batch of calls for signing.

        Args:
            request: The ``wallet_prepareCalls`` parameter object

        Raises:
            RelayerError: If the request fails
        """
        pass

    @abstractmethod
    def send_prepared_calls(self, signed: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit signed calls.

        Raises:
            RelayerError: If the request fails
        """
        pass

    @abstractmethod
    def get_calls_status(self, call_id: str) -> Dict[str, Any]:
        """
        Fetch the status of a submitted call id.

        Raises:
            RelayerError: If the request fails
        """
        pass

    def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_http_transport(
    relayer_url: str,
    api_key: str,
    retry_count: int = 3,
    timeout: int = 30,
    logger_instance: Optional[logging.Logger] = None
) -> RelayerTransport:
    """
    Get the HTTP JSON-RPC transport for a relayer endpoint.

    Returns:
        HTTP transport implementation
    """
    from .http_transport import HttpTransport
    return HttpTransport(
        relayer_url,
        api_key,
        retry_count=retry_count,
        timeout=timeout,
        logger=logger_instance
    )


def get_stub_transport(statuses: Optional[List[int]] = None) -> RelayerTransport:
    """
    Get an in-memory stub transport.

    This always returns a valid transport since the stub implementation
    has no network dependencies.

    Args:
        statuses: Scripted status codes returned by successive status queries

    Returns:
        Stub-based transport implementation
    """
    from .stub_transport import StubTransport
    return StubTransport(statuses=statuses)


def get_transport(config, dry_run: bool = False) -> RelayerTransport:
    """
    Get the transport matching a wallet configuration.

    Args:
        config: WalletConfig instance
        dry_run: Use the in-memory stub instead of the network

    Returns:
        Transport implementation

    Raises:
        ConfigurationError: If the configured relayer URL is not acceptable
    """
    if dry_run:
        logger.info("Using stub transport for relayer (dry run)")
        return get_stub_transport()

    logger.info("Using HTTP transport for relayer")
    try:
        return get_http_transport(
            config.relayer_url,
            config.api_key,
            retry_count=config.retry_count,
            timeout=config.timeout
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
