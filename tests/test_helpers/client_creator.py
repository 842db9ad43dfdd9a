"""
Utility functions for creating test clients with consistent defaults.
"""
from typing import Optional

from smartwallet_sdk.client import SmartWalletClient
from smartwallet_sdk.config import WalletConfig
from smartwallet_sdk.relayer.transport import RelayerTransport
from smartwallet_sdk.signer.local import LocalSigner

# Test constants used throughout tests
TEST_API_KEY = "test-api-key"
TEST_POLICY_ID = "11111111-2222-3333-4444-555555555555"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_RELAYER_URL = "https://relayer.example.com/v2"
TEST_ENDPOINT = TEST_RELAYER_URL
TEST_ACCOUNT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
TEST_TOKEN = "0xCFf7C6dA719408113DFcb5e36182c6d5aa491443"
TEST_DESTINATION = "0x1234123412341234123412341234123412341234"


def create_test_config(**overrides) -> WalletConfig:
    """
    Create a WalletConfig for tests without reading the environment.

    Polling uses a short interval and no deadline unless overridden.
    """
    values = dict(
        policy_id=TEST_POLICY_ID,
        api_key=TEST_API_KEY,
        chain_id=84532,
        relayer_url=TEST_RELAYER_URL,
        explorer_base_url="https://sepolia.basescan.org/tx/",
        poll_interval=0.01,
        poll_timeout=None,
        retry_count=0,
        timeout=5,
    )
    values.update(overrides)
    return WalletConfig(**values)


def create_test_client(
    transport: Optional[RelayerTransport] = None,
    priv_key: Optional[str] = TEST_PRIV_KEY,
    signer=None,
    config: Optional[WalletConfig] = None,
) -> SmartWalletClient:
    """
    Create a client instance for testing.

    Args:
        transport: Relayer transport; defaults to HTTP against TEST_RELAYER_URL
        priv_key: Private key for a LocalSigner when no signer is given
        signer: Signer instance
        config: WalletConfig; defaults to create_test_config()

    Returns:
        Configured SmartWalletClient instance
    """
    if signer is None and priv_key:
        signer = LocalSigner(priv_key)
    return SmartWalletClient(
        config or create_test_config(),
        signer=signer,
        transport=transport,
    )
