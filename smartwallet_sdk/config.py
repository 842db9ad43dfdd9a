"""
Configuration for the SmartWallet SDK.

Configuration is loaded once, at process start, into a ``WalletConfig`` that
is passed explicitly to every component.
"""
import importlib.resources
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

POLICY_ID_ENV = "GAS_MANAGER_POLICY_ID"
API_KEY_ENV = "ALCHEMY_API_KEY"
NETWORK_ENV = "SMART_WALLET_NETWORK"
RELAYER_URL_ENV = "SMART_WALLET_RELAYER_URL"
POLL_INTERVAL_ENV = "SMART_WALLET_POLL_INTERVAL"
POLL_TIMEOUT_ENV = "SMART_WALLET_POLL_TIMEOUT"

DEFAULT_NETWORK = "base-sepolia"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_POLL_TIMEOUT = 300.0


class NetworkConfig:
    """Static network metadata bundled with the package."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network configurations from the bundled networks.json.

        Returns:
            Dictionary of network configurations keyed by network name
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        text = importlib.resources.files("smartwallet_sdk").joinpath("networks.json").read_text()
        cls._networks_cache = json.loads(text)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get configuration for a specific network.

        Raises:
            ConfigurationError: If the network is not found
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigurationError(f"Network '{network}' not found. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_relayer_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Get the relayer URL for a network.

        An explicit override wins over the bundled value.
        """
        if override:
            return override
        return cls.get_network(network)["relayerUrl"]

    @classmethod
    def get_explorer_url(cls, network: str) -> str:
        return cls.get_network(network)["explorer"]


@dataclass(frozen=True)
class WalletConfig:
    """
    Process-wide settings for talking to the relaying service.

    Attributes:
        policy_id: Gas-sponsorship policy identifier
        api_key: Relaying service access credential
        network: Name of the network in networks.json
        chain_id: Chain id sent with every prepare request
        relayer_url: Wallet API URL (the API key is sent as a bearer token)
        explorer_base_url: Prefix for transaction explorer links
        poll_interval: Seconds between status queries while pending
        poll_timeout: Deadline in seconds for a single poll, None for no deadline
        retry_count: Connection-level HTTP retries
        timeout: Per-request HTTP timeout in seconds
    """
    policy_id: str
    api_key: str
    network: str = DEFAULT_NETWORK
    chain_id: int = 84532
    relayer_url: str = "https://api.g.alchemy.com/v2"
    explorer_base_url: str = "https://sepolia.basescan.org/tx/"
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: Optional[float] = DEFAULT_POLL_TIMEOUT
    retry_count: int = 3
    timeout: int = 30

    def __post_init__(self):
        if not self.policy_id:
            raise ConfigurationError(f"{POLICY_ID_ENV} is required")
        if not self.api_key:
            raise ConfigurationError(f"{API_KEY_ENV} is required")
        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.poll_timeout is not None and self.poll_timeout <= 0:
            raise ConfigurationError(f"poll_timeout must be positive, got {self.poll_timeout}")

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        network: Optional[str] = None
    ) -> "WalletConfig":
        """
        Build the configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            network: Network name override

        Returns:
            WalletConfig instance

        Raises:
            ConfigurationError: If GAS_MANAGER_POLICY_ID or ALCHEMY_API_KEY is
                missing, or an optional value cannot be parsed
        """
        env = os.environ if environ is None else environ

        policy_id = env.get(POLICY_ID_ENV)
        if not policy_id:
            raise ConfigurationError(f"{POLICY_ID_ENV} environment variable is required")
        api_key = env.get(API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(f"{API_KEY_ENV} environment variable is required")

        network = network or env.get(NETWORK_ENV) or DEFAULT_NETWORK
        net = NetworkConfig.get_network(network)

        try:
            poll_interval = float(env.get(POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL))
            raw_timeout = env.get(POLL_TIMEOUT_ENV)
            if raw_timeout is None:
                poll_timeout: Optional[float] = DEFAULT_POLL_TIMEOUT
            elif raw_timeout.lower() in ("", "0", "none"):
                poll_timeout = None
            else:
                poll_timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(f"Invalid polling configuration: {e}") from e

        config = cls(
            policy_id=policy_id,
            api_key=api_key,
            network=network,
            chain_id=int(net["chainId"]),
            relayer_url=NetworkConfig.get_relayer_url(network, override=env.get(RELAYER_URL_ENV)),
            explorer_base_url=net["explorer"],
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
        )
        logger.debug(f"Loaded configuration for network {network} (chain id {config.chain_id})")
        return config
