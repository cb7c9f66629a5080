"""
Network configuration for the Safe transaction SDK.

Known deployments are bundled in networks.json. The MultiSend address can
be overridden with the SAFETX_MULTISEND_ADDRESS environment variable.
"""
import json
import os
import importlib.resources
from typing import Any, Dict, Optional, Union

from .utils import to_checksum_address

MULTISEND_ENV_VAR = "SAFETX_MULTISEND_ADDRESS"


class NetworkConfig:
    """Registry of known networks and their Safe library deployments"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the bundled network registry, cached after the first call.

        Returns:
            Mapping of network name to configuration
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("safetx_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: Union[str, int]) -> Dict[str, Any]:
        """
        Get the configuration of a network by name or chain id.

        Raises:
            ValueError: If the network is not known
        """
        networks = cls.load_networks()
        if isinstance(network, str) and network in networks:
            return networks[network]
        if isinstance(network, int) or (isinstance(network, str) and network.isdigit()):
            chain_id = int(network)
            for config in networks.values():
                if config.get("chainId") == chain_id:
                    return config
        available = ", ".join(sorted(networks.keys()))
        raise ValueError(f"Network '{network}' not found. Available networks: {available}")

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Get the RPC URL for a network.

        Priority: override, <NETWORK>_RPC_URL environment variable, registry.
        """
        if override:
            return override
        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        if os.environ.get(env_var):
            return os.environ[env_var]
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_multi_send_address(cls, network: Union[str, int], override: Optional[str] = None) -> str:
        """
        Get the MultiSend address for a network.

        Priority: override, SAFETX_MULTISEND_ADDRESS environment variable,
        registry.

        Raises:
            ValueError: If the network is unknown or has no MultiSend entry
            InvalidAddress: If the resolved address is invalid
        """
        address = override or os.environ.get(MULTISEND_ENV_VAR)
        if not address:
            address = cls.get_network(network).get("multiSend")
        if not address:
            raise ValueError(f"No MultiSend deployment known for network '{network}'")
        return to_checksum_address(address)
