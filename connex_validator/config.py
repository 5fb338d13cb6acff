"""
Configuration for the connex-validator package.

Validation defaults come from environment variables and are read on every
call; network constants come from the packaged networks.json.
"""
import os
import json
import logging
import importlib.resources
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

ENV_STRICT = "CONNEX_VALIDATOR_STRICT"
ENV_AGGREGATE = "CONNEX_VALIDATOR_AGGREGATE"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Unknown value for {name}: {raw}, defaulting to {default}")
    return default


class ValidatorConfig:
    """
    Environment-driven validation defaults.

    CONNEX_VALIDATOR_STRICT: reject keys a schema does not declare (default on)
    CONNEX_VALIDATOR_AGGREGATE: collect all violations (default off)
    """

    DEFAULT_STRICT = True
    DEFAULT_AGGREGATE = False

    @classmethod
    def strict(cls) -> bool:
        return _env_flag(ENV_STRICT, cls.DEFAULT_STRICT)

    @classmethod
    def aggregate(cls) -> bool:
        return _env_flag(ENV_AGGREGATE, cls.DEFAULT_AGGREGATE)


class NetworkConfig:
    """Known Thor networks and their genesis constants."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("connex_validator").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug("Loaded %d network definitions", len(cls._networks_cache))
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get configuration for a named network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network: {network}. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_genesis_id(cls, network: str) -> str:
        return cls.get_network(network)["genesisId"]

    @classmethod
    def get_chain_tag(cls, network: str) -> int:
        return cls.get_network(network)["chainTag"]
