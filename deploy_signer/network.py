"""
Network parameter profiles.

A profile is read-only configuration shared by every invocation. Its id is
mixed into every hash and signature so that artifacts produced for one
network never validate on another.
"""
import os
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .exceptions import NetworkSelectionError

logger = logging.getLogger(__name__)

NETWORK_ENV_VAR = "DEPLOY_SIGNER_NETWORK"


@dataclass(frozen=True)
class NetworkProfile:
    """
    Parameters for one network.

    Attributes:
        id: Numeric network selector (0=mainnet, 1=testnet, 2=canary)
        name: Human readable name
    """
    id: int
    name: str

    @property
    def domain(self) -> bytes:
        """Domain separator prepended to hashed and signed messages"""
        return f"aleo-{self.name}-{self.id}:".encode("ascii")


MAINNET = NetworkProfile(id=0, name="mainnet")
TESTNET = NetworkProfile(id=1, name="testnet")
CANARY = NetworkProfile(id=2, name="canary")

NETWORKS: Dict[int, NetworkProfile] = {n.id: n for n in (MAINNET, TESTNET, CANARY)}


def get_network(selector: Union[int, str, NetworkProfile]) -> NetworkProfile:
    """
    Resolve a network selector to its profile.

    Args:
        selector: A profile, its numeric id, or its id/name as a string

    Returns:
        The matching NetworkProfile

    Raises:
        NetworkSelectionError: If no profile matches
    """
    if isinstance(selector, NetworkProfile):
        return selector

    if isinstance(selector, str):
        value = selector.strip().lower()
        for network in NETWORKS.values():
            if value == network.name:
                return network
        try:
            selector = int(value)
        except ValueError:
            raise NetworkSelectionError(f"Invalid network: {selector!r}")

    # bool is an int subclass; True/False are not network ids
    if isinstance(selector, bool) or not isinstance(selector, int):
        raise NetworkSelectionError(f"Invalid network: {selector!r}")

    network = NETWORKS.get(selector)
    if network is None:
        raise NetworkSelectionError(f"Invalid network: {selector}")
    return network


def network_from_env(default: Optional[NetworkProfile] = None) -> Optional[NetworkProfile]:
    """
    Read the network profile from DEPLOY_SIGNER_NETWORK.

    Args:
        default: Returned when the variable is unset or empty

    Returns:
        The configured profile, or default
    """
    value = os.environ.get(NETWORK_ENV_VAR)
    if not value:
        return default
    network = get_network(value)
    logger.debug("Using network %s from %s", network.name, NETWORK_ENV_VAR)
    return network
