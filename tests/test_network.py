"""
Tests for network profile selection.
"""
import dataclasses

import pytest

from deploy_signer.exceptions import NetworkSelectionError
from deploy_signer.network import (
    CANARY, MAINNET, NETWORK_ENV_VAR, NETWORKS, TESTNET, NetworkProfile,
    get_network, network_from_env,
)


@pytest.mark.parametrize("selector,expected", [
    (0, MAINNET),
    (1, TESTNET),
    (2, CANARY),
    ("0", MAINNET),
    (" 1 ", TESTNET),
    ("2", CANARY),
    ("mainnet", MAINNET),
    ("TestNet", TESTNET),
    ("canary", CANARY),
    (TESTNET, TESTNET),
])
def test_get_network(selector, expected):
    assert get_network(selector) is expected


@pytest.mark.parametrize("selector", [3, -1, "3", "devnet", "", True, 1.0, None])
def test_get_network_invalid(selector):
    with pytest.raises(NetworkSelectionError, match="Invalid network"):
        get_network(selector)


def test_network_error_stage():
    with pytest.raises(NetworkSelectionError) as exc_info:
        get_network(9)
    assert exc_info.value.stage == "config"


def test_networks_registry():
    assert set(NETWORKS) == {0, 1, 2}
    assert all(isinstance(n, NetworkProfile) for n in NETWORKS.values())


def test_domains_are_distinct():
    domains = {network.domain for network in NETWORKS.values()}
    assert len(domains) == len(NETWORKS)
    assert TESTNET.domain == b"aleo-testnet-1:"


def test_profiles_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        TESTNET.id = 5


def test_network_from_env(monkeypatch):
    monkeypatch.delenv(NETWORK_ENV_VAR, raising=False)
    assert network_from_env() is None
    assert network_from_env(default=MAINNET) is MAINNET

    monkeypatch.setenv(NETWORK_ENV_VAR, "2")
    assert network_from_env() is CANARY

    monkeypatch.setenv(NETWORK_ENV_VAR, "bogus")
    with pytest.raises(NetworkSelectionError):
        network_from_env()
