"""
Tests for deployment mutation and id computation.
"""
import hashlib

import pytest

from deploy_signer.codec import decode, require_deploy
from deploy_signer.deployment import (
    deployment_id, program_checksum, program_id, recompute_checksum, set_owner,
)
from deploy_signer.exceptions import AssemblyError
from deploy_signer.identity import derive_address
from deploy_signer.network import CANARY, MAINNET, TESTNET
from deploy_signer.identity.ec_constants import FIELD_MODULUS


@pytest.fixture
def deployment(deploy_json):
    deployment, _ = require_deploy(decode(deploy_json))
    return deployment


@pytest.fixture
def owned_deployment(deployment, admin_address):
    return recompute_checksum(set_owner(deployment, admin_address))


def test_program_checksum_format():
    checksum = program_checksum("program a.aleo;")
    digest = hashlib.sha3_256(b"program a.aleo;").digest()

    assert checksum.startswith("[") and checksum.endswith("]")
    items = checksum[1:-1].split(", ")
    assert len(items) == 32
    assert items == [f"{b}u8" for b in digest]


def test_program_id(deployment):
    assert program_id(deployment) == "helloworld.aleo"


def test_program_id_missing_header(deployment):
    with pytest.raises(AssemblyError):
        program_id(deployment.model_copy(update={"program": "function main:\n"}))


def test_set_owner_returns_copy(deployment, admin_key):
    """set_owner leaves the original deployment untouched"""
    address = derive_address(admin_key)
    updated = set_owner(deployment, address)

    assert updated.program_owner == address.value
    assert deployment.program_owner is None


def test_set_owner_overwrites(deployment, admin_address, fee_key):
    other = derive_address(fee_key).value
    updated = set_owner(set_owner(deployment, other), admin_address)

    assert updated.program_owner == admin_address


def test_recompute_checksum(deployment):
    updated = recompute_checksum(deployment)

    assert updated.program_checksum == program_checksum(deployment.program)
    assert deployment.program_checksum is None


def test_recompute_checksum_replaces_stale(deployment):
    stale = deployment.model_copy(update={"program_checksum": "[0u8]"})
    assert recompute_checksum(stale).program_checksum == program_checksum(deployment.program)


def test_deployment_id_requires_owner_and_checksum(deployment, admin_address):
    with pytest.raises(AssemblyError) as exc_info:
        deployment_id(deployment, TESTNET)
    assert exc_info.value.stage == "deployment_id"

    with pytest.raises(AssemblyError):
        deployment_id(set_owner(deployment, admin_address), TESTNET)
    with pytest.raises(AssemblyError):
        deployment_id(recompute_checksum(deployment), TESTNET)


def test_deployment_id_format(owned_deployment):
    deploy_id = deployment_id(owned_deployment, TESTNET)

    assert deploy_id.endswith("field")
    assert 0 <= int(deploy_id[:-len("field")]) < FIELD_MODULUS


def test_deployment_id_deterministic(owned_deployment):
    assert deployment_id(owned_deployment, TESTNET) == deployment_id(owned_deployment, TESTNET)


def test_deployment_id_depends_on_owner(owned_deployment, fee_key):
    other = set_owner(owned_deployment, derive_address(fee_key))
    assert deployment_id(other, TESTNET) != deployment_id(owned_deployment, TESTNET)


def test_deployment_id_depends_on_program(owned_deployment):
    changed = recompute_checksum(
        owned_deployment.model_copy(update={"program": owned_deployment.program + "\n"})
    )
    assert deployment_id(changed, TESTNET) != deployment_id(owned_deployment, TESTNET)


def test_deployment_id_depends_on_edition(owned_deployment):
    changed = owned_deployment.model_copy(update={"edition": 1})
    assert deployment_id(changed, TESTNET) != deployment_id(owned_deployment, TESTNET)


def test_deployment_id_depends_on_network(owned_deployment):
    ids = {deployment_id(owned_deployment, network) for network in (MAINNET, TESTNET, CANARY)}
    assert len(ids) == 3
