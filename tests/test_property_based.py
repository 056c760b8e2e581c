"""
Property-based tests for the deployment signer.

These tests verify that properties hold true across many random inputs.
"""
import json
import random

from hypothesis import given, settings, strategies as st

from deploy_signer import encode, sign_deployment
from deploy_signer.deployment import deployment_id, program_checksum
from deploy_signer.identity import derive_address, parse_private_key, private_key_from_seed
from deploy_signer.identity.ec_constants import U64_MAX
from deploy_signer.network import NETWORKS
from conftest import ADMIN_SEED, load_deploy_json

# Loaded once; hypothesis does not mix with function-scoped fixtures
DEPLOY_RECORD = json.loads(load_deploy_json())
ADMIN_KEY = private_key_from_seed(ADMIN_SEED)

seed_strategy = st.binary(min_size=32, max_size=32)
amount_strategy = st.integers(min_value=0, max_value=U64_MAX // 2)
network_strategy = st.sampled_from(sorted(NETWORKS))


def _with_amounts(base_amount: int, priority_amount: int) -> str:
    record = json.loads(json.dumps(DEPLOY_RECORD))
    inputs = record["fee"]["transition"]["inputs"]
    inputs[0]["value"] = f"{base_amount}u64"
    inputs[1]["value"] = f"{priority_amount}u64"
    return json.dumps(record)


@settings(max_examples=25, deadline=None)
@given(base_amount=amount_strategy, priority_amount=amount_strategy)
def test_fee_amounts_preserved(base_amount, priority_amount):
    """Any pair of u64 amounts survives re-authorization unchanged"""
    tx = sign_deployment(_with_amounts(base_amount, priority_amount), ADMIN_KEY)

    assert tx.fee.base_amount == base_amount
    assert tx.fee.priority_amount == priority_amount
    assert f"{base_amount + priority_amount}u64" in tx.fee.transition.outputs[0].value


@settings(max_examples=25, deadline=None)
@given(seed=seed_strategy)
def test_key_round_trip(seed):
    """Encoding a key and parsing it back yields the same key and address"""
    key = private_key_from_seed(seed)
    parsed = parse_private_key(str(key))

    assert parsed == key
    assert derive_address(parsed) == derive_address(key)


@settings(max_examples=15, deadline=None)
@given(seed=seed_strategy, network_id=network_strategy)
def test_owner_is_admin_address(seed, network_id):
    """Whatever the admin key, it becomes the program owner"""
    key = private_key_from_seed(seed)
    tx = sign_deployment(json.dumps(DEPLOY_RECORD), key, network=network_id)

    assert tx.deployment.program_owner == derive_address(key).value
    assert tx.deployment.program_checksum == program_checksum(tx.deployment.program)
    assert tx.fee.deployment_id == deployment_id(tx.deployment, NETWORKS[network_id])


@settings(max_examples=10, deadline=None)
@given(rng_seed=st.integers(min_value=0, max_value=2**32))
def test_seeded_runs_are_reproducible(rng_seed):
    tx1 = sign_deployment(json.dumps(DEPLOY_RECORD), ADMIN_KEY, rng=random.Random(rng_seed).randbytes)
    tx2 = sign_deployment(json.dumps(DEPLOY_RECORD), ADMIN_KEY, rng=random.Random(rng_seed).randbytes)

    assert encode(tx1) == encode(tx2)
