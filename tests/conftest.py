"""
Pytest fixtures for the deployment signer tests.
"""
import copy
import json
from pathlib import Path

import pytest

from deploy_signer.identity import derive_address, private_key_from_seed

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Deterministic test keys
ADMIN_SEED = bytes(range(32))
FEE_SEED = bytes(range(32, 64))

# Amounts carried by the fixture's public fee
FIXTURE_BASE_AMOUNT = 3000000
FIXTURE_PRIORITY_AMOUNT = 0

TRANSFER_JSON = '{"type": "transfer", "data": "test"}'


def load_deploy_json() -> str:
    """Deployment transaction with a public fee, as JSON text"""
    return (FIXTURES_DIR / "deploy_transaction.json").read_text(encoding="utf-8")


def make_private_fee_record(record: dict) -> dict:
    """Turn a deploy record's public fee into a private one"""
    record = copy.deepcopy(record)
    transition = record["fee"]["transition"]
    transition["function"] = "fee_private"
    transition["inputs"].insert(0, {
        "type": "record",
        "id": "1234567890field",
        "tag": "987654321field",
    })
    return record


@pytest.fixture
def deploy_json():
    """The deployment transaction fixture as JSON text"""
    return load_deploy_json()


@pytest.fixture
def deploy_record(deploy_json):
    """The deployment transaction fixture as a dictionary"""
    return json.loads(deploy_json)


@pytest.fixture
def private_fee_json(deploy_record):
    """A deployment transaction whose fee is private"""
    return json.dumps(make_private_fee_record(deploy_record))


@pytest.fixture
def transfer_json():
    """A record that decodes but is not a deployment"""
    return TRANSFER_JSON


@pytest.fixture
def admin_key():
    return private_key_from_seed(ADMIN_SEED)


@pytest.fixture
def admin_key_text(admin_key):
    return str(admin_key)


@pytest.fixture
def admin_address(admin_key):
    return derive_address(admin_key).value


@pytest.fixture
def fee_key():
    return private_key_from_seed(FEE_SEED)


@pytest.fixture
def fee_key_text(fee_key):
    return str(fee_key)


@pytest.fixture
def input_file(tmp_path, deploy_json):
    """Deployment transaction written to a temporary file"""
    path = tmp_path / "deployment.json"
    path.write_text(deploy_json, encoding="utf-8")
    return path
