"""
Deployment re-signing pipeline.

Takes a deployment transaction built by someone else, makes the admin key the
program owner and re-authorizes the fee under the fee key (the admin key when
no fee key is given). Every stage either feeds the next or aborts the run.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

from .assembler import assemble
from .attestation import attest
from .codec import decode, encode, require_deploy, require_public_fee
from .deployment import deployment_id, recompute_checksum, set_owner
from .exceptions import KeyFormatError
from .files import PathLike, read_transaction_file, write_transaction_file
from .identity.crypto import Rng, default_rng, derive_address, parse_private_key
from .identity.types import PrivateKey
from .models import DeployTransaction
from .network import TESTNET, NetworkProfile, get_network
from .vm import VM, ConsensusMemory

logger = logging.getLogger(__name__)

KeyLike = Union[PrivateKey, str]
NetworkLike = Union[NetworkProfile, int, str]


def load_private_key(key: KeyLike, role: str = "admin") -> PrivateKey:
    """Parse a key, naming its role (admin or fee) in format errors"""
    if isinstance(key, PrivateKey):
        return key
    try:
        return parse_private_key(key)
    except KeyFormatError as e:
        raise KeyFormatError(f"Invalid {role} private key format: {e}") from e


def sign_deployment(
    transaction_json: Union[str, bytes],
    admin_private_key: KeyLike,
    fee_private_key: Optional[KeyLike] = None,
    network: NetworkLike = TESTNET,
    rng: Optional[Rng] = None,
) -> DeployTransaction:
    """
    Re-sign a deployment transaction.

    Args:
        transaction_json: The deployment transaction as JSON
        admin_private_key: Key of the new program owner
        fee_private_key: Key paying the fee (defaults to the admin key)
        network: Network profile or selector
        rng: Random source for signatures and proofs

    Returns:
        The re-signed DeployTransaction

    Raises:
        KeyFormatError: If a key does not parse (checked before the input)
        DecodeError: If the input is not a transaction record
        WrongVariantError: If the input is not a deployment
        FeeNotPublicError: If the deployment's fee is not public
        AttestationError: If the ownership signature fails
        FeeAuthorizationError: If the fee cannot be authorized
        FeeExecutionError: If the fee cannot be executed
        AssemblyError: If the parts do not fit together
    """
    start_time = time.time()
    network = get_network(network)
    rng = rng or default_rng()

    # 1. Parse keys and derive the new owner address
    admin_key = load_private_key(admin_private_key, "admin")
    owner_address = derive_address(admin_key)
    if fee_private_key is None:
        fee_key = admin_key
    else:
        fee_key = load_private_key(fee_private_key, "fee")

    # 2. Decode and validate the transaction
    tx = decode(transaction_json)
    deployment, fee = require_deploy(tx)
    fee = require_public_fee(fee)

    # Read the amounts before the original fee is dropped
    base_amount = fee.base_amount
    priority_amount = fee.priority_amount

    # 3. Set the owner and the checksum, then derive the id
    deployment = set_owner(deployment, owner_address)
    deployment = recompute_checksum(deployment)
    deploy_id = deployment_id(deployment, network)

    # 4. Attest ownership
    program_owner = attest(admin_key, deploy_id, network, rng)

    # 5. Re-authorize the fee in a throwaway context
    with ConsensusMemory.open(network) as store:
        vm = VM.from_store(store)
        authorization = vm.authorize_fee_public(fee_key, base_amount, priority_amount, deploy_id, rng)
        new_fee = vm.execute_fee_authorization(authorization, rng)

    # 6. Reassemble
    transaction = assemble(program_owner, deployment, new_fee, network)

    elapsed_ms = (time.time() - start_time) * 1000
    logger.info(
        "Re-signed deployment %s… for owner %s… on %s in %.2f ms",
        transaction.id[:12], owner_address.value[:10], network.name, elapsed_ms,
    )
    return transaction


def sign_deployment_file(
    input_path: PathLike,
    output_path: PathLike,
    admin_private_key: KeyLike,
    fee_private_key: Optional[KeyLike] = None,
    network: NetworkLike = TESTNET,
    rng: Optional[Rng] = None,
) -> DeployTransaction:
    """
    Re-sign the deployment transaction in input_path and write it to output_path.

    The output file is only written once the whole pipeline has succeeded.

    Raises:
        TransactionIOError: If reading or writing fails
        DeploySignerError: Any pipeline failure (see sign_deployment)
    """
    admin_key = load_private_key(admin_private_key, "admin")
    content = read_transaction_file(input_path)

    transaction = sign_deployment(content, admin_key, fee_private_key, network, rng)

    write_transaction_file(output_path, encode(transaction))
    logger.info("Saved re-signed deployment to %s", output_path)
    return transaction


def sign_deployments(
    transactions: Sequence[Union[str, bytes]],
    admin_private_key: KeyLike,
    fee_private_key: Optional[KeyLike] = None,
    network: NetworkLike = TESTNET,
    max_workers: Optional[int] = None,
) -> List[DeployTransaction]:
    """
    Re-sign several deployment transactions in parallel.

    Each transaction is an independent invocation with its own execution
    context and the default random source.

    Args:
        transactions: Deployment transactions as JSON
        admin_private_key: Key of the new program owner
        fee_private_key: Key paying the fees (defaults to the admin key)
        network: Network profile or selector
        max_workers: Thread pool size

    Returns:
        Re-signed transactions, in input order

    Raises:
        DeploySignerError: The first failure, in input order
    """
    network = get_network(network)
    admin_key = load_private_key(admin_private_key, "admin")
    fee_key = None if fee_private_key is None else load_private_key(fee_private_key, "fee")

    def _sign_one(transaction_json):
        return sign_deployment(transaction_json, admin_key, fee_key, network)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(_sign_one, transactions))

    logger.info("Re-signed %d deployments on %s", len(results), network.name)
    return results
