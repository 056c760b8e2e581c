"""
Transaction assembly.
"""
import hashlib
import logging

import base58

from .attestation import verify_attestation
from .deployment import deployment_id as compute_deployment_id
from .exceptions import AssemblyError, DecodeError
from .models import FEE_PROGRAM, Deployment, DeployTransaction, Fee, ProgramOwner
from .network import NetworkProfile

logger = logging.getLogger(__name__)

TRANSACTION_HRP = "at1"


def transaction_id(deployment_id: str, fee: Fee, network: NetworkProfile) -> str:
    """Id of a deploy transaction, derived from its deployment id and fee transition"""
    digest = hashlib.sha256(
        network.domain + b"transaction:" + deployment_id.encode("ascii") + b":" + fee.transition.id.encode("ascii")
    ).digest()
    return TRANSACTION_HRP + base58.b58encode(digest).decode("ascii")


def assemble(
    owner: ProgramOwner,
    deployment: Deployment,
    fee: Fee,
    network: NetworkProfile,
) -> DeployTransaction:
    """
    Combine an attestation, a deployment and a fee into a Deploy transaction.

    Args:
        owner: Ownership attestation over the deployment id
        deployment: Mutated deployment
        fee: Fee bound to the deployment id
        network: Network profile

    Returns:
        DeployTransaction

    Raises:
        AssemblyError: If the parts do not belong together
    """
    deploy_id = compute_deployment_id(deployment, network)

    if owner.address != deployment.program_owner:
        raise AssemblyError(
            f"Attestation address {owner.address[:10]}… does not match program owner "
            f"{str(deployment.program_owner)[:10]}…"
        )
    if not verify_attestation(owner, deploy_id, network):
        raise AssemblyError("Program owner signature does not cover the deployment id")

    if fee.transition.program != FEE_PROGRAM or not (fee.is_fee_public or fee.is_fee_private):
        raise AssemblyError(
            f"Fee transition {fee.transition.program}/{fee.transition.function} is not a fee"
        )
    try:
        fee_deploy_id = fee.deployment_id
    except DecodeError as e:
        raise AssemblyError(f"Fee does not name a deployment id: {e}") from e
    if fee_deploy_id != deploy_id:
        raise AssemblyError("Fee is bound to a different deployment id")

    tx = DeployTransaction(
        id=transaction_id(deploy_id, fee, network),
        owner=owner,
        deployment=deployment,
        fee=fee,
    )
    logger.debug("Assembled deploy transaction %s…", tx.id[:12])
    return tx
