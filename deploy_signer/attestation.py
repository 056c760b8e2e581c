"""
Ownership attestations.
"""
import logging
from typing import Optional

from .exceptions import AttestationError
from .identity.crypto import Rng, derive_address, sign, verify
from .identity.types import PrivateKey
from .models import ProgramOwner
from .network import NetworkProfile

logger = logging.getLogger(__name__)


def _attestation_message(deployment_id: str, network: NetworkProfile) -> bytes:
    return network.domain + b"program_owner:" + deployment_id.encode("ascii")


def attest(
    admin_key: PrivateKey,
    deployment_id: str,
    network: NetworkProfile,
    rng: Optional[Rng] = None,
) -> ProgramOwner:
    """
    Sign a deployment id with the admin key.

    Args:
        admin_key: Key of the new program owner
        deployment_id: Id of the final deployment state ("<n>field")
        network: Network the attestation is scoped to
        rng: Random source for signature blinding

    Returns:
        ProgramOwner pairing the admin address with the signature

    Raises:
        AttestationError: If the signature cannot be produced
    """
    try:
        address = derive_address(admin_key)
        signature = sign(admin_key, _attestation_message(deployment_id, network), rng)
    except Exception as e:
        logger.error(f"Ownership attestation failed: {e}")
        raise AttestationError(f"Failed to create program owner: {e}") from e

    logger.debug("Attested deployment %s… as %s…", deployment_id[:12], address.value[:10])
    return ProgramOwner(address=address.value, signature=signature)


def verify_attestation(owner: ProgramOwner, deployment_id: str, network: NetworkProfile) -> bool:
    """Check that owner's signature covers deployment_id on network"""
    return verify(owner.address, _attestation_message(deployment_id, network), owner.signature)
