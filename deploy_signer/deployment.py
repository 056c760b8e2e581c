"""
Deployment mutation and identifier computation.
"""
import hashlib
import json
import logging
import re
from typing import Union

from .exceptions import AssemblyError
from .identity.crypto import hash_to_field
from .identity.types import Address
from .models import Deployment
from .network import NetworkProfile

logger = logging.getLogger(__name__)

_PROGRAM_HEADER = re.compile(r"^\s*program\s+([A-Za-z][A-Za-z0-9_]*\.aleo)\s*;")


def program_checksum(program: str) -> str:
    """
    Content checksum of a program.

    Args:
        program: Program source text

    Returns:
        SHA3-256 of the UTF-8 source, rendered as "[b0u8, b1u8, ...]"
    """
    digest = hashlib.sha3_256(program.encode("utf-8")).digest()
    return "[" + ", ".join(f"{b}u8" for b in digest) + "]"


def program_id(deployment: Deployment) -> str:
    """
    Program identifier ("name.aleo") declared in the program header.

    Raises:
        AssemblyError: If the program has no header
    """
    match = _PROGRAM_HEADER.match(deployment.program)
    if not match:
        raise AssemblyError("Deployment program has no 'program <name>.aleo;' header")
    return match.group(1)


def set_owner(deployment: Deployment, new_owner: Union[Address, str]) -> Deployment:
    """
    Overwrite the deployment owner.

    The previous owner is discarded without being checked.
    """
    owner = str(new_owner)
    logger.debug("Setting program owner to %s…", owner[:10])
    return deployment.model_copy(update={"program_owner": owner})


def recompute_checksum(deployment: Deployment) -> Deployment:
    """Set the checksum to the checksum of the current program"""
    return deployment.model_copy(update={"program_checksum": program_checksum(deployment.program)})


def deployment_id(deployment: Deployment, network: NetworkProfile) -> str:
    """
    Content-derived identifier of the deployment's current state.

    Must be called after set_owner and recompute_checksum; every field that
    goes into the id is final by then.

    Args:
        deployment: The mutated deployment
        network: Network the id is scoped to

    Returns:
        Field element string ("<n>field")

    Raises:
        AssemblyError: If owner or checksum are not set
    """
    if deployment.program_owner is None or deployment.program_checksum is None:
        raise AssemblyError(
            "Deployment id requested before program owner and checksum were set",
            stage="deployment_id",
        )

    payload = json.dumps(
        {
            "network": network.id,
            "edition": deployment.edition,
            "program": deployment.program,
            "verifying_keys": [
                [name, [verifier, certificate]]
                for name, (verifier, certificate) in deployment.verifying_keys
            ],
            "owner": deployment.program_owner,
            "checksum": deployment.program_checksum,
        },
        sort_keys=True,
        separators=(",", ":"),
    ).encode("utf-8")

    return f"{hash_to_field(network.domain, b'deployment:', payload)}field"
