"""
Identity module for the deployment signer.

This module handles private key parsing, address derivation and the
signature primitive used for ownership attestations and fee requests.
"""
import os
import logging
from typing import Optional

from deploy_signer.identity.crypto import (
    Rng, default_rng, derive_address, generate_private_key, parse_address,
    parse_private_key, private_key_from_seed, sign, verify,
)
from deploy_signer.identity.types import Address, PrivateKey

__all__ = [
    'Address',
    'PrivateKey',
    'Rng',
    'default_rng',
    'derive_address',
    'generate_private_key',
    'parse_address',
    'parse_private_key',
    'private_key_from_seed',
    'sign',
    'verify',
    'private_key_from_env',
]

logger = logging.getLogger(__name__)


def private_key_from_env(var_name: str) -> Optional[str]:
    """
    Read an encoded private key from an environment variable.

    The value is returned unparsed so that format errors surface at the same
    point as for keys passed on the command line.

    Args:
        var_name: Environment variable to read

    Returns:
        The stripped value, or None if unset or empty
    """
    value = os.environ.get(var_name, "").strip()
    if not value:
        return None
    logger.debug("Read private key from %s", var_name)
    return value
