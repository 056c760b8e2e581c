"""
Data types for the identity module.
"""
from dataclasses import dataclass, field

import base58

from deploy_signer.identity.ec_constants import PRIVATE_KEY_PREFIX


@dataclass(frozen=True)
class PrivateKey:
    """
    Secret material for one account.

    Attributes:
        seed: 32-byte seed every other key is derived from
    """
    seed: bytes = field(repr=False)

    def __str__(self) -> str:
        return base58.b58encode(PRIVATE_KEY_PREFIX + self.seed).decode("ascii")

    def __repr__(self) -> str:
        return "PrivateKey(<redacted>)"


@dataclass(frozen=True)
class Address:
    """
    Public account identifier derived from a PrivateKey.

    Attributes:
        value: Encoded address string ("aleo1...")
    """
    value: str

    def __str__(self) -> str:
        return self.value
