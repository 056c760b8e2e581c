"""
Cryptographic operations for the identity module.
"""
import hashlib
import logging
from typing import Callable, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey, Ed25519PublicKey
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
import nacl.utils

# Import base58 for key, address and signature encoding
try:
    import base58
except ImportError:
    raise ImportError(
        "base58 package is required for identity module. "
        "Install with: pip install base58"
    )

from deploy_signer.exceptions import KeyFormatError
from deploy_signer.identity.ec_constants import (
    ADDRESS_HRP, FIELD_MODULUS, PRIVATE_KEY_PREFIX, PRIVATE_KEY_SEED_SIZE,
    SIGNATURE_HRP, SIGNATURE_KEY_DOMAIN, SIGNATURE_NONCE_SIZE,
)
from deploy_signer.identity.types import Address, PrivateKey

# A random source: called with a byte count, returns that many random bytes
Rng = Callable[[int], bytes]

logger = logging.getLogger(__name__)

_PUBLIC_KEY_SIZE = 32
_ED25519_SIGNATURE_SIZE = 64
_SIGNATURE_SIZE = SIGNATURE_NONCE_SIZE + _PUBLIC_KEY_SIZE + _ED25519_SIGNATURE_SIZE


def default_rng() -> Rng:
    """Return the default cryptographically secure random source"""
    return nacl.utils.random


def private_key_from_seed(seed: bytes) -> PrivateKey:
    """
    Build a private key from a raw 32-byte seed.

    Raises:
        KeyFormatError: If the seed has the wrong size
    """
    if not isinstance(seed, (bytes, bytearray)) or len(seed) != PRIVATE_KEY_SEED_SIZE:
        raise KeyFormatError(f"Private key seed must be {PRIVATE_KEY_SEED_SIZE} bytes")
    return PrivateKey(seed=bytes(seed))


def generate_private_key(rng: Optional[Rng] = None) -> PrivateKey:
    """Generate a fresh private key from the given (or default) random source"""
    rng = rng or default_rng()
    return private_key_from_seed(rng(PRIVATE_KEY_SEED_SIZE))


def parse_private_key(text: str) -> PrivateKey:
    """
    Parse an encoded private key string.

    Args:
        text: Encoded key ("APrivateKey1...")

    Returns:
        PrivateKey

    Raises:
        KeyFormatError: If the string is not base58, has the wrong length
            or does not carry the private key prefix
    """
    if not isinstance(text, str) or not text.strip():
        raise KeyFormatError("Invalid private key format: expected a non-empty string")

    try:
        raw = base58.b58decode(text.strip())
    except ValueError as e:
        raise KeyFormatError(f"Invalid private key format: {e}") from e

    expected = len(PRIVATE_KEY_PREFIX) + PRIVATE_KEY_SEED_SIZE
    if len(raw) != expected:
        raise KeyFormatError(
            f"Invalid private key format: expected {expected} bytes, got {len(raw)}"
        )
    if raw[:len(PRIVATE_KEY_PREFIX)] != PRIVATE_KEY_PREFIX:
        raise KeyFormatError("Invalid private key format: wrong prefix")

    return PrivateKey(seed=raw[len(PRIVATE_KEY_PREFIX):])


def _as_private_key(key: Union[PrivateKey, str]) -> PrivateKey:
    if isinstance(key, PrivateKey):
        return key
    return parse_private_key(key)


def _signing_key(key: PrivateKey) -> Ed25519PrivateKey:
    # The signing key never equals the raw seed
    material = hashlib.sha256(SIGNATURE_KEY_DOMAIN + key.seed).digest()
    return Ed25519PrivateKey.from_private_bytes(material)


def _public_key_bytes(key: PrivateKey) -> bytes:
    return _signing_key(key).public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


def derive_address(key: Union[PrivateKey, str]) -> Address:
    """
    Derive the public address of a private key.

    Args:
        key: PrivateKey or its encoded string

    Returns:
        Address ("aleo1...")

    Raises:
        KeyFormatError: If a string key does not parse
    """
    private_key = _as_private_key(key)
    encoded = base58.b58encode(_public_key_bytes(private_key)).decode("ascii")
    address = Address(f"{ADDRESS_HRP}{encoded}")

    # Log truncated address for privacy
    logger.debug("Derived address %s…", address.value[:10])

    return address


def parse_address(text: str) -> Address:
    """
    Parse an encoded address string.

    Raises:
        KeyFormatError: If the address is malformed
    """
    _address_public_key(text)
    return Address(text)


def _address_public_key(text: str) -> bytes:
    if not isinstance(text, str) or not text.startswith(ADDRESS_HRP):
        raise KeyFormatError(f"Invalid address format: must start with '{ADDRESS_HRP}'")
    try:
        public_key = base58.b58decode(text[len(ADDRESS_HRP):])
    except ValueError as e:
        raise KeyFormatError(f"Invalid address format: {e}") from e
    if len(public_key) != _PUBLIC_KEY_SIZE:
        raise KeyFormatError("Invalid address format: wrong length")
    return public_key


def sign(key: PrivateKey, message: bytes, rng: Optional[Rng] = None) -> str:
    """
    Sign a message.

    A fresh nonce from rng is bound into every signature, so repeated calls
    over the same message return different, equally valid signatures.

    Args:
        key: Signing private key
        message: Message bytes
        rng: Random source (defaults to nacl.utils.random)

    Returns:
        Encoded signature ("sign1...")
    """
    rng = rng or default_rng()
    nonce = rng(SIGNATURE_NONCE_SIZE)
    if len(nonce) != SIGNATURE_NONCE_SIZE:
        raise ValueError("Random source returned the wrong number of bytes")

    signing_key = _signing_key(key)
    public_key = signing_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    signature = signing_key.sign(nonce + message)

    return SIGNATURE_HRP + base58.b58encode(nonce + public_key + signature).decode("ascii")


def signature_bytes(signature: str) -> bytes:
    """
    Decode a signature string to its raw bytes.

    Raises:
        ValueError: If the signature is malformed
    """
    if not isinstance(signature, str) or not signature.startswith(SIGNATURE_HRP):
        raise ValueError(f"signature must start with '{SIGNATURE_HRP}'")
    raw = base58.b58decode(signature[len(SIGNATURE_HRP):])
    if len(raw) != _SIGNATURE_SIZE:
        raise ValueError("signature has the wrong length")
    return raw


def verify(address: Union[Address, str], message: bytes, signature: str) -> bool:
    """
    Verify a signature against an address.

    Returns:
        True if the signature was made by the key behind address over
        message, False otherwise (including malformed inputs)
    """
    try:
        public_key = _address_public_key(str(address))
        raw = signature_bytes(signature)
    except (KeyFormatError, ValueError):
        return False

    nonce = raw[:SIGNATURE_NONCE_SIZE]
    signer = raw[SIGNATURE_NONCE_SIZE:SIGNATURE_NONCE_SIZE + _PUBLIC_KEY_SIZE]
    sig = raw[SIGNATURE_NONCE_SIZE + _PUBLIC_KEY_SIZE:]
    if signer != public_key:
        return False

    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(sig, nonce + message)
    except (InvalidSignature, ValueError):
        return False
    return True


def hash_to_field(*parts: bytes) -> int:
    """Hash byte strings to an element of the scalar field"""
    digest = hashlib.sha256(b"".join(parts)).digest()
    return int.from_bytes(digest, byteorder="big") % FIELD_MODULUS


def random_field(rng: Rng) -> int:
    """Draw a field element from a random source"""
    return int.from_bytes(rng(32), byteorder="big") % FIELD_MODULUS
