"""
Constants for the account and field encodings.
"""

# Order of the scalar field that field elements ("<n>field") live in
FIELD_MODULUS = 8444461749428370424248824938781546531375899335154063827935233455917409239041

# Largest value of a u64 literal
U64_MAX = 2 ** 64 - 1

# Fixed prefix of an encoded private key; base58 renders it as "APrivateKey1"
PRIVATE_KEY_PREFIX = bytes([127, 134, 189, 116, 210, 221, 210, 137, 145, 18, 253])

# Seed length in bytes
PRIVATE_KEY_SEED_SIZE = 32

# Human readable prefixes of the text encodings
ADDRESS_HRP = "aleo1"
SIGNATURE_HRP = "sign1"

# Random blinding prepended to every signature
SIGNATURE_NONCE_SIZE = 16

# Domain separator used to derive the signing key from the seed
SIGNATURE_KEY_DOMAIN = b"AleoAccountSignatureKey0"
