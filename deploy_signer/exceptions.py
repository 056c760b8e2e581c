"""
Exceptions for the deployment signer.

Every failure aborts the current invocation; nothing is retried.
"""
from typing import Optional


class DeploySignerError(Exception):
    """Base exception for deployment signing errors."""

    stage: Optional[str] = None

    def __init__(self, message: str, stage: Optional[str] = None):
        if stage is not None:
            self.stage = stage
        super().__init__(message)


class KeyFormatError(DeploySignerError):
    """Raised when a private key or address string does not parse."""
    stage = "key"


class DecodeError(DeploySignerError):
    """Raised when the input is not a well-formed transaction record."""
    stage = "decode"


class WrongVariantError(DeploySignerError):
    """Raised when the decoded transaction is not a deployment."""
    stage = "decode"


class FeeNotPublicError(DeploySignerError):
    """Raised when the deployment's fee is not a public fee."""
    stage = "decode"


class AttestationError(DeploySignerError):
    """Raised when the ownership signature cannot be produced."""
    stage = "attest"


class FeeAuthorizationError(DeploySignerError):
    """Raised when a fee authorization cannot be built."""
    stage = "authorize_fee"


class FeeExecutionError(DeploySignerError):
    """Raised when a fee authorization cannot be executed into a fee."""
    stage = "execute_fee"


class AssemblyError(DeploySignerError):
    """Raised when the transaction parts are structurally inconsistent."""
    stage = "assemble"


class TransactionIOError(DeploySignerError):
    """Raised when reading the input or writing the output fails."""
    stage = "io"


class NetworkSelectionError(DeploySignerError):
    """Raised when an unknown network profile is requested."""
    stage = "config"
