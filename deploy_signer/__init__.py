"""
aleo-deploy-signer: take over authorship of a deployment transaction.
"""
from .codec import decode, encode, require_deploy, require_public_fee
from .exceptions import (
    AssemblyError, AttestationError, DecodeError, DeploySignerError,
    FeeAuthorizationError, FeeExecutionError, FeeNotPublicError, KeyFormatError,
    NetworkSelectionError, TransactionIOError, WrongVariantError,
)
from .models import Deployment, DeployTransaction, Fee, ProgramOwner, Transaction
from .network import CANARY, MAINNET, TESTNET, NetworkProfile, get_network
from .signer import sign_deployment, sign_deployment_file, sign_deployments
from .version import __version__

__all__ = [
    "sign_deployment",
    "sign_deployment_file",
    "sign_deployments",
    "decode",
    "encode",
    "require_deploy",
    "require_public_fee",
    "Deployment",
    "DeployTransaction",
    "Fee",
    "ProgramOwner",
    "Transaction",
    "NetworkProfile",
    "MAINNET",
    "TESTNET",
    "CANARY",
    "get_network",
    "DeploySignerError",
    "KeyFormatError",
    "DecodeError",
    "WrongVariantError",
    "FeeNotPublicError",
    "AttestationError",
    "FeeAuthorizationError",
    "FeeExecutionError",
    "AssemblyError",
    "TransactionIOError",
    "NetworkSelectionError",
    "__version__",
]
