"""
Fee authorization and execution.

A fee authorization is a signed request by the payer binding the fee amounts
to a deployment id. Executing it inside a disposable ConsensusMemory yields
the fee transition, the state root it was executed against, and a proof.
"""
import hashlib
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

import base58

from deploy_signer.exceptions import (
    DecodeError, DeploySignerError, FeeAuthorizationError, FeeExecutionError,
)
from deploy_signer.identity.crypto import (
    Rng, default_rng, derive_address, hash_to_field, random_field, sign,
    signature_bytes, verify,
)
from deploy_signer.identity.ec_constants import (
    FIELD_MODULUS, SIGNATURE_HRP, U64_MAX,
)
from deploy_signer.identity.types import PrivateKey
from deploy_signer.models import (
    FEE_PROGRAM, FEE_PUBLIC, Fee, Transition, TransitionInput, TransitionOutput,
)
from deploy_signer.network import NetworkProfile
from deploy_signer.vm.store import ConsensusMemory

logger = logging.getLogger(__name__)

TRANSITION_HRP = "au1"
PROOF_HRP = "proof1"

_FIELD_LITERAL = re.compile(r"^(\d+)field$")
_PROOF_NONCE_SIZE = 16
_DIGEST_SIZE = 32


@dataclass(frozen=True)
class FeeAuthorization:
    """
    Unproved fee request signed by the payer.

    Attributes:
        payer: Payer address
        base_amount: Base fee in microcredits
        priority_amount: Priority fee in microcredits
        deployment_id: Deployment id the fee pays for
        network_id: Network the request is scoped to
        request_signature: Payer signature over the request
    """
    payer: str
    base_amount: int
    priority_amount: int
    deployment_id: str
    network_id: int
    request_signature: str


def _request_message(network: NetworkProfile, payer: str, base_amount: int,
                     priority_amount: int, deployment_id: str) -> bytes:
    payload = json.dumps(
        {
            "program": FEE_PROGRAM,
            "function": FEE_PUBLIC,
            "payer": payer,
            "base_amount": base_amount,
            "priority_amount": priority_amount,
            "deployment_id": deployment_id,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return network.domain + b"fee_request:" + payload.encode("utf-8")


def _check_amount(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FeeAuthorizationError(f"Fee {name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise FeeAuthorizationError(f"Fee {name} {value} is outside the u64 range")
    return value


def _check_deployment_id(deployment_id: Any) -> str:
    match = _FIELD_LITERAL.match(deployment_id) if isinstance(deployment_id, str) else None
    if not match or int(match.group(1)) >= FIELD_MODULUS:
        raise FeeAuthorizationError(f"Invalid deployment id: {deployment_id!r}")
    return deployment_id


def _future_value(payer: str, total: int) -> str:
    return (
        "{\n"
        f"  program_id: {FEE_PROGRAM},\n"
        f"  function_name: {FEE_PUBLIC},\n"
        "  arguments: [\n"
        f"    {payer},\n"
        f"    {total}u64\n"
        "  ]\n"
        "}"
    )


def _transition_id(network: NetworkProfile, transition: Transition) -> str:
    body = transition.model_dump(mode="json", exclude={"id"}, exclude_none=True)
    payload = json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")
    digest = hashlib.sha256(network.domain + b"transition:" + payload).digest()
    return TRANSITION_HRP + base58.b58encode(digest).decode("ascii")


def _proof_digest(nonce: bytes, transition_id: str, state_root: str, request_sig: bytes) -> bytes:
    return hashlib.sha256(
        nonce + transition_id.encode("ascii") + state_root.encode("ascii") + request_sig
    ).digest()


class VM:
    """Executes fee authorizations against a disposable consensus store"""

    def __init__(self, network: NetworkProfile, store: ConsensusMemory):
        """
        Initialize the VM.

        Args:
            network: Network profile
            store: Ephemeral store to execute against

        Raises:
            ValueError: If the store belongs to a different network
        """
        if store.network != network:
            raise ValueError(f"Store is for {store.network.name}, VM is for {network.name}")
        self.network = network
        self.store = store

    @classmethod
    def from_store(cls, store: ConsensusMemory) -> "VM":
        """Create a VM on top of an opened store"""
        return cls(store.network, store)

    def authorize_fee_public(
        self,
        private_key: PrivateKey,
        base_amount: int,
        priority_amount: int,
        deployment_id: str,
        rng: Optional[Rng] = None,
    ) -> FeeAuthorization:
        """
        Build a public fee authorization.

        Args:
            private_key: Fee payer key
            base_amount: Base fee in microcredits
            priority_amount: Priority fee in microcredits
            deployment_id: Id of the deployment being paid for
            rng: Random source for the request signature

        Returns:
            FeeAuthorization

        Raises:
            FeeAuthorizationError: On malformed amounts or deployment id, or
                if the request cannot be signed
        """
        base_amount = _check_amount("base amount", base_amount)
        priority_amount = _check_amount("priority amount", priority_amount)
        if base_amount + priority_amount > U64_MAX:
            raise FeeAuthorizationError("Fee total overflows u64")
        deployment_id = _check_deployment_id(deployment_id)

        try:
            payer = derive_address(private_key).value
            signature = sign(
                private_key,
                _request_message(self.network, payer, base_amount, priority_amount, deployment_id),
                rng,
            )
        except Exception as e:
            raise FeeAuthorizationError(f"Failed to sign fee request: {e}") from e

        logger.debug("Authorized public fee of %d+%d for %s…", base_amount, priority_amount, payer[:10])
        return FeeAuthorization(
            payer=payer,
            base_amount=base_amount,
            priority_amount=priority_amount,
            deployment_id=deployment_id,
            network_id=self.network.id,
            request_signature=signature,
        )

    def execute_fee_authorization(
        self,
        authorization: FeeAuthorization,
        rng: Optional[Rng] = None,
    ) -> Fee:
        """
        Execute a fee authorization into a proved fee.

        Args:
            authorization: Authorization from authorize_fee_public
            rng: Random source for transition commitments and proof blinding

        Returns:
            Fee

        Raises:
            FeeExecutionError: If the authorization does not check out or the
                proof cannot be produced
        """
        if authorization.network_id != self.network.id:
            raise FeeExecutionError(
                f"Authorization is for network {authorization.network_id}, VM is for {self.network.id}"
            )

        message = _request_message(
            self.network, authorization.payer, authorization.base_amount,
            authorization.priority_amount, authorization.deployment_id,
        )
        if not verify(authorization.payer, message, authorization.request_signature):
            raise FeeExecutionError("Fee request signature does not match the payer")

        rng = rng or default_rng()
        try:
            transition = self._build_transition(authorization, rng)
            state_root = self.store.global_state_root()

            request_sig = signature_bytes(authorization.request_signature)
            nonce = rng(_PROOF_NONCE_SIZE)
            digest = _proof_digest(nonce, transition.id, state_root, request_sig)
            proof = PROOF_HRP + base58.b58encode(nonce + request_sig + digest).decode("ascii")
        except DeploySignerError as e:
            raise FeeExecutionError(f"Failed to execute fee authorization: {e}") from e
        except Exception as e:
            logger.error(f"Fee execution failed: {e}")
            raise FeeExecutionError(f"Failed to execute fee authorization: {e}") from e

        logger.debug("Executed fee transition %s…", transition.id[:12])
        return Fee(transition=transition, global_state_root=state_root, proof=proof)

    def _build_transition(self, authorization: FeeAuthorization, rng: Rng) -> Transition:
        domain = self.network.domain
        tcm = f"{random_field(rng)}field"
        tpk = f"{random_field(rng)}group"

        values = [
            f"{authorization.base_amount}u64",
            f"{authorization.priority_amount}u64",
            authorization.deployment_id,
        ]
        inputs = [
            TransitionInput(
                type="public",
                id=f"{hash_to_field(domain, b'input:', tcm.encode(), str(index).encode(), value.encode())}field",
                value=value,
            )
            for index, value in enumerate(values)
        ]

        total = authorization.base_amount + authorization.priority_amount
        future = _future_value(authorization.payer, total)
        outputs = [
            TransitionOutput(
                type="future",
                id=f"{hash_to_field(domain, b'output:', tcm.encode(), future.encode())}field",
                value=future,
            )
        ]
        scm = f"{hash_to_field(domain, b'scm:', tcm.encode(), authorization.payer.encode())}field"

        transition = Transition(
            id="", program=FEE_PROGRAM, function=FEE_PUBLIC,
            inputs=inputs, outputs=outputs, tpk=tpk, tcm=tcm, scm=scm,
        )
        return transition.model_copy(update={"id": _transition_id(self.network, transition)})


def verify_fee(fee: Fee, network: NetworkProfile) -> bool:
    """
    Check a fee produced by execute_fee_authorization.

    Recomputes the transition id, the proof digest, and verifies the
    payer's request signature embedded in the proof.

    Returns:
        True if every check passes, False otherwise
    """
    if not fee.is_fee_public or not fee.proof or not fee.proof.startswith(PROOF_HRP):
        return False
    if _transition_id(network, fee.transition) != fee.transition.id:
        return False

    try:
        raw = base58.b58decode(fee.proof[len(PROOF_HRP):])
        payer = fee.payer
        base_amount = fee.base_amount
        priority_amount = fee.priority_amount
        deployment_id = fee.deployment_id
    except (DecodeError, ValueError):
        return False
    if payer is None or len(raw) <= _PROOF_NONCE_SIZE + _DIGEST_SIZE:
        return False

    nonce = raw[:_PROOF_NONCE_SIZE]
    request_sig = raw[_PROOF_NONCE_SIZE:-_DIGEST_SIZE]
    digest = raw[-_DIGEST_SIZE:]
    if _proof_digest(nonce, fee.transition.id, fee.global_state_root, request_sig) != digest:
        return False

    message = _request_message(network, payer, base_amount, priority_amount, deployment_id)
    signature = SIGNATURE_HRP + base58.b58encode(request_sig).decode("ascii")
    return verify(payer, message, signature)
