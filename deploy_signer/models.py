"""
Data models for the deployment signer.

The models mirror the JSON records of a transaction. Unknown fields are kept
so that re-encoding a record never drops data.
"""
import re
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import DecodeError

FEE_PROGRAM = "credits.aleo"
FEE_PUBLIC = "fee_public"
FEE_PRIVATE = "fee_private"

_U64_LITERAL = re.compile(r"^(\d+)u64$")
_FIELD_LITERAL = re.compile(r"^(\d+)field$")
_FUTURE_PAYER = re.compile(r"arguments:\s*\[\s*([^,\s\]]+)")


class TransitionInput(BaseModel):
    """One input of a transition (public, private, record, ...)"""
    model_config = ConfigDict(extra="allow")

    type: str
    id: str
    value: Optional[str] = None


class TransitionOutput(BaseModel):
    """One output of a transition"""
    model_config = ConfigDict(extra="allow")

    type: str
    id: str
    value: Optional[str] = None


class Transition(BaseModel):
    """A single executed function call"""
    model_config = ConfigDict(extra="allow")

    id: str
    program: str
    function: str
    inputs: List[TransitionInput] = Field(default_factory=list)
    outputs: List[TransitionOutput] = Field(default_factory=list)
    tpk: str
    tcm: str
    scm: str


class Fee(BaseModel):
    """Fee transition with its state root and proof"""
    model_config = ConfigDict(extra="allow")

    transition: Transition
    global_state_root: str
    proof: Optional[str] = None

    @property
    def is_fee_public(self) -> bool:
        return self.transition.program == FEE_PROGRAM and self.transition.function == FEE_PUBLIC

    @property
    def is_fee_private(self) -> bool:
        return self.transition.program == FEE_PROGRAM and self.transition.function == FEE_PRIVATE

    def _amount_offset(self) -> int:
        # fee_private takes the fee record as its first input
        if self.is_fee_public:
            return 0
        if self.is_fee_private:
            return 1
        raise DecodeError(
            f"Transition {self.transition.program}/{self.transition.function} is not a fee transition"
        )

    def _public_literal(self, index: int, pattern: "re.Pattern[str]", name: str) -> int:
        inputs = self.transition.inputs
        if index >= len(inputs):
            raise DecodeError(f"Fee transition is missing its {name} input (fee.transition.inputs[{index}])")
        item = inputs[index]
        if item.type != "public" or item.value is None:
            raise DecodeError(f"Fee {name} input (fee.transition.inputs[{index}]) is not public")
        match = pattern.match(item.value.strip())
        if not match:
            raise DecodeError(f"Malformed fee {name}: {item.value!r}")
        return int(match.group(1))

    @property
    def base_amount(self) -> int:
        """Base fee in microcredits"""
        return self._public_literal(self._amount_offset(), _U64_LITERAL, "base amount")

    @property
    def priority_amount(self) -> int:
        """Priority fee in microcredits"""
        return self._public_literal(self._amount_offset() + 1, _U64_LITERAL, "priority amount")

    @property
    def deployment_id(self) -> str:
        """Deployment id ("<n>field") the fee is bound to"""
        index = self._amount_offset() + 2
        return f"{self._public_literal(index, _FIELD_LITERAL, 'deployment id')}field"

    @property
    def payer(self) -> Optional[str]:
        """Payer address taken from the fee's future output, if present"""
        for output in self.transition.outputs:
            if output.type == "future" and output.value:
                match = _FUTURE_PAYER.search(output.value)
                if match:
                    return match.group(1)
        return None


class ProgramOwner(BaseModel):
    """Ownership attestation: an address and its signature over a deployment id"""
    model_config = ConfigDict(extra="allow")

    address: str
    signature: str


class Deployment(BaseModel):
    """A program being published with its verifying keys"""
    model_config = ConfigDict(extra="allow")

    # Strict: "1" and true are not editions
    edition: int = Field(ge=0, strict=True)
    program: str
    verifying_keys: List[Tuple[str, Tuple[str, str]]] = Field(default_factory=list)
    program_checksum: Optional[str] = None
    program_owner: Optional[str] = None


class Transaction(BaseModel):
    """Any transaction record, identified by its type tag"""
    model_config = ConfigDict(extra="allow")

    type: str
    id: Optional[str] = None


class DeployTransaction(Transaction):
    """Deploy variant: exactly one deployment and one fee"""

    type: Literal["deploy"] = "deploy"
    id: str
    owner: Optional[ProgramOwner] = None
    deployment: Deployment
    fee: Fee
