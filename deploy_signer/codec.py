"""
Transaction decoding and validation.
"""
import json
import logging
from typing import Any, Dict, Tuple, Union

from pydantic import BaseModel, ValidationError

from .exceptions import DecodeError, FeeNotPublicError, WrongVariantError
from .models import Deployment, DeployTransaction, Fee, Transaction

logger = logging.getLogger(__name__)


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}"


def decode(raw: Union[bytes, str]) -> Transaction:
    """
    Decode a transaction record.

    Args:
        raw: UTF-8 JSON bytes or text

    Returns:
        DeployTransaction for "deploy" records, a generic Transaction otherwise

    Raises:
        DecodeError: If the input is not a well-formed transaction record
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Failed to deserialize transaction: input is not UTF-8 ({e})") from e

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Failed to deserialize transaction: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(
            f"Failed to deserialize transaction: expected an object, got {type(data).__name__}"
        )

    tx_type = data.get("type")
    if not isinstance(tx_type, str):
        raise DecodeError("Failed to deserialize transaction: missing 'type' field")

    model = DeployTransaction if tx_type == "deploy" else Transaction
    try:
        tx = model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(
            f"Failed to deserialize transaction: {_describe_validation_error(e)}"
        ) from e

    logger.debug("Decoded %s transaction %s", tx.type, (tx.id or "")[:12])
    return tx


def require_deploy(tx: Transaction) -> Tuple[Deployment, Fee]:
    """
    Extract the deployment and fee of a Deploy transaction.

    Raises:
        WrongVariantError: If tx is not a Deploy transaction
    """
    if not isinstance(tx, DeployTransaction):
        raise WrongVariantError(f"Expected a deployment transaction, got '{tx.type}'")
    return tx.deployment, tx.fee


def require_public_fee(fee: Fee) -> Fee:
    """
    Ensure the fee is a public fee.

    Raises:
        FeeNotPublicError: If the fee is private or not a fee transition
    """
    if not fee.is_fee_public:
        raise FeeNotPublicError(
            "The original fee must be public "
            f"(got {fee.transition.program}/{fee.transition.function})"
        )
    return fee


def _drop_unset_optionals(model: BaseModel, data: Dict[str, Any]) -> Dict[str, Any]:
    # Only declared fields are pruned; unknown fields keep their nulls
    for name, field in type(model).model_fields.items():
        value = getattr(model, name)
        if value is None and not field.is_required():
            data.pop(name, None)
        elif isinstance(value, BaseModel):
            _drop_unset_optionals(value, data[name])
        elif isinstance(value, list):
            for item, item_data in zip(value, data[name]):
                if isinstance(item, BaseModel):
                    _drop_unset_optionals(item, item_data)
    return data


def encode(tx: Transaction) -> str:
    """
    Encode a transaction as pretty-printed JSON.

    Fields appear in declaration order; unset optional fields are omitted.
    Unknown fields are written back unchanged, null values included.
    """
    data = _drop_unset_optionals(tx, tx.model_dump(mode="json"))
    return json.dumps(data, indent=2, ensure_ascii=False)
