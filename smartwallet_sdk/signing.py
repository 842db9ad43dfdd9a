"""
Signing of prepared calls.

Every unit returned by ``wallet_prepareCalls`` carries a ``signatureRequest``
describing what to sign. The adapter computes the digest for that request,
signs it with the identity's signer and replaces the request with a
``signature`` object, keeping the single/batch shape and unit order intact.
"""
import logging
from typing import Any, Dict, Optional, Union

import rlp
from eth_account.messages import encode_defunct
from eth_utils import keccak, to_bytes, to_canonical_address

from .exceptions import SigningError
from .models import PreparedCalls, SignedCalls
from .signer import Signer

logger = logging.getLogger(__name__)

PERSONAL_SIGN = "personal_sign"
TYPED_DATA_V4 = "eth_signTypedData_v4"
EIP7702_AUTH = "eip7702Auth"

SIGNATURE_TYPE = "secp256k1"
# EIP-7702 authorization tuple magic prefix
SET_CODE_MAGIC = b"\x05"


def _to_int(value: Union[int, str]) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    raise TypeError(f"Expected an integer or numeric string, got {value!r}")


def authorization_digest(unit: Dict[str, Any]) -> bytes:
    """
    Digest of an EIP-7702 authorization unit.

    Computed as keccak(0x05 || rlp([chain_id, address, nonce])) from the unit's
    data; when the unit carries no data the relayer-provided ``rawPayload``
    is used instead.

    Raises:
        SigningError: If neither data nor a 32-byte raw payload is present
    """
    data = unit.get("data")
    if isinstance(data, dict) and "address" in data:
        chain_id = _to_int(unit.get("chainId", data.get("chainId")))
        address = to_canonical_address(data["address"])
        nonce = _to_int(data.get("nonce", 0))
        return keccak(SET_CODE_MAGIC + rlp.encode([chain_id, address, nonce]))

    raw = (unit.get("signatureRequest") or {}).get("rawPayload")
    if not raw:
        raise SigningError("Authorization unit carries neither data nor rawPayload")
    digest = to_bytes(hexstr=raw)
    if len(digest) != 32:
        raise SigningError(f"Authorization rawPayload must be 32 bytes, got {len(digest)}")
    return digest


def sign_unit(unit: Dict[str, Any], signer: Signer) -> Dict[str, Any]:
    """
    Sign one prepared unit.

    Args:
        unit: Prepared unit with a ``signatureRequest``
        signer: Signer for the identity the calls were prepared for

    Returns:
        The unit without its signature request and with a ``signature``

    Raises:
        SigningError: If the request is missing, unsupported or malformed
    """
    if not isinstance(unit, dict):
        raise SigningError(f"Prepared unit must be an object, got {type(unit).__name__}")
    request = unit.get("signatureRequest")
    if not isinstance(request, dict):
        raise SigningError(f"Unit of type {unit.get('type')!r} has no signatureRequest")

    request_type = request.get("type")
    try:
        if request_type == PERSONAL_SIGN:
            message = request.get("data")
            if isinstance(message, dict) and "raw" in message:
                signature = signer.sign_message(encode_defunct(hexstr=message["raw"]))
            elif isinstance(message, str):
                signature = signer.sign_message(encode_defunct(text=message))
            else:
                raise SigningError(f"personal_sign request has no message: {message!r}")
        elif request_type == TYPED_DATA_V4:
            typed_data = request.get("data")
            if not isinstance(typed_data, dict):
                raise SigningError("eth_signTypedData_v4 request has no typed data")
            signature = signer.sign_typed_data(typed_data)
        elif request_type == EIP7702_AUTH:
            signature = signer.sign_hash(authorization_digest(unit))
        else:
            raise SigningError(f"Unsupported signature request type {request_type!r}")
    except SigningError:
        raise
    except (ValueError, TypeError, KeyError) as e:
        raise SigningError(f"Cannot compute digest for {request_type} unit: {e}") from e

    signed = {key: value for key, value in unit.items() if key != "signatureRequest"}
    signed["signature"] = {"type": SIGNATURE_TYPE, "data": signature}
    logger.debug(f"Signed {unit.get('type')} unit via {request_type}")
    return signed


def sign_prepared_calls(prepared: PreparedCalls, signer: Optional[Signer]) -> SignedCalls:
    """
    Sign every unit of a prepared-calls variant.

    Returns:
        SingleSignedCalls for single input, BatchSignedCalls (same order) for batch input

    Raises:
        SigningError: If key material is unavailable or any unit cannot be signed
    """
    if signer is None:
        raise SigningError("Signing key material is unavailable")
    return prepared.sign_with(lambda unit: sign_unit(unit, signer))
