"""
Data models for the SmartWallet SDK.
"""
from enum import IntEnum
from typing import Any, Callable, Dict, List, Literal, Optional, Union

from eth_utils import is_address, to_bytes, to_checksum_address, to_hex
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import PreparationError, SubmissionError

ARRAY_TYPE = "array"


class Call(BaseModel):
    """A single on-chain call: target, calldata and optional native value"""
    model_config = ConfigDict(frozen=True)

    to: str
    data: bytes = b""
    value: Optional[int] = None

    @field_validator("to")
    @classmethod
    def _checksum_target(cls, v: str) -> str:
        if not is_address(v):
            raise ValueError(f"Invalid call target address: {v}")
        return to_checksum_address(v)

    @field_validator("data", mode="before")
    @classmethod
    def _hex_to_bytes(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return to_bytes(hexstr=v)
            except ValueError as e:
                raise ValueError(f"Call data must be 0x-prefixed hex: {e}")
        return v

    @field_validator("value")
    @classmethod
    def _non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Call value must not be negative")
        return v

    def to_rpc(self) -> Dict[str, str]:
        """Wire representation used in ``wallet_prepareCalls``"""
        rpc = {"to": self.to, "data": to_hex(self.data)}
        if self.value is not None:
            rpc["value"] = hex(self.value)
        return rpc


class PaymasterService(BaseModel):
    """Gas sponsorship request"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    policy_id: str = Field(..., alias="policyId")


class Capabilities(BaseModel):
    """Options attached to a batch of calls"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    paymaster_service: Optional[PaymasterService] = Field(None, alias="paymasterService")
    eip7702_auth: Optional[bool] = Field(None, alias="eip7702Auth")

    @classmethod
    def sponsored(cls, policy_id: str, eip7702_auth: bool = False) -> "Capabilities":
        return cls(
            paymaster_service=PaymasterService(policy_id=policy_id),
            eip7702_auth=True if eip7702_auth else None,
        )

    def to_rpc(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AccountInfo(BaseModel):
    """Smart-wallet account owned by a signer"""
    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(..., alias="accountAddress")
    id: Optional[str] = None


class SinglePreparedCalls(BaseModel):
    """Prepared calls consisting of one signable unit"""
    kind: Literal["single"] = "single"
    unit: Dict[str, Any]

    @property
    def units(self) -> List[Dict[str, Any]]:
        return [self.unit]

    def sign_with(self, sign_unit: Callable[[Dict[str, Any]], Dict[str, Any]]) -> "SingleSignedCalls":
        return SingleSignedCalls(unit=sign_unit(self.unit))


class BatchPreparedCalls(BaseModel):
    """Prepared calls consisting of an ordered sequence of signable units"""
    kind: Literal["batch"] = "batch"
    units: List[Dict[str, Any]]

    def sign_with(self, sign_unit: Callable[[Dict[str, Any]], Dict[str, Any]]) -> "BatchSignedCalls":
        return BatchSignedCalls(units=[sign_unit(unit) for unit in self.units])


class SingleSignedCalls(BaseModel):
    """Signed counterpart of SinglePreparedCalls"""
    kind: Literal["single"] = "single"
    unit: Dict[str, Any]

    @property
    def units(self) -> List[Dict[str, Any]]:
        return [self.unit]

    def to_rpc(self) -> Dict[str, Any]:
        return self.unit


class BatchSignedCalls(BaseModel):
    """Signed counterpart of BatchPreparedCalls"""
    kind: Literal["batch"] = "batch"
    units: List[Dict[str, Any]]

    def to_rpc(self) -> Dict[str, Any]:
        return {"type": ARRAY_TYPE, "data": self.units}


PreparedCalls = Union[SinglePreparedCalls, BatchPreparedCalls]
SignedCalls = Union[SingleSignedCalls, BatchSignedCalls]


def prepared_calls_from_response(response: Any) -> PreparedCalls:
    """
    Build the PreparedCalls variant matching the shape the relayer returned.

    Args:
        response: ``result`` of ``wallet_prepareCalls``

    Returns:
        BatchPreparedCalls for an ``array`` result, SinglePreparedCalls otherwise

    Raises:
        PreparationError: If the response is not a prepared-calls object
    """
    if not isinstance(response, dict) or "type" not in response:
        raise PreparationError(f"Malformed prepared calls in relayer response: {response!r}")

    if response["type"] != ARRAY_TYPE:
        return SinglePreparedCalls(unit=response)

    units = response.get("data")
    if not isinstance(units, list) or not units:
        raise PreparationError("Prepared calls of type 'array' must carry a non-empty list of units")
    for unit in units:
        if not isinstance(unit, dict):
            raise PreparationError(f"Malformed prepared unit: {unit!r}")
    return BatchPreparedCalls(units=units)


class SubmissionResult(BaseModel):
    """Tracking identifiers returned by ``wallet_sendPreparedCalls``"""
    model_config = ConfigDict(populate_by_name=True)

    prepared_call_ids: List[str] = Field(..., alias="preparedCallIds")

    @field_validator("prepared_call_ids")
    @classmethod
    def _at_least_one(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("preparedCallIds must not be empty")
        return v

    @classmethod
    def from_response(cls, response: Any) -> "SubmissionResult":
        """
        Raises:
            SubmissionError: If the response carries no call ids
        """
        if not isinstance(response, dict):
            raise SubmissionError(f"Malformed submission response: {response!r}")
        try:
            return cls.model_validate(response)
        except ValueError as e:
            raise SubmissionError(f"Malformed submission response: {e}") from e


class CallStatusCode(IntEnum):
    """Status codes reported by ``wallet_getCallsStatus``"""
    PENDING = 100
    SUCCESS = 200


class Receipt(BaseModel):
    """Transaction receipt attached to a successful call status"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    transaction_hash: str = Field(..., alias="transactionHash")


class CallStatus(BaseModel):
    """Status of a submitted call id"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: int
    id: Optional[str] = None
    receipts: Optional[List[Receipt]] = None

    @property
    def is_pending(self) -> bool:
        return self.status == CallStatusCode.PENDING

    @property
    def is_success(self) -> bool:
        return self.status == CallStatusCode.SUCCESS

    @property
    def transaction_hash(self) -> Optional[str]:
        """Hash of the first receipt, if any"""
        if not self.receipts:
            return None
        return self.receipts[0].transaction_hash


def explorer_link(base_url: str, status: CallStatus) -> Optional[str]:
    """
    Build an explorer link for the first receipt of a call status.

    Returns:
        ``base_url`` followed by the transaction hash, or None without receipts
    """
    tx_hash = status.transaction_hash
    if tx_hash is None:
        return None
    return f"{base_url}{tx_hash}"
