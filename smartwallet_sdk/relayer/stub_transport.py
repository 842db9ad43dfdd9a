"""
Stub-based transport implementation for the relaying service.

This module provides an in-memory relayer that answers wallet API requests
without touching the network. It shapes prepared calls the way the real
service does (a single user operation, or an ``array`` holding an EIP-7702
authorization plus the user operation) and walks each submitted call id
through a scripted sequence of status codes.
"""
import json
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from eth_utils import keccak, to_checksum_address

from .transport import RelayerTransport
from .exceptions import RelayerResponseError

logger = logging.getLogger(__name__)

# Modular account implementation the stub reports as the 7702 delegation target
STUB_DELEGATION_ADDRESS = "0x69007702764179f14F51cdce752f4f775d74E139"

USER_OPERATION_TYPE = "user-operation-v070"
AUTHORIZATION_TYPE = "authorization"
ARRAY_TYPE = "array"

# JSON-RPC "invalid params"
INVALID_PARAMS = -32602


def _digest(obj: Any) -> bytes:
    return keccak(text=json.dumps(obj, sort_keys=True, separators=(",", ":")))


class StubTransport(RelayerTransport):
    """
    A simple in-memory implementation of the relayer transport.

    Every request is recorded in ``requests`` as ``(method, params)`` so tests
    can assert on exactly what was sent.
    """

    def __init__(self, statuses: Optional[List[int]] = None):
        """
        Initialize the stub transport.

        Args:
            statuses: Status codes returned by successive status queries for each
                call id; the last one repeats. Defaults to ``[100, 200]``.
        """
        self.statuses = list(statuses) if statuses else [100, 200]
        self.requests: List[Tuple[str, Any]] = []
        self._progress: Dict[str, int] = {}
        self._lock = threading.Lock()

    def request_account(self, signer_address: str) -> Dict[str, Any]:
        self._record("wallet_requestAccount", [{"signerAddress": signer_address}])
        account = to_checksum_address(
            keccak(b"smart-wallet:" + bytes.fromhex(signer_address[2:]))[-20:]
        )
        return {"accountAddress": account, "id": "0x" + keccak(text=account).hex()[:32]}

    def prepare_calls(self, request: Dict[str, Any]) -> Dict[str, Any]:
        self._record("wallet_prepareCalls", [request])
        calls = request.get("calls") or []
        if not calls:
            raise RelayerResponseError("calls must not be empty", INVALID_PARAMS)
        for call in calls:
            if not call.get("to") or not str(call.get("data", "")).startswith("0x"):
                raise RelayerResponseError(f"Malformed call: {call}", INVALID_PARAMS)
        sender = request.get("from")
        if not sender:
            raise RelayerResponseError("from is required", INVALID_PARAMS)

        chain_id = request.get("chainId", "0x1")
        capabilities = request.get("capabilities") or {}
        user_op = {
            "type": USER_OPERATION_TYPE,
            "data": {
                "sender": sender,
                "nonce": "0x0",
                "callData": "0x" + _digest(calls).hex(),
                "paymasterAndData": capabilities.get("paymasterService"),
            },
            "chainId": chain_id,
            "signatureRequest": {
                "type": "personal_sign",
                "data": {"raw": "0x" + _digest(request).hex()},
            },
        }
        if not capabilities.get("eip7702Auth"):
            logger.debug(f"Stub prepared single user operation for {sender}")
            return user_op

        authorization = {
            "type": AUTHORIZATION_TYPE,
            "data": {"address": STUB_DELEGATION_ADDRESS, "nonce": "0x0"},
            "chainId": chain_id,
            "signatureRequest": {"type": "eip7702Auth"},
        }
        logger.debug(f"Stub prepared user operation plus 7702 authorization for {sender}")
        return {"type": ARRAY_TYPE, "data": [authorization, user_op]}

    def send_prepared_calls(self, signed: Dict[str, Any]) -> Dict[str, Any]:
        self._record("wallet_sendPreparedCalls", [signed])
        units = signed.get("data") if signed.get("type") == ARRAY_TYPE else [signed]
        for unit in units or []:
            signature = unit.get("signature") or {}
            if not str(signature.get("data", "")).startswith("0x"):
                raise RelayerResponseError(f"Unit of type {unit.get('type')} is not signed", INVALID_PARAMS)

        call_id = "0x" + _digest(signed).hex()
        with self._lock:
            self._progress[call_id] = 0
        return {"preparedCallIds": [call_id]}

    def get_calls_status(self, call_id: str) -> Dict[str, Any]:
        self._record("wallet_getCallsStatus", [call_id])
        with self._lock:
            if call_id not in self._progress:
                raise RelayerResponseError(f"Unknown call id {call_id}", INVALID_PARAMS)
            index = self._progress[call_id]
            self._progress[call_id] = index + 1
        status = self.statuses[min(index, len(self.statuses) - 1)]

        result: Dict[str, Any] = {"id": call_id, "status": status}
        if status == 200:
            result["receipts"] = [{
                "transactionHash": "0x" + keccak(text=call_id).hex(),
                "status": "0x1",
                "blockNumber": hex(index + 1),
                "logs": [],
            }]
        return result

    def _record(self, method: str, params: Any) -> None:
        with self._lock:
            self.requests.append((method, params))
