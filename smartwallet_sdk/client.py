"""
SmartWalletClient - Main client for the smart-wallet calls protocol.
"""
import logging
import threading
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import ValidationError

from .config import WalletConfig
from .exceptions import EncodingError, PollError, PreparationError, SubmissionError
from .models import (
    AccountInfo, Call, CallStatus, Capabilities, PreparedCalls, SignedCalls,
    SubmissionResult, prepared_calls_from_response
)
from .poller import StatusPoller
from .relayer import RelayerError, RelayerResponseError, RelayerTransport, get_transport
from .signer import LocalSigner, Signer
from .signing import sign_prepared_calls

CallLike = Union[Call, Dict[str, Any]]


class SmartWalletClient:
    """
    Client for preparing, signing, submitting and tracking smart-wallet calls.

    This client handles:
    1. Looking up the smart-wallet account owned by a signer
    2. Preparing batches of calls with the relaying service
    3. Signing the prepared units locally
    4. Submitting signed calls and polling them to a terminal status

    To use this client, you'll need:
    - A WalletConfig (gas policy id and relayer access key)
    - Either a private key or a custom signer
    """

    def __init__(
        self,
        config: WalletConfig,
        priv_key: Optional[str] = None,
        signer: Optional[Signer] = None,
        transport: Optional[RelayerTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the SmartWalletClient

        Args:
            config: Wallet configuration loaded at process start
            priv_key: Private key of the root signer (optional if signer provided)
            signer: Custom signer object (optional if priv_key provided)
            transport: Relayer transport (defaults to HTTP for config.relayer_url)
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self.signer = signer
        if self.signer is None and priv_key:
            self.signer = LocalSigner(priv_key)

        self.transport = transport or get_transport(config)
        self.poller = StatusPoller(
            self.get_calls_status,
            interval=config.poll_interval,
            timeout=config.poll_timeout,
            logger=self.logger
        )

    @property
    def address(self) -> str:
        """
        Get the signer address

        Raises:
            ValueError: If no signer is available
        """
        if self.signer is None:
            raise ValueError("No signer available")
        return self.signer.address

    def request_account(self, signer_address: Optional[str] = None) -> AccountInfo:
        """
        Get the smart-wallet account controlled by a signer.

        The address is derived by the service from the signer and stays the
        same before and after the account is deployed.

        Args:
            signer_address: Owner address (defaults to this client's signer)

        Returns:
            AccountInfo with the account address

        Raises:
            PreparationError: If the relayer lookup fails
        """
        owner = signer_address or self.address
        try:
            result = self.transport.request_account(owner)
            account = AccountInfo.model_validate(result)
        except RelayerError as e:
            raise PreparationError(f"Account lookup failed: {e}", getattr(e, "error_code", None)) from e
        except ValidationError as e:
            raise PreparationError(f"Malformed account response: {e}") from e

        self.logger.debug(f"Smart wallet address: {account.address}")
        return account

    def prepare_calls(
        self,
        calls: Sequence[CallLike],
        from_address: str,
        capabilities: Optional[Capabilities] = None
    ) -> PreparedCalls:
        """
        Prepare a batch of calls for signing.

        Args:
            calls: Calls to execute atomically, in order
            from_address: Smart-wallet account (or 7702-delegated signer) sending the calls
            capabilities: Batch options; defaults to sponsorship under the
                configured policy without delegation

        Returns:
            SinglePreparedCalls or BatchPreparedCalls, following the shape of
            the relayer response

        Raises:
            EncodingError: If a call is malformed
            PreparationError: If the relayer rejects the request or cannot be reached
        """
        if not calls:
            raise EncodingError("At least one call is required")
        try:
            parsed = [c if isinstance(c, Call) else Call.model_validate(c) for c in calls]
        except ValidationError as e:
            raise EncodingError(f"Malformed call: {e}") from e

        if capabilities is None:
            capabilities = Capabilities.sponsored(self.config.policy_id)

        request = {
            "calls": [call.to_rpc() for call in parsed],
            "from": from_address,
            "chainId": self.config.chain_id_hex,
            "capabilities": capabilities.to_rpc(),
        }
        self.logger.debug(
            f"Preparing {len(parsed)} call(s) from {from_address} "
            f"with capabilities {request['capabilities']}"
        )

        try:
            result = self.transport.prepare_calls(request)
        except RelayerError as e:
            self.logger.error(f"Prepare calls failed: {e}")
            raise PreparationError(f"Prepare calls failed: {e}", getattr(e, "error_code", None)) from e

        prepared = prepared_calls_from_response(result)
        if capabilities.eip7702_auth and prepared.kind != "batch":
            self.logger.debug("Delegation requested but relayer returned a single unit")
        return prepared

    def sign_prepared_calls(self, prepared: PreparedCalls) -> SignedCalls:
        """
        Sign prepared calls with this client's signer.

        Raises:
            SigningError: If no signer is available or a unit cannot be signed
        """
        signed = sign_prepared_calls(prepared, self.signer)
        self.logger.debug(f"Signed {len(signed.units)} unit(s)")
        return signed

    def send_prepared_calls(self, signed: SignedCalls) -> SubmissionResult:
        """
        Submit signed calls to the relaying service.

        Returns:
            SubmissionResult with the tracking identifiers

        Raises:
            SubmissionError: On transport failure, service rejection or an empty result
        """
        try:
            result = self.transport.send_prepared_calls(signed.to_rpc())
        except RelayerError as e:
            self.logger.error(f"Send prepared calls failed: {e}")
            raise SubmissionError(f"Send prepared calls failed: {e}", getattr(e, "error_code", None)) from e

        submission = SubmissionResult.from_response(result)
        self.logger.debug(f"Relayer accepted calls as {submission.prepared_call_ids}")
        return submission

    def get_calls_status(self, call_id: str) -> CallStatus:
        """
        Query the current status of a call id once.

        Raises:
            PollError: If the status cannot be fetched or parsed
        """
        try:
            result = self.transport.get_calls_status(call_id)
        except RelayerResponseError as e:
            raise PollError(f"Status query for {call_id} rejected: {e}", e.error_code) from e
        except RelayerError as e:
            raise PollError(f"Status query for {call_id} failed: {e}") from e

        try:
            return CallStatus.model_validate(result)
        except ValidationError as e:
            raise PollError(f"Malformed status response for {call_id}: {e}") from e

    def wait_for_calls_status(
        self,
        call_id: str,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None
    ) -> CallStatus:
        """
        Poll a call id until success.

        Raises:
            PollError: On a terminal failure status
            PollTimeoutError: If the deadline passes while pending
            PollCancelledError: If ``cancel_event`` is set
        """
        return self.poller.poll(call_id, cancel_event=cancel_event, timeout=timeout)

    def send_calls(
        self,
        calls: Sequence[CallLike],
        from_address: str,
        capabilities: Optional[Capabilities] = None,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None
    ) -> CallStatus:
        """
        Prepare, sign, submit and poll a batch of calls.

        Every step must succeed before the next starts; the first failure
        aborts the batch.

        Returns:
            The successful CallStatus of the submitted batch
        """
        prepared = self.prepare_calls(calls, from_address, capabilities)
        signed = self.sign_prepared_calls(prepared)
        submission = self.send_prepared_calls(signed)
        return self.wait_for_calls_status(
            submission.prepared_call_ids[0],
            cancel_event=cancel_event,
            timeout=timeout
        )

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
