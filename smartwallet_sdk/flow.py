"""
Reference end-to-end flows.

1. Mint demo tokens to a counterfactual smart wallet; the first sponsored
   call also deploys it.
2. With EIP-7702 delegation on the root signer, pull the tokens back out of
   the smart wallet through ``executeWithRuntimeValidation`` (authorized by
   the signer being the root owner) and forward them to a destination, all in
   one sponsored, atomic batch.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from web3 import Web3

from . import abi
from .client import SmartWalletClient
from .encoder import encode_delegated_call, encode_function_call
from .models import Call, CallStatus, Capabilities, explorer_link

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = "0x1234123412341234123412341234123412341234"


def token_amount(amount: int) -> int:
    """Whole tokens to base units for an 18-decimal token"""
    return Web3.to_wei(amount, "ether")


@dataclass
class FlowResult:
    """Outcome of one reference batch"""
    call_id: str
    status: CallStatus
    explorer_url: Optional[str]


def _run(
    client: SmartWalletClient,
    calls,
    from_address: str,
    capabilities: Capabilities,
    cancel_event: Optional[threading.Event],
    on_submitted: Optional[Callable[[str], None]]
) -> FlowResult:
    prepared = client.prepare_calls(calls, from_address, capabilities)
    signed = client.sign_prepared_calls(prepared)
    submission = client.send_prepared_calls(signed)
    call_id = submission.prepared_call_ids[0]
    if on_submitted is not None:
        on_submitted(call_id)
    status = client.wait_for_calls_status(call_id, cancel_event=cancel_event)
    return FlowResult(
        call_id=call_id,
        status=status,
        explorer_url=explorer_link(client.config.explorer_base_url, status)
    )


def mint_and_deploy(
    client: SmartWalletClient,
    account_address: str,
    amount: int = 100,
    token: str = abi.DEMO_TOKEN_ADDRESS,
    cancel_event: Optional[threading.Event] = None,
    on_submitted: Optional[Callable[[str], None]] = None
) -> FlowResult:
    """
    Mint ``amount`` tokens to the smart wallet, deploying it on first use.

    ``on_submitted`` is called with the call id as soon as the batch is
    accepted, before polling starts.

    Returns:
        FlowResult of the settled batch
    """
    calls = [
        Call(
            to=token,
            data=encode_function_call(abi.ERC20_MINT, (account_address, token_amount(amount)))
        )
    ]
    capabilities = Capabilities.sponsored(client.config.policy_id)
    result = _run(client, calls, account_address, capabilities, cancel_event, on_submitted)
    logger.info(f"Minted {amount} tokens to {account_address} in call {result.call_id}")
    return result


def withdraw_via_delegation(
    client: SmartWalletClient,
    account_address: str,
    destination: str = DEFAULT_DESTINATION,
    amount: int = 100,
    token: str = abi.DEMO_TOKEN_ADDRESS,
    cancel_event: Optional[threading.Event] = None,
    on_submitted: Optional[Callable[[str], None]] = None
) -> FlowResult:
    """
    Move tokens from the smart wallet to ``destination`` via the 7702-delegated signer.

    The batch is sent from the signer address itself: the first call has the
    smart wallet transfer the tokens to the signer, the second transfers them
    on to the destination.

    Returns:
        FlowResult of the settled batch
    """
    signer_address = client.address
    value = token_amount(amount)
    calls = [
        Call(
            to=account_address,
            data=encode_delegated_call(token, abi.ERC20_TRANSFER, (signer_address, value))
        ),
        Call(
            to=token,
            data=encode_function_call(abi.ERC20_TRANSFER, (destination, value))
        ),
    ]
    capabilities = Capabilities.sponsored(client.config.policy_id, eip7702_auth=True)
    result = _run(client, calls, signer_address, capabilities, cancel_event, on_submitted)
    logger.info(f"Moved {amount} tokens from {account_address} to {destination} in call {result.call_id}")
    return result
