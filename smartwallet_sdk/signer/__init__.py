"""
Signer interfaces for the SmartWallet SDK.
"""
from typing import Any, Dict, Protocol, runtime_checkable

from eth_account.messages import SignableMessage

from .local import LocalSigner


@runtime_checkable
class Signer(Protocol):
    """Protocol for custom signers; signatures are returned as 0x-prefixed hex"""
    address: str

    def sign_message(self, message: SignableMessage) -> str:
        """Sign an EIP-191 message"""
        ...

    def sign_typed_data(self, typed_data: Dict[str, Any]) -> str:
        """Sign an EIP-712 typed-data payload"""
        ...

    def sign_hash(self, digest: bytes) -> str:
        """Sign a raw 32-byte digest"""
        ...


__all__ = ['Signer', 'LocalSigner']
