"""
Local private-key signer.
"""
import logging
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.messages import SignableMessage
from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from ..exceptions import SigningError

logger = logging.getLogger(__name__)


class LocalSigner:
    """
    Signer holding a secp256k1 private key in process memory.

    The key never leaves this object: only addresses and signatures do.
    """

    def __init__(self, private_key: Optional[str] = None, account: Optional[LocalAccount] = None):
        """
        Initialize the signer

        Args:
            private_key: Hex private key
            account: Existing eth-account LocalAccount (instead of private_key)

        Raises:
            SigningError: If no key material is given or the key is invalid
        """
        if account is None:
            if not private_key:
                raise SigningError("Private key material is unavailable")
            try:
                account = Account.from_key(private_key)
            except (ValueError, TypeError) as e:
                raise SigningError(f"Invalid private key: {type(e).__name__}") from e
        self._account = account

    @classmethod
    def generate(cls) -> "LocalSigner":
        """Create a signer for a fresh random private key"""
        signer = cls(account=Account.create())
        logger.debug(f"Generated new signer {signer.address}")
        return signer

    @property
    def address(self) -> str:
        return self._account.address

    def sign_message(self, message: SignableMessage) -> str:
        return to_hex(self._account.sign_message(message).signature)

    def sign_typed_data(self, typed_data: Dict[str, Any]) -> str:
        return to_hex(self._account.sign_typed_data(full_message=typed_data).signature)

    def sign_hash(self, digest: bytes) -> str:
        if len(digest) != 32:
            raise SigningError(f"Digest must be 32 bytes, got {len(digest)}")
        return to_hex(self._account.unsafe_sign_hash(digest).signature)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"
