"""
Tests for signers.
"""
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from smartwallet_sdk.exceptions import SigningError, SmartWalletError
from smartwallet_sdk.signer import LocalSigner, Signer

from tests.test_helpers import TEST_PRIV_KEY


def test_local_signer_address(signer):
    assert signer.address == Account.from_key(TEST_PRIV_KEY).address
    assert isinstance(signer, Signer)


def test_generated_signers_differ():
    assert LocalSigner.generate().address != LocalSigner.generate().address


@pytest.mark.parametrize("key", [None, "", "0x1234", "not-hex"])
def test_unusable_key(key):
    with pytest.raises(SigningError) as exc_info:
        LocalSigner(key)
    assert isinstance(exc_info.value, SmartWalletError)
    assert exc_info.value.step == "sign"


def test_invalid_key_not_echoed():
    with pytest.raises(SigningError) as exc_info:
        LocalSigner("0xdeadbeef")
    assert "deadbeef" not in str(exc_info.value)


def test_sign_message(signer):
    message = encode_defunct(text="hello")
    signature = signer.sign_message(message)
    assert signature.startswith("0x") and len(signature) == 132
    assert Account.recover_message(message, signature=signature) == signer.address


def test_sign_hash_requires_32_bytes(signer):
    with pytest.raises(SigningError):
        signer.sign_hash(b"\x00" * 31)


def test_sign_hash_is_deterministic(signer):
    assert signer.sign_hash(b"\x01" * 32) == signer.sign_hash(b"\x01" * 32)


def test_repr_hides_key(signer):
    assert TEST_PRIV_KEY[2:] not in repr(signer)
    assert signer.address in repr(signer)


def test_custom_signer_protocol():
    class Remote:
        address = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

        def sign_message(self, message):
            return "0x00"

        def sign_typed_data(self, typed_data):
            return "0x00"

        def sign_hash(self, digest):
            return "0x00"

    assert isinstance(Remote(), Signer)
    assert not isinstance(object(), Signer)
