"""
Tests for authorization descriptors.
"""
import pytest

from smartwallet_sdk.authorization import (
    AuthorizationDescriptor, ValidationMode, ROOT_OWNER, SIGNATURE_SEGMENT_END,
    root_owner_authorization
)
from smartwallet_sdk.exceptions import EncodingError


def test_root_owner_constant():
    """Global validation, entity id 0, no explicit signature"""
    assert root_owner_authorization() == bytes.fromhex("01" "00000000" "ff")
    assert len(root_owner_authorization()) == 6


def test_root_owner_descriptor_fields():
    assert ROOT_OWNER.mode == ValidationMode.GLOBAL
    assert ROOT_OWNER.entity_id == 0
    assert ROOT_OWNER.signature_segment == SIGNATURE_SEGMENT_END


def test_entity_id_is_big_endian():
    encoded = AuthorizationDescriptor(ValidationMode.SELECTOR_ASSOCIATED, 0x01020304).encode()
    assert encoded == bytes.fromhex("00" "01020304" "ff")


def test_explicit_signature_segment_appended_last():
    encoded = AuthorizationDescriptor(ValidationMode.GLOBAL, 1, b"\x00\xaa\xbb\xff").encode()
    assert encoded == bytes.fromhex("01" "00000001" "00aabbff")


@pytest.mark.parametrize("entity_id", [-1, 2 ** 32, "0", True])
def test_invalid_entity_id(entity_id):
    with pytest.raises(EncodingError):
        AuthorizationDescriptor(ValidationMode.GLOBAL, entity_id).encode()


def test_mode_must_fit_one_byte():
    with pytest.raises(EncodingError):
        AuthorizationDescriptor(0x100, 0).encode()


def test_empty_signature_segment():
    with pytest.raises(EncodingError):
        AuthorizationDescriptor(ValidationMode.GLOBAL, 0, b"").encode()
