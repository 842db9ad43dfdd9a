"""
Authorization descriptors for runtime-validated account calls.

The descriptor tells a modular account which validation path authorizes a
call: a one-byte validation mode, a four-byte big-endian entity id, and a
signature segment. For the root owner the segment is the single end marker
``0xFF``, meaning no signature data follows because ``msg.sender`` itself is
the authorization.
"""
from dataclasses import dataclass
from enum import IntEnum

from .exceptions import EncodingError

ENTITY_ID_BYTES = 4
MAX_ENTITY_ID = 2 ** 32 - 1
SIGNATURE_SEGMENT_END = b"\xff"
ROOT_OWNER_ENTITY_ID = 0


class ValidationMode(IntEnum):
    """Validation option flags of the validation locator"""
    SELECTOR_ASSOCIATED = 0x00
    GLOBAL = 0x01


@dataclass(frozen=True)
class AuthorizationDescriptor:
    mode: ValidationMode
    entity_id: int
    signature_segment: bytes = SIGNATURE_SEGMENT_END

    def encode(self) -> bytes:
        """
        Serialize as mode || entity id || signature segment.

        Raises:
            EncodingError: If the mode does not fit one byte or the entity id
                is not a uint32
        """
        mode = int(self.mode)
        if not 0 <= mode <= 0xFF:
            raise EncodingError(f"Validation mode must fit in one byte, got {mode}")
        if isinstance(self.entity_id, bool) or not isinstance(self.entity_id, int):
            raise EncodingError(f"Entity id must be an integer, got {self.entity_id!r}")
        if not 0 <= self.entity_id <= MAX_ENTITY_ID:
            raise EncodingError(f"Entity id must be a uint32, got {self.entity_id}")
        if not self.signature_segment:
            raise EncodingError("Signature segment must not be empty")
        return (
            bytes([mode])
            + self.entity_id.to_bytes(ENTITY_ID_BYTES, "big")
            + bytes(self.signature_segment)
        )


ROOT_OWNER = AuthorizationDescriptor(ValidationMode.GLOBAL, ROOT_OWNER_ENTITY_ID)


def root_owner_authorization() -> bytes:
    """Global validation by the account's root owner: ``0x01 00000000 ff``"""
    return ROOT_OWNER.encode()
