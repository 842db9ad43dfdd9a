"""
Calldata encoding for single and delegated contract calls.

A call's data is the 4-byte keccak selector of the canonical function
signature followed by the ABI encoding of its arguments. A delegated call
nests one level deep: the inner invocation is wrapped in the account's
``execute(target, value, data)``, which in turn becomes the first argument of
``executeWithRuntimeValidation(data, authorization)``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from eth_abi import decode, encode, is_encodable, is_encodable_type
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from . import abi
from .authorization import root_owner_authorization
from .exceptions import EncodingError

logger = logging.getLogger(__name__)


def _split_types(params: str) -> Tuple[str, ...]:
    """Split a parameter list on top-level commas, keeping tuple types intact."""
    types = []
    depth = 0
    current = ""
    for char in params:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise EncodingError(f"Unbalanced parentheses in parameter list '{params}'")
        if char == "," and depth == 0:
            types.append(current.strip())
            current = ""
        else:
            current += char
    if depth != 0:
        raise EncodingError(f"Unbalanced parentheses in parameter list '{params}'")
    if current.strip():
        types.append(current.strip())
    elif types:
        raise EncodingError(f"Empty parameter type in '{params}'")
    return tuple(types)


@dataclass(frozen=True)
class FunctionSignature:
    """Function name plus ordered parameter types, e.g. ``transfer(address,uint256)``"""
    name: str
    types: Tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> "FunctionSignature":
        """
        Parse a human-readable function signature.

        Raises:
            EncodingError: If the signature is malformed or names an unknown type
        """
        text = text.strip()
        open_idx = text.find("(")
        if open_idx <= 0 or not text.endswith(")"):
            raise EncodingError(f"Malformed function signature '{text}'")
        name = text[:open_idx].strip()
        if not name.isidentifier():
            raise EncodingError(f"Invalid function name '{name}'")

        types = _split_types(text[open_idx + 1:-1])
        for typ in types:
            if any(ch.isspace() for ch in typ):
                raise EncodingError(f"Parameter names are not allowed in signatures: '{typ}'")
            if not is_encodable_type(typ):
                raise EncodingError(f"Unknown ABI type '{typ}' in '{text}'")
        return cls(name=name, types=types)

    @property
    def canonical(self) -> str:
        return f"{self.name}({','.join(self.types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.canonical)


def _as_signature(signature) -> FunctionSignature:
    if isinstance(signature, FunctionSignature):
        return signature
    return FunctionSignature.parse(signature)


def encode_function_call(signature, args: Sequence[Any] = ()) -> bytes:
    """
    Encode a function invocation.

    Args:
        signature: FunctionSignature or signature text such as ``mint(address,uint256)``
        args: Arguments matching the declared parameter types

    Returns:
        Selector followed by the ABI-encoded arguments

    Raises:
        EncodingError: On arity mismatch or an argument not encodable as its type
    """
    sig = _as_signature(signature)
    args = tuple(args)
    if len(args) != len(sig.types):
        raise EncodingError(
            f"{sig.canonical} expects {len(sig.types)} argument(s), got {len(args)}"
        )
    for position, (typ, arg) in enumerate(zip(sig.types, args)):
        if not is_encodable(typ, arg):
            raise EncodingError(
                f"Argument {position} of {sig.canonical} is not a valid {typ}: {arg!r}"
            )
    return sig.selector + encode(list(sig.types), list(args))


def _checksum_addresses(typ: str, value: Any) -> Any:
    """Checksum every address in a decoded value, descending into arrays and tuples."""
    if typ == "address":
        return to_checksum_address(value)
    if typ.endswith("]"):
        item_type = typ[:typ.rindex("[")]
        return tuple(_checksum_addresses(item_type, item) for item in value)
    if typ.startswith("("):
        return tuple(
            _checksum_addresses(component, item)
            for component, item in zip(_split_types(typ[1:-1]), value)
        )
    return value


def decode_function_call(signature, data: bytes) -> Tuple[Any, ...]:
    """
    Decode calldata produced by encode_function_call.

    Raises:
        EncodingError: If the selector does not match or the payload is malformed
    """
    sig = _as_signature(signature)
    data = bytes(data)
    if data[:4] != sig.selector:
        raise EncodingError(
            f"Selector 0x{data[:4].hex()} does not match {sig.canonical} (0x{sig.selector.hex()})"
        )
    try:
        values = decode(list(sig.types), data[4:])
    except DecodingError as e:
        raise EncodingError(f"Malformed arguments for {sig.canonical}: {e}") from e
    return tuple(_checksum_addresses(typ, value) for typ, value in zip(sig.types, values))


def encode_execute(target: str, value: int, data: bytes) -> bytes:
    """Encode the account's ``execute(target, value, data)``"""
    return encode_function_call(abi.EXECUTE, (target, value, data))


def encode_execute_with_runtime_validation(call_data: bytes, authorization: bytes) -> bytes:
    """Encode ``executeWithRuntimeValidation(data, authorization)``"""
    return encode_function_call(abi.EXECUTE_WITH_RUNTIME_VALIDATION, (call_data, authorization))


def encode_delegated_call(
    target: str,
    inner_signature,
    inner_args: Sequence[Any],
    value: int = 0,
    authorization: Optional[bytes] = None
) -> bytes:
    """
    Encode a call that an authorized party makes through a smart account.

    The returned bytes are the calldata for a call whose ``to`` is the smart
    account; the account then calls ``target`` with the inner invocation.

    Args:
        target: Contract the account should call
        inner_signature: Signature of the inner function
        inner_args: Arguments of the inner function
        value: Native value forwarded by the account
        authorization: Encoded authorization descriptor, defaults to the
            root-owner global validation

    Returns:
        Calldata for ``executeWithRuntimeValidation``
    """
    if authorization is None:
        authorization = root_owner_authorization()
    inner = encode_function_call(inner_signature, inner_args)
    execute = encode_execute(target, value, inner)
    logger.debug(f"Encoded delegated call to {target} ({len(inner)} byte inner payload)")
    return encode_execute_with_runtime_validation(execute, authorization)
