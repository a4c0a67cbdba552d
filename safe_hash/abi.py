"""
ABI value tree, encoding and display.

An ``AbiValue`` is a small tagged-union tree describing a Solidity value
together with its exact ABI type. The tree validates widths and ranges on
construction; the canonical head/tail byte layout is produced by ``eth_abi``.

Display helpers render a tree for humans. Display output is cosmetic and is
never fed back into hashing.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi import exceptions as abi_exceptions
from eth_abi import grammar
from web3 import Web3

from .exceptions import DecodingError, EncodingError
from .utils import hex_to_bytes, to_hex

logger = logging.getLogger(__name__)

# Integers at or above this value get a scientific-notation suffix in display mode
EXP_DISPLAY_THRESHOLD = 10_000
EXP_DISPLAY_PRECISION = 4


def _check_bits(bits: int) -> None:
    if not isinstance(bits, int) or bits < 8 or bits > 256 or bits % 8:
        raise EncodingError(f"Invalid integer width: {bits}")


def _as_bytes(value: Union[str, bytes], what: str) -> bytes:
    try:
        return hex_to_bytes(value)
    except DecodingError as e:
        raise EncodingError(f"Invalid {what}: {e}") from e


class AbiValue(ABC):
    """Base class for every node of an ABI value tree."""

    @property
    @abstractmethod
    def abi_type(self) -> str:
        """Canonical ABI type string, e.g. ``uint256`` or ``(address,bytes)``."""

    @abstractmethod
    def to_abi(self) -> Any:
        """Python representation accepted by ``eth_abi.encode``."""

    @property
    def is_dynamic(self) -> bool:
        return False


@dataclass(frozen=True)
class Address(AbiValue):
    value: bytes

    def __post_init__(self):
        raw = _as_bytes(self.value, "address")
        if len(raw) != 20:
            raise EncodingError(f"Address must be 20 bytes, got {len(raw)}")
        object.__setattr__(self, "value", raw)

    @property
    def abi_type(self) -> str:
        return "address"

    @property
    def checksum(self) -> str:
        return Web3.to_checksum_address(self.value)

    def to_abi(self) -> str:
        return self.checksum


@dataclass(frozen=True)
class Bool(AbiValue):
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise EncodingError(f"Expected bool, got {type(self.value).__name__}")

    @property
    def abi_type(self) -> str:
        return "bool"

    def to_abi(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Uint(AbiValue):
    value: int
    bits: int = 256

    def __post_init__(self):
        _check_bits(self.bits)
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise EncodingError(f"Expected int for uint{self.bits}, got {type(self.value).__name__}")
        if not 0 <= self.value < 2 ** self.bits:
            raise EncodingError(f"Value {self.value} out of range for uint{self.bits}")

    @property
    def abi_type(self) -> str:
        return f"uint{self.bits}"

    def to_abi(self) -> int:
        return self.value


@dataclass(frozen=True)
class Int(AbiValue):
    value: int
    bits: int = 256

    def __post_init__(self):
        _check_bits(self.bits)
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise EncodingError(f"Expected int for int{self.bits}, got {type(self.value).__name__}")
        bound = 2 ** (self.bits - 1)
        if not -bound <= self.value < bound:
            raise EncodingError(f"Value {self.value} out of range for int{self.bits}")

    @property
    def abi_type(self) -> str:
        return f"int{self.bits}"

    def to_abi(self) -> int:
        return self.value


@dataclass(frozen=True)
class FixedBytes(AbiValue):
    """``bytesN``. Shorter input is right-padded with zeros to ``size`` bytes."""
    value: bytes
    size: int = 32

    def __post_init__(self):
        if not isinstance(self.size, int) or not 1 <= self.size <= 32:
            raise EncodingError(f"Invalid fixed bytes width: {self.size}")
        raw = _as_bytes(self.value, f"bytes{self.size}")
        if len(raw) > self.size:
            raise EncodingError(f"{len(raw)} bytes do not fit in bytes{self.size}")
        object.__setattr__(self, "value", raw.ljust(self.size, b"\x00"))

    @property
    def abi_type(self) -> str:
        return f"bytes{self.size}"

    def to_abi(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class Bytes(AbiValue):
    value: bytes

    def __post_init__(self):
        object.__setattr__(self, "value", _as_bytes(self.value, "bytes"))

    @property
    def abi_type(self) -> str:
        return "bytes"

    @property
    def is_dynamic(self) -> bool:
        return True

    def to_abi(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class String(AbiValue):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise EncodingError(f"Expected str, got {type(self.value).__name__}")

    @property
    def abi_type(self) -> str:
        return "string"

    @property
    def is_dynamic(self) -> bool:
        return True

    def to_abi(self) -> str:
        return self.value


@dataclass(frozen=True)
class Array(AbiValue):
    """Dynamic-length array ``T[]``. ``item_type`` is required so empty arrays encode."""
    items: Sequence[AbiValue]
    item_type: str

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        for item in self.items:
            if item.abi_type != self.item_type:
                raise EncodingError(
                    f"Array of {self.item_type} cannot hold {item.abi_type}"
                )

    @property
    def abi_type(self) -> str:
        return f"{self.item_type}[]"

    @property
    def is_dynamic(self) -> bool:
        return True

    def to_abi(self) -> list:
        return [item.to_abi() for item in self.items]


@dataclass(frozen=True)
class FixedArray(Array):
    """Fixed-length array ``T[k]``."""

    @property
    def abi_type(self) -> str:
        return f"{self.item_type}[{len(self.items)}]"

    @property
    def is_dynamic(self) -> bool:
        return any(item.is_dynamic for item in self.items)


@dataclass(frozen=True)
class Tuple(AbiValue):
    items: Sequence[AbiValue]

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def abi_type(self) -> str:
        return "(" + ",".join(item.abi_type for item in self.items) + ")"

    @property
    def is_dynamic(self) -> bool:
        return any(item.is_dynamic for item in self.items)

    def to_abi(self) -> tuple:
        return tuple(item.to_abi() for item in self.items)


@dataclass(frozen=True)
class Struct(Tuple):
    """A tuple that carries a struct name and field names for display."""
    name: str = ""
    field_names: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "field_names", tuple(self.field_names))


def _encode(types: List[str], args: List[Any]) -> bytes:
    try:
        return abi_encode(types, args)
    except (abi_exceptions.EncodingError, abi_exceptions.ABITypeError,
            abi_exceptions.ParseError, TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode {types}: {e}") from e


def encode(value: AbiValue) -> bytes:
    """
    Canonical ABI encoding of a single value.

    Static values (including static tuples) encode in place. A dynamic value
    is encoded behind a one-word offset head, as a lone argument would be.
    """
    return _encode([value.abi_type], [value.to_abi()])


def encode_params(values: Iterable[AbiValue]) -> bytes:
    """ABI-encode a flat list of values as function arguments."""
    values = list(values)
    return _encode([v.abi_type for v in values], [v.to_abi() for v in values])


def parse_type(type_str: str) -> grammar.ABIType:
    """
    Parse and validate an ABI type string.

    Raises:
        DecodingError: If the type string is malformed or unsupported
    """
    try:
        abi_type = grammar.parse(type_str)
        abi_type.validate()
    except (abi_exceptions.ParseError, abi_exceptions.ABITypeError, ValueError) as e:
        raise DecodingError(f"Invalid ABI type {type_str!r}: {e}") from e
    return abi_type


def from_python(type_str: Union[str, grammar.ABIType], value: Any) -> AbiValue:
    """
    Build an ``AbiValue`` tree from a type string and a plain Python value
    (as produced by ``eth_abi.decode``).
    """
    abi_type = parse_type(type_str) if isinstance(type_str, str) else type_str

    if abi_type.is_array:
        item_type = abi_type.item_type
        if not isinstance(value, (list, tuple)):
            raise EncodingError(f"Expected a sequence for {abi_type.to_type_str()}")
        items = [from_python(item_type, v) for v in value]
        dims = abi_type.arrlist[-1]
        if dims:
            if len(items) != dims[0]:
                raise EncodingError(
                    f"Expected {dims[0]} items for {abi_type.to_type_str()}, got {len(items)}"
                )
            return FixedArray(items, item_type.to_type_str())
        return Array(items, item_type.to_type_str())

    if isinstance(abi_type, grammar.TupleType):
        if not isinstance(value, (list, tuple)) or len(value) != len(abi_type.components):
            raise EncodingError(f"Expected {len(abi_type.components)} tuple members")
        return Tuple([from_python(c, v) for c, v in zip(abi_type.components, value)])

    base, sub = abi_type.base, abi_type.sub
    if base == "address":
        return Address(value)
    if base == "bool":
        return Bool(value)
    if base == "uint":
        return Uint(value, sub)
    if base == "int":
        return Int(value, sub)
    if base == "bytes":
        return FixedBytes(value, sub) if sub else Bytes(value)
    if base == "string":
        return String(value)
    raise DecodingError(f"Unsupported ABI type: {abi_type.to_type_str()}")


def decode_params(types: Sequence[str], data: bytes) -> List[AbiValue]:
    """
    Decode ABI-encoded function arguments into ``AbiValue`` trees.

    Raises:
        DecodingError: If the data does not decode against the given types
    """
    parsed = [parse_type(t) for t in types]
    try:
        decoded = abi_decode([t.to_type_str() for t in parsed], bytes(data))
    except (abi_exceptions.DecodingError, ValueError, OverflowError) as e:
        raise DecodingError(f"Failed to decode {list(types)}: {e}") from e
    try:
        return [from_python(t, v) for t, v in zip(parsed, decoded)]
    except EncodingError as e:
        raise DecodingError(str(e)) from e


def decode(type_str: str, data: bytes) -> AbiValue:
    """Decode a single ABI-encoded value."""
    return decode_params([type_str], data)[0]


# Display

def to_exp_notation(value: int, precision: int = EXP_DISPLAY_PRECISION,
                    trim_end_zeros: bool = True, sign: str = "") -> str:
    """Render a non-negative integer as ``m.mmmeN`` (e.g. 12314 -> 1.231e4)."""
    digits = str(value)
    exponent = len(digits) - 1
    mantissa = digits[:precision]
    if trim_end_zeros:
        mantissa = mantissa.rstrip("0") or "0"
    if len(mantissa) > 1:
        mantissa = mantissa[0] + "." + mantissa[1:]
    return f"{sign}{mantissa}e{exponent}"


def format_uint_exp(num: int) -> str:
    if num < EXP_DISPLAY_THRESHOLD:
        return str(num)
    return f"{num} [{to_exp_notation(num)}]"


def format_int_exp(num: int) -> str:
    sign = "-" if num < 0 else ""
    magnitude = abs(num)
    if magnitude < EXP_DISPLAY_THRESHOLD:
        return f"{sign}{magnitude}"
    return f"{sign}{magnitude} [{to_exp_notation(magnitude, sign=sign)}]"


def format_value(value: AbiValue, raw: bool = False) -> str:
    """
    Render an ``AbiValue`` tree as a human-readable string.

    Args:
        value: Tree to render
        raw: If False, large integers get an exponent suffix, strings are
            quoted and structs show their field names
    """
    if isinstance(value, Address):
        return value.checksum
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Uint):
        return str(value.value) if raw else format_uint_exp(value.value)
    if isinstance(value, Int):
        return str(value.value) if raw else format_int_exp(value.value)
    if isinstance(value, (FixedBytes, Bytes)):
        return to_hex(value.value)
    if isinstance(value, String):
        quoted = json.dumps(value.value, ensure_ascii=False)
        return quoted[1:-1] if raw else quoted
    if isinstance(value, Array):
        return "[" + _format_list(value.items, raw) + "]"
    if isinstance(value, Struct) and not raw:
        if len(value.field_names) == len(value.items):
            members = ", ".join(
                f"{name}: {format_value(item, raw)}"
                for name, item in zip(value.field_names, value.items)
            )
            return f"{value.name}({{ {members} }})"
        return value.name + "(" + _format_list(value.items, raw) + ")"
    if isinstance(value, Tuple):
        return "(" + _format_list(value.items, raw) + ")"
    raise TypeError(f"Cannot format {type(value).__name__}")


def _format_list(values: Iterable[AbiValue], raw: bool) -> str:
    return ", ".join(format_value(v, raw) for v in values)
