"""
Generic EIP-712 typed-data hashing.

Computes the domain separator, the struct hash of the primary type and the
final signing hash for any typed-data document in the standard JSON layout
(``types``, ``domain``, ``primaryType``, ``message``).
"""
import json
import logging
import re
from typing import Any, Dict, List, Mapping, Set, Union

from pydantic import BaseModel, Field, ValidationError

from . import abi
from .exceptions import DecodingError, EncodingError
from .hasher import SafeHasher
from .models import HashTriple
from .utils import hex_to_bytes, keccak256

logger = logging.getLogger(__name__)

DOMAIN_TYPE_NAME = "EIP712Domain"

# Canonical EIP712Domain members, in the order they appear in the type string.
DOMAIN_FIELDS = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
)

_ARRAY_RE = re.compile(r"^(.+)\[(\d*)\]$")
_INT_RE = re.compile(r"^(u?)int(\d+)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(\d+)$")


class TypedField(BaseModel):
    name: str
    type: str


class TypedDataDocument(BaseModel):
    """An EIP-712 document: type definitions, domain, primary type and message."""
    types: Dict[str, List[TypedField]]
    primary_type: str = Field(..., alias="primaryType")
    domain: Dict[str, Any] = {}
    message: Dict[str, Any]

    class Config:
        populate_by_name = True

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "TypedDataDocument":
        """
        Parse a typed-data JSON document.

        Raises:
            DecodingError: If the text is not valid JSON or misses required keys
        """
        try:
            return cls.model_validate(json.loads(text))
        except (ValueError, ValidationError) as e:
            raise DecodingError(f"Invalid typed data document: {e}") from e


def _is_atomic(type_name: str) -> bool:
    if type_name in ("address", "bool", "string", "bytes"):
        return True
    m = _INT_RE.match(type_name)
    if m:
        bits = int(m.group(2))
        return 8 <= bits <= 256 and bits % 8 == 0
    m = _FIXED_BYTES_RE.match(type_name)
    return bool(m) and 1 <= int(m.group(1)) <= 32


def base_type(type_name: str) -> str:
    """Strip every array suffix: ``Person[][2]`` -> ``Person``."""
    while True:
        m = _ARRAY_RE.match(type_name)
        if not m:
            return type_name
        type_name = m.group(1)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise DecodingError("Expected an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        negative = text.startswith("-")
        digits = text[1:] if negative else text
        try:
            number = int(digits, 16) if digits.lower().startswith("0x") else int(digits, 10)
        except ValueError:
            raise DecodingError(f"Invalid integer: {value!r}") from None
        return -number if negative else number
    raise DecodingError(f"Expected an integer, got {type(value).__name__}")


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise DecodingError(f"Expected a boolean, got {value!r}")


def atomic_value(type_name: str, value: Any) -> abi.AbiValue:
    """Coerce a JSON value into the ``AbiValue`` for a static atomic type."""
    if type_name == "address":
        return abi.Address(value)
    if type_name == "bool":
        return abi.Bool(_to_bool(value))
    m = _INT_RE.match(type_name)
    if m:
        number, bits = _to_int(value), int(m.group(2))
        return abi.Int(number, bits) if not m.group(1) else abi.Uint(number, bits)
    m = _FIXED_BYTES_RE.match(type_name)
    if m:
        return abi.FixedBytes(hex_to_bytes(value), int(m.group(1)))
    raise DecodingError(f"Unknown type: {type_name}")


class TypedDataHasher:
    """
    Recursive EIP-712 hasher for an arbitrary ``TypedDataDocument``.

    Type definitions that reference themselves, directly or through other
    types, are rejected with ``DecodingError``.
    """

    def __init__(self, document: TypedDataDocument):
        self.document = document
        self.types: Dict[str, List[TypedField]] = dict(document.types)
        if DOMAIN_TYPE_NAME not in self.types:
            self.types[DOMAIN_TYPE_NAME] = self._derive_domain_type(document.domain)
        if document.primary_type not in self.types:
            raise DecodingError(f"Primary type {document.primary_type!r} is not defined")
        self._type_hashes: Dict[str, bytes] = {}

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "TypedDataHasher":
        return cls(TypedDataDocument.from_json(text))

    @staticmethod
    def _derive_domain_type(domain: Mapping[str, Any]) -> List[TypedField]:
        known = {name for name, _ in DOMAIN_FIELDS}
        unknown = sorted(set(domain) - known)
        if unknown:
            raise DecodingError(f"Unknown domain fields: {', '.join(unknown)}")
        return [TypedField(name=name, type=type_) for name, type_ in DOMAIN_FIELDS if name in domain]

    def dependencies(self, type_name: str) -> Set[str]:
        """Struct types transitively referenced by ``type_name``, excluding itself."""
        found: Set[str] = set()
        self._collect(type_name, found, [])
        found.discard(type_name)
        return found

    def _collect(self, type_name: str, found: Set[str], path: List[str]) -> None:
        if type_name in path:
            cycle = " -> ".join(path[path.index(type_name):] + [type_name])
            raise DecodingError(f"Cyclic type reference: {cycle}")
        if type_name in found:
            return
        found.add(type_name)
        for f in self.types[type_name]:
            referenced = base_type(f.type)
            if referenced in self.types:
                self._collect(referenced, found, path + [type_name])
            elif not _is_atomic(referenced):
                raise DecodingError(f"Type {type_name}.{f.name} references undefined type {referenced!r}")

    def encode_type(self, type_name: str) -> str:
        """``Name(type1 name1,...)`` followed by referenced types in alphabetical order."""
        if type_name not in self.types:
            raise DecodingError(f"Type {type_name!r} is not defined")
        ordered = [type_name] + sorted(self.dependencies(type_name))
        return "".join(
            f"{name}(" + ",".join(f"{f.type} {f.name}" for f in self.types[name]) + ")"
            for name in ordered
        )

    def type_hash(self, type_name: str) -> bytes:
        if type_name not in self._type_hashes:
            self._type_hashes[type_name] = keccak256(self.encode_type(type_name))
        return self._type_hashes[type_name]

    def encode_field(self, type_name: str, value: Any) -> bytes:
        """32-byte encoding of one member value."""
        m = _ARRAY_RE.match(type_name)
        if m:
            item_type, length = m.group(1), m.group(2)
            if not isinstance(value, (list, tuple)):
                raise DecodingError(f"Expected a list for {type_name}, got {type(value).__name__}")
            if length and len(value) != int(length):
                raise DecodingError(f"Expected {length} items for {type_name}, got {len(value)}")
            return keccak256(b"".join(self.encode_field(item_type, item) for item in value))
        if type_name in self.types:
            if not isinstance(value, Mapping):
                raise DecodingError(f"Expected an object for {type_name}, got {type(value).__name__}")
            return self.hash_struct(type_name, value)
        if type_name == "string":
            if not isinstance(value, str):
                raise DecodingError(f"Expected a string, got {type(value).__name__}")
            return keccak256(value.encode("utf-8"))
        if type_name == "bytes":
            return keccak256(hex_to_bytes(value))
        return abi.encode(atomic_value(type_name, value))

    def encode_data(self, type_name: str, data: Mapping[str, Any]) -> bytes:
        encoded = [self.type_hash(type_name)]
        for f in self.types[type_name]:
            if f.name not in data:
                raise DecodingError(f"Missing value for {type_name}.{f.name}")
            try:
                encoded.append(self.encode_field(f.type, data[f.name]))
            except EncodingError as e:
                raise DecodingError(f"Invalid value for {type_name}.{f.name}: {e}") from e
        return b"".join(encoded)

    def hash_struct(self, type_name: str, data: Mapping[str, Any]) -> bytes:
        return keccak256(self.encode_data(type_name, data))

    def domain_hash(self) -> bytes:
        return self.hash_struct(DOMAIN_TYPE_NAME, self.document.domain)

    def message_hash(self) -> bytes:
        return self.hash_struct(self.document.primary_type, self.document.message)

    def hashes(self) -> HashTriple:
        domain_hash = self.domain_hash()
        message_hash = self.message_hash()
        final = SafeHasher(domain_hash, message_hash).hash()
        logger.debug(f"Typed data {self.document.primary_type} hashed to {final.hex()}")
        return HashTriple(domain_hash=domain_hash, message_hash=message_hash, safe_hash=final)

    def hash(self) -> bytes:
        return self.hashes().safe_hash


def typed_data_hashes(document: Union[TypedDataDocument, str, bytes, Mapping[str, Any]]) -> HashTriple:
    """Domain hash, message hash and signing hash of a typed-data document."""
    if isinstance(document, (str, bytes)):
        document = TypedDataDocument.from_json(document)
    elif not isinstance(document, TypedDataDocument):
        try:
            document = TypedDataDocument.model_validate(document)
        except ValidationError as e:
            raise DecodingError(f"Invalid typed data document: {e}") from e
    return TypedDataHasher(document).hashes()
