"""
Data models for the safe-hash package.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .exceptions import DecodingError
from .utils import ZERO_ADDRESS, hex_to_bytes, normalize_address, to_hex

UINT256_MAX = 2 ** 256 - 1
CALL = 0
DELEGATE_CALL = 1


def _validate_address(value: Any) -> str:
    try:
        return normalize_address(value)
    except DecodingError as e:
        raise ValueError(str(e)) from e


def _validate_hex(value: Any) -> str:
    if value is None:
        return "0x"
    try:
        return to_hex(hex_to_bytes(value))
    except DecodingError as e:
        raise ValueError(str(e)) from e


def _validate_uint256(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Expected an unsigned integer, got bool")
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise ValueError(f"Invalid unsigned integer: {text!r}") from None
    if not isinstance(value, int):
        raise ValueError(f"Expected an unsigned integer, got {type(value).__name__}")
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Value {value} does not fit in 256 bits")
    return value


class TransactionParameters(BaseModel):
    """The ten SafeTx fields plus signatures, normalized and immutable."""
    to: str
    value: int = 0
    data: str = "0x"
    operation: int = CALL
    safe_tx_gas: int = 0
    base_gas: int = 0
    gas_price: int = 0
    gas_token: str = ZERO_ADDRESS
    refund_receiver: str = ZERO_ADDRESS
    nonce: int = 0
    signatures: str = "0x"

    class Config:
        frozen = True

    @field_validator("to", "gas_token", "refund_receiver", mode="before")
    @classmethod
    def _address(cls, v):
        return _validate_address(v)

    @field_validator("data", "signatures", mode="before")
    @classmethod
    def _hex(cls, v):
        return _validate_hex(v)

    @field_validator("value", "safe_tx_gas", "base_gas", "gas_price", "nonce", mode="before")
    @classmethod
    def _uint(cls, v):
        return _validate_uint256(v)

    @field_validator("operation", mode="before")
    @classmethod
    def _operation(cls, v):
        v = _validate_uint256(v)
        if v not in (CALL, DELEGATE_CALL):
            raise ValueError(f"operation must be 0 (call) or 1 (delegatecall), got {v}")
        return v

    @property
    def data_bytes(self) -> bytes:
        return hex_to_bytes(self.data)

    @property
    def signatures_bytes(self) -> bytes:
        return hex_to_bytes(self.signatures)


class UserTransactionArgs(BaseModel):
    """
    Transaction fields as supplied by the user.

    Fields left at their defaults are treated as "not supplied" when compared
    against a fetched record.
    """
    to: Optional[str] = None
    value: int = 0
    data: str = "0x"
    operation: int = CALL
    safe_tx_gas: int = 0
    base_gas: int = 0
    gas_price: int = 0
    gas_token: str = ZERO_ADDRESS
    refund_receiver: str = ZERO_ADDRESS
    signatures: str = "0x"

    @field_validator("to", mode="before")
    @classmethod
    def _optional_address(cls, v):
        return None if v is None else _validate_address(v)

    @field_validator("gas_token", "refund_receiver", mode="before")
    @classmethod
    def _address(cls, v):
        return _validate_address(v)

    @field_validator("data", "signatures", mode="before")
    @classmethod
    def _hex(cls, v):
        return _validate_hex(v)

    @field_validator("value", "safe_tx_gas", "base_gas", "gas_price", "operation", mode="before")
    @classmethod
    def _uint(cls, v):
        return _validate_uint256(v)


class Parameter(BaseModel):
    name: str
    type: str
    value: Any = None
    value_decoded: Optional[Any] = Field(None, alias="valueDecoded")

    class Config:
        populate_by_name = True


class DataDecoded(BaseModel):
    method: str
    parameters: List[Parameter] = []


class Confirmation(BaseModel):
    owner: str
    submission_date: Optional[str] = Field(None, alias="submissionDate")
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    signature_type: Optional[str] = Field(None, alias="signatureType")
    signature: Optional[str] = None

    class Config:
        populate_by_name = True


class SafeTransaction(BaseModel):
    """A multisig transaction record from the Safe transaction service."""
    safe: str
    to: str
    value: str = "0"
    data: Optional[str] = None
    data_decoded: Optional[DataDecoded] = Field(None, alias="dataDecoded")
    operation: int = CALL
    gas_token: str = Field(ZERO_ADDRESS, alias="gasToken")
    safe_tx_gas: int = Field(0, alias="safeTxGas")
    base_gas: int = Field(0, alias="baseGas")
    gas_price: str = Field("0", alias="gasPrice")
    refund_receiver: str = Field(ZERO_ADDRESS, alias="refundReceiver")
    nonce: int
    safe_tx_hash: str = Field(..., alias="safeTxHash")
    confirmations_required: Optional[int] = Field(None, alias="confirmationsRequired")
    confirmations: List[Confirmation] = []
    signatures: Optional[str] = None
    proposer: Optional[str] = None
    execution_date: Optional[str] = Field(None, alias="executionDate")
    submission_date: Optional[str] = Field(None, alias="submissionDate")
    modified: Optional[str] = None
    block_number: Optional[int] = Field(None, alias="blockNumber")
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    executor: Optional[str] = None
    is_executed: bool = Field(False, alias="isExecuted")
    is_successful: Optional[bool] = Field(None, alias="isSuccessful")
    origin: Optional[Union[str, Dict[str, Any]]] = None
    trusted: Optional[bool] = None

    class Config:
        populate_by_name = True

    @field_validator("gas_price", "value", mode="before")
    @classmethod
    def _stringify(cls, v):
        return "0" if v is None else str(v)

    @field_validator("safe_tx_gas", "base_gas", mode="before")
    @classmethod
    def _gas(cls, v):
        return 0 if v is None else v


class SafeApiResponse(BaseModel):
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[SafeTransaction] = []


class TxFileInput(BaseModel):
    """
    Transaction input file, as copied from a Tenderly simulation.

    Pre-1.0.0 Safes name the ``baseGas`` field ``dataGas``; exactly one of the
    two must be present.
    """
    to: str
    value: int = 0
    data: str = "0x"
    operation: int = CALL
    safe_tx_gas: int = Field(0, alias="safeTxGas")
    base_gas: Optional[int] = Field(None, alias="baseGas")
    data_gas: Optional[int] = Field(None, alias="dataGas")
    gas_price: int = Field(0, alias="gasPrice")
    gas_token: str = Field(ZERO_ADDRESS, alias="gasToken")
    refund_receiver: str = Field(ZERO_ADDRESS, alias="refundReceiver")
    signatures: str = "0x"

    class Config:
        populate_by_name = True

    @field_validator("value", "safe_tx_gas", "base_gas", "data_gas", "gas_price", "operation",
                     mode="before")
    @classmethod
    def _uint(cls, v):
        return None if v is None else _validate_uint256(v)

    @model_validator(mode="after")
    def _one_gas_field(self):
        if (self.base_gas is None) == (self.data_gas is None):
            raise ValueError("exactly one of baseGas or dataGas must be provided")
        return self

    def resolved_base_gas(self) -> int:
        return self.base_gas if self.base_gas is not None else self.data_gas


class Mismatch(BaseModel):
    """A field whose user-supplied value disagrees with the fetched record."""
    field: str
    api_value: str
    user_value: str


@dataclass(frozen=True)
class HashTriple:
    """Domain hash, message (struct) hash and the final hash that gets signed."""
    domain_hash: bytes
    message_hash: bytes
    safe_hash: bytes
    raw_message_hash: Optional[bytes] = None

    def as_hex(self) -> Dict[str, str]:
        result = {
            "domain_hash": self.domain_hash.hex(),
            "message_hash": self.message_hash.hex(),
            "safe_hash": self.safe_hash.hex(),
        }
        if self.raw_message_hash is not None:
            result["raw_message_hash"] = self.raw_message_hash.hex()
        return result
