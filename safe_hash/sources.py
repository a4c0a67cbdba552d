"""
Normalization of the possible transaction sources into ``TransactionParameters``.

A transaction comes from exactly one of: a record fetched from the Safe
transaction service, a transaction input file, or manually supplied fields.
"""
import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .exceptions import DecodingError
from .models import SafeTransaction, TransactionParameters, TxFileInput, UserTransactionArgs

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _build(**fields) -> TransactionParameters:
    try:
        return TransactionParameters(**fields)
    except ValidationError as e:
        raise DecodingError(f"Invalid transaction parameters: {e}") from e


def from_api_record(api_tx: SafeTransaction) -> TransactionParameters:
    return _build(
        to=api_tx.to,
        value=api_tx.value,
        data=api_tx.data,
        operation=api_tx.operation,
        safe_tx_gas=api_tx.safe_tx_gas,
        base_gas=api_tx.base_gas,
        gas_price=api_tx.gas_price,
        gas_token=api_tx.gas_token,
        refund_receiver=api_tx.refund_receiver,
        nonce=api_tx.nonce,
        signatures=api_tx.signatures,
    )


def from_tx_file(tx_file: TxFileInput, nonce: int = 0) -> TransactionParameters:
    return _build(
        to=tx_file.to,
        value=tx_file.value,
        data=tx_file.data,
        operation=tx_file.operation,
        safe_tx_gas=tx_file.safe_tx_gas,
        base_gas=tx_file.resolved_base_gas(),
        gas_price=tx_file.gas_price,
        gas_token=tx_file.gas_token,
        refund_receiver=tx_file.refund_receiver,
        nonce=nonce,
        signatures=tx_file.signatures,
    )


def from_manual(args: UserTransactionArgs, nonce: int = 0) -> TransactionParameters:
    """
    Raises:
        DecodingError: If the destination address was not supplied
    """
    if args.to is None:
        raise DecodingError("The 'to' address is required when no transaction record is available")
    return _build(nonce=nonce, **args.model_dump())


def resolve_transaction(
    api: Optional[SafeTransaction] = None,
    file: Optional[TxFileInput] = None,
    manual: Optional[UserTransactionArgs] = None,
    nonce: int = 0,
) -> TransactionParameters:
    """
    Build ``TransactionParameters`` from exactly one source.

    Args:
        api: Record fetched from the transaction service (carries its own nonce)
        file: Parsed transaction input file
        manual: Manually supplied fields
        nonce: Nonce for file and manual sources

    Raises:
        ValueError: If zero or several sources are given
        DecodingError: If the chosen source does not hold a valid transaction
    """
    given = [name for name, source in (("api", api), ("file", file), ("manual", manual))
             if source is not None]
    if len(given) != 1:
        raise ValueError(f"Exactly one transaction source is required, got {len(given)}: {given}")

    logger.debug(f"Resolving transaction from {given[0]} source")
    if api is not None:
        return from_api_record(api)
    if file is not None:
        return from_tx_file(file, nonce)
    return from_manual(manual, nonce)


def load_tx_file(path: PathLike) -> TxFileInput:
    """
    Read a transaction input file.

    Raises:
        DecodingError: If the file cannot be read or is not a valid transaction
    """
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            raw = json.load(f)
        return TxFileInput.model_validate(raw)
    except OSError as e:
        raise DecodingError(f"Cannot read transaction file {path}: {e}") from e
    except (ValueError, ValidationError) as e:
        raise DecodingError(f"Invalid transaction file {path}: {e}") from e


def read_text_file(path: PathLike) -> str:
    """
    Read a message or typed-data file as UTF-8 text.

    Raises:
        DecodingError: If the file cannot be read
    """
    try:
        with Path(path).open("r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DecodingError(f"Cannot read {path}: {e}") from e
