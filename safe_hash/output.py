"""
Console rendering of hashes, transaction details and warnings.
"""
import os
import sys
from typing import IO, Iterable, Optional

import typer

from .checks import SafeWarnings
from .config import NO_COLOR_ENV
from .decoder import DecodedCall
from .models import HashTriple, Mismatch, SafeTransaction

LABEL_WIDTH = 24


def should_use_color(no_color: bool = False) -> bool:
    """Colour only when writing to a terminal and not disabled by flag or NO_COLOR."""
    if no_color or os.environ.get(NO_COLOR_ENV):
        return False
    return sys.stdout.isatty()


class Renderer:
    """Writes aligned ``label: value`` blocks to a stream."""

    def __init__(self, color: Optional[bool] = None, file: Optional[IO[str]] = None):
        self.color = color
        self.file = file

    def echo(self, text: str = "", **style) -> None:
        if style:
            text = typer.style(text, **style)
        typer.echo(text, file=self.file, color=self.color)

    def field(self, label: str, value, width: int = LABEL_WIDTH) -> None:
        self.echo(f"{label + ':':<{width}} {value}")

    def section(self, title: str) -> None:
        self.echo()
        self.echo(title, bold=True)

    def hashes(self, hashes: HashTriple) -> None:
        if hashes.raw_message_hash is not None:
            self.field("Raw Message Hash", hashes.raw_message_hash.hex())
        self.field("Domain Hash", hashes.domain_hash.hex())
        self.field("Message Hash", hashes.message_hash.hex())
        self.field("Safe Transaction Hash", hashes.safe_hash.hex())
        self.echo(
            "Verify the above value as the Safe Tx Hash when signing the message from the ledger.",
            bold=True,
        )

    def message_hashes(self, hashes: HashTriple) -> None:
        if hashes.raw_message_hash is not None:
            self.field("Safe Message", hashes.raw_message_hash.hex())
        self.field("Safe Message Hash", hashes.safe_hash.hex())
        self.field("Domain Hash", hashes.domain_hash.hex())
        self.field("Message Hash", hashes.message_hash.hex())
        self.echo(
            "Verify the above value as the Safe Tx Hash when signing the message from the ledger.",
            bold=True,
        )

    def eip712_hashes(self, hashes: HashTriple) -> None:
        self.field("EIP 712 Hash", hashes.safe_hash.hex())
        self.field("Domain Hash", hashes.domain_hash.hex())
        self.field("Message Hash", hashes.message_hash.hex())

    def safe_ui_values(self, hashes: HashTriple) -> None:
        self.section("Safe UI values:")
        self.field("Safe Message Hash", hashes.safe_hash.hex())
        self.field("Domain Hash", hashes.domain_hash.hex())
        self.field("Message Hash", hashes.message_hash.hex())

    def api_transaction(self, tx: SafeTransaction) -> None:
        self.field("Safe Address", tx.safe)
        self.field("To", tx.to)
        self.field("Value", tx.value)
        self.field("Data", tx.data or "0x")
        self.field("Operation", tx.operation)
        self.field("Nonce", tx.nonce)
        self.field("Safe Tx Gas", tx.safe_tx_gas)
        self.field("Base Gas", tx.base_gas)
        self.field("Gas Price", tx.gas_price)
        self.field("Gas Token", tx.gas_token)
        self.field("Refund Receiver", tx.refund_receiver)
        self.field("Confirmations Required", tx.confirmations_required)
        self.field("Confirmations Count", len(tx.confirmations))

        if tx.data_decoded is not None:
            self.section("Decoded Call:")
            self.field("Method", tx.data_decoded.method, width=12)
            for param in tx.data_decoded.parameters:
                self.field("Parameter", f"{param.type}: {param.value}", width=12)

    def execution_calldata(self, calldata: bytes, calldata_hash: bytes) -> None:
        self.field("Full Tx Calldata", "0x" + calldata.hex())
        self.field("Full Tx Calldata Hash", calldata_hash.hex())

    def decoded_calls(self, calls: Iterable[DecodedCall], raw: bool = False) -> None:
        calls = list(calls)
        if not calls:
            self.echo("No matching function signature found.", fg="yellow")
            return
        for call in calls:
            self.field("Signature", call.signature)
            for index, arg in enumerate(call.formatted(raw)):
                self.field(f"  [{index}]", arg)

    def mismatches(self, mismatches: Iterable[Mismatch]) -> None:
        for mismatch in mismatches:
            self.echo(mismatch.field, bold=True)
            self.field("  API Returned", mismatch.api_value, width=16)
            self.field("  User Supplied", mismatch.user_value, width=16)

    def warnings(self, warnings: SafeWarnings) -> None:
        if not warnings.has_warnings():
            return
        self.echo()
        self.echo("WARNINGS:", fg="red", bold=True)
        for message in warnings.messages():
            self.echo(f"• {message}")
        if warnings.argument_mismatches:
            self.echo("ARGUMENT MISMATCHES:", fg="red", bold=True)
            self.mismatches(warnings.argument_mismatches)
        self.echo()
        self.echo("Please review the above warnings before signing the transaction.", fg="red", bold=True)

    def notice(self, message: str) -> None:
        self.echo(message, fg="yellow")
