"""
``safe-hash`` command-line interface.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from typer.core import TyperGroup
from pydantic import ValidationError

from .chains import chain_id_of, supported_chain_names
from .checks import SafeWarnings, check_suspicious_content
from .config import DEFAULT_SAFE_VERSION
from .decoder import CalldataDecoder
from .eip712 import typed_data_hashes
from .exceptions import LookupUnavailableError, MismatchError, SafeHashError
from .hasher import ExecuteTxHasher
from .models import SafeTransaction, TransactionParameters, UserTransactionArgs
from .output import Renderer, should_use_color
from .remote.etherscan import EtherscanClient
from .remote.safe_api import SafeApiClient, validate_safe_tx_hash, validate_transaction_details
from .signing import msg_signing_hashes, safe_ui_hashes, tx_signing_hashes
from .sources import load_tx_file, read_text_file, resolve_transaction
from .version import __version__

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CHAIN_HELP = "Chain the Safe is deployed on: " + ", ".join(supported_chain_names())


class SafeHashGroup(TyperGroup):
    """Reports package errors as a one-line message on stderr (exit status 1)."""

    def invoke(self, ctx: typer.Context):
        try:
            return super().invoke(ctx)
        except (SafeHashError, ValueError) as e:
            logger.debug("Command failed", exc_info=True)
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)


app = typer.Typer(
    cls=SafeHashGroup,
    add_completion=False,
    pretty_exceptions_enable=False,
    help="Verify Safe transaction, message and EIP-712 hashes before signing.",
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"safe-hash {__version__}")
        raise typer.Exit()


def _user_args(**fields) -> UserTransactionArgs:
    supplied = {name: value for name, value in fields.items() if value is not None}
    try:
        return UserTransactionArgs(**supplied)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e


def _verifier() -> Optional[EtherscanClient]:
    client = EtherscanClient()
    return client if client.available else None


def _renderer(ctx: typer.Context) -> Renderer:
    return ctx.obj["renderer"]


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable coloured output."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["renderer"] = Renderer(color=should_use_color(no_color))


@app.command("tx")
def tx_command(
    ctx: typer.Context,
    chain: str = typer.Option(..., "--chain", help=CHAIN_HELP),
    nonce: int = typer.Option(..., "--nonce", help="Safe nonce of the transaction."),
    safe_address: str = typer.Option(..., "--safe-address", help="Address of the Safe."),
    safe_version: str = typer.Option(DEFAULT_SAFE_VERSION, "--safe-version", help="Safe contract version."),
    to: Optional[str] = typer.Option(None, "--to", help="Destination address."),
    value: Optional[str] = typer.Option(None, "--value", help="Value in wei."),
    data: Optional[str] = typer.Option(None, "--data", help="Hex call data."),
    operation: Optional[str] = typer.Option(None, "--operation", help="0 for call, 1 for delegatecall."),
    safe_tx_gas: Optional[str] = typer.Option(None, "--safe-tx-gas"),
    base_gas: Optional[str] = typer.Option(None, "--base-gas", help="baseGas (dataGas before Safe 1.0.0)."),
    gas_price: Optional[str] = typer.Option(None, "--gas-price"),
    gas_token: Optional[str] = typer.Option(None, "--gas-token"),
    refund_receiver: Optional[str] = typer.Option(None, "--refund-receiver"),
    tx_file: Optional[Path] = typer.Option(
        None, "--tx-file", exists=True, dir_okay=False, help="JSON transaction input file (skips the API lookup)."
    ),
    offline: bool = typer.Option(False, "--offline", help="Do not query the Safe transaction service."),
):
    """Compute the hashes of a multisig transaction."""
    out = _renderer(ctx)
    chain_id = chain_id_of(chain)
    user_args = _user_args(
        to=to, value=value, data=data, operation=operation, safe_tx_gas=safe_tx_gas,
        base_gas=base_gas, gas_price=gas_price, gas_token=gas_token, refund_receiver=refund_receiver,
    )
    warnings = SafeWarnings()
    api_tx: Optional[SafeTransaction] = None

    if tx_file:
        tx = resolve_transaction(file=load_tx_file(tx_file), nonce=nonce)
    else:
        if not offline:
            try:
                api_tx = SafeApiClient().get_transaction(chain_id, safe_address, nonce)
            except LookupUnavailableError as e:
                logger.warning(f"Safe API lookup failed: {e}")
                out.notice(f"Could not fetch the transaction ({e}); using the supplied arguments.")
        if api_tx is not None:
            out.api_transaction(api_tx)
            out.echo()
            try:
                validate_transaction_details(api_tx, user_args)
            except MismatchError as e:
                warnings.argument_mismatches.extend(e.mismatches)
            tx = resolve_transaction(api=api_tx)
        else:
            tx = resolve_transaction(manual=user_args, nonce=nonce)

    hashes = tx_signing_hashes(tx, chain_id, safe_address, safe_version)
    if api_tx is not None:
        try:
            validate_safe_tx_hash(api_tx, hashes.safe_hash)
        except MismatchError as e:
            warnings.argument_mismatches.extend(e.mismatches)

    warnings.union(check_suspicious_content(tx, chain_id, _verifier()))
    out.hashes(hashes)
    out.warnings(warnings)


@app.command("msg")
def msg_command(
    ctx: typer.Context,
    chain: str = typer.Option(..., "--chain", help=CHAIN_HELP),
    safe_address: str = typer.Option(..., "--safe-address", help="Address of the Safe."),
    input_file: Path = typer.Option(..., "--input-file", exists=True, dir_okay=False,
                                     help="File holding the message text."),
    safe_version: str = typer.Option(DEFAULT_SAFE_VERSION, "--safe-version", help="Safe contract version."),
):
    """Compute the hashes of an off-chain Safe message."""
    message = read_text_file(input_file)
    hashes = msg_signing_hashes(message, chain_id_of(chain), safe_address, safe_version)
    _renderer(ctx).message_hashes(hashes)


@app.command("typed")
def typed_command(
    ctx: typer.Context,
    input_file: Path = typer.Option(..., "--input-file", exists=True, dir_okay=False,
                                     help="EIP-712 typed-data JSON document."),
    chain: Optional[str] = typer.Option(None, "--chain", help=CHAIN_HELP),
    safe_address: Optional[str] = typer.Option(None, "--safe-address", help="Safe that signs the document."),
    safe_version: str = typer.Option(DEFAULT_SAFE_VERSION, "--safe-version", help="Safe contract version."),
):
    """Compute the hashes of an EIP-712 typed-data document."""
    if (chain is None) != (safe_address is None):
        raise typer.BadParameter("--chain and --safe-address must be given together")
    out = _renderer(ctx)
    hashes = typed_data_hashes(read_text_file(input_file))
    out.eip712_hashes(hashes)
    if chain is not None:
        out.safe_ui_values(safe_ui_hashes(hashes.safe_hash, chain_id_of(chain), safe_address, safe_version))


@app.command("exec")
def exec_command(
    ctx: typer.Context,
    chain: Optional[str] = typer.Option(None, "--chain", help=CHAIN_HELP),
    tx_file: Optional[Path] = typer.Option(None, "--tx-file", exists=True, dir_okay=False,
                                           help="JSON transaction input file."),
    to: Optional[str] = typer.Option(None, "--to", help="Destination address."),
    value: Optional[str] = typer.Option(None, "--value", help="Value in wei."),
    data: Optional[str] = typer.Option(None, "--data", help="Hex call data."),
    operation: Optional[str] = typer.Option(None, "--operation", help="0 for call, 1 for delegatecall."),
    safe_tx_gas: Optional[str] = typer.Option(None, "--safe-tx-gas"),
    base_gas: Optional[str] = typer.Option(None, "--base-gas"),
    gas_price: Optional[str] = typer.Option(None, "--gas-price"),
    gas_token: Optional[str] = typer.Option(None, "--gas-token"),
    refund_receiver: Optional[str] = typer.Option(None, "--refund-receiver"),
    signatures: Optional[str] = typer.Option(None, "--signatures", help="Concatenated owner signatures (hex)."),
):
    """Build the execTransaction call data for a signed transaction."""
    out = _renderer(ctx)
    if tx_file:
        tx = resolve_transaction(file=load_tx_file(tx_file))
        if signatures is not None:
            tx = TransactionParameters(**{**tx.model_dump(), "signatures": signatures})
    else:
        tx = resolve_transaction(manual=_user_args(
            to=to, value=value, data=data, operation=operation, safe_tx_gas=safe_tx_gas,
            base_gas=base_gas, gas_price=gas_price, gas_token=gas_token,
            refund_receiver=refund_receiver, signatures=signatures,
        ))

    hasher = ExecuteTxHasher(tx)
    out.execution_calldata(hasher.calldata(), hasher.calldata_hash())
    chain_id = chain_id_of(chain) if chain else None
    out.warnings(check_suspicious_content(tx, chain_id, _verifier()))


@app.command("decode")
def decode_command(
    ctx: typer.Context,
    calldata: str = typer.Option(..., "--data", help="Hex call data to decode."),
    raw: bool = typer.Option(False, "--raw", help="Show values without display formatting."),
):
    """Decode call data against known function signatures."""
    out = _renderer(ctx)
    try:
        calls = CalldataDecoder().decode(calldata)
    except LookupUnavailableError as e:
        out.notice(f"Signature lookup unavailable: {e}")
        return
    out.decoded_calls(calls, raw=raw)


def main():
    """Console-script entry point."""
    app(prog_name="safe-hash")
