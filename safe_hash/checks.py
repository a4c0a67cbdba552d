"""
Heuristic checks that flag risky transaction contents before signing.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .models import Mismatch, TransactionParameters
from .remote.etherscan import EtherscanClient, VerificationStatus
from .utils import ZERO_ADDRESS, function_selector, hex_to_bytes

logger = logging.getLogger(__name__)

# Safe methods that change the owner set or the signing threshold
SUSPICIOUS_FUNC_SIGNATURES = (
    "addOwnerWithThreshold(address,uint256)",
    "removeOwner(address,address,uint256)",
    "swapOwner(address,address,address)",
    "changeThreshold(uint256)",
)
SUSPICIOUS_SELECTORS = frozenset(function_selector(s) for s in SUSPICIOUS_FUNC_SIGNATURES)


@dataclass
class SafeWarnings:
    """Warning flags collected for one transaction."""
    zero_address: bool = False
    delegatecall: bool = False
    non_zero_gas_token: bool = False
    non_zero_refund_receiver: bool = False
    non_zero_gas_price: bool = False
    dangerous_methods: bool = False
    unverified_contract: bool = False
    verification_unavailable: bool = False
    argument_mismatches: List[Mismatch] = field(default_factory=list)

    def has_warnings(self) -> bool:
        return any(self.messages()) or bool(self.argument_mismatches)

    def union(self, other: "SafeWarnings") -> "SafeWarnings":
        """Merge ``other`` into this set (flags are OR-ed, mismatches appended)."""
        for name in (
            "zero_address", "delegatecall",
            "non_zero_gas_token", "non_zero_refund_receiver", "non_zero_gas_price",
            "dangerous_methods", "unverified_contract", "verification_unavailable",
        ):
            setattr(self, name, getattr(self, name) or getattr(other, name))
        self.argument_mismatches.extend(other.argument_mismatches)
        return self

    def messages(self) -> List[str]:
        """Human-readable warning lines, excluding argument mismatches."""
        lines = []
        if self.zero_address:
            lines.append("Transaction is being sent to the zero address")
        if self.delegatecall:
            lines.append("Transaction is using delegatecall")
        if self.non_zero_gas_token:
            lines.append("Transaction is using a non-zero gas token")
        if self.non_zero_refund_receiver:
            lines.append("Transaction has a non-zero refund receiver")
        if self.non_zero_gas_price:
            lines.append("Transaction has a non-zero gas price")
        if self.dangerous_methods:
            lines.append(
                "Transaction data matches a function signature that modifies "
                "the owners or threshold of the Safe."
            )
        if self.unverified_contract:
            lines.append("Target contract source is not verified on the block explorer")
        if self.verification_unavailable:
            lines.append("Contract verification status could not be checked")
        return lines


def is_suspicious_calldata(calldata: Union[str, bytes]) -> bool:
    """
    True if the call data starts with an owner- or threshold-changing selector.

    Raises:
        DecodingError: If the call data is not valid hex
    """
    data = hex_to_bytes(calldata)
    return len(data) >= 4 and data[:4] in SUSPICIOUS_SELECTORS


def check_suspicious_content(
    tx: TransactionParameters,
    chain_id: Optional[int] = None,
    verifier: Optional[EtherscanClient] = None
) -> SafeWarnings:
    """
    Flag risky fields of a transaction.

    Args:
        tx: Transaction to inspect
        chain_id: Chain of the transaction, needed for contract verification
        verifier: Block-explorer client. Verification of the target contract
            is only attempted when one is given and the call carries data.

    Returns:
        The collected warnings
    """
    warnings = SafeWarnings()

    if tx.to == ZERO_ADDRESS:
        warnings.zero_address = True
    if tx.operation == 1:
        warnings.delegatecall = True
    if tx.gas_token != ZERO_ADDRESS:
        warnings.non_zero_gas_token = True
    if tx.refund_receiver != ZERO_ADDRESS:
        warnings.non_zero_refund_receiver = True
    if tx.gas_price != 0:
        warnings.non_zero_gas_price = True
    if is_suspicious_calldata(tx.data_bytes):
        warnings.dangerous_methods = True

    if verifier is not None and tx.data_bytes:
        if chain_id is None:
            warnings.verification_unavailable = True
        else:
            status = verifier.verification_status(tx.to, chain_id)
            logger.debug(f"Verification status of {tx.to}: {status.value}")
            if status is VerificationStatus.UNVERIFIED:
                warnings.unverified_contract = True
            elif status is VerificationStatus.UNAVAILABLE:
                warnings.verification_unavailable = True

    return warnings
