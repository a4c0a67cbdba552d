"""
Safe contract version parsing and the version-gated hashing rules.
"""
import re
from dataclasses import dataclass
from typing import Sequence, Tuple, TypeVar, Union

from .exceptions import DecodingError, VersionUnsupportedError

T = TypeVar("T")

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[+-][0-9A-Za-z.+-]*)?$")


@dataclass(frozen=True, order=True)
class SafeVersion:
    """Three-part Safe contract version, ordered like a semantic version."""
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: Union[str, "SafeVersion"]) -> "SafeVersion":
        """
        Parse ``"1.3.0"``, ``"v1.3.0"`` or ``"1.3.0+L2"``.

        Raises:
            DecodingError: If the string is not a three-part version
        """
        if isinstance(value, SafeVersion):
            return value
        match = _VERSION_RE.match(value.strip())
        if not match:
            raise DecodingError(f"Invalid Safe version: {value!r}")
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


MINIMUM_SUPPORTED_VERSION = SafeVersion(0, 1, 0)

# Safe 1.3.0 added chainId to the domain separator.
DOMAIN_TYPE_BY_VERSION: Tuple[Tuple[SafeVersion, str], ...] = (
    (SafeVersion(0, 1, 0), "EIP712Domain(address verifyingContract)"),
    (SafeVersion(1, 3, 0), "EIP712Domain(uint256 chainId,address verifyingContract)"),
)

# Safe 1.0.0 renamed dataGas to baseGas in the SafeTx struct.
SAFE_TX_TYPE_BY_VERSION: Tuple[Tuple[SafeVersion, str], ...] = (
    (
        SafeVersion(0, 1, 0),
        "SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,"
        "uint256 dataGas,uint256 gasPrice,address gasToken,address refundReceiver,uint256 nonce)",
    ),
    (
        SafeVersion(1, 0, 0),
        "SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,"
        "uint256 baseGas,uint256 gasPrice,address gasToken,address refundReceiver,uint256 nonce)",
    ),
)

CHAIN_ID_IN_DOMAIN_SINCE = DOMAIN_TYPE_BY_VERSION[-1][0]
BASE_GAS_NAME_SINCE = SAFE_TX_TYPE_BY_VERSION[-1][0]


def ensure_supported(version: SafeVersion) -> SafeVersion:
    """
    Raises:
        VersionUnsupportedError: If the version is below the supported minimum
    """
    if version < MINIMUM_SUPPORTED_VERSION:
        raise VersionUnsupportedError(f"{version} version of Safe Wallet is not supported")
    return version


def select_for_version(table: Sequence[Tuple[SafeVersion, T]], version: SafeVersion) -> T:
    """Return the entry of the highest threshold that ``version`` reaches."""
    ensure_supported(version)
    selected = None
    for threshold, entry in table:
        if version >= threshold:
            selected = entry
    if selected is None:
        raise VersionUnsupportedError(f"No rule applies to Safe version {version}")
    return selected


def domain_includes_chain_id(version: SafeVersion) -> bool:
    return version >= CHAIN_ID_IN_DOMAIN_SINCE


def uses_base_gas_name(version: SafeVersion) -> bool:
    return version >= BASE_GAS_NAME_SINCE
