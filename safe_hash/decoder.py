"""
Best-effort decoding of call data against signatures from the 4byte directory.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from . import abi
from .exceptions import DecodingError, EncodingError
from .remote.four_byte import FourByteDirectory
from .utils import hex_to_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedCall:
    signature: str
    arguments: Tuple[abi.AbiValue, ...]

    def formatted(self, raw: bool = False) -> List[str]:
        return [abi.format_value(arg, raw) for arg in self.arguments]


def argument_types(signature: str) -> List[str]:
    """
    Canonical argument types of a text signature.

    Raises:
        DecodingError: If the signature cannot be parsed
    """
    start = signature.find("(")
    if start <= 0 or not signature.endswith(")"):
        raise DecodingError(f"Invalid function signature: {signature!r}")
    if signature[start:] == "()":
        return []
    parsed = abi.parse_type(signature[start:])
    return [c.to_type_str() for c in parsed.components]


def decode_with_signature(signature: str, calldata: Union[str, bytes]) -> DecodedCall:
    """
    Decode the arguments of ``calldata`` against one signature.

    The decode is accepted only if re-encoding the decoded values reproduces
    the argument bytes exactly.

    Raises:
        DecodingError: If the call data does not match the signature
    """
    data = hex_to_bytes(calldata)
    if len(data) < 4:
        raise DecodingError(f"Call data must be at least 4 bytes, got {len(data)}")
    types = argument_types(signature)
    values = abi.decode_params(types, data[4:])
    try:
        reencoded = abi.encode_params(values)
    except EncodingError as e:
        raise DecodingError(f"Decoded values of {signature} do not re-encode: {e}") from e
    if reencoded != data[4:]:
        raise DecodingError(f"Call data is not a canonical encoding of {signature}")
    return DecodedCall(signature=signature, arguments=tuple(values))


class CalldataDecoder:
    """
    Decodes call data by trying every candidate signature for its selector.

    Ambiguous selectors may yield several decodings; all of them are
    returned for the caller to judge.
    """

    def __init__(self, directory: Optional[FourByteDirectory] = None):
        self.directory = directory or FourByteDirectory()

    def decode(self, calldata: Union[str, bytes]) -> List[DecodedCall]:
        """
        Raises:
            DecodingError: If the call data is not hex or shorter than a selector
            LookupUnavailableError: If the signature directory cannot be queried
        """
        data = hex_to_bytes(calldata)
        if len(data) < 4:
            raise DecodingError(f"Call data must be at least 4 bytes, got {len(data)}")
        return self.decode_candidates(self.directory.lookup(data[:4]), data)

    @staticmethod
    def decode_candidates(signatures: Sequence[str], data: bytes) -> List[DecodedCall]:
        decoded = []
        for signature in signatures:
            try:
                decoded.append(decode_with_signature(signature, data))
            except DecodingError as e:
                logger.debug(f"Candidate {signature} rejected: {e}")
        return decoded
