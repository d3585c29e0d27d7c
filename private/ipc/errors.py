import logging
from typing import Optional, Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from sdk.config import validate_hex_string

logger = logging.getLogger(__name__)

# Selectors of the two builtin Solidity revert payloads
ERROR_SELECTOR = "0x08c379a0"  # Error(string)
PANIC_SELECTOR = "0x4e487b71"  # Panic(uint256)

# Revert strings compiled into the TestCommon bytecode
KNOWN_ERROR_STRINGS = [
    "failed state",
    "ECDSA: invalid signature length",
    "ECDSA: invalid signature",
    "ECDSA: invalid signature 's' value",
    "ECDSA: invalid signature 'v' value",
    "Initializable: contract is already initialized",
]

PANIC_CODES = {
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x22: "invalid storage byte array encoding",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to zero-initialized internal function",
}


def _to_hex(error_data: Union[str, bytes]) -> Optional[str]:
    if isinstance(error_data, (bytes, bytearray)):
        return "0x" + bytes(error_data).hex()
    if isinstance(error_data, str):
        # web3 reports reverts as "execution reverted: 0x..." in some versions
        idx = error_data.find("0x")
        return error_data[idx:] if idx >= 0 else None
    return None


def decode_revert_reason(error_data: Union[str, bytes]) -> Optional[str]:
    """
    Decodes the payload of a reverted call into a readable reason.

    Args:
        error_data: Raw revert data as bytes or a hex string, typically starting
                    with the 4-byte selector (e.g., "0x08c379a0...").

    Returns:
        The `Error(string)` message, a description of a `Panic(uint256)` code,
        or None for custom errors and malformed data.
    """
    hex_data = _to_hex(error_data)
    if hex_data is None or not validate_hex_string(hex_data):
        return None

    selector = hex_data[:10].lower()
    try:
        payload = bytes.fromhex(hex_data[10:])
    except ValueError:
        return None

    try:
        if selector == ERROR_SELECTOR:
            (reason,) = decode(["string"], payload)
            return reason
        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], payload)
            return f"panic: {PANIC_CODES.get(code, f'unknown code {code:#x}')}"
    except DecodingError as e:
        logger.debug(f"Could not decode revert payload {hex_data}: {e}")
        return None
    return None


def error_hash_to_error(error_data: Union[str, bytes]) -> Optional[str]:
    """
    Maps revert data to one of the TestCommon contract's known error strings.

    Returns:
        The matching entry of KNOWN_ERROR_STRINGS, otherwise None.
    """
    reason = decode_revert_reason(error_data)
    if reason in KNOWN_ERROR_STRINGS:
        return reason
    return None
