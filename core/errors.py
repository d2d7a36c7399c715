"""
Error taxonomy for batched contract reads

Input-shape errors never reach the network. Whole-batch errors fail a full
resolution. Decode errors are absorbed into a per-call state.
"""
from typing import Optional


class MulticallError(Exception):
    """Base class for all multicall errors"""


# ==================== INPUT SHAPE ====================

class InvalidAddress(MulticallError, ValueError):
    """Call target is not a 20-byte hex address"""

    def __init__(self, address: str):
        super().__init__(f"Invalid address: {address}")
        self.address = address


class InvalidPayload(MulticallError, ValueError):
    """Call payload is not lowercase, even-length, 0x-prefixed hex"""

    def __init__(self, payload: str):
        super().__init__(f"Invalid hex: {payload}")
        self.payload = payload


class MalformedKey(MulticallError, ValueError):
    """Call key does not split into exactly one target and one payload"""

    def __init__(self, key: str):
        super().__init__(f"Invalid call key: {key}")
        self.key = key


class InvalidArguments(MulticallError, ValueError):
    """Arguments do not fit the parameter kinds of a function signature"""


# ==================== WHOLE BATCH ====================

class StaleResponse(MulticallError):
    """Batch was answered at a block older than the requested floor"""

    def __init__(self, block_number: int, min_block: int):
        super().__init__(
            f"Fetched results for old block number: {block_number} vs. {min_block}"
        )
        self.block_number = block_number
        self.min_block = min_block


class TransportFailure(MulticallError):
    """The RPC endpoint could not be reached or answered with an error"""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint


# ==================== PER CALL ====================

class DecodeFailure(MulticallError):
    """Return data could not be decoded against the function outputs"""
