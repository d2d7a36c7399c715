"""
Call state derivation
"""
from dataclasses import dataclass
from typing import Optional

from core.calls.aggregator import CallResult
from core.calls.signature import FunctionSignature
from core.errors import DecodeFailure
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CallState:
    """Observable state of one call at a given latest block"""
    valid: bool
    # The decoded result, or None if loading or errored/no data
    result: Optional[tuple]
    # True if the result has never been fetched
    loading: bool
    # True if the result is not for the latest block
    syncing: bool
    # True if the call was made and is synced, but the return data is invalid
    error: bool


INVALID_CALL_STATE = CallState(valid=False, result=None, loading=False, syncing=False, error=False)
LOADING_CALL_STATE = CallState(valid=True, result=None, loading=True, syncing=True, error=False)


def to_call_state(
    call_result: Optional[CallResult],
    signature: Optional[FunctionSignature],
    latest_block: Optional[int]
) -> CallState:
    """Derive the call state of one raw result; never raises on bad data"""
    if call_result is None or not call_result.valid:
        return INVALID_CALL_STATE
    if call_result.block_number is None:
        return LOADING_CALL_STATE
    if signature is None or latest_block is None:
        return LOADING_CALL_STATE

    data = call_result.data
    success = bool(data)
    syncing = call_result.block_number < latest_block

    result = None
    if success:
        try:
            result = signature.decode_output(data)
        except DecodeFailure:
            logger.debug(f"Result data parsing failed: {signature.text} 0x{data.hex()}")
            return CallState(valid=True, result=None, loading=False, syncing=syncing, error=True)

    return CallState(
        valid=True,
        result=result,
        loading=False,
        syncing=syncing,
        error=not success
    )
