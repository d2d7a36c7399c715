"""Unit tests for call state derivation."""

from core.calls.aggregator import INVALID_RESULT, CallResult
from core.calls.call_state import (
    INVALID_CALL_STATE,
    LOADING_CALL_STATE,
    CallState,
    to_call_state,
)
from core.calls.signature import FunctionSignature
from tests.conftest import uint

BALANCE_OF = FunctionSignature.parse("balanceOf(address)", outputs=["uint256"])


class TestCanonicalStates:
    """Invalid and loading shortcuts."""

    def test_missing_result(self) -> None:
        assert to_call_state(None, BALANCE_OF, 100) == INVALID_CALL_STATE

    def test_invalid_result(self) -> None:
        assert to_call_state(INVALID_RESULT, BALANCE_OF, 100) == INVALID_CALL_STATE

    def test_in_flight(self) -> None:
        result = CallResult(valid=True, data=uint(1), block_number=None)
        assert to_call_state(result, BALANCE_OF, 100) == LOADING_CALL_STATE

    def test_no_signature(self) -> None:
        result = CallResult(valid=True, data=uint(1), block_number=100)
        assert to_call_state(result, None, 100) == LOADING_CALL_STATE

    def test_no_latest_block(self) -> None:
        result = CallResult(valid=True, data=uint(1), block_number=100)
        assert to_call_state(result, BALANCE_OF, None) == LOADING_CALL_STATE

    def test_latest_block_zero_is_known(self) -> None:
        result = CallResult(valid=True, data=uint(1), block_number=0)
        state = to_call_state(result, BALANCE_OF, 0)
        assert not state.loading
        assert state.result == (1,)


class TestSettledStates:
    """Decoded success and error outcomes."""

    def test_success(self) -> None:
        result = CallResult(valid=True, data=uint(42), block_number=100)
        assert to_call_state(result, BALANCE_OF, 100) == CallState(
            valid=True, result=(42,), loading=False, syncing=False, error=False
        )

    def test_syncing_when_older_than_latest(self) -> None:
        result = CallResult(valid=True, data=uint(42), block_number=100)
        state = to_call_state(result, BALANCE_OF, 105)
        assert state.syncing
        assert state.result == (42,)

    def test_not_syncing_at_latest(self) -> None:
        result = CallResult(valid=True, data=uint(42), block_number=100)
        assert not to_call_state(result, BALANCE_OF, 100).syncing

    def test_empty_data_is_error(self) -> None:
        result = CallResult(valid=True, data=None, block_number=100)
        assert to_call_state(result, BALANCE_OF, 105) == CallState(
            valid=True, result=None, loading=False, syncing=True, error=True
        )

    def test_malformed_data_is_error(self) -> None:
        result = CallResult(valid=True, data=b"\x01\x02\x03", block_number=100)
        assert to_call_state(result, BALANCE_OF, 100) == CallState(
            valid=True, result=None, loading=False, syncing=False, error=True
        )
