"""
Query shapes on top of the aggregator

- one contract, many argument sets
- many contracts, one argument set
- one contract, one call
"""
from typing import Any, Optional, Sequence

from core.calls.aggregator import ABSENT, CallResult, CallResultAggregator, CallSlot
from core.calls.call_state import CallState, INVALID_CALL_STATE, to_call_state
from core.calls.signature import FunctionSignature
from core.errors import InvalidArguments
from core.network.call_key import Call
from utils.logger import get_logger

logger = get_logger(__name__)

MethodArgs = Sequence[Any]


class MulticallQueries:
    """Builds call slots, resolves them together and derives call states"""

    def __init__(self, aggregator: CallResultAggregator):
        self.aggregator = aggregator

    @staticmethod
    def _call_data(signature: FunctionSignature, inputs: Optional[MethodArgs]) -> Optional[str]:
        try:
            return signature.encode_input(inputs)
        except InvalidArguments as e:
            logger.debug(f"Skipping call with invalid arguments: {e}")
            return None

    async def _states(self, slots: list[CallSlot], signature: FunctionSignature) -> list[CallState]:
        results: list[CallResult] = await self.aggregator.resolve(slots)
        # Nothing was sent: no need for a head block to judge freshness
        if not any(result.valid for result in results):
            return [INVALID_CALL_STATE for _ in results]
        latest_block = await self.aggregator.latest_block()
        return [to_call_state(result, signature, latest_block) for result in results]

    async def single_contract_multiple_data(
        self,
        target: Optional[str],
        signature: Optional[FunctionSignature],
        call_inputs: Sequence[Optional[MethodArgs]]
    ) -> list[CallState]:
        """Same contract and function, one call per argument set"""
        if not target or signature is None or not call_inputs:
            return []

        slots: list[CallSlot] = []
        for inputs in call_inputs:
            call_data = self._call_data(signature, inputs)
            slots.append(Call(target, call_data) if call_data else ABSENT)
        return await self._states(slots, signature)

    async def multiple_contract_single_data(
        self,
        targets: Sequence[Optional[str]],
        signature: Optional[FunctionSignature],
        call_inputs: Optional[MethodArgs] = None
    ) -> list[CallState]:
        """Same function and arguments on every target; None targets stay invalid"""
        if not targets or signature is None:
            return []

        call_data = self._call_data(signature, call_inputs)
        if call_data is None:
            return [INVALID_CALL_STATE for _ in targets]

        slots: list[CallSlot] = [
            Call(target, call_data) if target else ABSENT
            for target in targets
        ]
        return await self._states(slots, signature)

    async def single_call_result(
        self,
        target: Optional[str],
        signature: Optional[FunctionSignature],
        inputs: Optional[MethodArgs] = None
    ) -> CallState:
        """One call; INVALID_CALL_STATE when there is nothing to call"""
        if not target or signature is None:
            return INVALID_CALL_STATE

        call_data = self._call_data(signature, inputs)
        if call_data is None:
            return INVALID_CALL_STATE

        states = await self._states([Call(target, call_data)], signature)
        return states[0]
