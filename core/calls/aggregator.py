"""
Call result aggregator
Turns an ordered list of (possibly absent) calls into one batched request and
maps the raw answers back onto the original order.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from config.settings import BLOCK_SAFETY_MARGIN
from core.errors import InvalidAddress, InvalidPayload
from core.network.call_key import Call, parse_call_key, to_call_key
from core.network.height import HeightSource, trusted_height
from core.network.multicall import BatchFetcher
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Absent:
    """A slot with no call to make (missing contract, unencodable arguments)"""
    reason: str = ""


ABSENT = Absent()

# One entry of a request list: a call to send, or an explicitly empty slot
CallSlot = Union[Call, Absent]


@dataclass(frozen=True)
class CallResult:
    """
    Raw outcome of one call slot.

    valid=False: the call was never executed (no data, no block).
    valid=True, block_number=None: sent but not answered yet.
    valid=True, data=None: executed but returned nothing (usually a revert).
    """
    valid: bool
    data: Optional[bytes] = None
    block_number: Optional[int] = None


INVALID_RESULT = CallResult(valid=False)


class CallResultAggregator:
    """
    Resolves call slots through a BatchFetcher, one request per resolve().
    Holds no state between resolutions.
    """

    def __init__(
        self,
        fetcher: BatchFetcher,
        height_source: HeightSource,
        safety_margin: int = BLOCK_SAFETY_MARGIN
    ):
        self.fetcher = fetcher
        self.height_source = height_source
        self.safety_margin = safety_margin

    async def latest_block(self) -> int:
        """Freshest block this aggregator is willing to trust"""
        return await trusted_height(self.height_source, self.safety_margin)

    async def resolve(self, slots: Sequence[CallSlot]) -> list[CallResult]:
        """
        Resolve every slot, preserving input order and length.

        Absent slots and calls that fail key validation map to INVALID_RESULT
        without any network access. StaleResponse and TransportFailure fail
        the whole resolution.
        """
        slot_keys: list[Optional[str]] = []
        for slot in slots:
            if not isinstance(slot, Call):
                slot_keys.append(None)
                continue
            try:
                slot_keys.append(to_call_key(slot))
            except (InvalidAddress, InvalidPayload) as e:
                logger.debug(f"Dropping call that cannot be keyed: {e}")
                slot_keys.append(None)

        # First-seen order, one physical call per key
        unique_keys = list(dict.fromkeys(key for key in slot_keys if key is not None))
        if not unique_keys:
            return [INVALID_RESULT for _ in slots]

        min_block = await self.latest_block()
        response = await self.fetcher.fetch(
            [parse_call_key(key) for key in unique_keys],
            min_block
        )
        return_data = dict(zip(unique_keys, response.results))

        results = []
        for key in slot_keys:
            if key is None:
                results.append(INVALID_RESULT)
                continue
            data = return_data.get(key)
            results.append(CallResult(
                valid=True,
                data=data if data else None,
                block_number=response.block_number
            ))
        return results
