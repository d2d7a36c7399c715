"""Shared fakes for the batched call pipeline (no network access)."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import pytest
from eth_abi import encode

from core.calls.aggregator import CallResultAggregator
from core.calls.queries import MulticallQueries
from core.network.multicall import BatchFetcher

TARGET_A = "0x" + "aa" * 20
TARGET_B = "0x" + "bb" * 20
ACCOUNT = "0x" + "cc" * 20


def uint(value: int) -> bytes:
    """ABI-encoded uint256 return data."""
    return encode(["uint256"], [value])


class FakeEndpoint:
    """BatchEndpoint double answering from a per-target table.

    :param block_number: Block reported for every batch.
    :param responses: Return data keyed by lowercase target, or by
        (lowercase target, call data) for per-payload answers.
    :param error: Exception raised instead of answering.
    """

    def __init__(
        self,
        block_number: int = 200,
        responses: Optional[dict] = None,
        error: Optional[BaseException] = None,
        responder: Optional[Callable[[str, bytes], bytes]] = None,
    ) -> None:
        self.block_number = block_number
        self.responses = responses or {}
        self.error = error
        self.responder = responder
        self.requests: list[list[tuple[str, bytes]]] = []

    async def aggregate(self, calls: Sequence[tuple[str, bytes]]) -> tuple[int, list[bytes]]:
        self.requests.append(list(calls))
        if self.error is not None:
            raise self.error
        results = []
        for target, data in calls:
            if self.responder is not None:
                results.append(self.responder(target, data))
                continue
            key = target.lower()
            results.append(self.responses.get((key, data), self.responses.get(key, b"")))
        return self.block_number, results


class FakeHeightSource:
    """HeightSource double returning a fixed head block."""

    def __init__(self, height: int = 200, error: Optional[BaseException] = None) -> None:
        self.height = height
        self.error = error
        self.calls = 0

    async def current_height(self) -> int:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.height


@pytest.fixture
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture
def height_source() -> FakeHeightSource:
    return FakeHeightSource()


@pytest.fixture
def aggregator(endpoint: FakeEndpoint, height_source: FakeHeightSource) -> CallResultAggregator:
    return CallResultAggregator(BatchFetcher(endpoint), height_source, safety_margin=0)


@pytest.fixture
def queries(aggregator: CallResultAggregator) -> MulticallQueries:
    return MulticallQueries(aggregator)
