"""
Block height sources

A height source reports the chain head. Callers never trust the head as is:
see `trusted_height`.
"""
from typing import Protocol

from config.chains import ChainId
from config.settings import BLOCK_SAFETY_MARGIN
from utils.rpc_manager import RPCManager, rpc_manager


class HeightSource(Protocol):
    async def current_height(self) -> int:
        """Return the current head block; raise TransportFailure if unreachable"""
        ...


class RPCHeightSource:
    """Head block of a chain, read through the RPC manager"""

    def __init__(self, chain_id: ChainId, manager: RPCManager = rpc_manager):
        self.chain_id = chain_id
        self._manager = manager

    async def current_height(self) -> int:
        return int(await self._manager.get_block_number(self.chain_id))


async def trusted_height(source: HeightSource, margin: int = BLOCK_SAFETY_MARGIN) -> int:
    """Head minus a safety margin of recent, possibly unpropagated blocks"""
    return max(await source.current_height() - margin, 0)
