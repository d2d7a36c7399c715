"""
Multicall3 batch transport
Sends many read calls as a single eth_call and reports the block it ran at.
Contract Address (All Chains): 0xcA11bde05977b3631167028862bE2a173976CA11
"""
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from eth_utils import to_checksum_address
from web3 import AsyncWeb3

from config.chains import ChainId, CHAINS
from core.errors import StaleResponse, TransportFailure
from core.network.call_key import Call
from utils.logger import get_logger
from utils.rpc_manager import RPCManager, rpc_manager

logger = get_logger(__name__)

MULTICALL3_ABI = [
    {
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Call[]",
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "tryBlockAndAggregate",
        "outputs": [
            {"internalType": "uint256", "name": "blockNumber", "type": "uint256"},
            {"internalType": "bytes32", "name": "blockHash", "type": "bytes32"},
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Result[]",
                "name": "returnData",
                "type": "tuple[]"
            }
        ],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "address", "name": "addr", "type": "address"}],
        "name": "getEthBalance",
        "outputs": [{"internalType": "uint256", "name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]


class BatchEndpoint(Protocol):
    async def aggregate(self, calls: Sequence[tuple[str, bytes]]) -> tuple[int, list[bytes]]:
        """
        Execute (target, call data) pairs in one request.
        Returns the block number and one return data entry per call, in order.
        Raises TransportFailure when the request cannot be completed.
        """
        ...


class MulticallEndpoint:
    """BatchEndpoint backed by Multicall3.tryBlockAndAggregate"""

    def __init__(
        self,
        chain_id: ChainId,
        address: Optional[str] = None,
        manager: RPCManager = rpc_manager
    ):
        self.chain_id = chain_id
        self.address = to_checksum_address(address or CHAINS[chain_id].multicall_address)
        self._manager = manager

    async def aggregate(self, calls: Sequence[tuple[str, bytes]]) -> tuple[int, list[bytes]]:
        call_structs = [(to_checksum_address(target), data) for target, data in calls]

        async def request(web3: AsyncWeb3):
            contract = web3.eth.contract(address=self.address, abi=MULTICALL3_ABI)
            # requireSuccess=False: a reverting call must not sink the batch
            return await contract.functions.tryBlockAndAggregate(False, call_structs).call()

        block_number, _block_hash, results = await self._manager.run(self.chain_id, request)

        # Failed calls come back as empty data, same as a call with no return value
        return int(block_number), [bytes(data) if success else b"" for success, data in results]


@dataclass(frozen=True)
class FetchResult:
    """Raw return data per call plus the block the batch was answered at"""
    results: list[bytes]
    block_number: int


class BatchFetcher:
    """
    One-shot batch transport.
    Does not deduplicate, validate or retry; the caller owns retry policy.
    """

    def __init__(self, endpoint: BatchEndpoint):
        self.endpoint = endpoint

    async def fetch(self, calls: Sequence[Call], min_block: int) -> FetchResult:
        """
        Send all calls as one aggregated request.

        Raises StaleResponse if the endpoint answered below `min_block` and
        lets TransportFailure from the endpoint propagate unchanged.
        """
        block_number, return_data = await self.endpoint.aggregate(
            [(call.target, call.payload_bytes) for call in calls]
        )

        if len(return_data) != len(calls):
            raise TransportFailure(
                f"Multicall returned {len(return_data)} results for {len(calls)} calls"
            )

        if block_number < min_block:
            logger.debug(f"Fetched results for old block number: {block_number} vs. {min_block}")
            raise StaleResponse(block_number, min_block)

        return FetchResult(
            results=[bytes(data) for data in return_data],
            block_number=block_number
        )
