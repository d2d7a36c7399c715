"""
RPC Endpoint Manager with failover across a chain's configured endpoints
"""
import asyncio
import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import ProviderConnectionError, Web3RPCError

from config.chains import ChainId, CHAINS
from config.settings import REQUEST_TIMEOUT
from core.errors import TransportFailure
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Failures of the endpoint itself; anything else is a local bug and propagates
ENDPOINT_ERRORS = (
    asyncio.TimeoutError,
    aiohttp.ClientError,
    OSError,
    ProviderConnectionError,
    Web3RPCError,
)

# Shared session for every provider
_SESSION: aiohttp.ClientSession | None = None


async def get_session() -> aiohttp.ClientSession:
    """Get or create the shared aiohttp session"""
    global _SESSION
    if _SESSION is None or _SESSION.closed:
        connector = aiohttp.TCPConnector(
            use_dns_cache=True,
            ttl_dns_cache=600,
            limit=100,
            limit_per_host=20,
        )
        _SESSION = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT + 10, connect=10),
        )
    return _SESSION


@dataclass
class EndpointHealth:
    """Failure bookkeeping for one RPC endpoint"""
    url: str
    failures: int = 0
    last_failure: float = 0
    latency_ms: float = 0

    def record_success(self, latency_ms: float):
        self.failures = 0
        # Exponential moving average
        self.latency_ms = latency_ms if self.latency_ms == 0 else 0.8 * self.latency_ms + 0.2 * latency_ms

    def record_failure(self):
        self.failures += 1
        self.last_failure = time.monotonic()

    @property
    def healthy(self) -> bool:
        # 3+ failures within the last minute benches the endpoint
        return self.failures < 3 or time.monotonic() - self.last_failure >= 60


class RPCManager:
    """
    Hands out AsyncWeb3 instances and runs requests with endpoint failover.
    Only transport state lives here; no request results are kept.
    """

    def __init__(self):
        self._web3: dict[str, AsyncWeb3] = {}
        self._health: dict[ChainId, dict[str, EndpointHealth]] = {
            chain_id: {url: EndpointHealth(url=url) for url in config.usable_rpcs}
            for chain_id, config in CHAINS.items()
        }

    async def _web3_for(self, url: str) -> AsyncWeb3:
        if url not in self._web3:
            provider = AsyncHTTPProvider(url, request_kwargs={"timeout": REQUEST_TIMEOUT})
            await provider.cache_async_session(await get_session())
            self._web3[url] = AsyncWeb3(provider)
        return self._web3[url]

    def _ranked_endpoints(self, chain_id: ChainId) -> list[str]:
        """Healthy endpoints first, fastest first"""
        health = self._health[chain_id]
        if not health:
            raise TransportFailure(f"No RPC endpoints configured for {CHAINS[chain_id].name}")
        return sorted(
            health,
            key=lambda url: (not health[url].healthy, health[url].latency_ms or float("inf")),
        )

    async def run(
        self,
        chain_id: ChainId,
        request: Callable[[AsyncWeb3], Awaitable[T]],
    ) -> T:
        """
        Run `request` against the best endpoint, failing over to the next one.
        Raises TransportFailure once every endpoint has failed.
        """
        last_error: Exception | None = None
        last_url: str | None = None

        for url in self._ranked_endpoints(chain_id):
            web3 = await self._web3_for(url)
            started = time.monotonic()
            try:
                result = await asyncio.wait_for(request(web3), timeout=REQUEST_TIMEOUT)
            except ENDPOINT_ERRORS as e:
                self._health[chain_id][url].record_failure()
                logger.debug(f"RPC request failed on {url}: {e!r}")
                last_error, last_url = e, url
                continue

            self._health[chain_id][url].record_success((time.monotonic() - started) * 1000)
            return result

        raise TransportFailure(
            f"All RPC endpoints failed for {CHAINS[chain_id].name}: {last_error!r}",
            endpoint=last_url,
        ) from last_error

    async def call(self, chain_id: ChainId, method: str, *args, **kwargs) -> Any:
        """Run a web3.eth method or awaitable property with failover"""
        async def request(web3: AsyncWeb3):
            attr = getattr(web3.eth, method)
            # Some eth attributes are awaitable properties (block_number, gas_price)
            if inspect.isawaitable(attr):
                return await attr
            return await attr(*args, **kwargs)

        return await self.run(chain_id, request)

    async def get_block_number(self, chain_id: ChainId) -> int:
        """Get current block number for a chain"""
        return await self.call(chain_id, "block_number")

    async def close(self):
        """Close the shared session"""
        global _SESSION
        self._web3.clear()
        if _SESSION is not None and not _SESSION.closed:
            await _SESSION.close()
        _SESSION = None


# Global RPC manager instance
rpc_manager = RPCManager()
