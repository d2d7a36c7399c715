"""
Chain configurations with RPC endpoints, multicall and pair factory addresses
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import os
from dotenv import load_dotenv

from config.settings import MULTICALL3_ADDRESS

load_dotenv()

INFURA_KEY = os.getenv("INFURA_API_KEY")


class ChainId(Enum):
    """Blockchain chain IDs"""
    ETHEREUM = 1
    BSC = 56
    HECO = 128
    POLYGON = 137
    ARBITRUM = 42161


@dataclass(frozen=True)
class PairFactory:
    """Uniswap V2 style factory used to derive pair addresses"""
    name: str
    factory_address: str
    init_code_hash: str


@dataclass
class ChainConfig:
    """Configuration for a blockchain"""
    chain_id: ChainId
    name: str
    native_token: str
    native_decimals: int
    wrapped_native: str  # Address of the wrapped native token (WETH, WBNB, ...)
    rpc_endpoints: list[Optional[str]]
    multicall_address: str = MULTICALL3_ADDRESS
    pair_factory: Optional[PairFactory] = None

    @property
    def usable_rpcs(self) -> list[str]:
        """RPC endpoints in failover order, skipping unset ones"""
        return [r for r in self.rpc_endpoints if r]


UNISWAP_V2 = PairFactory(
    name="Uniswap V2",
    factory_address="0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f",
    init_code_hash="0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f",
)

PANCAKESWAP_V2 = PairFactory(
    name="PancakeSwap V2",
    factory_address="0xcA143Ce32Fe78f1f7019d7d551a6402fC5350c73",
    init_code_hash="0x00fb7f630766e6a796048ea87d01acd3068e8ff67d078148a3fa3f4a84f69bd5",
)

# QuickSwap is a straight Uniswap V2 fork and shares its init code hash
QUICKSWAP = PairFactory(
    name="QuickSwap",
    factory_address="0x5757371414417b8C6CAad45bAeF941aBc7d3Ab32",
    init_code_hash="0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f",
)


CHAINS: dict[ChainId, ChainConfig] = {
    ChainId.ETHEREUM: ChainConfig(
        chain_id=ChainId.ETHEREUM,
        name="Ethereum",
        native_token="ETH",
        native_decimals=18,
        wrapped_native="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        rpc_endpoints=[
            f"https://mainnet.infura.io/v3/{INFURA_KEY}" if INFURA_KEY else None,
            "https://eth.llamarpc.com",
            "https://ethereum.publicnode.com",
            "https://1rpc.io/eth",
            "https://eth.drpc.org",
        ],
        pair_factory=UNISWAP_V2,
    ),

    ChainId.BSC: ChainConfig(
        chain_id=ChainId.BSC,
        name="BSC",
        native_token="BNB",
        native_decimals=18,
        wrapped_native="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
        rpc_endpoints=[
            "https://bsc-dataseed.binance.org",
            "https://bsc.publicnode.com",
            "https://bsc-dataseed1.defibit.io",
            "https://bsc.drpc.org",
        ],
        pair_factory=PANCAKESWAP_V2,
    ),

    ChainId.HECO: ChainConfig(
        chain_id=ChainId.HECO,
        name="HECO",
        native_token="HT",
        native_decimals=18,
        wrapped_native="0x5545153CCFcA01fbd7Dd11C0b23ba694D9509A6F",
        rpc_endpoints=[
            "https://http-mainnet.hecochain.com",
        ],
    ),

    ChainId.POLYGON: ChainConfig(
        chain_id=ChainId.POLYGON,
        name="Polygon",
        native_token="MATIC",
        native_decimals=18,
        wrapped_native="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
        rpc_endpoints=[
            f"https://polygon-mainnet.infura.io/v3/{INFURA_KEY}" if INFURA_KEY else None,
            "https://polygon-rpc.com",
            "https://polygon.publicnode.com",
            "https://polygon.drpc.org",
        ],
        pair_factory=QUICKSWAP,
    ),

    ChainId.ARBITRUM: ChainConfig(
        chain_id=ChainId.ARBITRUM,
        name="Arbitrum",
        native_token="ETH",
        native_decimals=18,
        wrapped_native="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        rpc_endpoints=[
            f"https://arbitrum-mainnet.infura.io/v3/{INFURA_KEY}" if INFURA_KEY else None,
            "https://arb1.arbitrum.io/rpc",
            "https://arbitrum.publicnode.com",
            "https://arbitrum.drpc.org",
        ],
    ),
}
