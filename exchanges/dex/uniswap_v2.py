"""
Uniswap V2 style pair reserves
Works for any fork that derives pair addresses with CREATE2 from a factory
(Uniswap V2, PancakeSwap V2, QuickSwap, ...)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from eth_utils import keccak, to_bytes, to_checksum_address

from config.chains import ChainId, CHAINS, PairFactory
from config.tokens import Currency, CurrencyAmount, Token, wrapped_currency
from core.calls.queries import MulticallQueries
from core.calls.signature import FunctionSignature
from exchanges.abis import UNISWAP_V2_PAIR_ABI
from utils.logger import get_logger

logger = get_logger(__name__)

GET_RESERVES = FunctionSignature.from_abi(UNISWAP_V2_PAIR_ABI, "getReserves")


class PairState(Enum):
    LOADING = "loading"
    NOT_EXISTS = "not_exists"
    EXISTS = "exists"
    INVALID = "invalid"


def sort_tokens(token_a: Token, token_b: Token) -> tuple[Token, Token]:
    return (token_a, token_b) if token_a.sorts_before(token_b) else (token_b, token_a)


def compute_pair_address(factory: PairFactory, token_a: Token, token_b: Token) -> str:
    """CREATE2 address of the pair contract for two tokens"""
    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(to_bytes(hexstr=token0.address) + to_bytes(hexstr=token1.address))
    digest = keccak(
        b"\xff"
        + to_bytes(hexstr=factory.factory_address)
        + salt
        + to_bytes(hexstr=factory.init_code_hash)
    )
    return to_checksum_address(digest[12:])


@dataclass(frozen=True)
class Pair:
    """Reserves of one pair, token0 first"""
    address: str
    reserve0: CurrencyAmount
    reserve1: CurrencyAmount

    @property
    def token0(self) -> Token:
        return self.reserve0.currency

    @property
    def token1(self) -> Token:
        return self.reserve1.currency

    def involves_token(self, token: Token) -> bool:
        return token.equals(self.token0) or token.equals(self.token1)

    def reserve_of(self, token: Token) -> CurrencyAmount:
        if not self.involves_token(token):
            raise ValueError(f"{token.symbol or token.address} is not in pair {self.address}")
        return self.reserve0 if token.equals(self.token0) else self.reserve1


class PairReserves:
    """Resolves pair existence and reserves for currency pairs in one batch"""

    def __init__(
        self,
        queries: MulticallQueries,
        chain_id: ChainId,
        factory: Optional[PairFactory] = None
    ):
        self.queries = queries
        self.chain_id = chain_id
        self.factory = factory or CHAINS[chain_id].pair_factory
        if self.factory is None:
            raise ValueError(f"No pair factory configured for {CHAINS[chain_id].name}")

    async def get_pairs(
        self,
        currencies: Sequence[tuple[Optional[Currency], Optional[Currency]]]
    ) -> list[tuple[PairState, Optional[Pair]]]:
        tokens = [
            (wrapped_currency(a, self.chain_id), wrapped_currency(b, self.chain_id))
            for a, b in currencies
        ]

        pair_addresses = [
            compute_pair_address(self.factory, token_a, token_b)
            if token_a and token_b and not token_a.equals(token_b) else None
            for token_a, token_b in tokens
        ]

        states = await self.queries.multiple_contract_single_data(pair_addresses, GET_RESERVES)

        pairs: list[tuple[PairState, Optional[Pair]]] = []
        for (token_a, token_b), address, state in zip(tokens, pair_addresses, states):
            if state.loading:
                pairs.append((PairState.LOADING, None))
            elif not token_a or not token_b or token_a.equals(token_b):
                pairs.append((PairState.INVALID, None))
            elif not state.result:
                # No code at the derived address: getReserves returns nothing
                logger.debug(f"No {self.factory.name} pair at {address}")
                pairs.append((PairState.NOT_EXISTS, None))
            else:
                reserve0, reserve1 = state.result[0], state.result[1]
                token0, token1 = sort_tokens(token_a, token_b)
                pairs.append((PairState.EXISTS, Pair(
                    address=address,
                    reserve0=CurrencyAmount(token0, reserve0),
                    reserve1=CurrencyAmount(token1, reserve1)
                )))
        return pairs

    async def get_pair(
        self,
        currency_a: Optional[Currency],
        currency_b: Optional[Currency]
    ) -> tuple[PairState, Optional[Pair]]:
        pairs = await self.get_pairs([(currency_a, currency_b)])
        return pairs[0]
