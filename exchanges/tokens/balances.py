"""
Native and ERC-20 balance lookups built on batched calls
"""
from typing import Optional, Sequence

from eth_utils import is_address, to_checksum_address

from config.chains import ChainId, CHAINS
from config.tokens import Currency, CurrencyAmount, ETHER, NativeCurrency, Token
from core.calls.queries import MulticallQueries
from core.calls.signature import FunctionSignature
from core.network.multicall import MULTICALL3_ABI
from exchanges.abis import ERC20_ABI
from utils.logger import get_logger

logger = get_logger(__name__)

GET_ETH_BALANCE = FunctionSignature.from_abi(MULTICALL3_ABI, "getEthBalance")
BALANCE_OF = FunctionSignature.from_abi(ERC20_ABI, "balanceOf")


def checksummed(address: Optional[str]) -> Optional[str]:
    """Checksum address, or None when it is not an address"""
    if isinstance(address, str) and is_address(address):
        return to_checksum_address(address)
    return None


class TokenBalances:
    """
    Balance lookups for one chain.
    Native balances go through the multicall contract's getEthBalance.
    """

    def __init__(self, queries: MulticallQueries, chain_id: ChainId, multicall_address: Optional[str] = None):
        self.queries = queries
        self.chain_id = chain_id
        self.multicall_address = multicall_address or CHAINS[chain_id].multicall_address

    async def get_eth_balances(
        self,
        unchecked_addresses: Optional[Sequence[Optional[str]]] = None
    ) -> dict[str, CurrencyAmount]:
        """Map each valid address to its native balance, addresses sorted"""
        addresses = sorted({a for a in map(checksummed, unchecked_addresses or []) if a})

        results = await self.queries.single_contract_multiple_data(
            self.multicall_address,
            GET_ETH_BALANCE,
            [[address] for address in addresses]
        )

        balances = {}
        for address, state in zip(addresses, results):
            if state.result is not None:
                balances[address] = CurrencyAmount(ETHER, state.result[0])
        return balances

    async def get_token_balances_with_loading_indicator(
        self,
        address: Optional[str],
        tokens: Optional[Sequence[Optional[Token]]] = None
    ) -> tuple[dict[str, CurrencyAmount], bool]:
        """Map token address to balance of `address`, plus whether any call is still loading"""
        account = checksummed(address)
        validated = [t for t in tokens or [] if isinstance(t, Token) and t.chain_id == self.chain_id]
        if not account or not validated:
            return {}, False

        states = await self.queries.multiple_contract_single_data(
            [token.address for token in validated],
            BALANCE_OF,
            [account]
        )
        any_loading = any(state.loading for state in states)

        balances = {}
        for token, state in zip(validated, states):
            if state.result is not None:
                balances[token.address] = CurrencyAmount(token, state.result[0])
            elif state.error:
                logger.debug(f"balanceOf failed for {token.symbol or token.address}")
        return balances, any_loading

    async def get_token_balances(
        self,
        address: Optional[str],
        tokens: Optional[Sequence[Optional[Token]]] = None
    ) -> dict[str, CurrencyAmount]:
        balances, _ = await self.get_token_balances_with_loading_indicator(address, tokens)
        return balances

    async def get_token_balance(self, account: Optional[str], token: Optional[Token]) -> Optional[CurrencyAmount]:
        """Balance for a single token/account combo"""
        if token is None:
            return None
        balances = await self.get_token_balances(account, [token])
        return balances.get(token.address)

    async def get_currency_balances(
        self,
        account: Optional[str],
        currencies: Optional[Sequence[Optional[Currency]]] = None
    ) -> list[Optional[CurrencyAmount]]:
        """Balances in the order of `currencies`; None where unknown"""
        currencies = list(currencies or [])
        account = checksummed(account)

        tokens = [c for c in currencies if isinstance(c, Token)]
        token_balances = await self.get_token_balances(account, tokens)

        contains_native = any(isinstance(c, NativeCurrency) for c in currencies)
        eth_balances = await self.get_eth_balances([account] if account and contains_native else [])

        balances: list[Optional[CurrencyAmount]] = []
        for currency in currencies:
            if not account or currency is None:
                balances.append(None)
            elif isinstance(currency, Token):
                balances.append(token_balances.get(currency.address))
            elif isinstance(currency, NativeCurrency):
                balances.append(eth_balances.get(account))
            else:
                balances.append(None)
        return balances

    async def get_currency_balance(self, account: Optional[str], currency: Optional[Currency]) -> Optional[CurrencyAmount]:
        balances = await self.get_currency_balances(account, [currency])
        return balances[0]
