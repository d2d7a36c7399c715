"""
ERC-20 read-only helpers: allowance, decimals, total supply
"""
from decimal import Decimal
from enum import Enum
from typing import Optional

from config.tokens import CurrencyAmount, NativeCurrency, Token
from core.calls.queries import MulticallQueries
from core.calls.signature import FunctionSignature
from exchanges.abis import ERC20_ABI

ALLOWANCE = FunctionSignature.from_abi(ERC20_ABI, "allowance")
DECIMALS = FunctionSignature.from_abi(ERC20_ABI, "decimals")
TOTAL_SUPPLY = FunctionSignature.from_abi(ERC20_ABI, "totalSupply")
SYMBOL = FunctionSignature.from_abi(ERC20_ABI, "symbol")
NAME = FunctionSignature.from_abi(ERC20_ABI, "name")


class ApprovalState(Enum):
    UNKNOWN = "unknown"
    NOT_APPROVED = "not_approved"
    PENDING = "pending"
    APPROVED = "approved"


def approval_state(amount: CurrencyAmount, allowance: Optional[CurrencyAmount]) -> ApprovalState:
    """Whether `allowance` covers spending `amount`"""
    if isinstance(amount.currency, NativeCurrency):
        return ApprovalState.APPROVED
    if allowance is None:
        return ApprovalState.UNKNOWN
    return ApprovalState.NOT_APPROVED if allowance.less_than(amount) else ApprovalState.APPROVED


class ERC20Reader:
    def __init__(self, token: Token, queries: MulticallQueries):
        self.token = token
        self.queries = queries

    async def allowance(self, owner: str, spender: str) -> Optional[CurrencyAmount]:
        state = await self.queries.single_call_result(self.token.address, ALLOWANCE, [owner, spender])
        if state.result is None:
            return None
        return CurrencyAmount(self.token, state.result[0])

    async def decimals(self) -> Optional[int]:
        state = await self.queries.single_call_result(self.token.address, DECIMALS)
        return state.result[0] if state.result is not None else None

    async def total_supply(self) -> Optional[Decimal]:
        """Total supply scaled by the on-chain decimals"""
        state = await self.queries.single_call_result(self.token.address, TOTAL_SUPPLY)
        if state.result is None:
            return None
        decimals = await self.decimals()
        if decimals is None:
            return None
        return Decimal(state.result[0]) / (Decimal(10) ** decimals)

    async def symbol(self) -> Optional[str]:
        state = await self.queries.single_call_result(self.token.address, SYMBOL)
        return state.result[0] if state.result is not None else None

    async def name(self) -> Optional[str]:
        state = await self.queries.single_call_result(self.token.address, NAME)
        return state.result[0] if state.result is not None else None
