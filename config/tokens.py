"""
Token and currency definitions per chain
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from eth_utils import is_address, to_checksum_address

from config.chains import ChainId, CHAINS


@dataclass(frozen=True)
class NativeCurrency:
    """The gas currency of a chain (ETH, BNB, HT, ...), not an ERC-20"""
    symbol: str = "ETH"
    name: str = "Ether"
    decimals: int = 18


# Native currency marker, shared by every chain
ETHER = NativeCurrency()


@dataclass(frozen=True)
class Token:
    """ERC-20 token deployed on one chain"""
    chain_id: ChainId
    address: str
    decimals: int
    symbol: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not is_address(self.address):
            raise ValueError(f"Invalid token address: {self.address}")
        # Checksum once so equality and sorting never depend on input casing
        object.__setattr__(self, "address", to_checksum_address(self.address))

    def equals(self, other: "Token") -> bool:
        return self.chain_id == other.chain_id and self.address == other.address

    def sorts_before(self, other: "Token") -> bool:
        """Token ordering used by pair contracts (token0 < token1)"""
        if self.chain_id != other.chain_id:
            raise ValueError("Tokens are on different chains")
        if self.address == other.address:
            raise ValueError("Tokens have the same address")
        return self.address.lower() < other.address.lower()


Currency = Union[Token, NativeCurrency]


@dataclass(frozen=True)
class CurrencyAmount:
    """Raw integer amount of a currency, in its smallest unit"""
    currency: Currency
    raw: int

    def to_decimal(self) -> Decimal:
        return Decimal(self.raw) / (Decimal(10) ** self.currency.decimals)

    def less_than(self, other: "CurrencyAmount") -> bool:
        return self.raw < other.raw

    def __str__(self) -> str:
        return f"{self.to_decimal()} {self.currency.symbol or '?'}"


def wrapped_native(chain_id: ChainId) -> Token:
    """Wrapped form of the chain's native currency"""
    config = CHAINS[chain_id]
    return Token(
        chain_id=chain_id,
        address=config.wrapped_native,
        decimals=config.native_decimals,
        symbol=f"W{config.native_token}",
        name=f"Wrapped {config.native_token}",
    )


def wrapped_currency(currency: Optional[Currency], chain_id: Optional[ChainId]) -> Optional[Token]:
    """Map the native currency to its wrapped token; tokens pass through"""
    if currency is None or chain_id is None:
        return None
    if isinstance(currency, NativeCurrency):
        return wrapped_native(chain_id)
    if isinstance(currency, Token) and currency.chain_id == chain_id:
        return currency
    return None


# ==================== ETHEREUM ====================

DAI = Token(ChainId.ETHEREUM, "0x6B175474E89094C44Da98b954EedeAC495271d0F", 18, "DAI", "Dai Stablecoin")
USDC = Token(ChainId.ETHEREUM, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6, "USDC", "USD//C")
USDT = Token(ChainId.ETHEREUM, "0xdAC17F958D2ee523a2206206994597C13D831ec7", 6, "USDT", "Tether USD")
COMP = Token(ChainId.ETHEREUM, "0xc00e94Cb662C3520282E6f5717214004A7f26888", 18, "COMP", "Compound")
MKR = Token(ChainId.ETHEREUM, "0x9f8F72aA9304c8B593d555F12eF6589cC3A579A2", 18, "MKR", "Maker")

# ==================== HECO ====================

HUSD = Token(ChainId.HECO, "0x0298c2b32eaE4da002a15f36fdf7615BEa3DA047", 8, "HUSD", "Heco-Peg HUSD Token")
HUSDT = Token(ChainId.HECO, "0xa71EdC38d189767582C38A3145b5873052c3e47a", 18, "HUSDT", "Heco-Peg USDTHECO Token")

# ==================== BSC ====================

BUSD = Token(ChainId.BSC, "0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56", 18, "BUSD", "Binance-Peg BUSD Token")
BUSDT = Token(ChainId.BSC, "0x55d398326f99059fF775485246999027B3197955", 18, "BUSDT", "Binance-Peg BUSD-T")


ALL_TOKENS: list[Token] = [DAI, USDC, USDT, COMP, MKR, HUSD, HUSDT, BUSD, BUSDT]


def get_tokens_for_chain(chain_id: ChainId) -> list[Token]:
    """Get all known tokens on a chain, wrapped native first"""
    return [wrapped_native(chain_id)] + [t for t in ALL_TOKENS if t.chain_id == chain_id]


def find_token(chain_id: ChainId, symbol_or_address: str) -> Optional[Currency]:
    """Resolve a CLI style token reference (symbol, native symbol or address)"""
    needle = symbol_or_address.strip()
    if needle.upper() == CHAINS[chain_id].native_token:
        return ETHER
    for token in get_tokens_for_chain(chain_id):
        if token.symbol and token.symbol.upper() == needle.upper():
            return token
        if token.address.lower() == needle.lower():
            return token
    return None
