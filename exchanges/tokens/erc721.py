"""
ERC-721 read-only helpers
"""
from dataclasses import dataclass
from typing import Optional

from eth_utils import to_checksum_address

from core.calls.queries import MulticallQueries
from core.calls.signature import FunctionSignature
from exchanges.abis import ERC721_ABI
from utils.logger import get_logger

logger = get_logger(__name__)

BALANCE_OF = FunctionSignature.from_abi(ERC721_ABI, "balanceOf")
OWNER_OF = FunctionSignature.from_abi(ERC721_ABI, "ownerOf")
GET_APPROVED = FunctionSignature.from_abi(ERC721_ABI, "getApproved")
IS_APPROVED_FOR_ALL = FunctionSignature.from_abi(ERC721_ABI, "isApprovedForAll")
TOKEN_OF_OWNER_BY_INDEX = FunctionSignature.from_abi(ERC721_ABI, "tokenOfOwnerByIndex")
TOKEN_BY_INDEX = FunctionSignature.from_abi(ERC721_ABI, "tokenByIndex")
NAME = FunctionSignature.from_abi(ERC721_ABI, "name")
OWNER = FunctionSignature.from_abi(ERC721_ABI, "owner")
ADMIN = FunctionSignature.from_abi(ERC721_ABI, "admin")
SYMBOL = FunctionSignature.from_abi(ERC721_ABI, "symbol")
TOKEN_URI = FunctionSignature.from_abi(ERC721_ABI, "tokenURI")
TOTAL_SUPPLY = FunctionSignature.from_abi(ERC721_ABI, "totalSupply")
SUPPORTS_INTERFACE = FunctionSignature.from_abi(ERC721_ABI, "supportsInterface")


@dataclass(frozen=True)
class TokenIdOwner:
    contract: str
    owner: str
    token_id: int


class ERC721Reader:
    """Reads an ERC-721 collection; enumeration calls are batched"""

    def __init__(self, contract_address: str, queries: MulticallQueries):
        self.contract_address = to_checksum_address(contract_address)
        self.queries = queries

    async def _single(self, signature: FunctionSignature, inputs=None):
        state = await self.queries.single_call_result(self.contract_address, signature, inputs)
        return state.result[0] if state.result else None

    async def balance_of(self, owner: str) -> Optional[int]:
        return await self._single(BALANCE_OF, [owner])

    async def owner_of(self, token_id: int) -> Optional[str]:
        owner = await self._single(OWNER_OF, [token_id])
        return to_checksum_address(owner) if owner else None

    async def get_approved(self, token_id: int) -> Optional[str]:
        approved = await self._single(GET_APPROVED, [token_id])
        return to_checksum_address(approved) if approved else None

    async def is_approved(self, token_id: int, operator: str) -> bool:
        approved = await self.get_approved(token_id)
        return approved is not None and approved.lower() == operator.lower()

    async def is_approved_for_all(self, owner: str, operator: str) -> Optional[bool]:
        return await self._single(IS_APPROVED_FOR_ALL, [owner, operator])

    async def name(self) -> Optional[str]:
        return await self._single(NAME)

    async def owner(self) -> Optional[str]:
        owner = await self._single(OWNER)
        return to_checksum_address(owner) if owner else None

    async def symbol(self) -> Optional[str]:
        return await self._single(SYMBOL)

    async def admin(self) -> Optional[str]:
        admin = await self._single(ADMIN)
        return to_checksum_address(admin) if admin else None

    async def token_uri(self, token_id: int) -> Optional[str]:
        return await self._single(TOKEN_URI, [token_id])

    async def total_supply(self) -> Optional[int]:
        return await self._single(TOTAL_SUPPLY)

    async def supports_interface(self, interface_id: bytes | str) -> Optional[bool]:
        """ERC-165 check; `interface_id` is 4 bytes or its 0x-hex form"""
        return await self._single(SUPPORTS_INTERFACE, [interface_id])

    async def token_by_index(self, index: int) -> Optional[int]:
        return await self._single(TOKEN_BY_INDEX, [index])

    async def token_of_owner_by_index(self, owner: str, index: int) -> Optional[int]:
        return await self._single(TOKEN_OF_OWNER_BY_INDEX, [owner, index])

    async def all_tokens_of_owner(self, owner: str, total: Optional[int] = None) -> list[TokenIdOwner]:
        """Token ids held by `owner`; `total` defaults to its on-chain balance"""
        if total is None:
            total = await self.balance_of(owner) or 0
        states = await self.queries.single_contract_multiple_data(
            self.contract_address,
            TOKEN_OF_OWNER_BY_INDEX,
            [[owner, index] for index in range(total)]
        )
        owner = to_checksum_address(owner)
        return [
            TokenIdOwner(self.contract_address, owner, state.result[0])
            for state in states
            if state.valid and state.result is not None and len(state.result) == 1
        ]

    async def all_tokens(self, total: Optional[int] = None) -> list[TokenIdOwner]:
        """Every token id of the collection with its owner; `total` defaults to totalSupply()"""
        if total is None:
            total = await self.total_supply() or 0
        id_states = await self.queries.single_contract_multiple_data(
            self.contract_address,
            TOKEN_BY_INDEX,
            [[index] for index in range(total)]
        )
        token_ids = [
            state.result[0] for state in id_states
            if state.valid and state.result is not None and len(state.result) == 1
        ]

        owner_states = await self.queries.single_contract_multiple_data(
            self.contract_address,
            OWNER_OF,
            [[token_id] for token_id in token_ids]
        )
        # Keep ids and owners paired; a failed ownerOf drops only its own id
        owners = []
        for token_id, state in zip(token_ids, owner_states):
            if state.valid and state.result is not None and len(state.result) == 1:
                owners.append(TokenIdOwner(self.contract_address, to_checksum_address(state.result[0]), token_id))
            else:
                logger.debug(f"ownerOf({token_id}) failed on {self.contract_address}")
        return owners
