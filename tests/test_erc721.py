"""Unit tests for the ERC-721 reader."""

import pytest
from eth_abi import encode
from eth_utils import to_checksum_address

from exchanges.tokens.erc721 import (
    BALANCE_OF,
    IS_APPROVED_FOR_ALL,
    NAME,
    OWNER_OF,
    SUPPORTS_INTERFACE,
    TOKEN_BY_INDEX,
    TOKEN_OF_OWNER_BY_INDEX,
    TOKEN_URI,
    TOTAL_SUPPLY,
    ERC721Reader,
    TokenIdOwner,
)
from tests.conftest import ACCOUNT, TARGET_A, uint

COLLECTION = "0x" + "ab" * 20
OPERATOR = "0x" + "ee" * 20


def address_word(address: str) -> bytes:
    return encode(["address"], [address])


def selector_responder(table):
    """Answer by function selector, then by the first uint argument."""

    def respond(target: str, data: bytes) -> bytes:
        answer = table.get(data[:4], b"")
        if callable(answer):
            return answer(int.from_bytes(data[-32:], "big"))
        return answer

    return respond


class TestSingleReads:
    @pytest.mark.asyncio
    async def test_owner_of_is_checksummed(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = address_word(ACCOUNT)

        owner = await ERC721Reader(COLLECTION, queries).owner_of(1)

        assert owner == to_checksum_address(ACCOUNT)

    @pytest.mark.asyncio
    async def test_missing_token(self, queries, endpoint) -> None:
        assert await ERC721Reader(COLLECTION, queries).owner_of(1) is None

    @pytest.mark.asyncio
    async def test_name(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = encode(["string"], ["Punks"])
        assert await ERC721Reader(COLLECTION, queries).name() == "Punks"

    @pytest.mark.asyncio
    async def test_is_approved(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = address_word(OPERATOR)
        reader = ERC721Reader(COLLECTION, queries)

        assert await reader.is_approved(7, OPERATOR.upper().replace("0X", "0x"))
        assert not await reader.is_approved(7, ACCOUNT)

    @pytest.mark.asyncio
    async def test_is_approved_for_all_false(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = encode(["bool"], [False])
        assert await ERC721Reader(COLLECTION, queries).is_approved_for_all(ACCOUNT, OPERATOR) is False

    @pytest.mark.asyncio
    async def test_balance_of(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = uint(3)
        assert await ERC721Reader(COLLECTION, queries).balance_of(ACCOUNT) == 3


class TestEnumeration:
    """Batched enumeration keeps ids and owners paired."""

    @pytest.mark.asyncio
    async def test_all_tokens_of_owner(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOKEN_OF_OWNER_BY_INDEX.selector: lambda index: uint(100 + index),
        })

        tokens = await ERC721Reader(COLLECTION, queries).all_tokens_of_owner(ACCOUNT, 3)

        assert [t.token_id for t in tokens] == [100, 101, 102]
        assert len(endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_all_tokens_skips_failed_owner(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOKEN_BY_INDEX.selector: lambda index: uint(index * 2),
            # Token id 2 has no owner (burned)
            OWNER_OF.selector: lambda token_id: b"" if token_id == 2 else address_word(TARGET_A),
        })

        tokens = await ERC721Reader(COLLECTION, queries).all_tokens(3)

        owner = tokens[0].owner
        assert tokens == [
            TokenIdOwner(tokens[0].contract, owner, 0),
            TokenIdOwner(tokens[0].contract, owner, 4),
        ]
        assert owner.lower() == TARGET_A
        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_zero_total(self, queries, endpoint, height_source) -> None:
        assert await ERC721Reader(COLLECTION, queries).all_tokens(0) == []
        assert endpoint.requests == []
        assert height_source.calls == 0


class TestCollectionViews:
    """Remaining single-call views of a collection."""

    @pytest.mark.asyncio
    async def test_symbol(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = encode(["string"], ["PNK"])
        assert await ERC721Reader(COLLECTION, queries).symbol() == "PNK"

    @pytest.mark.asyncio
    async def test_admin_is_checksummed(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = address_word(OPERATOR)
        assert await ERC721Reader(COLLECTION, queries).admin() == to_checksum_address(OPERATOR)

    @pytest.mark.asyncio
    async def test_admin_missing(self, queries, endpoint) -> None:
        assert await ERC721Reader(COLLECTION, queries).admin() is None

    @pytest.mark.asyncio
    async def test_token_uri(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOKEN_URI.selector: lambda token_id: encode(["string"], [f"ipfs://meta/{token_id}"]),
        })
        assert await ERC721Reader(COLLECTION, queries).token_uri(42) == "ipfs://meta/42"

    @pytest.mark.asyncio
    async def test_total_supply(self, queries, endpoint) -> None:
        endpoint.responses[COLLECTION] = uint(10_000)
        assert await ERC721Reader(COLLECTION, queries).total_supply() == 10_000

    @pytest.mark.asyncio
    async def test_supports_interface(self, queries, endpoint) -> None:
        erc721_interface = bytes.fromhex("80ac58cd")
        call_data = bytes.fromhex(SUPPORTS_INTERFACE.encode_input([erc721_interface])[2:])
        endpoint.responses[(COLLECTION, call_data)] = encode(["bool"], [True])
        reader = ERC721Reader(COLLECTION, queries)

        assert await reader.supports_interface(erc721_interface) is True
        assert await reader.supports_interface("0x80ac58cd") is True
        assert await reader.supports_interface("0x01ffc9a7") is None

    @pytest.mark.asyncio
    async def test_supports_interface_bad_id(self, queries, endpoint) -> None:
        assert await ERC721Reader(COLLECTION, queries).supports_interface("not hex") is None
        assert endpoint.requests == []

    @pytest.mark.asyncio
    async def test_token_by_index(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOKEN_BY_INDEX.selector: lambda index: uint(index + 500),
        })
        assert await ERC721Reader(COLLECTION, queries).token_by_index(3) == 503

    @pytest.mark.asyncio
    async def test_token_of_owner_by_index(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOKEN_OF_OWNER_BY_INDEX.selector: lambda index: uint(index + 7),
        })
        assert await ERC721Reader(COLLECTION, queries).token_of_owner_by_index(ACCOUNT, 0) == 7


class TestEnumerationDefaults:
    """Enumeration sizes read from the chain when not given."""

    @pytest.mark.asyncio
    async def test_all_tokens_uses_total_supply(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            TOTAL_SUPPLY.selector: uint(2),
            TOKEN_BY_INDEX.selector: lambda index: uint(index + 1),
            OWNER_OF.selector: lambda token_id: address_word(ACCOUNT),
        })

        tokens = await ERC721Reader(COLLECTION, queries).all_tokens()

        assert [t.token_id for t in tokens] == [1, 2]
        assert len(endpoint.requests) == 3

    @pytest.mark.asyncio
    async def test_all_tokens_of_owner_uses_balance(self, queries, endpoint) -> None:
        endpoint.responder = selector_responder({
            BALANCE_OF.selector: uint(1),
            TOKEN_OF_OWNER_BY_INDEX.selector: lambda index: uint(99),
        })

        tokens = await ERC721Reader(COLLECTION, queries).all_tokens_of_owner(ACCOUNT)

        assert tokens == [TokenIdOwner(to_checksum_address(COLLECTION), to_checksum_address(ACCOUNT), 99)]

    @pytest.mark.asyncio
    async def test_unknown_supply_enumerates_nothing(self, queries, endpoint) -> None:
        assert await ERC721Reader(COLLECTION, queries).all_tokens() == []
        assert len(endpoint.requests) == 1


def test_signatures_from_abi() -> None:
    assert NAME.text == "name()"
    assert IS_APPROVED_FOR_ALL.text == "isApprovedForAll(address,address)"
    assert TOKEN_OF_OWNER_BY_INDEX.text == "tokenOfOwnerByIndex(address,uint256)"
