"""Unit tests for call key encoding."""

import pytest

from core.errors import InvalidAddress, InvalidPayload, MalformedKey
from core.network.call_key import Call, parse_call_key, to_call_key

TARGET = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


class TestCallKeyRoundTrip:
    """Valid calls survive encode then decode."""

    @pytest.mark.parametrize(
        "call",
        [
            Call(TARGET, "0x"),
            Call(TARGET.lower(), "0x70a08231"),
            Call("0x" + "ab" * 20, "0x" + "00" * 36),
        ],
    )
    def test_round_trip(self, call: Call) -> None:
        assert parse_call_key(to_call_key(call)) == call

    def test_key_embeds_both_fields(self) -> None:
        assert to_call_key(Call(TARGET, "0x1234")) == f"{TARGET}-0x1234"

    def test_distinct_calls_have_distinct_keys(self) -> None:
        assert to_call_key(Call(TARGET, "0x12")) != to_call_key(Call(TARGET, "0x1234"))


class TestCallKeyRejection:
    """Malformed calls are rejected before they reach the network."""

    def test_uppercase_payload(self) -> None:
        with pytest.raises(InvalidPayload):
            to_call_key(Call(TARGET, "0xABCD"))

    def test_odd_length_payload(self) -> None:
        with pytest.raises(InvalidPayload):
            to_call_key(Call(TARGET, "0x123"))

    def test_payload_without_prefix(self) -> None:
        with pytest.raises(InvalidPayload):
            to_call_key(Call(TARGET, "1234"))

    def test_payload_with_trailing_newline(self) -> None:
        with pytest.raises(InvalidPayload):
            to_call_key(Call(TARGET, "0x1234\n"))

    def test_short_address(self) -> None:
        with pytest.raises(InvalidAddress):
            to_call_key(Call("0x" + "ab" * 19, "0x"))

    def test_long_address(self) -> None:
        with pytest.raises(InvalidAddress):
            to_call_key(Call("0x" + "ab" * 21, "0x"))

    def test_non_hex_address(self) -> None:
        with pytest.raises(InvalidAddress):
            to_call_key(Call("0x" + "zz" * 20, "0x"))

    def test_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError, match="Invalid hex"):
            to_call_key(Call(TARGET, "0xAB"))


class TestParseCallKey:
    """Key decoding requires exactly two segments."""

    @pytest.mark.parametrize("key", ["no-separator-here-twice", "missing", "a-b-c"])
    def test_malformed(self, key: str) -> None:
        with pytest.raises(MalformedKey):
            parse_call_key(key)

    def test_parse(self) -> None:
        assert parse_call_key(f"{TARGET}-0x12") == Call(TARGET, "0x12")
