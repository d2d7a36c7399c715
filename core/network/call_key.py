"""
Canonical call keys

A call key is the string form of one (target, payload) pair. It is used to
deduplicate calls inside a batch and to map batch results back to callers.
"""
import re
from typing import NamedTuple

from core.errors import InvalidAddress, InvalidPayload, MalformedKey

ADDRESS_REGEX = re.compile(r"0x[a-fA-F0-9]{40}")
# Lowercase only, whole bytes only
LOWER_HEX_REGEX = re.compile(r"0x(?:[a-f0-9]{2})*")

KEY_SEPARATOR = "-"


class Call(NamedTuple):
    """One read-only request: call `payload` on contract `target`"""
    target: str
    payload: str

    @property
    def payload_bytes(self) -> bytes:
        return bytes.fromhex(self.payload[2:])


def validate_call(call: Call) -> None:
    if not isinstance(call.target, str) or not ADDRESS_REGEX.fullmatch(call.target):
        raise InvalidAddress(call.target)
    if not isinstance(call.payload, str) or not LOWER_HEX_REGEX.fullmatch(call.payload):
        raise InvalidPayload(call.payload)


def to_call_key(call: Call) -> str:
    validate_call(call)
    return f"{call.target}{KEY_SEPARATOR}{call.payload}"


def parse_call_key(key: str) -> Call:
    pieces = key.split(KEY_SEPARATOR)
    if len(pieces) != 2:
        raise MalformedKey(key)
    return Call(target=pieces[0], payload=pieces[1])
