"""
Function signatures used to build call data and decode return data

A FunctionSignature is passed explicitly wherever a call is built or decoded.
Input parameters are restricted to a closed set of kinds so that arguments can
be checked before any request is made.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from eth_abi import decode, encode, is_encodable
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, is_address, is_hex, to_bytes, to_checksum_address

from core.errors import DecodeFailure, InvalidArguments

_SIGNATURE_REGEX = re.compile(r"\s*([A-Za-z_$][A-Za-z0-9_$]*)\s*\((.*)\)\s*")
_SIZED_REGEX = re.compile(r"(uint|int|bytes)(\d*)")


class ParamKind(Enum):
    """Supported input parameter kinds"""
    ADDRESS = "address"
    UINT = "uint"
    INT = "int"
    BOOL = "bool"
    BYTES = "bytes"
    STRING = "string"


@dataclass(frozen=True)
class Param:
    """One input parameter: canonical ABI type plus its kind"""
    abi_type: str
    kind: ParamKind
    is_array: bool = False

    @classmethod
    def parse(cls, abi_type: str) -> "Param":
        raw = abi_type.strip()
        is_array = raw.endswith("[]")
        base = raw[:-2] if is_array else raw

        if base in ("address", "bool", "string"):
            kind = ParamKind(base)
        else:
            match = _SIZED_REGEX.fullmatch(base)
            if not match:
                raise InvalidArguments(f"Unsupported parameter type: {abi_type}")
            kind = ParamKind(match.group(1))
            # uint/int without a size are uint256/int256 in selectors
            if kind in (ParamKind.UINT, ParamKind.INT) and not match.group(2):
                base = f"{base}256"

        return cls(abi_type=f"{base}[]" if is_array else base, kind=kind, is_array=is_array)

    def coerce(self, value: Any) -> Any:
        """Convert a caller value to what eth_abi expects, or raise InvalidArguments"""
        if self.is_array:
            if not isinstance(value, (list, tuple)):
                raise InvalidArguments(f"Expected a list for {self.abi_type}, got {value!r}")
            coerced = [self._coerce_one(item) for item in value]
        else:
            coerced = self._coerce_one(value)

        if not is_encodable(self.abi_type, coerced):
            raise InvalidArguments(f"Value {value!r} does not fit {self.abi_type}")
        return coerced

    def _coerce_one(self, value: Any) -> Any:
        kind = self.kind
        if kind is ParamKind.ADDRESS:
            if isinstance(value, str) and is_address(value):
                return to_checksum_address(value)
        elif kind in (ParamKind.UINT, ParamKind.INT):
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, str):
                try:
                    # Decimal or 0x-prefixed numeric strings
                    return int(value, 0)
                except ValueError:
                    pass
        elif kind is ParamKind.BOOL:
            if isinstance(value, bool):
                return value
        elif kind is ParamKind.BYTES:
            if isinstance(value, (bytes, bytearray)):
                return bytes(value)
            if isinstance(value, str) and is_hex(value):
                return to_bytes(hexstr=value)
        elif kind is ParamKind.STRING:
            if isinstance(value, str):
                return value

        raise InvalidArguments(f"Value {value!r} is not a valid {kind.value}")


def _output_type(param: dict) -> str:
    """ABI JSON output entry to an eth_abi type string (tuples included)"""
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_output_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


@dataclass(frozen=True)
class FunctionSignature:
    """Name, typed inputs and output types of one contract function"""
    name: str
    inputs: tuple[Param, ...] = ()
    outputs: tuple[str, ...] = ()
    output_names: tuple[str, ...] = ()

    @classmethod
    def parse(
        cls,
        signature: str,
        outputs: Sequence[str] = (),
        output_names: Sequence[str] = ()
    ) -> "FunctionSignature":
        """Build from text such as "balanceOf(address)" and its output types"""
        match = _SIGNATURE_REGEX.fullmatch(signature)
        if not match:
            raise InvalidArguments(f"Invalid function signature: {signature}")
        name, params = match.groups()
        inputs = tuple(Param.parse(p) for p in params.split(",") if p.strip())
        return cls(name=name, inputs=inputs, outputs=tuple(outputs), output_names=tuple(output_names))

    @classmethod
    def from_abi(cls, abi: list[dict], name: str) -> "FunctionSignature":
        """Build from the first function called `name` in a contract ABI"""
        for entry in abi:
            if entry.get("type", "function") == "function" and entry.get("name") == name:
                outputs = entry.get("outputs", [])
                return cls(
                    name=name,
                    inputs=tuple(Param.parse(p["type"]) for p in entry.get("inputs", [])),
                    outputs=tuple(_output_type(o) for o in outputs),
                    output_names=tuple(o.get("name", "") for o in outputs),
                )
        raise InvalidArguments(f"Function {name} not found in ABI")

    @property
    def text(self) -> str:
        """Canonical signature text, e.g. balanceOf(address)"""
        return f"{self.name}({','.join(p.abi_type for p in self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.text)

    def encode_input(self, args: Optional[Sequence[Any]] = None) -> str:
        """Call data as lowercase 0x-hex; raises InvalidArguments on bad args"""
        args = list(args or [])
        if len(args) != len(self.inputs):
            raise InvalidArguments(
                f"{self.text} takes {len(self.inputs)} arguments, got {len(args)}"
            )
        values = [param.coerce(arg) for param, arg in zip(self.inputs, args)]
        encoded = encode([p.abi_type for p in self.inputs], values)
        return "0x" + (self.selector + encoded).hex()

    def decode_output(self, data: bytes) -> tuple:
        """Decode return data; raises DecodeFailure on malformed bytes"""
        try:
            return tuple(decode(list(self.outputs), data))
        except (DecodingError, ValueError, TypeError) as e:
            raise DecodeFailure(f"Cannot decode {self.text} result: {e}") from e

    def decode_named(self, data: bytes) -> dict[str, Any]:
        """Decode return data into a dict keyed by output name (or position)"""
        values = self.decode_output(data)
        names = self.output_names or ()
        return {
            (names[i] if i < len(names) and names[i] else str(i)): value
            for i, value in enumerate(values)
        }
