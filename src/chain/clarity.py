"""
Tagged chain values (Clarity values) and their consensus serialization.

Every value returned by a read-only contract call is a tagged value: a type tag + payload.
The node API transports them hex encoded:

    <1 byte type id><payload>

* uint / int: 16 bytes, big endian (int is two's complement)
* true / false: no payload
* standard principal: 1 byte version + 20 bytes hash160
* contract principal: standard principal + 1 byte name length + name
* none: no payload, some / ok / err: the wrapped value
* list: 4 bytes length + values
* tuple: 4 bytes length + (1 byte name length + name + value) per field, names sorted
* string-ascii / string-utf8 / buffer: 4 bytes length + bytes

Principals are rendered as c32check addresses (ex. ST3P49R8XXQWG69S66MZASYPTTGNDKK0WW32RRJDN).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import ClassVar, Union

from src.core.exceptions import DecodeError

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
CHECKSUM_LENGTH = 4
HASH160_LENGTH = 20
UINT_BYTES = 16
UINT_MAX = 2 ** (8 * UINT_BYTES) - 1


class TypeId(IntEnum):
    INT = 0x00
    UINT = 0x01
    BUFFER = 0x02
    TRUE = 0x03
    FALSE = 0x04
    PRINCIPAL_STANDARD = 0x05
    PRINCIPAL_CONTRACT = 0x06
    RESPONSE_OK = 0x07
    RESPONSE_ERR = 0x08
    OPTIONAL_NONE = 0x09
    OPTIONAL_SOME = 0x0A
    LIST = 0x0B
    TUPLE = 0x0C
    STRING_ASCII = 0x0D
    STRING_UTF8 = 0x0E


class ClarityType(StrEnum):
    """Tag exposed on every decoded value."""

    INT = "int"
    UINT = "uint"
    BOOL = "bool"
    BUFFER = "buffer"
    PRINCIPAL = "principal"
    CONTRACT_PRINCIPAL = "contract-principal"
    OK = "ok"
    ERR = "err"
    NONE = "none"
    SOME = "some"
    LIST = "list"
    TUPLE = "tuple"
    STRING_ASCII = "string-ascii"
    STRING_UTF8 = "string-utf8"


# --- VALUE TYPES ---
@dataclass(frozen=True)
class IntCV:
    type: ClassVar[ClarityType] = ClarityType.INT
    value: int


@dataclass(frozen=True)
class UIntCV:
    type: ClassVar[ClarityType] = ClarityType.UINT
    value: int


@dataclass(frozen=True)
class BoolCV:
    type: ClassVar[ClarityType] = ClarityType.BOOL
    value: bool


@dataclass(frozen=True)
class BufferCV:
    type: ClassVar[ClarityType] = ClarityType.BUFFER
    value: bytes


@dataclass(frozen=True)
class StandardPrincipalCV:
    type: ClassVar[ClarityType] = ClarityType.PRINCIPAL
    value: str  # c32check address


@dataclass(frozen=True)
class ContractPrincipalCV:
    type: ClassVar[ClarityType] = ClarityType.CONTRACT_PRINCIPAL
    address: str
    contract_name: str

    @property
    def value(self) -> str:
        return f"{self.address}.{self.contract_name}"


@dataclass(frozen=True)
class ResponseOkCV:
    type: ClassVar[ClarityType] = ClarityType.OK
    value: ClarityValue


@dataclass(frozen=True)
class ResponseErrCV:
    type: ClassVar[ClarityType] = ClarityType.ERR
    value: ClarityValue


@dataclass(frozen=True)
class NoneCV:
    type: ClassVar[ClarityType] = ClarityType.NONE


@dataclass(frozen=True)
class SomeCV:
    type: ClassVar[ClarityType] = ClarityType.SOME
    value: ClarityValue


@dataclass(frozen=True)
class ListCV:
    type: ClassVar[ClarityType] = ClarityType.LIST
    value: tuple[ClarityValue, ...] = ()


@dataclass(frozen=True)
class TupleCV:
    type: ClassVar[ClarityType] = ClarityType.TUPLE
    value: dict[str, ClarityValue] = field(default_factory=dict)


@dataclass(frozen=True)
class StringAsciiCV:
    type: ClassVar[ClarityType] = ClarityType.STRING_ASCII
    value: str


@dataclass(frozen=True)
class StringUtf8CV:
    type: ClassVar[ClarityType] = ClarityType.STRING_UTF8
    value: str


ClarityValue = Union[
    IntCV,
    UIntCV,
    BoolCV,
    BufferCV,
    StandardPrincipalCV,
    ContractPrincipalCV,
    ResponseOkCV,
    ResponseErrCV,
    NoneCV,
    SomeCV,
    ListCV,
    TupleCV,
    StringAsciiCV,
    StringUtf8CV,
]

PrincipalCV = Union[StandardPrincipalCV, ContractPrincipalCV]


def principal_cv(principal: str) -> PrincipalCV:
    """'ST...' -> standard principal, 'ST....name' -> contract principal."""
    if "." in principal:
        address, contract_name = principal.split(".", 1)
        return ContractPrincipalCV(address, contract_name)
    return StandardPrincipalCV(principal)


# --- C32CHECK ADDRESSES ---
def c32_encode(data: bytes) -> str:
    """Crockford-style base32: the big-endian number in base 32, plus one '0' per leading zero byte."""
    number = int.from_bytes(data, "big")
    digits = []
    while number > 0:
        number, remainder = divmod(number, 32)
        digits.append(C32_ALPHABET[remainder])
    leading_zero_bytes = len(data) - len(data.lstrip(b"\x00"))
    return "0" * leading_zero_bytes + "".join(reversed(digits))


def c32_normalize(text: str) -> str:
    return text.upper().replace("O", "0").replace("L", "1").replace("I", "1")


def c32_decode(text: str) -> bytes:
    text = c32_normalize(text)
    if any(character not in C32_ALPHABET for character in text):
        raise DecodeError(f"Not a c32 string: {text!r}")

    leading_zeros = len(text) - len(text.lstrip("0"))
    number = 0
    for character in text[leading_zeros:]:
        number = number * 32 + C32_ALPHABET.index(character)
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading_zeros + body


def _checksum(version: int, data: bytes) -> bytes:
    first = hashlib.sha256(bytes([version]) + data).digest()
    return hashlib.sha256(first).digest()[:CHECKSUM_LENGTH]


def c32check_encode(version: int, data: bytes) -> str:
    if not 0 <= version < len(C32_ALPHABET):
        raise DecodeError(f"Invalid address version: {version}")
    return C32_ALPHABET[version] + c32_encode(data + _checksum(version, data))


def c32check_decode(text: str) -> tuple[int, bytes]:
    text = c32_normalize(text)
    if len(text) < 2:
        raise DecodeError(f"c32check string too short: {text!r}")

    version = C32_ALPHABET.find(text[0])
    if version < 0:
        raise DecodeError(f"Invalid address version character: {text[0]!r}")

    decoded = c32_decode(text[1:])
    data, checksum = decoded[:-CHECKSUM_LENGTH], decoded[-CHECKSUM_LENGTH:]
    if _checksum(version, data) != checksum:
        raise DecodeError(f"Bad checksum for address {text!r}")
    return version, data


def c32_address(version: int, hash160: bytes) -> str:
    return "S" + c32check_encode(version, hash160)


def c32_address_decode(address: str) -> tuple[int, bytes]:
    if not address.startswith("S"):
        raise DecodeError(f"Stacks address should start with 'S': {address!r}")
    version, hash160 = c32check_decode(address[1:])
    if len(hash160) != HASH160_LENGTH:
        raise DecodeError(f"Address {address!r} does not wrap a 20 byte hash")
    return version, hash160


# --- SERIALIZATION ---
def serialize(value: ClarityValue) -> bytes:
    """Consensus serialization of a value."""

    if isinstance(value, UIntCV):
        if not 0 <= value.value <= UINT_MAX:
            raise DecodeError(f"uint out of range: {value.value}")
        return bytes([TypeId.UINT]) + value.value.to_bytes(UINT_BYTES, "big")

    if isinstance(value, IntCV):
        return bytes([TypeId.INT]) + value.value.to_bytes(
            UINT_BYTES, "big", signed=True
        )

    if isinstance(value, BoolCV):
        return bytes([TypeId.TRUE if value.value else TypeId.FALSE])

    if isinstance(value, BufferCV):
        return bytes([TypeId.BUFFER]) + _length_prefixed(value.value)

    if isinstance(value, StandardPrincipalCV):
        return bytes([TypeId.PRINCIPAL_STANDARD]) + _address_bytes(value.value)

    if isinstance(value, ContractPrincipalCV):
        name = value.contract_name.encode("ascii")
        return (
            bytes([TypeId.PRINCIPAL_CONTRACT])
            + _address_bytes(value.address)
            + bytes([len(name)])
            + name
        )

    if isinstance(value, ResponseOkCV):
        return bytes([TypeId.RESPONSE_OK]) + serialize(value.value)

    if isinstance(value, ResponseErrCV):
        return bytes([TypeId.RESPONSE_ERR]) + serialize(value.value)

    if isinstance(value, NoneCV):
        return bytes([TypeId.OPTIONAL_NONE])

    if isinstance(value, SomeCV):
        return bytes([TypeId.OPTIONAL_SOME]) + serialize(value.value)

    if isinstance(value, ListCV):
        return (
            bytes([TypeId.LIST])
            + len(value.value).to_bytes(4, "big")
            + b"".join(serialize(item) for item in value.value)
        )

    if isinstance(value, TupleCV):
        # field names are always serialized in sorted order
        encoded = bytes([TypeId.TUPLE]) + len(value.value).to_bytes(4, "big")
        for name in sorted(value.value):
            name_bytes = name.encode("ascii")
            encoded += bytes([len(name_bytes)]) + name_bytes + serialize(value.value[name])
        return encoded

    if isinstance(value, StringAsciiCV):
        return bytes([TypeId.STRING_ASCII]) + _length_prefixed(
            value.value.encode("ascii")
        )

    if isinstance(value, StringUtf8CV):
        return bytes([TypeId.STRING_UTF8]) + _length_prefixed(
            value.value.encode("utf-8")
        )

    raise DecodeError(f"Cannot serialize {value!r}")


def to_hex(value: ClarityValue) -> str:
    return "0x" + serialize(value).hex()


def _length_prefixed(data: bytes) -> bytes:
    return len(data).to_bytes(4, "big") + data


def _address_bytes(address: str) -> bytes:
    version, hash160 = c32_address_decode(address)
    return bytes([version]) + hash160


# --- DESERIALIZATION ---
class _ByteReader:
    """Cursor over the serialized bytes. Running out of bytes is a DecodeError."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.position = 0

    def read(self, size: int) -> bytes:
        end = self.position + size
        if end > len(self.data):
            raise DecodeError(
                f"Unexpected end of input: wanted {size} bytes at offset {self.position}"
            )
        chunk = self.data[self.position : end]
        self.position = end
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self.read(4), "big")

    def at_end(self) -> bool:
        return self.position == len(self.data)


def deserialize(data: bytes) -> ClarityValue:
    reader = _ByteReader(data)
    value = _read_value(reader)
    if not reader.at_end():
        raise DecodeError(
            f"Trailing bytes after value: {len(data) - reader.position} bytes left"
        )
    return value


def from_hex(hex_string: str) -> ClarityValue:
    hex_string = hex_string.removeprefix("0x")
    try:
        data = bytes.fromhex(hex_string)
    except ValueError as exc:
        raise DecodeError(f"Not a hex string: {hex_string!r}") from exc
    return deserialize(data)


def _read_value(reader: _ByteReader) -> ClarityValue:
    type_byte = reader.read_byte()
    try:
        type_id = TypeId(type_byte)
    except ValueError as exc:
        raise DecodeError(f"Unknown type id: {type_byte:#04x}") from exc

    if type_id == TypeId.UINT:
        return UIntCV(int.from_bytes(reader.read(UINT_BYTES), "big"))
    if type_id == TypeId.INT:
        return IntCV(int.from_bytes(reader.read(UINT_BYTES), "big", signed=True))
    if type_id == TypeId.TRUE:
        return BoolCV(True)
    if type_id == TypeId.FALSE:
        return BoolCV(False)
    if type_id == TypeId.BUFFER:
        return BufferCV(reader.read(reader.read_u32()))
    if type_id == TypeId.PRINCIPAL_STANDARD:
        return StandardPrincipalCV(_read_address(reader))
    if type_id == TypeId.PRINCIPAL_CONTRACT:
        address = _read_address(reader)
        name = reader.read(reader.read_byte()).decode("ascii", errors="replace")
        return ContractPrincipalCV(address, name)
    if type_id == TypeId.RESPONSE_OK:
        return ResponseOkCV(_read_value(reader))
    if type_id == TypeId.RESPONSE_ERR:
        return ResponseErrCV(_read_value(reader))
    if type_id == TypeId.OPTIONAL_NONE:
        return NoneCV()
    if type_id == TypeId.OPTIONAL_SOME:
        return SomeCV(_read_value(reader))
    if type_id == TypeId.LIST:
        length = reader.read_u32()
        return ListCV(tuple(_read_value(reader) for _ in range(length)))
    if type_id == TypeId.TUPLE:
        length = reader.read_u32()
        fields: dict[str, ClarityValue] = {}
        for _ in range(length):
            name = reader.read(reader.read_byte()).decode("ascii", errors="replace")
            fields[name] = _read_value(reader)
        return TupleCV(fields)
    if type_id == TypeId.STRING_ASCII:
        return StringAsciiCV(
            reader.read(reader.read_u32()).decode("ascii", errors="replace")
        )
    # only STRING_UTF8 left
    return StringUtf8CV(reader.read(reader.read_u32()).decode("utf-8", errors="replace"))


def _read_address(reader: _ByteReader) -> str:
    version = reader.read_byte()
    hash160 = reader.read(HASH160_LENGTH)
    return c32_address(version, hash160)
