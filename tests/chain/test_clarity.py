"""Unit tests for src/chain/clarity.py"""

import pytest

from src.chain.clarity import (
    BoolCV,
    ContractPrincipalCV,
    DecodeError,
    IntCV,
    ListCV,
    NoneCV,
    ResponseErrCV,
    ResponseOkCV,
    SomeCV,
    StandardPrincipalCV,
    StringAsciiCV,
    TupleCV,
    UIntCV,
    c32_address,
    c32_address_decode,
    c32_decode,
    c32_encode,
    deserialize,
    from_hex,
    principal_cv,
    serialize,
    to_hex,
)
from tests.fakes import PLAYER_A, PLAYER_B

HASH160 = bytes.fromhex("a46ff88886c2ef9762d970b4d2c63678835bd39d")


# -- c32check addresses --
def test_known_mainnet_address() -> None:
    """Reference vector of the c32check encoding."""
    assert c32_address(22, HASH160) == "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


def test_address_decodes_back_to_hash() -> None:
    assert c32_address_decode("SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7") == (
        22,
        HASH160,
    )


def test_testnet_addresses_start_with_st() -> None:
    assert PLAYER_A.startswith("ST")
    assert c32_address_decode(PLAYER_A) == (26, HASH160)


def test_leading_zero_bytes_are_kept() -> None:
    data = bytes([0, 0, 1, 2])
    encoded = c32_encode(data)
    assert encoded.startswith("00")
    assert c32_decode(encoded) == data


@pytest.mark.parametrize(
    "address",
    [
        "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ8",  # checksum off by one
        "XP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7",  # not an 'S' address
        "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJU",  # 'U' is not in the alphabet
    ],
)
def test_invalid_addresses(address: str) -> None:
    with pytest.raises(DecodeError):
        c32_address_decode(address)


# -- serialization --
@pytest.mark.parametrize(
    "value, expected_hex",
    [
        (UIntCV(3), "0x0100000000000000000000000000000003"),
        (IntCV(-1), "0x00ffffffffffffffffffffffffffffffff"),
        (BoolCV(True), "0x03"),
        (BoolCV(False), "0x04"),
        (NoneCV(), "0x09"),
        (SomeCV(UIntCV(0)), "0x0a0100000000000000000000000000000000"),
        (StringAsciiCV("hi"), "0x0d000000026869"),
    ],
)
def test_serialize_primitives(value, expected_hex: str) -> None:
    assert to_hex(value) == expected_hex
    assert from_hex(expected_hex) == value


def test_standard_principal_layout() -> None:
    encoded = serialize(StandardPrincipalCV(PLAYER_A))
    assert encoded == bytes([0x05, 26]) + HASH160


def test_contract_principal() -> None:
    value = principal_cv(f"{PLAYER_A}.tic-tac-toe")
    assert isinstance(value, ContractPrincipalCV)
    assert value.value == f"{PLAYER_A}.tic-tac-toe"

    encoded = serialize(value)
    assert encoded[22] == len("tic-tac-toe")
    assert deserialize(encoded) == value


def test_tuple_fields_are_sorted() -> None:
    """Field names are always serialized in sorted order, whatever the dict order."""
    value = TupleCV({"b": UIntCV(2), "a": UIntCV(1)})
    encoded = serialize(value)
    assert encoded[:5] == bytes([0x0C, 0, 0, 0, 2])
    assert encoded[5:7] == bytes([1]) + b"a"
    assert deserialize(encoded) == value


def test_nested_values() -> None:
    value = ResponseOkCV(
        ListCV(
            (
                SomeCV(StandardPrincipalCV(PLAYER_B)),
                NoneCV(),
                ResponseErrCV(UIntCV(102)),
            )
        )
    )
    assert from_hex(to_hex(value)) == value


@pytest.mark.parametrize(
    "hex_string",
    [
        "0x",  # nothing to read
        "0x01000000",  # uint cut short
        "0xff",  # unknown type id
        "0x0304",  # trailing bytes
        "0xzz",  # not hex
        "0x0b00000002" + "03",  # list announces more items than present
    ],
)
def test_malformed_input(hex_string: str) -> None:
    with pytest.raises(DecodeError):
        from_hex(hex_string)


@pytest.mark.parametrize("value", [-1, 2**128])
def test_uint_out_of_range_cannot_be_serialized(value: int) -> None:
    with pytest.raises(DecodeError):
        serialize(UIntCV(value))
