import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from errors import MalformedSignature
from sign.signature import split_signature


@pytest.fixture
def signed():
    account = Account.create()
    return account.sign_message(encode_defunct(text="relay me"))


def test_split_65_byte_signature(signed):
    sig = split_signature(Web3.to_hex(signed.signature))

    assert sig.v == signed.v
    assert sig.r == signed.r.to_bytes(32, "big")
    assert sig.s == signed.s.to_bytes(32, "big")


def test_recovery_id_0_1_is_normalized(signed):
    raw = bytearray(signed.signature)
    raw[64] -= 27

    sig = split_signature(Web3.to_hex(bytes(raw)))

    assert sig.v == signed.v


def test_compact_eip2098_signature(signed):
    r = signed.r.to_bytes(32, "big")
    s = signed.s.to_bytes(32, "big")
    y_parity = signed.v - 27
    y_parity_and_s = bytes([s[0] | (0x80 if y_parity else 0)]) + s[1:]

    sig = split_signature(Web3.to_hex(r + y_parity_and_s))

    assert sig == (signed.v, r, s)


def test_uppercase_prefix_is_accepted(signed):
    text = "0X" + Web3.to_hex(signed.signature)[2:]

    assert split_signature(text).v == signed.v


@pytest.mark.parametrize(
    "bad",
    [
        "",
        "deadbeef",
        "0x",
        "0x1234",
        "0x" + "gg" * 65,
        "0x" + "11" * 66,
        "0x" + "11" * 64 + "1d",  # v = 29
        "0x" + "11" * 64 + "22",  # v = 34
        "0x" + "11" * 65 + "1",  # odd length
    ],
)
def test_malformed_signatures(bad):
    with pytest.raises(MalformedSignature):
        split_signature(bad)


def test_high_s_is_rejected(signed):
    r = signed.r.to_bytes(32, "big")
    high_s = b"\xff" * 32

    with pytest.raises(MalformedSignature, match="non-canonical"):
        split_signature(Web3.to_hex(r + high_s + bytes([27])))


def test_non_string_is_malformed():
    with pytest.raises(MalformedSignature):
        split_signature(None)


def test_odd_length_hex_is_not_padded(signed):
    text = Web3.to_hex(signed.signature)[:-1]

    with pytest.raises(MalformedSignature, match="whole bytes"):
        split_signature(text)


@pytest.mark.parametrize("chain_id", [0, 1, 5])
def test_eip155_v_is_normalized_by_parity(signed, chain_id):
    raw = bytearray(signed.signature)
    raw[64] = chain_id * 2 + 35 + (signed.v - 27)

    sig = split_signature(Web3.to_hex(bytes(raw)))

    assert sig.v == signed.v
