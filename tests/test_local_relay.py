from conftest import STAKING_ABI, USDT_ABI, USER_ADDRESS
from local_relay import coerce_args


def test_coerce_uint_strings_and_addresses():
    out = coerce_args(USDT_ABI, "transferWithSignature", [USER_ADDRESS.lower(), USER_ADDRESS, "0x10"])

    assert out == [USER_ADDRESS, USER_ADDRESS, 16]


def test_coerce_leaves_non_numeric_strings():
    out = coerce_args(STAKING_ABI, "stakeWithSignature", [USER_ADDRESS, "lots"])

    assert out == [USER_ADDRESS, "lots"]


def test_coerce_passes_through_on_arity_mismatch():
    args = [USER_ADDRESS.lower(), "1"]

    assert coerce_args(USDT_ABI, "transferWithSignature", args) == args


def test_coerce_passes_through_unknown_function():
    args = ["1"]

    assert coerce_args(USDT_ABI, "mint", args) == args


def test_coerce_leading_zero_decimal_is_base_10():
    out = coerce_args(STAKING_ABI, "stakeWithSignature", [USER_ADDRESS, "0100"])

    assert out == [USER_ADDRESS, 100]


def test_coerce_leaves_underscored_and_signed_strings():
    for text in ["1_000", "+5", "0b101", "0xzz"]:
        out = coerce_args(STAKING_ABI, "stakeWithSignature", [USER_ADDRESS, text])
        assert out == [USER_ADDRESS, text]
