# signature.py
import re
from typing import NamedTuple

from web3 import Web3

from errors import MalformedSignature

# secp256k1 s values above this are malleable and rejected on-chain
_HIGH_BIT = 0x80

# whole bytes only, odd-length hex would be silently left-padded
_HEX_RE = re.compile(r"^0[xX]([0-9a-fA-F]{2})*$")


class SignatureComponents(NamedTuple):
    v: int
    r: bytes
    s: bytes


def normalize_v(v: int) -> int:
    """0/1 and 27/28 map directly; EIP-155 style v (>= 35) maps by parity, odd -> 27."""
    if v in (0, 27):
        return 27
    if v in (1, 28):
        return 28
    if v >= 35:
        return 27 if v & 1 else 28
    raise MalformedSignature(f"invalid recovery id: {v}")


def split_signature(signature: str) -> SignatureComponents:
    """
    Split a hex signature into (v, r, s) for contracts that verify with ecrecover.

    Accepts the usual 65 byte form r || s || v and the 64 byte EIP-2098
    compact form r || yParityAndS. v always comes back as 27/28.
    """
    if not isinstance(signature, str) or not _HEX_RE.match(signature):
        raise MalformedSignature("signature must be 0x-prefixed hex of whole bytes")

    raw = Web3.to_bytes(hexstr=signature)

    if len(raw) == 65:
        r, s, v = raw[:32], raw[32:64], normalize_v(raw[64])
    elif len(raw) == 64:
        r, y_parity_and_s = raw[:32], raw[32:]
        v = 28 if y_parity_and_s[0] & _HIGH_BIT else 27
        s = bytes([y_parity_and_s[0] & 0x7F]) + y_parity_and_s[1:]
    else:
        raise MalformedSignature(f"signature must be 64 or 65 bytes, got {len(raw)}")

    if s[0] & _HIGH_BIT:
        raise MalformedSignature("non-canonical s")

    return SignatureComponents(v=v, r=r, s=s)
