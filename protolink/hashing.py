"""
Transaction hashing behaviors.

The hash reproduces 32-bit JavaScript integer arithmetic exactly:

    hash = ((hash << 5) - hash + charCode) | 0    for every UTF-16 code unit
    result = hash ** 2                            as a double

Reference value:
    fold_hash32("luis@tjoj.com" + "luke@tjoj.com") == 487414128
    format_number(squared)                         == "237572532174000400"
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence

from .domain import Node
from .resolution.chain_resolver import get_property

# Properties hashed by default, in concatenation order
HASH_KEYS = ("sender", "recipient")

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000
_MAX_SAFE_INTEGER = 2 ** 53 - 1


def to_int32(value: int) -> int:
    """Wrap an integer to signed 32 bits (JavaScript `x | 0`)."""
    value &= _INT32_MASK
    return value - (1 << 32) if value & _INT32_SIGN else value


def utf16_code_units(text: str) -> list[int]:
    """The UTF-16 code units of text, as charCodeAt would report them."""
    data = text.encode("utf-16-le", "surrogatepass")
    return [
        int.from_bytes(data[i:i + 2], "little")
        for i in range(0, len(data), 2)
    ]


def fold_hash32(data: str) -> int:
    """Fold data into a signed 32-bit accumulator."""
    accumulator = 0
    for code in utf16_code_units(data):
        accumulator = to_int32((accumulator << 5) - accumulator + code)
    return accumulator


def format_number(value: Any) -> str:
    """
    Render a number the way JavaScript's Number#toString does.

    Python's repr already yields the shortest round-tripping digits; only
    the layout differs (no trailing ".0", plain digits up to 1e21).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and abs(value) <= _MAX_SAFE_INTEGER:
        return str(value)

    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + body


def _as_text(value: Any) -> str:
    # Array#join renders null and undefined as empty strings
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(item) for item in value)
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def hash_input(this: Node, keys: Iterable[str] = HASH_KEYS) -> str:
    """Concatenate the resolved values of keys on this."""
    return "".join(_as_text(get_property(this, key).value) for key in keys)


def calculate_hash(this: Node, keys: Iterable[str] = HASH_KEYS) -> float:
    """
    Behavior: square of the 32-bit fold of this's hashed properties.

    Values are resolved through the chain, so a Node inheriting sender
    and recipient hashes the same as one owning them.
    """
    folded = fold_hash32(hash_input(this, keys))
    return float(folded * folded)


def has_hash(keys: Sequence[str]) -> dict[str, Callable[[Node], float]]:
    """
    Mixin factory: a calculate_hash behavior bound to a fixed key list.

    Merge the result into a prototype with merge_into().
    """
    fixed = tuple(keys)

    def hash_behavior(this: Node) -> float:
        return calculate_hash(this, fixed)

    return {"calculate_hash": hash_behavior}
