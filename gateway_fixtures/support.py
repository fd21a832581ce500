"""
Scalar and choice generators: the building blocks every record generator
is made of. All of them take the driver first and raise ``Exhausted``
through unchanged.
"""
from __future__ import annotations

import ipaddress
from typing import Any, Callable, Dict, Sequence, Tuple

from .driver import Driver
from .generator import ValueGenerator

MAX_ENTRY_ATTEMPTS = 20

ALPHA_NUMERIC_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

IF_NAME_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_"
IF_NAME_MAX_LEN = 16
# stems leave room for the numeric suffix of LinuxIfNamesGenerator
IF_NAME_STEM_MAX_LEN = IF_NAME_MAX_LEN - 8

K8S_END_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
K8S_OTHER_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789-"
K8S_OBJ_MAX_LEN = 63

IPV4_BITS = 32
IPV6_BITS = 128


def gen_from_chars(d: Driver, chars: str, min_len: int, max_len: int, *,
                   max_excluded: bool = False) -> str:
    """Draw a length, then each character's index into ``chars``."""
    n = d.gen_int(min_len, max_len, max_excluded=max_excluded)
    return "".join(chars[d.gen_int(0, len(chars), max_excluded=True)] for _ in range(n))


def choose(d: Driver, choices: Sequence):
    return choices[d.gen_int(0, len(choices), max_excluded=True)]


def choose_variant(d: Driver, variants: Sequence):
    """Uniform pick over an explicit, ordered variant list."""
    return variants[d.gen_int(0, len(variants) - 1)]


def optional(d: Driver, value):
    """Keep an already produced ``value`` or drop it, by explicit choice."""
    return choose(d, (value, None))


def unique_map(d: Driver, count: int, make_entry: Callable[[Driver], Tuple[Any, Any]],
               attempts: int = MAX_ENTRY_ATTEMPTS) -> Dict[Any, Any]:
    """Build a map of up to ``count`` entries with distinct keys.

    An entry whose key is already taken is regenerated, at most ``attempts``
    times; after that the slot is left empty and the map comes out smaller.
    """
    out: Dict[Any, Any] = {}
    for _ in range(count):
        for _ in range(attempts):
            key, value = make_entry(d)
            if key not in out:
                out[key] = value
                break
    return out


# ---- Addresses ----
def format_addr(value: int, width: int) -> str:
    if width == IPV4_BITS:
        return str(ipaddress.IPv4Address(value))
    if width == IPV6_BITS:
        return str(ipaddress.IPv6Address(value))
    raise ValueError(f"unsupported address width {width}")


def network_bits(value: int, mask: int, width: int) -> int:
    """Clear every bit of ``value`` below a ``mask``-bit prefix."""
    all_ones = (1 << width) - 1
    return value & (all_ones ^ (all_ones >> mask))


def format_cidr(value: int, mask: int, width: int) -> str:
    return f"{format_addr(network_bits(value, mask, width), width)}/{mask}"


def ipv4_addr_string(d: Driver) -> str:
    return format_addr(d.gen_int(0x1000_0000, 0xffff_ffff, max_excluded=True), IPV4_BITS)


def ipv6_addr_string(d: Driver) -> str:
    return format_addr(d.gen_int(1, (1 << IPV6_BITS) - 1, max_excluded=True), IPV6_BITS)


def ip_addr_string(d: Driver) -> str:
    if d.gen_bool():
        return ipv4_addr_string(d)
    return ipv6_addr_string(d)


def v4_cidr_string(d: Driver) -> str:
    mask = d.gen_int(0, IPV4_BITS)
    return format_cidr(d.gen_uint(IPV4_BITS), mask, IPV4_BITS)


def v6_cidr_string(d: Driver) -> str:
    mask = d.gen_int(0, IPV6_BITS)
    return format_cidr(d.gen_uint(IPV6_BITS), mask, IPV6_BITS)


def cidr_string(d: Driver) -> str:
    if d.gen_bool():
        return v4_cidr_string(d)
    return v6_cidr_string(d)


def source_mac_string(d: Driver) -> str:
    """Unicast MAC, lowercase hex so generated values compare as strings.

    Starts at 2 so clearing the multicast bit can never produce the all-zero
    address.
    """
    mac = d.gen_int(2, 0xffff_ffff_ffff, max_excluded=True) & 0xffff_ffff_fffe
    return ":".join(f"{(mac >> shift) & 0xff:02x}" for shift in range(0, 48, 8))


# ---- Names ----
def linux_ifname(d: Driver) -> str:
    return gen_from_chars(d, IF_NAME_CHARS, 1, IF_NAME_MAX_LEN)


class LinuxIfNamesGenerator(ValueGenerator):
    """``count`` interface names, unique through their index suffix."""

    def __init__(self, count: int):
        if count < 0:
            raise ValueError("count must be non-negative")
        self.count = count

    def generate(self, d):
        return [f"{gen_from_chars(d, IF_NAME_CHARS, 1, IF_NAME_STEM_MAX_LEN)}{i}"
                for i in range(self.count)]


def k8s_object_name(d: Driver) -> str:
    n = d.gen_int(2, K8S_OBJ_MAX_LEN)
    first = gen_from_chars(d, K8S_END_CHARS, 1, 1)
    middle = gen_from_chars(d, K8S_OTHER_CHARS, n - 2, n - 2)
    last = gen_from_chars(d, K8S_END_CHARS, 1, 1)
    return f"{first}{middle}{last}"


# ---- Weighted distribution ----
class WeightedRanges(ValueGenerator):
    """Piecewise distribution over disjoint integer ranges.

    ``pieces`` is a list of ``(last_weight, low, high)``: a weight drawn
    uniformly in ``[0, max_weight]`` selects the first piece whose
    ``last_weight`` is not below it, and the value is then drawn uniformly
    from ``[low, high]``.
    """

    def __init__(self, pieces: Sequence[Tuple[int, int, int]], max_weight: int = 100):
        if not pieces or pieces[-1][0] != max_weight:
            raise ValueError("pieces must end at max_weight")
        lasts = [p[0] for p in pieces]
        if lasts != sorted(set(lasts)):
            raise ValueError("piece weights must be strictly increasing")
        self.pieces = tuple(pieces)
        self.max_weight = max_weight

    def generate(self, d):
        weight = d.gen_int(0, self.max_weight)
        for last_weight, low, high in self.pieces:
            if weight <= last_weight:
                return d.gen_int(low, high)
        raise AssertionError("unreachable")

    def __repr__(self):
        return f"WeightedRanges({list(self.pieces)!r}, max_weight={self.max_weight})"


# 81% in [0, 5], 15% in [6, 50], 4% in [51, 1000]
RESTART_DISTRIBUTION = WeightedRanges([(80, 0, 5), (95, 6, 50), (100, 51, 1000)])
