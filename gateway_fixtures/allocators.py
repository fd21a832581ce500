"""
Collision-free allocators for CIDR blocks and interface host addresses.

Both guarantee pairwise distinct results by construction, never by
generate-and-reject: blocks walk sequentially from one random starting
prefix, host addresses get a distinct high-bit prefix each before their
variable-width host part is drawn.
"""
from __future__ import annotations

from .driver import Driver
from .generator import ValueGenerator
from .support import IPV4_BITS, IPV6_BITS, format_addr, format_cidr


def prefix_bits_for(count: int) -> int:
    """Smallest ``p`` with ``2**p >= count`` (``ceil(log2(next_pow2(count)))``)."""
    if count <= 1:
        return 0
    return (count - 1).bit_length()


class UniqueCidrGenerator(ValueGenerator):
    """``count`` distinct ``addr/mask`` blocks sharing one prefix length.

    At most ``2**mask - 1`` blocks are produced: the all-zero prefix is never
    emitted, so the result is silently shorter when ``count`` does not fit.
    A ``/0`` request yields the default route alone.
    """

    width: int
    seed_min: int
    default_route: str

    def __init__(self, count: int, mask: int):
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if not 0 <= mask <= self.width:
            raise ValueError(f"mask must be in [0, {self.width}], got {mask}")
        self.count = count
        self.mask = mask

    def max_blocks(self) -> int:
        if self.mask == 0:
            return min(1, self.count)
        return min((1 << self.mask) - 1, self.count)

    def generate(self, d: Driver):
        if self.count == 0:
            return []
        if self.mask == 0:
            # the seed is still drawn
            d.gen_uint(self.width)
            return [self.default_route]

        host_bits = self.width - self.mask
        prefix_mask = (1 << self.mask) - 1
        seed = d.gen_int(self.seed_min, (1 << self.width) - 1)
        candidate = seed >> host_bits

        cidrs = []
        for _ in range(self.max_blocks()):
            if candidate & prefix_mask == 0:
                # the zero prefix is reserved, also after wrapping at 2**mask
                candidate = 1
            cidrs.append(format_cidr(candidate << host_bits, self.mask, self.width))
            candidate += 1
        return cidrs

    def __repr__(self):
        return f"{type(self).__name__}(count={self.count}, mask={self.mask})"


class UniqueV4CidrGenerator(UniqueCidrGenerator):
    width = IPV4_BITS
    seed_min = 0x1000_0000
    default_route = "0.0.0.0/0"


class UniqueV6CidrGenerator(UniqueCidrGenerator):
    width = IPV6_BITS
    seed_min = 1
    default_route = "::/0"


class UniqueInterfaceAddressGenerator(ValueGenerator):
    """``count`` distinct host addresses, each with its own mask length.

    Every address owns a distinct prefix in its top ``P`` bits, ``P`` being
    just enough bits to number ``count`` prefixes, so the host part can use
    any mask length in ``[P, width]`` without two addresses colliding.

    The host part is never all-zero (network) nor all-ones (broadcast)
    except for ``/width-1`` point-to-point links, where both addresses are
    usable, and ``/width`` where the address is all prefix.
    """

    width: int
    nonzero_start = False

    def __init__(self, count: int):
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self.count = count

    def prefix_bits(self) -> int:
        bits = prefix_bits_for(self.count)
        if self.nonzero_start:
            return max(bits, 1)
        return bits

    def host_range(self, mask_len: int):
        host_bits = self.width - mask_len
        if host_bits == 0:
            return 0, 0
        if mask_len >= self.width - 1:
            return 0, (1 << host_bits) - 1
        return 1, (1 << host_bits) - 2

    def generate(self, d: Driver):
        if self.count == 0:
            return []
        num_prefix_bits = self.prefix_bits()
        prefix_shift = self.width - num_prefix_bits
        largest_prefix = (1 << num_prefix_bits) - 1

        prefix = d.gen_int(0, largest_prefix, min_excluded=self.nonzero_start)
        addrs = []
        for _ in range(self.count):
            mask_len = d.gen_int(num_prefix_bits, self.width)
            lo, hi = self.host_range(mask_len)
            addr_data = d.gen_int(lo, hi)
            addr = (prefix << prefix_shift) | addr_data
            addrs.append(f"{format_addr(addr, self.width)}/{mask_len}")
            prefix = 0 if prefix == largest_prefix else prefix + 1
        return addrs

    def __repr__(self):
        return f"{type(self).__name__}(count={self.count})"


class UniqueV4InterfaceAddressGenerator(UniqueInterfaceAddressGenerator):
    width = IPV4_BITS


class UniqueV6InterfaceAddressGenerator(UniqueInterfaceAddressGenerator):
    width = IPV6_BITS
    nonzero_start = True
