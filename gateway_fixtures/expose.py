"""
Generators for peering ``Expose`` blocks and their NAT settings.
"""
from __future__ import annotations

from .allocators import UniqueV4CidrGenerator, UniqueV6CidrGenerator
from .driver import Driver
from .generator import ValueGenerator, draw, type_generator
from .schema import (
    Duration, Expose, Nat, PeeringAs, PeeringIPs, PeeringStatefulNat, PeeringStatelessNat,
)

I64_MAX = (1 << 63) - 1
MAX_NANOS = 999_999_999

MIN_RULES, MAX_RULES = 1, 10
MIN_V4_MASK = 8
MIN_V6_MASK = 16


class _UniqueRules(ValueGenerator):
    """One rule per CIDR of ``cidr_generator``, each either kept or negated."""

    rule_type: type

    def __init__(self, cidr_generator: ValueGenerator):
        self.cidr_generator = cidr_generator

    def generate(self, d: Driver):
        rules = []
        for cidr in draw(d, self.cidr_generator):
            if d.gen_bool():
                rules.append(self.rule_type(not_=cidr))
            else:
                rules.append(self.rule_type(cidr=cidr))
        return rules


class UniquePeeringIPs(_UniqueRules):
    rule_type = PeeringIPs


class UniquePeeringAs(_UniqueRules):
    rule_type = PeeringAs


@type_generator(PeeringStatefulNat)
def gen_peering_stateful_nat(d: Driver) -> PeeringStatefulNat:
    seconds = d.gen_int(0, I64_MAX)
    nanos = d.gen_int(0, MAX_NANOS)
    return PeeringStatefulNat(idle_timeout=Duration(seconds=seconds, nanos=nanos))


@type_generator(PeeringStatelessNat)
def gen_peering_stateless_nat(d: Driver) -> PeeringStatelessNat:
    return PeeringStatelessNat()


@type_generator(Nat)
def gen_nat(d: Driver) -> Nat:
    if d.gen_bool():
        return Nat(stateful=draw(d, PeeringStatefulNat))
    return Nat(stateless=draw(d, PeeringStatelessNat))


@type_generator(Expose)
def gen_expose(d: Driver) -> Expose:
    v4 = d.gen_bool()
    count = d.gen_int(MIN_RULES, MAX_RULES)
    v4_mask = d.gen_int(MIN_V4_MASK, 32)
    v6_mask = d.gen_int(MIN_V6_MASK, 128)

    def cidrs():
        if v4:
            return UniqueV4CidrGenerator(count, v4_mask)
        return UniqueV6CidrGenerator(count, v6_mask)

    ips = draw(d, UniquePeeringIPs(cidrs()))
    if not d.gen_bool():
        return Expose(ips=ips)
    nat = draw(d, Nat)
    as_ = draw(d, UniquePeeringAs(cidrs()))
    return Expose(ips=ips, as_=as_, nat=nat)
