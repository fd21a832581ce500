import ipaddress
import re

import pytest
from hypothesis import given, settings

from gateway_fixtures import RandomDriver, draw, to_canonical
from gateway_fixtures.check import InvalidValue, check_device, check_expose
from gateway_fixtures.expose import MAX_RULES, MIN_V4_MASK, MIN_V6_MASK
from gateway_fixtures.schema import (
    Device, Expose, Nat, PacketDriver, PeeringStatefulNat, to_obj,
)
from gateway_fixtures.strategies import from_generator

K8S_NAME = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


def _rule_network(rule):
    assert (rule.cidr is None) != (rule.not_ is None), rule
    return ipaddress.ip_network(rule.cidr or rule.not_, strict=True)


def _exposes(n=400):
    for seed in range(n):
        yield draw(RandomDriver(seed), Expose)


def test_exposes_hold_invariants():
    multi_ip = stateful = stateless = ips_only = negated = 0
    for expose in _exposes():
        check_expose(to_obj(expose))
        assert 1 <= len(expose.ips) <= MAX_RULES
        nets = [_rule_network(r) for r in expose.ips + expose.as_]
        assert len({n.version for n in nets}) == 1
        for net in nets:
            floor = MIN_V4_MASK if net.version == 4 else MIN_V6_MASK
            assert net.prefixlen >= floor
        if len(expose.ips) > 1:
            multi_ip += 1
        negated += sum(r.not_ is not None for r in expose.ips)
        if not expose.as_:
            ips_only += 1
            continue
        assert expose.nat is not None
        if expose.nat.stateful is not None:
            assert expose.nat.stateless is None
            assert expose.nat.stateful.idle_timeout is not None
            stateful += 1
        else:
            assert expose.nat.stateless is not None
            stateless += 1
    assert multi_ip > 0
    assert ips_only > 0
    assert stateful > 0 and stateless > 0
    assert negated > 0


def test_rules_within_a_list_are_distinct():
    for expose in _exposes(200):
        for rules in (expose.ips, expose.as_):
            nets = [_rule_network(r) for r in rules]
            assert len(set(nets)) == len(nets)


@given(from_generator(Expose))
@settings(max_examples=100, deadline=None)
def test_expose_strategy(expose):
    check_expose(to_obj(expose))


@given(from_generator(PeeringStatefulNat))
@settings(max_examples=100, deadline=None)
def test_stateful_timeout_is_canonical(nat):
    canonical = to_canonical(nat.idle_timeout)
    assert canonical.seconds == nat.idle_timeout.seconds
    assert canonical.nanos == nat.idle_timeout.nanos


def test_nat_sets_exactly_one_variant():
    d = RandomDriver(3)
    for _ in range(100):
        nat = draw(d, Nat)
        assert (nat.stateful is None) != (nat.stateless is None)


def test_check_expose_rejects_nat_without_variant():
    expose = to_obj(draw(RandomDriver(0), Expose))
    expose["as_"] = expose["as_"] or [{"cidr": expose["ips"][0]["cidr"] or expose["ips"][0]["not_"],
                                       "not_": None}]
    expose["nat"] = {"stateful": None, "stateless": None}
    with pytest.raises(InvalidValue):
        check_expose(expose)


def test_devices():
    drivers = set()
    for seed in range(200):
        device = draw(RandomDriver(seed), Device)
        check_device(to_obj(device))
        assert K8S_NAME.match(device.hostname)
        assert 2 <= len(device.hostname) <= 63
        assert device.tracing.default == 1
        assert device.eal is None and device.ports == []
        drivers.add(device.driver)
    assert drivers == {int(v) for v in PacketDriver}


@given(from_generator(Device))
@settings(max_examples=60, deadline=None)
def test_device_strategy(device):
    check_device(to_obj(device))
