import ipaddress
import re

import pytest
from hypothesis import given, settings, strategies as st

from gateway_fixtures import RandomDriver, draw
from gateway_fixtures.schema import VARIANTS
from gateway_fixtures.strategies import from_generator
from gateway_fixtures.support import (
    ALPHA_NUMERIC_CHARS, IF_NAME_CHARS, IF_NAME_MAX_LEN, K8S_OBJ_MAX_LEN, RESTART_DISTRIBUTION,
    LinuxIfNamesGenerator, WeightedRanges, cidr_string, choose, gen_from_chars,
    ip_addr_string, k8s_object_name, linux_ifname, optional, source_mac_string,
    unique_map, v4_cidr_string, v6_cidr_string,
)

K8S_NAME = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


@pytest.mark.parametrize("enum_type", list(VARIANTS), ids=lambda t: t.__name__)
def test_enum_generators_stay_in_declared_range(enum_type):
    values = set()
    for seed in range(200):
        v = draw(RandomDriver(seed), enum_type)
        assert isinstance(v, enum_type)
        values.add(int(v))
    assert values == {int(v) for v in VARIANTS[enum_type]}
    assert values == set(range(len(VARIANTS[enum_type])))


@given(st.text(alphabet="abc_", min_size=1, max_size=5), st.integers(0, 10), st.integers(0, 10),
       st.integers(0, 2 ** 32))
@settings(max_examples=60, deadline=None)
def test_gen_from_chars(chars, a, b, seed):
    lo, hi = min(a, b), max(a, b)
    s = gen_from_chars(RandomDriver(seed), chars, lo, hi)
    assert lo <= len(s) <= hi
    assert set(s) <= set(chars)


def test_choose_reaches_every_choice():
    d = RandomDriver(11)
    assert {choose(d, "xyz") for _ in range(200)} == {"x", "y", "z"}


def test_optional_is_both_present_and_absent():
    d = RandomDriver(12)
    seen = {optional(d, "value") for _ in range(200)}
    assert seen == {"value", None}


def test_weighted_restart_distribution():
    low = medium = high = 0
    total_samples = 2000
    d = RandomDriver(2024)
    for _ in range(total_samples):
        restarts = draw(d, RESTART_DISTRIBUTION)
        if 0 <= restarts <= 5:
            low += 1
        elif 6 <= restarts <= 50:
            medium += 1
        elif 51 <= restarts <= 1000:
            high += 1
        else:
            pytest.fail(f"restart count out of expected range: {restarts}")
    assert low + medium + high == total_samples
    assert high > 0, "tail never reached"
    assert medium > 0
    assert low > medium > high
    assert high < total_samples // 10


def test_weighted_ranges_rejects_bad_pieces():
    with pytest.raises(ValueError):
        WeightedRanges([(50, 0, 1)])
    with pytest.raises(ValueError):
        WeightedRanges([(60, 0, 1), (40, 2, 3), (100, 4, 5)])


@given(from_generator(RESTART_DISTRIBUTION))
@settings(max_examples=60, deadline=None)
def test_restart_distribution_bounds(restarts):
    assert 0 <= restarts <= 1000


def test_address_strings_parse():
    d = RandomDriver(13)
    for _ in range(200):
        ip = ipaddress.ip_address(ip_addr_string(d))
        if ip.version == 4:
            assert int(ip) >= 0x1000_0000
        else:
            assert int(ip) >= 1
        ipaddress.IPv4Network(v4_cidr_string(d), strict=True)
        ipaddress.IPv6Network(v6_cidr_string(d), strict=True)
        ipaddress.ip_network(cidr_string(d), strict=True)


def test_source_mac_is_unicast_lowercase():
    d = RandomDriver(14)
    for _ in range(200):
        mac = source_mac_string(d)
        octets = mac.split(":")
        assert len(octets) == 6
        assert mac == mac.lower()
        assert int(octets[0], 16) & 1 == 0
        assert mac != "00:00:00:00:00:00"


@given(st.integers(0, 2 ** 32))
@settings(max_examples=60, deadline=None)
def test_linux_ifname(seed):
    name = linux_ifname(RandomDriver(seed))
    assert 1 <= len(name) <= IF_NAME_MAX_LEN
    assert set(name) <= set(IF_NAME_CHARS)


@pytest.mark.parametrize("count", [0, 1, 7, 50])
def test_linux_ifnames_are_unique(count):
    for seed in range(20):
        names = LinuxIfNamesGenerator(count).generate(RandomDriver(seed))
        assert len(names) == count
        assert len(set(names)) == count
        assert all(len(n) <= IF_NAME_MAX_LEN for n in names)


def test_k8s_object_names():
    d = RandomDriver(15)
    for _ in range(300):
        name = k8s_object_name(d)
        assert 2 <= len(name) <= K8S_OBJ_MAX_LEN
        assert K8S_NAME.match(name), name


def test_unique_map_retries_then_under_fills():
    # only three distinct keys exist, so ten slots cannot all be filled
    def entry(d):
        k = d.gen_int(0, 2)
        return k, f"value-{k}"

    m = unique_map(RandomDriver(16), 10, entry)
    assert 1 <= len(m) <= 3
    assert all(v == f"value-{k}" for k, v in m.items())


def test_unique_map_fills_when_keys_are_plentiful():
    m = unique_map(RandomDriver(17), 8, lambda d: (d.gen_uint(64), None))
    assert len(m) == 8


def test_alphanumeric_alphabet():
    assert len(ALPHA_NUMERIC_CHARS) == len(set(ALPHA_NUMERIC_CHARS)) == 62
    s = gen_from_chars(RandomDriver(18), ALPHA_NUMERIC_CHARS, 200, 200)
    assert s.isascii() and s.isalnum()
