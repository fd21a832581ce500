import pytest
from hypothesis import given, settings, strategies as st

from gateway_fixtures import ByteDriver, Exhausted, RandomDriver, produce
from gateway_fixtures.check import check_expose
from gateway_fixtures.schema import (
    Expose, GetDataplaneStatusRequest, GetDataplaneStatusResponse, to_obj,
)


def test_random_driver_is_reproducible_per_seed():
    a, b = RandomDriver(42), RandomDriver(42)
    draws_a = [a.gen_int(0, 1 << 128) for _ in range(50)] + [a.gen_bool() for _ in range(50)]
    draws_b = [b.gen_int(0, 1 << 128) for _ in range(50)] + [b.gen_bool() for _ in range(50)]
    assert draws_a == draws_b
    assert a.draws == 100


def test_random_driver_budget_exhausts():
    d = RandomDriver(1, max_draws=3)
    for _ in range(3):
        d.gen_uint(32)
    with pytest.raises(Exhausted):
        d.gen_bool()


def test_exclusive_bounds():
    d = RandomDriver(5)
    assert {d.gen_int(0, 1, max_excluded=True) for _ in range(20)} == {0}
    assert {d.gen_int(0, 1, min_excluded=True) for _ in range(20)} == {1}


def test_empty_range_is_a_caller_bug():
    with pytest.raises(ValueError):
        RandomDriver(0).gen_int(3, 3, max_excluded=True)


def test_byte_driver_exhausts_on_short_buffer():
    d = ByteDriver(b"\x01")
    assert d.gen_int(0, 255) == 1
    with pytest.raises(Exhausted):
        d.gen_int(0, 255)
    with pytest.raises(Exhausted):
        ByteDriver(b"\x00").gen_uint(32)


def test_byte_driver_single_value_range_reads_nothing():
    d = ByteDriver(b"")
    assert d.gen_int(7, 7) == 7
    assert d.remaining == 0


@given(st.binary(min_size=0, max_size=64), st.integers(-1000, 1000), st.integers(0, 1 << 70))
@settings(max_examples=100, deadline=None)
def test_byte_driver_stays_in_bounds(data, lo, span):
    d = ByteDriver(data)
    try:
        v = d.gen_int(lo, lo + span)
    except Exhausted:
        return
    assert lo <= v <= lo + span


def test_exhaustion_yields_no_value():
    assert produce(GetDataplaneStatusResponse, ByteDriver(b"")) is None
    assert produce(GetDataplaneStatusResponse, RandomDriver(3, max_draws=5)) is None
    # nothing to draw, nothing to run out of
    assert produce(GetDataplaneStatusRequest, ByteDriver(b"")) == GetDataplaneStatusRequest()


@given(st.binary(max_size=256))
@settings(max_examples=100, deadline=None)
def test_replayed_bytes_give_whole_value_or_nothing(data):
    expose = produce(Expose, ByteDriver(data))
    if expose is not None:
        check_expose(to_obj(expose))
