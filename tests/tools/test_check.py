import json

import pytest

from gateway_fixtures import check, corpus
from gateway_fixtures.check import (
    BroadcastAddress, CounterExceedsTotal, DuplicateAddress, DuplicateKey, InvalidEnumValue,
    InvalidValue, KeyMismatch, MixedFamilies, NetworkAddress, check_host_addresses,
    check_unique_cidrs,
)


def test_host_address_rules():
    check_host_addresses(["10.0.0.1/24", "10.0.0.254/24", "10.0.1.0/31", "10.0.1.1/31",
                          "10.0.2.0/32", "fd00::1/64"])
    with pytest.raises(NetworkAddress):
        check_host_addresses(["10.0.0.0/24"])
    with pytest.raises(BroadcastAddress):
        check_host_addresses(["10.0.0.255/24"])
    with pytest.raises(DuplicateAddress):
        check_host_addresses(["10.0.0.1/24", "10.0.0.1/16"])
    with pytest.raises(InvalidValue):
        check_host_addresses(["10.0.0.300/24"])


def test_cidr_rules():
    check_unique_cidrs(["10.0.0.0/8", "11.0.0.0/8"])
    with pytest.raises(DuplicateKey):
        check_unique_cidrs(["10.0.0.0/8", "10.0.0.0/8"])
    with pytest.raises(InvalidValue):
        check_unique_cidrs(["10.0.0.1/8"])
    with pytest.raises(MixedFamilies):
        check_unique_cidrs(["10.0.0.0/8", "fd00::/8"])


def _write(tmp_path, doc, name="case.json"):
    p = tmp_path / name
    p.write_text(json.dumps(doc), encoding="utf-8")
    return p


def _fixture(kind, seed=5):
    return dict(corpus.iter_fixtures(seed, 1, kind))[0]


def test_corrupted_hostname_fails(tmp_path, capsys):
    doc = _fixture("device")
    doc["value"]["hostname"] = "-Bad_Name"
    p = _write(tmp_path, doc, "bad_device.json")
    assert check.main([str(p)]) == 1
    out = capsys.readouterr().out
    assert "[FAIL] bad_device.json -> InvalidValue" in out
    assert "Summary: 0 ok, 1 failed" in out


def test_mixed_directory(tmp_path, capsys):
    good = _fixture("expose")
    bad = _fixture("device")
    bad["value"]["driver"] = 7
    _write(tmp_path, good, "a.json")
    _write(tmp_path, bad, "b.json")
    assert check.main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "[FAIL] b.json -> InvalidEnumValue" in out
    assert "Summary: 1 ok, 1 failed" in out


def test_missing_path(tmp_path, capsys):
    assert check.main([str(tmp_path / "nope")]) == 2
    assert "no such file or directory" in capsys.readouterr().err


def test_unknown_kind():
    with pytest.raises(InvalidValue):
        check.check_fixture({"kind": "route", "seed": 0, "value": {}})


def test_status_counter_checks():
    resp = {
        "interface_statuses": [], "frr_status": None, "dataplane_status": None,
        "interface_runtime": {}, "bgp": None, "vpcs": {}, "vpc_counters": {},
        "vpc_peering_counters": {
            "vpc-1--vpc-2": {"name": "vpc-1--vpc-2", "src_vpc": "vpc-1", "dst_vpc": "vpc-2",
                             "packets": 10, "bytes": 640, "drops": 11, "pps": 0.0, "bps": 0.0},
        },
    }
    with pytest.raises(CounterExceedsTotal):
        check.check_status_response(resp)

    counters = resp["vpc_peering_counters"]["vpc-1--vpc-2"]
    counters["drops"] = 1
    check.check_status_response(resp)

    resp["vpc_peering_counters"] = {"other": counters}
    with pytest.raises(KeyMismatch):
        check.check_status_response(resp)


def test_bad_interface_enum():
    resp = {"interface_statuses": [{"ifname": "eth0", "oper_status": 9, "admin_status": 0}],
            "interface_runtime": {}, "vpcs": {}, "vpc_peering_counters": {}, "vpc_counters": {}}
    with pytest.raises(InvalidEnumValue):
        check.check_status_response(resp)


@pytest.mark.parametrize("doc", [
    [1, 2],
    "device",
    {"kind": "device", "seed": 0, "value": []},
    {"kind": "expose", "seed": 0, "value": {"ips": "10.0.0.0/8", "as_": []}},
])
def test_wrong_shaped_json_fails_cleanly(tmp_path, capsys, doc):
    _write(tmp_path, _fixture("device"), "a.json")
    _write(tmp_path, doc, "b.json")
    assert check.main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "[FAIL] b.json -> " in out
    assert "Summary: 1 ok, 1 failed" in out


def test_path_is_required(capsys):
    with pytest.raises(SystemExit) as exc:
        check.main([])
    assert exc.value.code == 2
    assert "path" in capsys.readouterr().err
