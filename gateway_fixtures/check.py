"""
Invariant checker for generated fixtures.

Works on the JSON form of the records (``schema.to_obj``), so it validates
corpus files written by ``gateway_fixtures.corpus`` as well as freshly
generated values.

Usage:
  gateway-fixtures-check <file.json>     # checks a single fixture
  gateway-fixtures-check <dir>           # checks every *.json under dir
Exits non-zero on failure.
"""
from __future__ import annotations

import argparse
import ipaddress
import json
import logging
import re
import sys
from pathlib import Path
from typing import Iterable, List

from .duration import DurationConversionError, to_canonical
from .errors import Error
from .schema import (
    VARIANTS, BgpNeighborSessionState, DataplaneStatusType, Duration, FrrAgentStatusType,
    InterfaceAdminStatusType, InterfaceOperStatusType, PacketDriver, ZebraStatusType,
)
from .support import IF_NAME_MAX_LEN, K8S_OBJ_MAX_LEN

log = logging.getLogger(__name__)

U64_MAX = (1 << 64) - 1
BYTES_PER_PACKET = 64
K8S_NAME_RE = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


class CheckError(Error): pass
class DuplicateKey(CheckError): pass
class DuplicateAddress(CheckError): pass
class NetworkAddress(CheckError): pass
class BroadcastAddress(CheckError): pass
class InvalidEnumValue(CheckError): pass
class CounterExceedsTotal(CheckError): pass
class KeyMismatch(CheckError): pass
class MixedFamilies(CheckError): pass
class MissingField(CheckError): pass
class InvalidValue(CheckError): pass


def _enum(value, cls, what):
    if value not in {int(v) for v in VARIANTS[cls]}:
        raise InvalidEnumValue(f"{what}={value!r} not a {cls.__name__}")


def _require(obj, key, what):
    if obj.get(key) is None:
        raise MissingField(f"{what}.{key} missing")
    return obj[key]


def _not_above(part, total, what):
    if part > total:
        raise CounterExceedsTotal(f"{what}: {part} > {total}")


# ---- Addresses ----
def check_unique_cidrs(cidrs: Iterable[str]) -> None:
    """Valid networks (no host bits set), one family, distinct prefixes."""
    seen = set()
    versions = set()
    for cidr in cidrs:
        try:
            net = ipaddress.ip_network(cidr, strict=True)
        except ValueError as e:
            raise InvalidValue(f"bad cidr {cidr!r}: {e}") from None
        if net in seen:
            raise DuplicateKey(f"duplicate cidr {cidr}")
        seen.add(net)
        versions.add(net.version)
    if len(versions) > 1:
        raise MixedFamilies(f"mixed address families: {sorted(versions)}")


def check_same_family(cidrs: Iterable[str]) -> None:
    versions = {ipaddress.ip_network(c, strict=False).version for c in cidrs}
    if len(versions) > 1:
        raise MixedFamilies(f"mixed address families: {sorted(versions)}")


def check_host_addresses(addrs: Iterable[str]) -> None:
    """Distinct addresses, none a network or broadcast address for its mask.

    ``/31`` and ``/127`` are point-to-point links where both addresses are
    usable; ``/32`` and ``/128`` have no host part at all.
    """
    seen = set()
    for addr in addrs:
        try:
            iface = ipaddress.ip_interface(addr)
        except ValueError as e:
            raise InvalidValue(f"bad address {addr!r}: {e}") from None
        ip = iface.ip
        if ip in seen:
            raise DuplicateAddress(f"duplicate address {addr}")
        seen.add(ip)
        width = ip.max_prefixlen
        mask = iface.network.prefixlen
        if mask >= width - 1:
            continue
        host_mask = (1 << (width - mask)) - 1
        host = int(ip) & host_mask
        if host == 0:
            raise NetworkAddress(f"network address {addr}")
        if host == host_mask:
            raise BroadcastAddress(f"broadcast address {addr}")


# ---- Status ----
def _check_interface(iface, what):
    name = _require(iface, "ifname", what)
    if not 0 < len(name) <= IF_NAME_MAX_LEN:
        raise InvalidValue(f"{what}.ifname {name!r} has bad length")
    _enum(iface["oper_status"], InterfaceOperStatusType, f"{what}.oper_status")
    _enum(iface["admin_status"], InterfaceAdminStatusType, f"{what}.admin_status")


def _check_prefixes(p, what):
    _not_above(p["received"], p["received_pre_policy"], f"{what}.received")


def _check_neighbor(nbr, what):
    if not 1 <= nbr["peer_port"] <= 65535:
        raise InvalidValue(f"{what}.peer_port={nbr['peer_port']}")
    _enum(nbr["session_state"], BgpNeighborSessionState, f"{what}.session_state")
    for af in ("ipv4_unicast_prefixes", "ipv6_unicast_prefixes", "l2vpn_evpn_prefixes"):
        _check_prefixes(_require(nbr, af, what), f"{what}.{af}")


def _check_packets(c, what):
    _not_above(c["drops"], c["packets"], f"{what}.drops")
    if c["bytes"] != min(c["packets"] * BYTES_PER_PACKET, U64_MAX):
        raise InvalidValue(f"{what}.bytes={c['bytes']} for {c['packets']} packets")


def _check_keyed(mapping, key_field, what):
    for key, value in mapping.items():
        if key != value[key_field]:
            raise KeyMismatch(f"{what}[{key!r}].{key_field}={value[key_field]!r}")


def check_status_response(resp: dict) -> None:
    names = set()
    for iface in resp["interface_statuses"]:
        _check_interface(iface, "interface_statuses")
        if iface["ifname"] in names:
            raise DuplicateKey(f"duplicate ifname {iface['ifname']}")
        names.add(iface["ifname"])

    frr = resp.get("frr_status")
    if frr is not None:
        _enum(frr["zebra_status"], ZebraStatusType, "frr_status.zebra_status")
        _enum(frr["frr_agent_status"], FrrAgentStatusType, "frr_status.frr_agent_status")
        if not 0 <= frr["restarts"] <= 1000:
            raise InvalidValue(f"frr_status.restarts={frr['restarts']}")

    dp = resp.get("dataplane_status")
    if dp is not None:
        _enum(dp["status"], DataplaneStatusType, "dataplane_status.status")

    for name, rt in resp["interface_runtime"].items():
        if not name:
            raise InvalidValue("empty interface_runtime key")
        _enum(rt["oper_status"], InterfaceOperStatusType, f"interface_runtime[{name}].oper_status")
        _enum(rt["admin_status"], InterfaceAdminStatusType, f"interface_runtime[{name}].admin_status")
        if not 576 <= rt["mtu"] <= 9216:
            raise InvalidValue(f"interface_runtime[{name}].mtu={rt['mtu']}")

    bgp = resp.get("bgp")
    if bgp is not None:
        for vrf, vrf_status in bgp["vrfs"].items():
            if not vrf:
                raise InvalidValue("empty vrf name")
            for ip, nbr in vrf_status["neighbors"].items():
                ipaddress.ip_address(ip)
                _check_neighbor(nbr, f"bgp.vrfs[{vrf}].neighbors[{ip}]")

    _check_keyed(resp["vpcs"], "name", "vpcs")
    for name, vpc in resp["vpcs"].items():
        if not vpc["id"]:
            raise InvalidValue(f"vpcs[{name}].id empty")
        if not 1 <= vpc["vni"] <= 16_777_215:
            raise InvalidValue(f"vpcs[{name}].vni={vpc['vni']}")
        _check_keyed(vpc["interfaces"], "ifname", f"vpcs[{name}].interfaces")

    _check_keyed(resp["vpc_peering_counters"], "name", "vpc_peering_counters")
    for name, c in resp["vpc_peering_counters"].items():
        if not c["src_vpc"] or not c["dst_vpc"]:
            raise MissingField(f"vpc_peering_counters[{name}] vpc names")
        if name != f"{c['src_vpc']}--{c['dst_vpc']}" or c["src_vpc"] > c["dst_vpc"]:
            raise InvalidValue(f"vpc_peering_counters[{name}] not ordered src--dst")
        _check_packets(c, f"vpc_peering_counters[{name}]")
        if c["pps"] < 0 or c["bps"] < 0:
            raise InvalidValue(f"vpc_peering_counters[{name}] negative rate")

    _check_keyed(resp["vpc_counters"], "name", "vpc_counters")
    for name, c in resp["vpc_counters"].items():
        _check_packets(c, f"vpc_counters[{name}]")


# ---- Expose / device ----
def _rule_cidrs(rules, what) -> List[str]:
    cidrs = []
    for rule in rules:
        set_fields = [k for k in ("cidr", "not_") if rule.get(k) is not None]
        if len(set_fields) != 1:
            raise InvalidValue(f"{what} rule must set exactly one of cidr/not_: {rule}")
        cidrs.append(rule[set_fields[0]])
    return cidrs


def check_expose(expose: dict) -> None:
    if not expose["ips"]:
        raise MissingField("expose.ips empty")
    ips = _rule_cidrs(expose["ips"], "expose.ips")
    as_ = _rule_cidrs(expose["as_"], "expose.as_")
    check_unique_cidrs(ips)
    check_unique_cidrs(as_)
    check_same_family(ips + as_)
    if not as_:
        return
    nat = _require(expose, "nat", "expose")
    if (nat.get("stateful") is None) == (nat.get("stateless") is None):
        raise InvalidValue(f"expose.nat must set exactly one variant: {nat}")
    if nat.get("stateful") is not None:
        timeout = _require(nat["stateful"], "idle_timeout", "expose.nat.stateful")
        try:
            to_canonical(Duration(**timeout))
        except DurationConversionError as e:
            raise InvalidValue(f"expose.nat.stateful.idle_timeout: {e}") from None


def check_device(device: dict) -> None:
    _enum(device["driver"], PacketDriver, "device.driver")
    name = device["hostname"]
    if not 2 <= len(name) <= K8S_OBJ_MAX_LEN or not K8S_NAME_RE.match(name):
        raise InvalidValue(f"device.hostname {name!r} is not a k8s object name")
    _require(device, "tracing", "device")


CHECKERS = {
    "status": check_status_response,
    "expose": check_expose,
    "device": check_device,
}


def check_fixture(fixture: dict) -> None:
    """Check a corpus document ``{"kind": ..., "seed": ..., "value": ...}``."""
    if not isinstance(fixture, dict):
        raise InvalidValue(f"fixture must be an object, got {type(fixture).__name__}")
    kind = fixture.get("kind")
    if kind not in CHECKERS:
        raise InvalidValue(f"unknown fixture kind {kind!r}")
    value = _require(fixture, "value", "fixture")
    if not isinstance(value, dict):
        raise InvalidValue(f"fixture.value must be an object, got {type(value).__name__}")
    CHECKERS[kind](value)


def check_paths(paths: Iterable[Path]) -> int:
    ok = 0; bad = 0
    for p in paths:
        try:
            check_fixture(json.loads(p.read_text(encoding="utf-8")))
            ok += 1
            log.debug("ok %s", p)
        except (CheckError, AttributeError, KeyError, TypeError, ValueError) as e:
            print(f"[FAIL] {p.name} -> {e.__class__.__name__}: {e}")
            bad += 1
    print(f"\nSummary: {ok} ok, {bad} failed")
    return 1 if bad else 0


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check generated gateway fixtures.")
    ap.add_argument("path", help="fixture .json file or directory of fixtures")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    root = Path(args.path)
    if root.is_file():
        paths = [root]
    elif root.is_dir():
        paths = sorted(root.glob("*.json"))
    else:
        print(f"no such file or directory: {root}", file=sys.stderr)
        return 2
    return check_paths(paths)


if __name__ == "__main__":
    sys.exit(main())
