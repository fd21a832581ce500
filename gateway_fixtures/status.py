"""
Generators for the dataplane status records.

Fields are drawn in the order they are declared; every name-keyed map uses
the identifying field of its value as key.
"""
from __future__ import annotations

from .driver import Driver
from .generator import draw, type_generator
from .schema import (
    VARIANTS,
    BgpMessageCounters, BgpMessages, BgpNeighborPrefixes, BgpNeighborSessionState,
    BgpNeighborStatus, BgpStatus, BgpVrfStatus, DataplaneStatusInfo, DataplaneStatusType,
    FrrAgentStatusType, FrrStatus, GetDataplaneStatusRequest, GetDataplaneStatusResponse,
    InterfaceAdminStatusType, InterfaceCounters, InterfaceOperStatusType,
    InterfaceRuntimeStatus, InterfaceStatus, VpcCounters, VpcInterfaceStatus,
    VpcPeeringCounters, VpcStatus, ZebraStatusType,
)
from .support import (
    RESTART_DISTRIBUTION, choose_variant, linux_ifname, optional, unique_map,
)

U64_MAX = (1 << 64) - 1
I64_MIN, I64_MAX = -(1 << 63), (1 << 63) - 1

BYTES_PER_PACKET = 64
MAX_VNI = 16_777_215

MAX_INTERFACES = 8
MAX_EXTRA_RUNTIME_NAMES = 2
MAX_VRFS = 3
MAX_NEIGHBORS = 4
MAX_VPCS = 4
MAX_VPC_INTERFACES = 4
MAX_PEERINGS = 6
MAX_VPC_COUNTERS = 4


def _register_enum(cls):
    variants = VARIANTS[cls]

    @type_generator(cls)
    def gen(d: Driver):
        return choose_variant(d, variants)
    return gen


for _enum in (InterfaceOperStatusType, InterfaceAdminStatusType, ZebraStatusType,
              FrrAgentStatusType, DataplaneStatusType, BgpNeighborSessionState):
    _register_enum(_enum)


def packet_bytes(packets: int) -> int:
    """Byte count for ``packets`` fixed-size packets, saturating at u64."""
    return min(packets * BYTES_PER_PACKET, U64_MAX)


def vpc_name(d: Driver, highest: int) -> str:
    return f"vpc-{d.gen_int(1, highest)}"


@type_generator(GetDataplaneStatusRequest)
def gen_get_dataplane_status_request(d: Driver) -> GetDataplaneStatusRequest:
    return GetDataplaneStatusRequest()


@type_generator(InterfaceStatus)
def gen_interface_status(d: Driver) -> InterfaceStatus:
    ifname = linux_ifname(d)
    oper_status = int(draw(d, InterfaceOperStatusType))
    admin_status = int(draw(d, InterfaceAdminStatusType))
    return InterfaceStatus(ifname=ifname, oper_status=oper_status, admin_status=admin_status)


@type_generator(FrrStatus)
def gen_frr_status(d: Driver) -> FrrStatus:
    restarts = draw(d, RESTART_DISTRIBUTION)
    zebra_status = int(draw(d, ZebraStatusType))
    frr_agent_status = int(draw(d, FrrAgentStatusType))
    applied_config_gen = d.gen_int(I64_MIN, I64_MAX)
    applied_configs = d.gen_uint(32)
    failed_configs = d.gen_uint(32)
    return FrrStatus(
        zebra_status=zebra_status,
        frr_agent_status=frr_agent_status,
        applied_config_gen=applied_config_gen,
        restarts=restarts,
        applied_configs=applied_configs,
        failed_configs=failed_configs,
    )


@type_generator(DataplaneStatusInfo)
def gen_dataplane_status_info(d: Driver) -> DataplaneStatusInfo:
    return DataplaneStatusInfo(status=int(draw(d, DataplaneStatusType)))


@type_generator(InterfaceCounters)
def gen_interface_counters(d: Driver) -> InterfaceCounters:
    rx_bits = d.gen_int(0, 10_000_000)
    tx_bits = d.gen_int(0, 10_000_000)
    rx_errors = d.gen_int(0, 10_000)
    tx_errors = d.gen_int(0, 10_000)
    rx_bps = float(d.gen_int(0, 5_000_000))
    tx_bps = float(d.gen_int(0, 5_000_000))
    return InterfaceCounters(
        tx_bits=tx_bits, tx_bps=tx_bps, tx_errors=tx_errors,
        rx_bits=rx_bits, rx_bps=rx_bps, rx_errors=rx_errors,
    )


@type_generator(InterfaceRuntimeStatus)
def gen_interface_runtime_status(d: Driver) -> InterfaceRuntimeStatus:
    mtu = d.gen_int(576, 9216)
    counters = optional(d, draw(d, InterfaceCounters))
    admin_status = int(draw(d, InterfaceAdminStatusType))
    oper_status = int(draw(d, InterfaceOperStatusType))
    # locally administered unicast
    mac = "02:" + ":".join(f"{d.gen_int(0, 255):02x}" for _ in range(5))
    return InterfaceRuntimeStatus(
        admin_status=admin_status, oper_status=oper_status, mac=mac, mtu=mtu,
        counters=counters,
    )


@type_generator(BgpMessageCounters)
def gen_bgp_message_counters(d: Driver) -> BgpMessageCounters:
    return BgpMessageCounters(
        capability=d.gen_int(0, 10_000),
        keepalive=d.gen_int(0, 10_000),
        notification=d.gen_int(0, 1_000),
        open=d.gen_int(0, 5_000),
        route_refresh=d.gen_int(0, 5_000),
        update=d.gen_int(0, 50_000),
    )


@type_generator(BgpMessages)
def gen_bgp_messages(d: Driver) -> BgpMessages:
    received = draw(d, BgpMessageCounters)
    sent = draw(d, BgpMessageCounters)
    return BgpMessages(received=received, sent=sent)


@type_generator(BgpNeighborPrefixes)
def gen_bgp_neighbor_prefixes(d: Driver) -> BgpNeighborPrefixes:
    received_pre_policy = d.gen_int(0, 50_000)
    # policy can only filter
    received = d.gen_int(0, received_pre_policy)
    sent = d.gen_int(0, 50_000)
    return BgpNeighborPrefixes(received=received, received_pre_policy=received_pre_policy, sent=sent)


def router_id(d: Driver) -> str:
    return "{}.{}.{}.{}".format(d.gen_int(1, 254), d.gen_int(0, 255),
                                d.gen_int(0, 255), d.gen_int(1, 254))


@type_generator(BgpNeighborStatus)
def gen_bgp_neighbor_status(d: Driver) -> BgpNeighborStatus:
    peer_port = d.gen_int(1, 65535)
    local_as = d.gen_int(1, 65_534)
    peer_as = d.gen_int(1, 65_534)
    enabled = d.gen_bool()
    peer_group = f"grp{d.gen_int(0, 1000)}"
    remote_router_id = router_id(d)
    session_state = int(draw(d, BgpNeighborSessionState))
    connections_dropped = d.gen_int(0, 1000)
    established_transitions = d.gen_int(0, 1000)
    messages = draw(d, BgpMessages)
    ipv4_unicast_prefixes = draw(d, BgpNeighborPrefixes)
    ipv6_unicast_prefixes = draw(d, BgpNeighborPrefixes)
    l2vpn_evpn_prefixes = draw(d, BgpNeighborPrefixes)
    return BgpNeighborStatus(
        enabled=enabled,
        local_as=local_as,
        peer_as=peer_as,
        peer_port=peer_port,
        peer_group=peer_group,
        remote_router_id=remote_router_id,
        session_state=session_state,
        connections_dropped=connections_dropped,
        established_transitions=established_transitions,
        last_reset_reason="test",
        messages=messages,
        ipv4_unicast_prefixes=ipv4_unicast_prefixes,
        ipv6_unicast_prefixes=ipv6_unicast_prefixes,
        l2vpn_evpn_prefixes=l2vpn_evpn_prefixes,
    )


def _neighbor_entry(d: Driver):
    ip = f"10.{d.gen_int(0, 255)}.{d.gen_int(0, 255)}.{d.gen_int(1, 254)}"
    return ip, draw(d, BgpNeighborStatus)


@type_generator(BgpVrfStatus)
def gen_bgp_vrf_status(d: Driver) -> BgpVrfStatus:
    n = d.gen_int(0, MAX_NEIGHBORS)
    return BgpVrfStatus(neighbors=unique_map(d, n, _neighbor_entry))


@type_generator(BgpStatus)
def gen_bgp_status(d: Driver) -> BgpStatus:
    nvrfs = d.gen_int(0, MAX_VRFS)
    vrfs = {}
    for i in range(nvrfs):
        name = "default" if i == 0 else f"vrf{i}"
        vrfs[name] = draw(d, BgpVrfStatus)
    return BgpStatus(vrfs=vrfs)


@type_generator(VpcInterfaceStatus)
def gen_vpc_interface_status(d: Driver) -> VpcInterfaceStatus:
    ifname = linux_ifname(d)
    admin_status = int(draw(d, InterfaceAdminStatusType))
    oper_status = int(draw(d, InterfaceOperStatusType))
    return VpcInterfaceStatus(ifname=ifname, admin_status=admin_status, oper_status=oper_status)


def _vpc_interface_entry(d: Driver):
    s = draw(d, VpcInterfaceStatus)
    return s.ifname, s


@type_generator(VpcStatus)
def gen_vpc_status(d: Driver) -> VpcStatus:
    name = vpc_name(d, 128)
    id_ = f"id-{d.gen_int(1, 10_000)}"
    vni = d.gen_int(1, MAX_VNI)
    route_count = d.gen_int(0, 50_000)
    nifs = d.gen_int(0, MAX_VPC_INTERFACES)
    interfaces = unique_map(d, nifs, _vpc_interface_entry)
    return VpcStatus(id=id_, name=name, vni=vni, route_count=route_count, interfaces=interfaces)


@type_generator(VpcPeeringCounters)
def gen_vpc_peering_counters(d: Driver) -> VpcPeeringCounters:
    a = vpc_name(d, 64)
    b = vpc_name(d, 64)
    src_vpc, dst_vpc = (a, b) if a <= b else (b, a)
    packets = d.gen_int(0, 10_000_000)
    drops = d.gen_int(0, packets)
    pps = float(d.gen_int(0, 100_000))
    bps = float(d.gen_int(0, 5_000_000))
    return VpcPeeringCounters(
        name=f"{src_vpc}--{dst_vpc}",
        src_vpc=src_vpc,
        dst_vpc=dst_vpc,
        packets=packets,
        bytes=packet_bytes(packets),
        drops=drops,
        pps=pps,
        bps=bps,
    )


@type_generator(VpcCounters)
def gen_vpc_counters(d: Driver) -> VpcCounters:
    name = vpc_name(d, 128)
    packets = d.gen_int(0, 100_000_000)
    drops = d.gen_int(0, packets)
    return VpcCounters(name=name, packets=packets, drops=drops, bytes=packet_bytes(packets))


def _keyed_by_name(record_type):
    def entry(d: Driver):
        record = draw(d, record_type)
        return record.name, record
    return entry


def _interface_entry(d: Driver):
    iface = draw(d, InterfaceStatus)
    return iface.ifname, iface


def runtime_names(d: Driver, known: list) -> list:
    """Distinct names for the runtime map.

    A prefix of the known interface names plus up to two ``ifN`` names that
    have no ``InterfaceStatus`` at all. An ``ifN`` already present is dropped.
    """
    target = d.gen_int(0, len(known) + MAX_EXTRA_RUNTIME_NAMES)
    pool = list(known)
    for _ in range(d.gen_int(0, MAX_EXTRA_RUNTIME_NAMES)):
        name = f"if{d.gen_int(0, 9999)}"
        if name not in pool:
            pool.append(name)
    return pool[:target]


@type_generator(GetDataplaneStatusResponse)
def gen_get_dataplane_status_response(d: Driver) -> GetDataplaneStatusResponse:
    ninterfaces = d.gen_int(0, MAX_INTERFACES)
    interfaces = unique_map(d, ninterfaces, _interface_entry)

    frr_status = optional(d, draw(d, FrrStatus))
    dataplane_status = optional(d, draw(d, DataplaneStatusInfo))

    interface_runtime = {}
    for name in runtime_names(d, list(interfaces)):
        interface_runtime[name] = draw(d, InterfaceRuntimeStatus)

    bgp = optional(d, draw(d, BgpStatus))

    vpcs = unique_map(d, d.gen_int(0, MAX_VPCS), _keyed_by_name(VpcStatus))
    vpc_peering_counters = unique_map(d, d.gen_int(0, MAX_PEERINGS),
                                      _keyed_by_name(VpcPeeringCounters))
    vpc_counters = unique_map(d, d.gen_int(0, MAX_VPC_COUNTERS), _keyed_by_name(VpcCounters))

    return GetDataplaneStatusResponse(
        interface_statuses=list(interfaces.values()),
        frr_status=frr_status,
        dataplane_status=dataplane_status,
        interface_runtime=interface_runtime,
        bgp=bgp,
        vpcs=vpcs,
        vpc_peering_counters=vpc_peering_counters,
        vpc_counters=vpc_counters,
    )
