"""
Plain records mirroring the gateway config/status schema.

Enum-typed fields hold the integer wire value, exactly like protobuf
bindings do. A protobuf ``oneof`` is modelled as sibling optional fields of
which one is set.
"""
from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


# ---- Enums ----
class InterfaceOperStatusType(enum.IntEnum):
    INTERFACE_STATUS_UNKNOWN = 0
    INTERFACE_STATUS_OPER_UP = 1
    INTERFACE_STATUS_OPER_DOWN = 2
    INTERFACE_STATUS_ERROR = 3


class InterfaceAdminStatusType(enum.IntEnum):
    INTERFACE_ADMIN_STATUS_UNKNOWN = 0
    INTERFACE_ADMIN_STATUS_UP = 1
    INTERFACE_ADMIN_STATUS_DOWN = 2


class ZebraStatusType(enum.IntEnum):
    ZEBRA_STATUS_NOT_CONNECTED = 0
    ZEBRA_STATUS_CONNECTED = 1


class FrrAgentStatusType(enum.IntEnum):
    FRR_AGENT_STATUS_NOT_CONNECTED = 0
    FRR_AGENT_STATUS_CONNECTED = 1


class DataplaneStatusType(enum.IntEnum):
    DATAPLANE_STATUS_UNKNOWN = 0
    DATAPLANE_STATUS_HEALTHY = 1
    DATAPLANE_STATUS_INIT = 2
    DATAPLANE_STATUS_ERROR = 3


class BgpNeighborSessionState(enum.IntEnum):
    BGP_STATE_UNSET = 0
    BGP_STATE_IDLE = 1
    BGP_STATE_CONNECT = 2
    BGP_STATE_ACTIVE = 3
    BGP_STATE_OPEN = 4
    BGP_STATE_ESTABLISHED = 5


class PacketDriver(enum.IntEnum):
    KERNEL = 0
    DPDK = 1


# Generation picks from these explicit, ordered lists; nothing walks the
# enum classes at runtime.
VARIANTS = {
    InterfaceOperStatusType: (
        InterfaceOperStatusType.INTERFACE_STATUS_UNKNOWN,
        InterfaceOperStatusType.INTERFACE_STATUS_OPER_UP,
        InterfaceOperStatusType.INTERFACE_STATUS_OPER_DOWN,
        InterfaceOperStatusType.INTERFACE_STATUS_ERROR,
    ),
    InterfaceAdminStatusType: (
        InterfaceAdminStatusType.INTERFACE_ADMIN_STATUS_UNKNOWN,
        InterfaceAdminStatusType.INTERFACE_ADMIN_STATUS_UP,
        InterfaceAdminStatusType.INTERFACE_ADMIN_STATUS_DOWN,
    ),
    ZebraStatusType: (
        ZebraStatusType.ZEBRA_STATUS_NOT_CONNECTED,
        ZebraStatusType.ZEBRA_STATUS_CONNECTED,
    ),
    FrrAgentStatusType: (
        FrrAgentStatusType.FRR_AGENT_STATUS_NOT_CONNECTED,
        FrrAgentStatusType.FRR_AGENT_STATUS_CONNECTED,
    ),
    DataplaneStatusType: (
        DataplaneStatusType.DATAPLANE_STATUS_UNKNOWN,
        DataplaneStatusType.DATAPLANE_STATUS_HEALTHY,
        DataplaneStatusType.DATAPLANE_STATUS_INIT,
        DataplaneStatusType.DATAPLANE_STATUS_ERROR,
    ),
    BgpNeighborSessionState: (
        BgpNeighborSessionState.BGP_STATE_UNSET,
        BgpNeighborSessionState.BGP_STATE_IDLE,
        BgpNeighborSessionState.BGP_STATE_CONNECT,
        BgpNeighborSessionState.BGP_STATE_ACTIVE,
        BgpNeighborSessionState.BGP_STATE_OPEN,
        BgpNeighborSessionState.BGP_STATE_ESTABLISHED,
    ),
    PacketDriver: (
        PacketDriver.KERNEL,
        PacketDriver.DPDK,
    ),
}


# ---- Status ----
@dataclass
class InterfaceStatus:
    ifname: str
    oper_status: int
    admin_status: int

@dataclass
class FrrStatus:
    zebra_status: int
    frr_agent_status: int
    applied_config_gen: int
    restarts: int
    applied_configs: int
    failed_configs: int

@dataclass
class DataplaneStatusInfo:
    status: int

@dataclass
class InterfaceCounters:
    tx_bits: int
    tx_bps: float
    tx_errors: int
    rx_bits: int
    rx_bps: float
    rx_errors: int

@dataclass
class InterfaceRuntimeStatus:
    admin_status: int
    oper_status: int
    mac: str
    mtu: int
    counters: Optional[InterfaceCounters] = None

@dataclass
class BgpMessageCounters:
    capability: int
    keepalive: int
    notification: int
    open: int
    route_refresh: int
    update: int

@dataclass
class BgpMessages:
    received: Optional[BgpMessageCounters] = None
    sent: Optional[BgpMessageCounters] = None

@dataclass
class BgpNeighborPrefixes:
    received: int
    received_pre_policy: int
    sent: int

@dataclass
class BgpNeighborStatus:
    enabled: bool
    local_as: int
    peer_as: int
    peer_port: int
    peer_group: str
    remote_router_id: str
    session_state: int
    connections_dropped: int
    established_transitions: int
    last_reset_reason: str
    messages: Optional[BgpMessages] = None
    ipv4_unicast_prefixes: Optional[BgpNeighborPrefixes] = None
    ipv6_unicast_prefixes: Optional[BgpNeighborPrefixes] = None
    l2vpn_evpn_prefixes: Optional[BgpNeighborPrefixes] = None

@dataclass
class BgpVrfStatus:
    neighbors: Dict[str, BgpNeighborStatus] = field(default_factory=dict)

@dataclass
class BgpStatus:
    vrfs: Dict[str, BgpVrfStatus] = field(default_factory=dict)

@dataclass
class VpcInterfaceStatus:
    ifname: str
    admin_status: int
    oper_status: int

@dataclass
class VpcStatus:
    id: str
    name: str
    vni: int
    route_count: int
    interfaces: Dict[str, VpcInterfaceStatus] = field(default_factory=dict)

@dataclass
class VpcPeeringCounters:
    name: str
    src_vpc: str
    dst_vpc: str
    packets: int
    bytes: int
    drops: int
    pps: float
    bps: float

@dataclass
class VpcCounters:
    name: str
    packets: int
    drops: int
    bytes: int

@dataclass
class GetDataplaneStatusRequest:
    pass

@dataclass
class GetDataplaneStatusResponse:
    interface_statuses: List[InterfaceStatus] = field(default_factory=list)
    frr_status: Optional[FrrStatus] = None
    dataplane_status: Optional[DataplaneStatusInfo] = None
    interface_runtime: Dict[str, InterfaceRuntimeStatus] = field(default_factory=dict)
    bgp: Optional[BgpStatus] = None
    vpcs: Dict[str, VpcStatus] = field(default_factory=dict)
    vpc_peering_counters: Dict[str, VpcPeeringCounters] = field(default_factory=dict)
    vpc_counters: Dict[str, VpcCounters] = field(default_factory=dict)


# ---- Expose / peering ----
@dataclass
class Duration:
    """google.protobuf.Duration: signed seconds, signed nanos."""
    seconds: int = 0
    nanos: int = 0

@dataclass
class PeeringIPs:
    cidr: Optional[str] = None
    not_: Optional[str] = None

@dataclass
class PeeringAs:
    cidr: Optional[str] = None
    not_: Optional[str] = None

@dataclass
class PeeringStatefulNat:
    idle_timeout: Optional[Duration] = None

@dataclass
class PeeringStatelessNat:
    pass

@dataclass
class Nat:
    stateful: Optional[PeeringStatefulNat] = None
    stateless: Optional[PeeringStatelessNat] = None

@dataclass
class Expose:
    ips: List[PeeringIPs] = field(default_factory=list)
    as_: List[PeeringAs] = field(default_factory=list)
    nat: Optional[Nat] = None


# ---- Device ----
@dataclass
class TracingConfig:
    default: int = 0
    tagconfig: list = field(default_factory=list)

@dataclass
class Device:
    driver: int
    hostname: str
    eal: Optional[dict] = None
    ports: list = field(default_factory=list)
    tracing: Optional[TracingConfig] = None


def to_obj(record):
    """Convert a record tree into JSON-ready dicts, lists and scalars."""
    if dataclasses.is_dataclass(record):
        return {f.name: to_obj(getattr(record, f.name)) for f in dataclasses.fields(record)}
    if isinstance(record, dict):
        return {k: to_obj(v) for k, v in record.items()}
    if isinstance(record, (list, tuple)):
        return [to_obj(v) for v in record]
    if isinstance(record, enum.IntEnum):
        return int(record)
    return record
