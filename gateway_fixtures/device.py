from __future__ import annotations

from .driver import Driver
from .generator import draw, type_generator
from .schema import VARIANTS, Device, PacketDriver, TracingConfig
from .support import choose_variant, k8s_object_name


@type_generator(PacketDriver)
def gen_packet_driver(d: Driver) -> PacketDriver:
    return choose_variant(d, VARIANTS[PacketDriver])


@type_generator(TracingConfig)
def gen_tracing_config(d: Driver) -> TracingConfig:
    return TracingConfig(default=1, tagconfig=[])


@type_generator(Device)
def gen_device(d: Driver) -> Device:
    # EAL and ports stay empty until the dataplane consumes them
    driver = int(draw(d, PacketDriver))
    hostname = k8s_object_name(d)
    return Device(driver=driver, hostname=hostname, eal=None, ports=[],
                  tracing=draw(d, TracingConfig))
