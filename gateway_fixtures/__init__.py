"""Deterministic, structure-aware fixtures for the gateway config/status schema."""
from .driver import ByteDriver, Driver, HypothesisDriver, RandomDriver
from .errors import Error, Exhausted
from .generator import ValueGenerator, draw, produce, type_generator
from .allocators import (
    UniqueV4CidrGenerator, UniqueV4InterfaceAddressGenerator,
    UniqueV6CidrGenerator, UniqueV6InterfaceAddressGenerator,
)
from .duration import (
    CanonicalDuration, DurationConversionError, DurationOutOfRange, NegativeDuration,
    from_canonical, to_canonical,
)
# importing these registers the record generators
from . import device, expose, status  # noqa: F401

__version__ = "0.1.0"
