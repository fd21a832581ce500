"""
Generator registry.

Record types register a generator function with ``@type_generator``;
parameterized generators (allocators, name lists...) subclass
``ValueGenerator``. ``draw`` runs either kind and lets ``Exhausted``
propagate, ``produce`` is the public entry point returning ``None`` instead.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from .driver import Driver
from .errors import Exhausted

_TYPE_GENERATORS: Dict[type, Callable[[Driver], Any]] = {}


class ValueGenerator:
    """A generator carrying its own parameters."""

    def generate(self, d: Driver):
        raise NotImplementedError

    def produce(self, d: Driver):
        try:
            return self.generate(d)
        except Exhausted:
            return None


def type_generator(cls: type):
    """Register the decorated function as the generator for ``cls``."""
    def register(fn):
        if cls in _TYPE_GENERATORS:
            raise ValueError(f"generator already registered for {cls.__name__}")
        _TYPE_GENERATORS[cls] = fn
        return fn
    return register


def generator_for(cls: type) -> Callable[[Driver], Any]:
    try:
        return _TYPE_GENERATORS[cls]
    except KeyError:
        raise TypeError(f"no generator registered for {cls.__name__}") from None


def draw(d: Driver, target):
    if isinstance(target, ValueGenerator):
        return target.generate(d)
    return generator_for(target)(d)


def produce(target, d: Driver) -> Optional[Any]:
    try:
        return draw(d, target)
    except Exhausted:
        return None
