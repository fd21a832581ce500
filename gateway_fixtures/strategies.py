"""Expose gateway_fixtures generators as hypothesis strategies."""
from __future__ import annotations

from hypothesis import strategies as st

from .driver import HypothesisDriver
from .generator import draw


def from_generator(target) -> st.SearchStrategy:
    """Strategy for a registered record type or a ``ValueGenerator``.

    Hypothesis supplies every bounded draw, so failing examples shrink
    through the generator's own structure.
    """
    @st.composite
    def build(draw_fn):
        return draw(HypothesisDriver(draw_fn), target)
    return build()
