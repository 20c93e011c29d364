# railcut/geometry.py
# Module row geometry -> required rail length (mm).
#
#   required = m * module_width + (m - 1) * mid_clamp + 2 * end_clamp_width + 2 * buffer
#
# The mid clamp term only applies when there is at least one module.

from __future__ import annotations

from .config import DEFAULTS
from .lengths import round_mm


def required_rail_length(
    modules: int,
    module_width: float = DEFAULTS.module_width,
    mid_clamp: float = DEFAULTS.mid_clamp,
    end_clamp_width: float = DEFAULTS.end_clamp_width,
    buffer: float = DEFAULTS.buffer,
) -> int:
    m = max(0, int(modules))
    gaps = m - 1 if m > 0 else 0
    span = m * float(module_width) + gaps * float(mid_clamp) + 2 * float(end_clamp_width) + 2 * float(buffer)
    return round_mm(span)
