"""Numeric intervals for hit distances and color clamping.

An Interval [lb, ub] answers two membership questions: ``contains``
(inclusive bounds) and ``surrounds`` (exclusive bounds). The renderer uses
one interval as the window of acceptable hit distances along a ray and
another to clamp color channels into [0, 1] before quantization.

lb <= ub is the caller's responsibility and is not checked.
"""

import taichi as ti
import taichi.math as tm

# Hit distances below this are treated as self-intersections (shadow acne)
T_MIN = 0.001
T_MAX = float("inf")


@ti.dataclass
class Interval:
    """A closed-or-open range of f32 values.

    Attributes:
        lb: Lower bound.
        ub: Upper bound.
    """

    lb: ti.f32
    ub: ti.f32


@ti.func
def make_interval(lb: ti.f32, ub: ti.f32) -> Interval:
    """Create an interval from its bounds."""
    return Interval(lb=lb, ub=ub)


@ti.func
def interval_contains(interval: Interval, x: ti.f32) -> ti.i32:
    """Return 1 if lb <= x <= ub."""
    return interval.lb <= x and x <= interval.ub


@ti.func
def interval_surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """Return 1 if lb < x < ub."""
    return interval.lb < x and x < interval.ub


@ti.func
def interval_clamp(interval: Interval, x: ti.f32) -> ti.f32:
    """Clamp x into [lb, ub]."""
    return tm.clamp(x, interval.lb, interval.ub)


@ti.func
def hit_interval() -> Interval:
    """The valid hit-distance window (T_MIN, +inf) used by the integrator."""
    return Interval(lb=T_MIN, ub=T_MAX)


@ti.func
def color_interval() -> Interval:
    """The [0, 1] range color channels are clamped to."""
    return Interval(lb=0.0, ub=1.0)
