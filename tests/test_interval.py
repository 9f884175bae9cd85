"""Unit tests for the interval module."""

import taichi as ti


def test_contains_is_inclusive():
    from src.pathtracer.core.interval import interval_contains, make_interval

    results = ti.field(dtype=ti.i32, shape=4)

    @ti.kernel
    def test_kernel():
        interval = make_interval(0.0, 1.0)
        results[0] = interval_contains(interval, 0.0)
        results[1] = interval_contains(interval, 1.0)
        results[2] = interval_contains(interval, 0.5)
        results[3] = interval_contains(interval, 1.5)

    test_kernel()
    assert list(results.to_numpy()) == [1, 1, 1, 0]


def test_surrounds_is_exclusive():
    from src.pathtracer.core.interval import interval_surrounds, make_interval

    results = ti.field(dtype=ti.i32, shape=3)

    @ti.kernel
    def test_kernel():
        interval = make_interval(0.0, 1.0)
        results[0] = interval_surrounds(interval, 0.0)
        results[1] = interval_surrounds(interval, 1.0)
        results[2] = interval_surrounds(interval, 0.5)

    test_kernel()
    assert list(results.to_numpy()) == [0, 0, 1]


def test_clamp():
    from src.pathtracer.core.interval import color_interval, interval_clamp

    results = ti.field(dtype=ti.f32, shape=3)

    @ti.kernel
    def test_kernel():
        interval = color_interval()
        results[0] = interval_clamp(interval, -0.5)
        results[1] = interval_clamp(interval, 0.25)
        results[2] = interval_clamp(interval, 3.0)

    test_kernel()
    values = results.to_numpy()
    assert values[0] == 0.0
    assert abs(values[1] - 0.25) < 1e-7
    assert values[2] == 1.0


def test_hit_interval_excludes_self_intersection():
    """Hits closer than T_MIN are rejected to avoid shadow acne."""
    from src.pathtracer.core.interval import T_MIN, hit_interval, interval_surrounds

    results = ti.field(dtype=ti.i32, shape=3)

    @ti.kernel
    def test_kernel():
        interval = hit_interval()
        results[0] = interval_surrounds(interval, 0.0005)
        results[1] = interval_surrounds(interval, 0.01)
        results[2] = interval_surrounds(interval, 1.0e30)

    test_kernel()
    assert T_MIN == 0.001
    assert list(results.to_numpy()) == [0, 1, 1]
