import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
import numpy as np
import pytest
from hydrostom.hydraulics import conductance
from hydrostom.params import PAR_CONDUCTIVITY_STD, PAR_PHOTO_STD
from hydrostom.photosynthesis import assimilation
from hydrostom.utils import (
    DomainError, SweepPoint, array_like_wrapper, grid_points, sweep, sweep_to_arrays
)


def test_grid_points_order():
    assert grid_points([0.1, 0.2], [500, 1000]) == [(0.1, 500), (0.1, 1000), (0.2, 500), (0.2, 1000)]
    assert grid_points([1, 2, 3]) == [(1,), (2,), (3,)]


def test_sweep_preserves_order_and_records_failures():
    func = partial(assimilation, ca=400.0, photo=PAR_PHOTO_STD)
    points = [(1.0, 0.5), (-1.0, 0.5), (0.0, 0.5), (1.0, -2.0), (2.0, 0.5)]
    res = sweep(func, points)

    assert [r.inputs for r in res] == points
    assert [r.ok for r in res] == [True, False, True, False, True]
    assert res[0].value == pytest.approx(assimilation(1.0, 0.5, 400.0, PAR_PHOTO_STD))
    assert res[2].value == 0
    assert np.isnan(res[1].value)
    assert res[1].error.startswith("DomainError:")


def test_sweep_logs_failed_points(caplog):
    func = partial(conductance, psi_soil=-1.0, params=PAR_CONDUCTIVITY_STD)
    with caplog.at_level(logging.WARNING, logger="hydrostom.utils"):
        res = sweep(func, [1.0, -1.0])
    assert not res[1].ok
    assert any("failed" in record.message for record in caplog.records)


def test_sweep_with_executor_matches_serial():
    func = partial(conductance, psi_soil=-1.0, params=PAR_CONDUCTIVITY_STD)
    points = list(np.linspace(-1, 5, 13))
    serial = sweep(func, points)
    with ThreadPoolExecutor(max_workers=4) as executor:
        parallel = sweep(func, points, executor=executor)
    assert [r.inputs for r in parallel] == points
    assert [r.error for r in parallel] == [r.error for r in serial]
    np.testing.assert_allclose([r.value for r in parallel], [r.value for r in serial])


def test_sweep_mapping_points():
    res = sweep(assimilation, [dict(gs=1.0, vcmax=0.5, ca=400.0, photo=PAR_PHOTO_STD)])
    assert res[0].ok
    assert res[0].value > 0


def test_sweep_propagates_unexpected_errors():
    def broken(x):
        raise KeyError(x)
    with pytest.raises(KeyError):
        sweep(broken, [1.0])


def test_sweep_to_arrays():
    func = partial(conductance, psi_soil=-1.0, params=PAR_CONDUCTIVITY_STD)
    x, y = sweep_to_arrays(sweep(func, [0.0, 1.0, -1.0]))
    np.testing.assert_array_equal(x, [0.0, 1.0, -1.0])
    assert y[0] == 0
    assert y[1] > 0
    assert np.isnan(y[2])

    x, y = sweep_to_arrays([SweepPoint(inputs=(1, 2), value=3.0), SweepPoint(inputs=(4, 5), error="DomainError: x")])
    assert x.shape == (2, 2)
    assert np.isnan(y[1])


def test_array_like_wrapper():
    def f(a, b, c=1.0):
        return a*b + c
    g = array_like_wrapper(f, ["a", "b"])
    assert g(2.0, 3.0) == 7.0
    np.testing.assert_allclose(g([1.0, 2.0], 3.0), [4.0, 7.0])
    np.testing.assert_allclose(g([1.0, 2.0], np.array([3.0, 4.0]), c=0.0), [3.0, 8.0])
    with pytest.raises(ValueError):
        g([1.0, 2.0], [1.0, 2.0, 3.0])


def test_sweep_point_defaults():
    p = SweepPoint(inputs=(1.0,))
    assert np.isnan(p.value)
    assert p.ok
    assert issubclass(DomainError, ValueError)


def test_sweep_to_arrays_tuple_results_with_failures():
    def f(x):
        if x < 0:
            raise DomainError("negative")
        return (x, 2*x, 3*x)
    x, y = sweep_to_arrays(sweep(f, [-1.0, 1.0, 2.0]))
    np.testing.assert_array_equal(x, [-1.0, 1.0, 2.0])
    assert y.shape == (3, 3)
    assert np.all(np.isnan(y[0]))
    np.testing.assert_array_equal(y[1:], [[1.0, 2.0, 3.0], [2.0, 4.0, 6.0]])


def test_sweep_to_arrays_all_points_failed():
    x, y = sweep_to_arrays([SweepPoint(inputs=1.0, error="DomainError: x"), SweepPoint(inputs=2.0, error="DomainError: y")])
    assert y.shape == (2,)
    assert np.all(np.isnan(y))
