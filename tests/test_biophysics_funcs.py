from types import SimpleNamespace
import numpy as np
import pytest
from hydrostom.biophysics_funcs import conductivity, quad_roots
from hydrostom.params import ConductivityParams, PAR_CONDUCTIVITY_STD
from hydrostom.utils import DomainError, NumericalError


@pytest.mark.parametrize("psi50, b", [(-2.0, 2.0), (-1.0, 1.0), (-4.5, 3.3), (-0.3, 8.0)])
def test_conductivity_half_at_psi50_and_one_at_zero(psi50, b):
    p = ConductivityParams(psi50=psi50, b=b)
    assert conductivity(psi50, p) == pytest.approx(0.5, abs=1e-12)
    assert conductivity(0.0, p) == 1


def test_conductivity_non_increasing_with_drought():
    psi = np.linspace(0, -10, 101)
    k = conductivity(psi, PAR_CONDUCTIVITY_STD)
    assert np.all(np.diff(k) <= 0)
    assert np.all((k > 0) & (k <= 1))


def test_conductivity_rejects_zero_psi50():
    with pytest.raises(DomainError):
        conductivity(-1.0, SimpleNamespace(psi50=0.0, b=2.0))


def test_quad_roots():
    # x^2 - 3x + 2 = (x-1)(x-2)
    assert sorted(quad_roots(1.0, -3.0, 2.0)) == pytest.approx([1.0, 2.0])
    # -x^2 + 4 = 0
    assert sorted(quad_roots(-1.0, 0.0, 4.0)) == pytest.approx([-2.0, 2.0])
    # linear 2x - 4 = 0
    assert quad_roots(0.0, 2.0, -4.0) == (2.0, 2.0)


def test_quad_roots_small_leading_coefficient_is_stable():
    # roots of 1e-12 x^2 - x + 1 = 0 are ~1 and ~1e12; the naive formula loses the small root
    roots = sorted(quad_roots(1e-12, -1.0, 1.0))
    assert roots[0] == pytest.approx(1.0, rel=1e-9)
    assert roots[1] == pytest.approx(1e12, rel=1e-9)


def test_quad_roots_imaginary():
    with pytest.raises(NumericalError):
        quad_roots(1.0, 0.0, 1.0)
