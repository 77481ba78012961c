import numpy as np
import pytest
from hydrostom.hydraulics import gs_star, transpiration
from hydrostom.optimisation import optimize_capacity, capacity_bounds
from hydrostom.params import EnvParams, PhotosynthParams
from hydrostom.photosynthesis import assimilation
from hydrostom.regulation import HydraulicRegulationModel
from hydrostom.soil import soil_water_potential
from hydrostom.utils import DomainError, grid_points, sweep, sweep_to_arrays


def test_calculate_composes_components():
    model = HydraulicRegulationModel()
    w_vol, vpd = 0.3, 1200.0
    psi_soil, gs, E, vcmax, A, prof = model.calculate(w_vol, vpd)

    assert psi_soil == pytest.approx(soil_water_potential(w_vol, model.Soil))
    gs_ref = model.gs_to_molar * gs_star(psi_soil, vpd, model.viscosity, model.dpsi_star, model.Plant.huber_value, model.Plant, model.Plant.conductivity)
    assert gs == pytest.approx(gs_ref)
    env = EnvParams(soil_potential=psi_soil, viscosity=model.viscosity, vpd=vpd)
    assert E == pytest.approx(transpiration(model.dpsi_star, psi_soil, model.Plant, env))
    assert (vcmax, prof) == pytest.approx(optimize_capacity(gs, model.ca, model.Cost, model.Photo, model.vcmax_guess))
    assert A == pytest.approx(assimilation(gs, vcmax, model.ca, model.Photo))


def test_default_model_acclimates_to_interior_capacity():
    model = HydraulicRegulationModel()
    _, gs, E, vcmax, A, prof = model.calculate(0.4, 1000.0)
    lo, hi = capacity_bounds(model.vcmax_guess)
    assert lo < vcmax < hi
    assert 0 < A < gs*model.ca
    assert prof > 0
    assert E > 0


def test_drier_soil_and_air_close_stomata():
    model = HydraulicRegulationModel()
    gs_theta = [model.calculate_gs_star(w, 1000.0) for w in [0.5, 0.4, 0.3, 0.2]]
    gs_vpd = [model.calculate_gs_star(0.4, d) for d in [500.0, 1000.0, 2000.0]]
    assert np.all(np.diff(gs_theta) < 0)
    assert np.all(np.diff(gs_vpd) < 0)


def test_calculate_vcmax_matches_calculate():
    model = HydraulicRegulationModel(dpsi_star=1.5, Photo=PhotosynthParams(kmm=70.8, gamma_star=4.33))
    assert model.calculate_vcmax(0.35, 800.0) == pytest.approx(model.calculate(0.35, 800.0)[3])


@pytest.mark.parametrize("w_vol, vpd", [(0.3, 0.0), (0.3, -100.0), (0.0, 1000.0)])
def test_calculate_rejects_degenerate_conditions(w_vol, vpd):
    with pytest.raises(DomainError):
        HydraulicRegulationModel().calculate(w_vol, vpd)


def test_sweep_over_model_flags_failed_points():
    model = HydraulicRegulationModel()
    res = sweep(model.calculate, grid_points([0.3, 0.4], [0.0, 1000.0]))
    assert [r.ok for r in res] == [False, True, False, True]
    assert len(res[1].value) == 6


def test_sweep_over_model_converts_to_arrays():
    model = HydraulicRegulationModel()
    x, out = sweep_to_arrays(sweep(model.calculate, grid_points([0.3], [0.0, 1000.0])))
    assert x.shape == (2, 2)
    assert out.shape == (2, 6)
    assert np.all(np.isnan(out[0]))
    np.testing.assert_allclose(out[1], model.calculate(0.3, 1000.0))
