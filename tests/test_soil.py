import numpy as np
import pytest
from hydrostom.params import SoilParams, PAR_SOIL_STD
from hydrostom.soil import soil_water_potential
from hydrostom.utils import DomainError


def test_soil_water_potential_at_reference_content():
    assert soil_water_potential(PAR_SOIL_STD.w_vol_fc, PAR_SOIL_STD) == pytest.approx(PAR_SOIL_STD.psi_soil_sat)


def test_soil_water_potential_power_law():
    p = SoilParams(psi_soil_sat=-0.01, w_vol_fc=0.3, b=4.0)
    assert soil_water_potential(0.15, p) == pytest.approx(-0.01 * 2.0**4)


def test_soil_water_potential_array():
    w_vol = np.linspace(0.1, 0.5, 9)
    psi = soil_water_potential(w_vol, PAR_SOIL_STD)
    assert isinstance(psi, np.ndarray)
    assert psi.shape == w_vol.shape
    assert np.all(psi <= 0)
    # drier soil, more negative potential
    assert np.all(np.diff(psi) > 0)
    assert psi[3] == pytest.approx(soil_water_potential(w_vol[3], PAR_SOIL_STD))


@pytest.mark.parametrize("w_vol", [0.0, -0.1, np.nan])
def test_soil_water_potential_rejects_non_positive_content(w_vol):
    with pytest.raises(DomainError):
        soil_water_potential(w_vol, PAR_SOIL_STD)


def test_soil_water_potential_rejects_zero_in_array():
    with pytest.raises(DomainError):
        soil_water_potential([0.3, 0.0], PAR_SOIL_STD)
