"""
Soil water retention functions
"""

import numpy as np
from hydrostom.utils import DomainError, array_like_wrapper


def _soil_water_potential(w_vol, params):
    if not np.isfinite(w_vol) or w_vol <= 0:
        raise DomainError(f"Volumetric soil water content must be > 0, got {w_vol}")
    return params.psi_soil_sat*(params.w_vol_fc/w_vol)**params.b


def soil_water_potential(w_vol, params):
    """
    Parameters
    ----------
    w_vol: float or array_like
        Volumetric soil water content (m3 water m-3 soil), must be > 0

    params: SoilParams
        psi_soil_sat: soil water potential at the reference water content (MPa)
        w_vol_fc: reference (field capacity) volumetric soil water content (m3 water m-3 soil)
        b: empirical soil-water retention curve parameter (-)

    Returns
    -------
    Psi_s: soil water potential (MPa), <= 0. An ndarray when w_vol is array-like.

    References
    ----------
    Campbell (1974) A simple method for determining unsaturated conductivity from moisture retention data, Soil Science 117(6), p 311-314
    """
    return _vfunc(w_vol, params)


_vfunc = array_like_wrapper(_soil_water_potential, ["w_vol"])
