"""
Plant hydraulics functions: Includes the soil-to-leaf conductance integral, transpiration supply and the stomatal regulation set point
"""

import numpy as np
from scipy.integrate import quad
from hydrostom.biophysics_funcs import conductivity
from hydrostom.utils import DomainError, NumericalError

MPA_TO_PA = 1e6  ## unit conversion of the conductance integral (MPa) to SI (Pa)


def conductance(dpsi, psi_soil, params):
    """
    Integral of the relative conductivity over the soil-to-leaf water potential drop.

    Parameters
    ----------
    dpsi: float
        Soil-to-leaf water potential difference (MPa), must be >= 0

    psi_soil: float
        Soil water potential (MPa)

    params: ConductivityParams or PlantParams
        Any record carrying psi50 (MPa) and b (-)

    Returns
    -------
    Integrated relative conductivity (MPa), >= 0

    Notes
    -----
    Transport proceeds from psi_soil towards the more negative leaf potential psi_soil - dpsi, so the raw
    integral from psi_soil to psi_soil - dpsi is negative. The returned value is its negation, i.e. the
    integral from psi_soil - dpsi up to psi_soil. The interval may span zero.

    References
    ----------
    Sperry et al. (2017) doi:10.1111/pce.12852 (steady-state transpiration via the Kirchhoff transform)
    """
    if not np.isfinite(dpsi) or not np.isfinite(psi_soil):
        raise DomainError(f"dpsi and psi_soil must be finite, got dpsi={dpsi}, psi_soil={psi_soil}")
    if dpsi < 0:
        raise DomainError(f"dpsi must be >= 0, got {dpsi}")
    if params.psi50 == 0:
        raise DomainError("psi50 must be non-zero")
    if dpsi == 0:
        return 0.0

    result = quad(conductivity, psi_soil - dpsi, psi_soil, args=(params,), full_output=1)
    if len(result) > 3:
        # quad appends a warning message when the integration did not converge
        raise NumericalError(f"Conductance integral did not converge for dpsi={dpsi}, psi_soil={psi_soil}: {result[3]}")
    return result[0]


def transpiration(dpsi, psi_soil, plant, env):
    """
    Transpiration supplied by the xylem for a given soil-to-leaf water potential drop.

    Parameters
    ----------
    dpsi: float
        Soil-to-leaf water potential difference (MPa)

    psi_soil: float
        Soil water potential (MPa)

    plant: PlantParams
        Plant hydraulic parameters

    env: EnvParams
        Environmental conditions, only the viscosity of water is used here

    Returns
    -------
    Transpiration (m3 m-2 s-1), volumetric flux per leaf area

    Notes
    -----
    Darcy's law along a path of length height with a leaf-area specific sapwood conductivity
    conductivity_scalar * base_conductivity * huber_value.
    """
    if env.viscosity <= 0:
        raise DomainError(f"viscosity must be > 0, got {env.viscosity}")
    K_l = plant.conductivity_scalar * plant.base_conductivity * plant.huber_value    ## leaf-area specific sapwood conductivity (m2)
    return K_l / plant.height / env.viscosity * MPA_TO_PA * conductance(dpsi, psi_soil, plant)


def gs_star(psi_soil, vpd, viscosity, dpsi_star, huber_value, conductance_params, conductivity_params):
    """
    Regulated stomatal conductance that holds the soil-to-leaf water potential drop at dpsi_star.

    Parameters
    ----------
    psi_soil: float
        Soil water potential (MPa)

    vpd: float
        Vapour pressure deficit, must be > 0

    viscosity: float
        Dynamic viscosity of water (Pa s), must be > 0

    dpsi_star: float
        Target soil-to-leaf water potential difference, the isohydricity set point (MPa), >= 0

    huber_value: float
        Sapwood area to leaf area ratio (m2 m-2)

    conductance_params: PlantParams
        Any record carrying base_conductivity (m2) and height (m)

    conductivity_params: ConductivityParams or PlantParams
        Any record carrying psi50 (MPa) and b (-)

    Returns
    -------
    gs*: stomatal conductance to water vapour that balances supply and demand at dpsi_star

    Notes
    -----
    Setting transpiration demand 1.6 * gs * vpd equal to the xylem supply at dpsi_star and solving for gs.
    A zero vpd would give an infinite conductance, so it is rejected as a domain error.
    """
    if not np.isfinite(vpd) or vpd <= 0:
        raise DomainError(f"vpd must be finite and > 0 to regulate stomatal conductance, got {vpd}")
    if not np.isfinite(viscosity) or viscosity <= 0:
        raise DomainError(f"viscosity must be finite and > 0, got {viscosity}")
    if not np.isfinite(huber_value) or huber_value < 0:
        raise DomainError(f"huber_value must be finite and >= 0, got {huber_value}")
    if conductance_params.height <= 0:
        raise DomainError(f"height must be > 0, got {conductance_params.height}")
    return (huber_value * conductance_params.base_conductivity) / (1.6 * conductance_params.height * viscosity * vpd) \
        * conductance(dpsi_star, psi_soil, conductivity_params)
