"""
Leaf photosynthesis functions: Rubisco-limited net assimilation coupled to a stomatal CO2 supply
"""

import numpy as np
from hydrostom.biophysics_funcs import quad_roots
from hydrostom.utils import DomainError, NumericalError


def _check_inputs(gs, vcmax, ca):
    if not (np.isfinite(gs) and np.isfinite(vcmax) and np.isfinite(ca)):
        raise DomainError(f"gs, vcmax and ca must be finite, got gs={gs}, vcmax={vcmax}, ca={ca}")
    if gs < 0:
        raise DomainError(f"Stomatal conductance must be >= 0, got {gs}")
    if vcmax < 0:
        raise DomainError(f"Vcmax must be >= 0, got {vcmax}")
    if ca <= 0:
        raise DomainError(f"Ambient CO2 must be > 0, got {ca}")


def assimilation_demand(ci, vcmax, photo):
    """Rubisco-limited (demand) assimilation rate at a given internal CO2, vcmax*(ci - gamma_star)/(ci + kmm)"""
    return vcmax*(ci - photo.gamma_star)/(ci + photo.kmm)


def solve_ci(gs, vcmax, ca, photo):
    """
    Internal CO2 concentration at which CO2 supply through the stomata balances Rubisco demand.

    Parameters
    ----------
    gs: float
        Stomatal conductance to CO2, must be > 0

    vcmax: float
        Maximum Rubisco carboxylation capacity, >= 0

    ca: float
        Ambient CO2, > 0, in the same units as kmm and gamma_star

    photo: PhotosynthParams
        kmm and gamma_star

    Returns
    -------
    ci: internal CO2 concentration

    Notes
    -----
    Equating supply A = gs*(ca - ci) with demand A = vcmax*(ci - gamma_star)/(ci + kmm) gives

        -gs*ci^2 + (gs*ca - gs*kmm - vcmax)*ci + (gs*ca*kmm + vcmax*gamma_star) = 0

    Since a < 0 and c > 0 the roots have opposite signs and the positive root is the physical one.
    It corresponds to the minus branch (-b - sqrt(D))/(2a) of the standard formula, computed in a form
    that stays bounded as gs -> 0.
    """
    if gs <= 0:
        raise DomainError(f"solve_ci requires gs > 0, got {gs}")

    a = -gs
    b = gs*ca - gs*photo.kmm - vcmax
    c = gs*ca*photo.kmm + vcmax*photo.gamma_star

    roots = [r for r in quad_roots(a, b, c) if np.isfinite(r) and r > 0]
    if not roots:
        raise NumericalError(f"No physical root for ci (gs={gs}, vcmax={vcmax}, ca={ca})")
    return max(roots)


def assimilation(gs, vcmax, ca, photo):
    """
    Net Rubisco-limited assimilation given stomatal conductance and photosynthetic capacity.

    Parameters
    ----------
    gs: float
        Stomatal conductance to CO2, >= 0

    vcmax: float
        Maximum Rubisco carboxylation capacity, >= 0

    ca: float
        Ambient CO2, > 0, in the same units as kmm and gamma_star

    photo: PhotosynthParams
        kmm and gamma_star

    Returns
    -------
    A: net assimilation rate, in units of gs*ca

    Notes
    -----
    With closed stomata (gs=0) there is no gas exchange and A=0; this is handled before the quadratic,
    which would otherwise degenerate to a linear equation.

    References
    ----------
    Farquhar et al. (1980) doi:10.1007/BF00386231
    """
    _check_inputs(gs, vcmax, ca)
    if gs == 0:
        return 0.0
    ci = solve_ci(gs, vcmax, ca, photo)
    return gs*(ca - ci)
