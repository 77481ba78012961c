"""
Optimal photosynthetic capacity: Includes the carbon profit of Vcmax and its bounded maximisation
"""

import logging
from functools import partial
from typing import Tuple
import numpy as np
from scipy.optimize import minimize_scalar
from hydrostom.photosynthesis import assimilation
from hydrostom.utils import DomainError, NumericalError

logger = logging.getLogger(__name__)

BOUND_FACTOR = 1e5  ## search interval spans initial_guess/BOUND_FACTOR to initial_guess*BOUND_FACTOR


def profit(vcmax, gs, ca, cost, photo):
    """
    Net carbon profit of photosynthetic capacity: assimilation gain minus a linear construction and maintenance cost.

    Parameters
    ----------
    vcmax: float
        Maximum Rubisco carboxylation capacity, >= 0

    gs: float
        Stomatal conductance to CO2, >= 0

    ca: float
        Ambient CO2, > 0

    cost: CostParams
        b: marginal cost per unit vcmax

    photo: PhotosynthParams
        kmm and gamma_star

    Returns
    -------
    A(gs, vcmax) - b*vcmax
    """
    return assimilation(gs, vcmax, ca, photo) - cost.b*vcmax


def capacity_bounds(initial_guess) -> Tuple[float, float]:
    """Search interval for Vcmax around an initial guess"""
    if not np.isfinite(initial_guess) or initial_guess <= 0:
        raise DomainError(f"initial_guess must be > 0, got {initial_guess}")
    return initial_guess/BOUND_FACTOR, initial_guess*BOUND_FACTOR


def optimize_capacity(gs_star, ca, cost, photo, initial_guess, maxiter=100, xatol=1e-8):
    """
    Photosynthetic capacity that maximises net carbon profit for a given (regulated) stomatal conductance.

    Parameters
    ----------
    gs_star: float
        Stomatal conductance to CO2, >= 0

    ca: float
        Ambient CO2, > 0

    cost: CostParams
        b: marginal cost per unit vcmax

    photo: PhotosynthParams
        kmm and gamma_star

    initial_guess: float
        Initial estimate of Vcmax, > 0. Sets the search interval [1e-5*initial_guess, 1e5*initial_guess].

    maxiter: int
        Iteration cap of the bounded optimiser

    xatol: float
        Absolute tolerance on log(vcmax)

    Returns
    -------
    vcmax_opt: float
        Argmax of the profit within the search interval

    profit_opt: float
        Profit at vcmax_opt

    Notes
    -----
    Profit is concave in vcmax (a saturating assimilation gain minus a linear cost), so a bounded Brent
    search is sufficient. The search runs on log(vcmax) to resolve the wide interval evenly. Brent's
    method never evaluates the interval ends, so the interior optimum is compared against both bounds.

    With gs_star=0 assimilation is zero for any vcmax and profit decreases strictly, so the lower bound is
    returned directly.
    """
    if not np.isfinite(gs_star) or gs_star < 0:
        raise DomainError(f"gs_star must be >= 0, got {gs_star}")
    if ca <= 0:
        raise DomainError(f"Ambient CO2 must be > 0, got {ca}")
    vcmax_lo, vcmax_hi = capacity_bounds(initial_guess)

    _profit = partial(profit, gs=gs_star, ca=ca, cost=cost, photo=photo)

    if gs_star == 0:
        logger.debug("gs_star=0, returning lower capacity bound %s", vcmax_lo)
        return vcmax_lo, _profit(vcmax_lo)

    def neg_profit_log(x):
        return -_profit(np.exp(x))

    res = minimize_scalar(
        neg_profit_log,
        bounds=(np.log(vcmax_lo), np.log(vcmax_hi)),
        method="bounded",
        options={"maxiter": maxiter, "xatol": xatol},
    )
    if not res.success:
        raise NumericalError(f"Capacity optimisation did not converge (gs_star={gs_star}, ca={ca}): {res.message}")

    candidates = [(float(np.exp(res.x)), -float(res.fun)), (vcmax_lo, _profit(vcmax_lo)), (vcmax_hi, _profit(vcmax_hi))]
    vcmax_opt, profit_opt = max(candidates, key=lambda vp: vp[1])
    logger.debug("Capacity optimisation converged after %d evaluations: vcmax_opt=%s, profit=%s", res.nfev, vcmax_opt, profit_opt)
    return vcmax_opt, profit_opt
