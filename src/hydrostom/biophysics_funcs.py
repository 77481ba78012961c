"""
Biophysics helper functions used across more than one hydrostom module
"""

import numpy as np
from hydrostom.utils import DomainError, NumericalError


def conductivity(psi, params):
    """
    Relative xylem conductivity as a function of water potential.

    Parameters
    ----------
    psi: float
        Water potential (MPa)

    params: ConductivityParams or PlantParams
        Any record carrying psi50 (MPa, non-zero) and b (-, positive)

    Returns
    -------
    Relative conductivity (-), in (0,1]. Equals 1 at psi=0 and 0.5 at psi=psi50.

    Notes
    -----
    k/kmax = 0.5**((psi/psi50)**b). For positive potentials the curve is mirrored, i.e. |psi/psi50| is
    used, which only differs from the plain power for non-integer b.

    References
    ----------
    Neufeld et al. (1992) doi:10.1104/pp.100.2.1020 (Weibull form of the vulnerability curve)
    """
    if params.psi50 == 0:
        raise DomainError("psi50 must be non-zero")
    return 0.5**(np.abs(psi/params.psi50)**params.b)


def quad_roots(a, b, c):
    """
    Returns the two roots of the quadratic equation ax^2 + bx + c = 0 using the numerically stable form.

    With q = -0.5*(b + sign(b)*sqrt(b^2 - 4ac)) the roots are q/a and c/q. The root q/a is the
    "minus" branch (-b - sqrt(D))/(2a) when b >= 0, and c/q is its algebraic equivalent when b < 0, so
    neither root suffers cancellation when a or c is small.

    Raises NumericalError for imaginary roots. A degenerate (linear) equation returns its single root twice.
    """
    discriminant = b**2 - 4*a*c
    if discriminant < 0:
        raise NumericalError(f"Imaginary roots in quadratic (a={a}, b={b}, c={c}, discriminant={discriminant})")

    if a == 0:
        if b == 0:
            raise NumericalError("Degenerate quadratic with a=b=0 has no root")
        return (-c/b, -c/b)

    q = -0.5*(b + np.copysign(np.sqrt(discriminant), b))
    if q == 0:
        # b == 0 and c == 0, double root at zero
        return (0.0, 0.0)
    return (q/a, c/q)
