"""
Parameter records: Immutable parameter sets for the plant hydraulics, environment, photosynthesis, cost and soil components
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable
import numpy as np
from attrs import define, field
from hydrostom.utils import DomainError

logger = logging.getLogger(__name__)


def _finite(instance, attribute, value):
    if not np.isfinite(value):
        raise DomainError(f"{type(instance).__name__}.{attribute.name} must be finite, got {value}")

def _positive(instance, attribute, value):
    _finite(instance, attribute, value)
    if value <= 0:
        raise DomainError(f"{type(instance).__name__}.{attribute.name} must be > 0, got {value}")

def _non_negative(instance, attribute, value):
    _finite(instance, attribute, value)
    if value < 0:
        raise DomainError(f"{type(instance).__name__}.{attribute.name} must be >= 0, got {value}")

def _non_positive(instance, attribute, value):
    _finite(instance, attribute, value)
    if value > 0:
        raise DomainError(f"{type(instance).__name__}.{attribute.name} must be <= 0, got {value}")

def _non_zero(instance, attribute, value):
    _finite(instance, attribute, value)
    if value == 0:
        raise DomainError(f"{type(instance).__name__}.{attribute.name} must be non-zero, got {value}")


@define(frozen=True)
class ConductivityParams:
    """
    Xylem vulnerability curve parameters
    """
    psi50: float = field(default=-2.0, converter=float, validator=_non_zero)  ## Water potential at which conductivity drops to half its maximum (MPa)
    b: float = field(default=2.0, converter=float, validator=_positive)  ## Shape exponent of the vulnerability curve (-)


@define(frozen=True)
class PlantParams:
    """
    Plant hydraulic architecture parameters
    """
    base_conductivity: float = field(default=1e-12, converter=float, validator=_non_negative)  ## Maximum sapwood conductivity, Ks0 (m2)
    huber_value: float = field(default=1e-4, converter=float, validator=_non_negative)  ## Sapwood area to leaf area ratio (m2 m-2)
    height: float = field(default=10.0, converter=float, validator=_positive)  ## Plant height i.e. hydraulic path length (m)
    conductivity_scalar: float = field(default=1.0, converter=float, validator=_non_negative)  ## Dimensionless scalar on the sapwood conductivity (-)
    psi50: float = field(default=-2.0, converter=float, validator=_non_zero)  ## Water potential at which conductivity drops to half its maximum (MPa)
    b: float = field(default=2.0, converter=float, validator=_positive)  ## Shape exponent of the vulnerability curve (-)

    @property
    def conductivity(self) -> ConductivityParams:
        return ConductivityParams(psi50=self.psi50, b=self.b)


@define(frozen=True)
class EnvParams:
    """
    Environmental conditions
    """
    soil_potential: float = field(default=-0.5, converter=float, validator=_non_positive)  ## Soil water potential (MPa)
    viscosity: float = field(default=1e-3, converter=float, validator=_positive)  ## Dynamic viscosity of water (Pa s)
    vpd: float = field(default=1000.0, converter=float, validator=_non_negative)  ## Vapour pressure deficit (Pa)


@define(frozen=True)
class PhotosynthParams:
    """
    Photosynthetic constants that are derived externally from temperature, CO2 and elevation.

    Defaults are the P-model values at 20 degC and standard sea-level pressure (Bernacchi et al., 2001 temperature responses).
    """
    kmm: float = field(default=46.10, converter=float, validator=_positive)  ## Michaelis-Menten coefficient of Rubisco-limited assimilation (Pa)
    gamma_star: float = field(default=3.339, converter=float, validator=_positive)  ## Photorespiratory CO2 compensation point (Pa)

    @classmethod
    def from_provider(cls, provider: Callable[..., Any], tc, vpd, co2, elevation, fapar=1.0, kphio=0.087182, beta=146.0):
        """
        Obtain kmm and gamma_star from an external photosynthesis parameterisation (e.g. a P-model implementation).

        Parameters
        ----------
        provider: Callable
            Called as provider(tc=..., vpd=..., co2=..., elevation=..., fapar=..., kphio=..., beta=...). It must
            return a mapping or an object carrying "kmm" and "gammastar" (or "gamma_star").
        tc: float
            Air temperature (degrees Celsius)
        vpd: float
            Vapour pressure deficit (Pa)
        co2: float
            Atmospheric CO2 concentration (ppm)
        elevation: float
            Site elevation (m a.s.l.)
        fapar: float
            Fraction of absorbed photosynthetically active radiation (-)
        kphio: float
            Apparent quantum yield efficiency (-)
        beta: float
            Unit cost ratio of carboxylation to transpiration (-)

        Returns
        -------
        PhotosynthParams
        """
        out = provider(tc=tc, vpd=vpd, co2=co2, elevation=elevation, fapar=fapar, kphio=kphio, beta=beta)
        kmm = _lookup(out, "kmm")
        gamma_star = _lookup(out, "gammastar", "gamma_star")
        logger.debug("Photosynthetic constants from provider: kmm=%s, gamma_star=%s", kmm, gamma_star)
        return cls(kmm=kmm, gamma_star=gamma_star)


def _lookup(out, *names):
    for name in names:
        if isinstance(out, Mapping):
            if name in out:
                return out[name]
        elif hasattr(out, name):
            return getattr(out, name)
    raise DomainError(f"Photosynthesis parameter provider returned no value for any of {names}")


@define(frozen=True)
class CostParams:
    """
    Carbon cost of photosynthetic capacity
    """
    b: float = field(default=0.1, converter=float, validator=_positive)  ## Marginal construction and maintenance cost per unit Vcmax (units of A per unit Vcmax)


@define(frozen=True)
class SoilParams:
    """
    Soil water retention curve parameters
    """
    psi_soil_sat: float = field(default=-0.05, converter=float, validator=_non_positive)  ## Soil water potential at the reference water content (MPa)
    w_vol_fc: float = field(default=0.5, converter=float, validator=_positive)  ## Reference (field capacity) volumetric soil water content (m3 water m-3 soil)
    b: float = field(default=5.0, converter=float, validator=_positive)  ## Empirical soil-water retention curve exponent (-)


## Standard parameter sets
PAR_CONDUCTIVITY_STD = ConductivityParams()
PAR_PLANT_STD = PlantParams()
PAR_ENV_STD = EnvParams()
PAR_PHOTO_STD = PhotosynthParams()
PAR_COST_STD = CostParams()
PAR_SOIL_STD = SoilParams()
