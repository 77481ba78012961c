"""
Hydraulic regulation model class: Couples soil water, plant hydraulics, stomatal regulation and acclimated photosynthetic capacity
"""

import logging
from typing import Tuple
from attrs import define, field
from hydrostom.params import PlantParams, SoilParams, PhotosynthParams, CostParams, EnvParams
from hydrostom.params import PAR_PLANT_STD, PAR_SOIL_STD, PAR_PHOTO_STD, PAR_COST_STD
from hydrostom.soil import soil_water_potential
from hydrostom.hydraulics import gs_star, transpiration, MPA_TO_PA
from hydrostom.optimisation import optimize_capacity
from hydrostom.photosynthesis import assimilation

logger = logging.getLogger(__name__)

MOLAR_DENSITY_WATER = 55.5e3  ## mol m-3

@define
class HydraulicRegulationModel:
    """
    Calculator of isohydric stomatal regulation and the photosynthetic capacity acclimated to it
    """

    ## Parameter sets
    Plant: PlantParams = field(default=PAR_PLANT_STD)    ## Plant hydraulic parameters. Optional, defaults to the standard plant.
    Soil: SoilParams = field(default=PAR_SOIL_STD)    ## Soil water retention parameters. Optional, defaults to the standard soil.
    Photo: PhotosynthParams = field(default=PAR_PHOTO_STD)    ## Photosynthetic constants kmm and gamma_star. Optional, use PhotosynthParams.from_provider to derive site-specific values.
    Cost: CostParams = field(default=PAR_COST_STD)    ## Carbon cost of photosynthetic capacity

    ## Class parameters
    viscosity: float = field(default=1e-3)    ## Dynamic viscosity of water (Pa s)
    ca: float = field(default=40.53)    ## Ambient CO2 partial pressure (Pa), i.e. 400 ppm at sea-level pressure; must use the same units as kmm and gamma_star
    dpsi_star: float = field(default=1.0)    ## Isohydric set point, the regulated soil-to-leaf water potential difference (MPa)
    gs_to_molar: float = field(default=MPA_TO_PA*MOLAR_DENSITY_WATER)    ## Converts gs* (m s-1 Pa-1 with the conductance integral in MPa) to a molar conductance (mol m-2 s-1 Pa-1) consistent with ca in Pa
    vcmax_guess: float = field(default=50e-6)    ## Initial estimate of Vcmax (mol m-2 s-1), centres the capacity search interval

    def calculate(
        self,
        w_vol,    ## volumetric soil water content (m3 m-3)
        vpd,      ## vapour pressure deficit (Pa)
    ) -> Tuple[float, ...]:
        """
        Regulated gas exchange and acclimated photosynthetic capacity for one soil moisture and VPD state.

        Returns
        -------
        psi_soil: soil water potential (MPa)
        gs: regulated stomatal conductance (mol m-2 s-1 Pa-1)
        E: transpiration supplied at the set point (m3 m-2 s-1)
        vcmax_opt: acclimated Vcmax (mol m-2 s-1)
        A: net assimilation at gs and vcmax_opt (mol m-2 s-1)
        profit_opt: A - b*vcmax_opt (mol m-2 s-1)
        """

        ## Soil water potential
        psi_soil = soil_water_potential(w_vol, self.Soil)

        env = EnvParams(soil_potential=psi_soil, viscosity=self.viscosity, vpd=vpd)

        ## Stomatal conductance that holds the water potential drop at the set point
        gs = self.gs_to_molar * gs_star(env.soil_potential, env.vpd, env.viscosity, self.dpsi_star, self.Plant.huber_value, self.Plant, self.Plant.conductivity)

        ## Transpiration supplied at the set point
        E = transpiration(self.dpsi_star, env.soil_potential, self.Plant, env)

        ## Photosynthetic capacity acclimated to the regulated conductance
        vcmax_opt, profit_opt = optimize_capacity(gs, self.ca, self.Cost, self.Photo, self.vcmax_guess)

        A = assimilation(gs, vcmax_opt, self.ca, self.Photo)

        logger.debug("w_vol=%s vpd=%s -> psi_soil=%s gs*=%s E=%s vcmax=%s A=%s", w_vol, vpd, psi_soil, gs, E, vcmax_opt, A)

        return (psi_soil, gs, E, vcmax_opt, A, profit_opt)

    def calculate_gs_star(self, w_vol, vpd):
        """Regulated stomatal conductance (mol m-2 s-1 Pa-1) for a soil water content and vapour pressure deficit"""
        psi_soil = soil_water_potential(w_vol, self.Soil)
        return self.gs_to_molar * gs_star(psi_soil, vpd, self.viscosity, self.dpsi_star, self.Plant.huber_value, self.Plant, self.Plant.conductivity)

    def calculate_vcmax(self, w_vol, vpd):
        """Acclimated Vcmax for a soil water content and vapour pressure deficit"""
        gs = self.calculate_gs_star(w_vol, vpd)
        vcmax_opt, _ = optimize_capacity(gs, self.ca, self.Cost, self.Photo, self.vcmax_guess)
        return vcmax_opt
