# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.16.7
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %%
import logging
from functools import partial
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from attrs import evolve

# %%
from hydrostom.params import PAR_PLANT_STD, PAR_CONDUCTIVITY_STD, PAR_ENV_STD, PAR_PHOTO_STD, PAR_COST_STD, PAR_SOIL_STD
from hydrostom.biophysics_funcs import conductivity
from hydrostom.hydraulics import conductance, transpiration, gs_star
from hydrostom.soil import soil_water_potential
from hydrostom.photosynthesis import assimilation, assimilation_demand
from hydrostom.optimisation import optimize_capacity, profit, capacity_bounds
from hydrostom.regulation import HydraulicRegulationModel
from hydrostom.utils import sweep, grid_points, sweep_to_arrays

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# %% [markdown]
# ## Xylem vulnerability curve
#
# Relative conductivity declines with water potential as
#
# $k/k_{max} = 0.5^{(\Psi/\Psi_{50})^b}$
#
# so that conductivity is halved at $\Psi_{50}$ and $b$ sets the steepness of the decline.

# %%
_psi = np.linspace(0, -6, 200)

fig, axes = plt.subplots(1,2,figsize=(9,3))

for psi50 in [-1.0, -2.0, -4.0]:
    p = evolve(PAR_CONDUCTIVITY_STD, psi50=psi50)
    axes[0].plot(_psi, conductivity(_psi, p), label=r"$\rm \Psi_{50}=%.1f$" % psi50)
axes[0].set_xlabel(r"$\rm \Psi$ (MPa)")
axes[0].set_ylabel(r"$\rm k/k_{max}$ (-)")
axes[0].legend(handlelength=0.75)

for b in [1.0, 2.0, 5.0]:
    p = evolve(PAR_CONDUCTIVITY_STD, b=b)
    axes[1].plot(_psi, conductivity(_psi, p), label=r"$\rm b=%.0f$" % b)
axes[1].set_xlabel(r"$\rm \Psi$ (MPa)")
axes[1].legend(handlelength=0.75)

plt.tight_layout()

# %% [markdown]
# ## Conductance integral and transpiration
#
# Steady-state transpiration follows from integrating the conductivity over the water potential drop from the soil to the leaf:
#
# $E = \frac{K_{s0} v_{huber}}{h \eta} \int_{\Psi_s - \Delta\Psi}^{\Psi_s} k(\Psi)/k_{max} \, d\Psi$

# %%
_dpsi = np.linspace(0, 5, 50)

fig, axes = plt.subplots(1,2,figsize=(9,3))

for psi_soil in [0.0, -0.5, -1.0, -2.0]:
    res = sweep(partial(conductance, psi_soil=psi_soil, params=PAR_CONDUCTIVITY_STD), _dpsi)
    x, y = sweep_to_arrays(res)
    axes[0].plot(x, y, label=r"$\rm \Psi_s=%.1f$" % psi_soil)

    res = sweep(partial(transpiration, psi_soil=psi_soil, plant=PAR_PLANT_STD, env=PAR_ENV_STD), _dpsi)
    x, y = sweep_to_arrays(res)
    axes[1].plot(x, y*1e3*3600, label=r"$\rm \Psi_s=%.1f$" % psi_soil)

axes[0].set_xlabel(r"$\rm \Delta \Psi$ (MPa)")
axes[0].set_ylabel("Conductance integral (MPa)")
axes[0].legend(handlelength=0.75)
axes[1].set_xlabel(r"$\rm \Delta \Psi$ (MPa)")
axes[1].set_ylabel(r"E (mm h$^{-1}$)")

plt.tight_layout()

# %% [markdown]
# ## Soil water potential

# %%
_w_vol = np.linspace(0.1, 0.5, 100)

fig, ax = plt.subplots(1,1,figsize=(4.5,3))
ax.plot(_w_vol, soil_water_potential(_w_vol, PAR_SOIL_STD))
ax.set_xlabel(r"$\rm \theta$ (m$^3$ m$^{-3}$)")
ax.set_ylabel(r"$\rm \Psi_s$ (MPa)")
plt.tight_layout()

# %% [markdown]
# ## Stomatal regulation
#
# Holding the soil-to-leaf water potential drop at the set point $\Delta\Psi^*$ defines the stomatal conductance
#
# $g_s^* = \frac{K_{s0} v_{huber}}{1.6 h \eta D} \int_{\Psi_s - \Delta\Psi^*}^{\Psi_s} k(\Psi)/k_{max} \, d\Psi$
#
# A VPD of zero has no finite solution; the sweep records that point as failed rather than aborting.

# %%
def gs_star_theta_vpd(w_vol, vpd, dpsi_star=1.0):
    psi_soil = soil_water_potential(w_vol, PAR_SOIL_STD)
    return gs_star(psi_soil, vpd, PAR_ENV_STD.viscosity, dpsi_star, PAR_PLANT_STD.huber_value, PAR_PLANT_STD, PAR_PLANT_STD.conductivity)

_vpd = [0.0, 500.0, 1000.0, 2000.0]
res = sweep(gs_star_theta_vpd, grid_points(_w_vol, _vpd))
df = pd.DataFrame({"w_vol": [r.inputs[0] for r in res], "vpd": [r.inputs[1] for r in res],
                   "gs_star": [r.value for r in res], "error": [r.error for r in res]})
print(df[~df["error"].isna()].head())

fig, ax = plt.subplots(1,1,figsize=(4.5,3))
for vpd, dfv in df.groupby("vpd"):
    if dfv["gs_star"].notna().any():
        ax.plot(dfv["w_vol"], dfv["gs_star"], label="D=%d Pa" % vpd)
ax.set_xlabel(r"$\rm \theta$ (m$^3$ m$^{-3}$)")
ax.set_ylabel(r"$\rm g_s^*$")
ax.legend(handlelength=0.75)
plt.tight_layout()

# %% [markdown]
# ## Assimilation
#
# Net assimilation is the intersection of the stomatal supply $A = g_s (c_a - c_i)$ and the Rubisco demand $A = V_{cmax} (c_i - \Gamma^*)/(c_i + K)$.
# As $g_s \rightarrow \infty$ it approaches the demand-limited rate at $c_i = c_a$.

# %%
ca = 40.53  # Pa
_gs = np.logspace(-8, -4, 100)
_vcmax = [20e-6, 50e-6, 100e-6]

fig, ax = plt.subplots(1,1,figsize=(4.5,3))
for vcmax in _vcmax:
    res = sweep(partial(assimilation, vcmax=vcmax, ca=ca, photo=PAR_PHOTO_STD), _gs)
    x, y = sweep_to_arrays(res)
    l, = ax.plot(x, y*1e6, label=r"$\rm V_{cmax}=%d$" % (vcmax*1e6))
    ax.axhline(assimilation_demand(ca, vcmax, PAR_PHOTO_STD)*1e6, color=l.get_color(), linestyle=":")
ax.set_xscale("log")
ax.set_xlabel(r"$\rm g_s$ (mol m$^{-2}$ s$^{-1}$ Pa$^{-1}$)")
ax.set_ylabel(r"A ($\rm \mu$mol m$^{-2}$ s$^{-1}$)")
ax.legend(handlelength=0.75)
plt.tight_layout()

# %% [markdown]
# ## Acclimated photosynthetic capacity
#
# Photosynthetic capacity maximises the net profit $A(g_s^*, V_{cmax}) - b V_{cmax}$.

# %%
gs = 3e-7
vcmax_guess = 50e-6
vcmax_opt, profit_opt = optimize_capacity(gs, ca, PAR_COST_STD, PAR_PHOTO_STD, vcmax_guess)

_v = np.logspace(np.log10(1e-6), np.log10(2e-4), 200)
fig, ax = plt.subplots(1,1,figsize=(4.5,3))
ax.plot(_v*1e6, [profit(v, gs, ca, PAR_COST_STD, PAR_PHOTO_STD)*1e6 for v in _v])
ax.scatter(vcmax_opt*1e6, profit_opt*1e6, color="k", zorder=3)
ax.set_xlabel(r"$\rm V_{cmax}$ ($\rm \mu$mol m$^{-2}$ s$^{-1}$)")
ax.set_ylabel(r"Profit ($\rm \mu$mol m$^{-2}$ s$^{-1}$)")
plt.tight_layout()

print("Search interval:", capacity_bounds(vcmax_guess))
print("vcmax_opt =", vcmax_opt*1e6, "umol m-2 s-1; profit =", profit_opt*1e6)

# %% [markdown]
# ## Coupled model: response to soil drying and VPD

# %%
model = HydraulicRegulationModel()

_w_vol = np.linspace(0.15, 0.5, 30)
_vpd = [500.0, 1000.0, 2000.0]

fig, axes = plt.subplots(1,3,figsize=(12,3))
for vpd in _vpd:
    res = sweep(model.calculate, grid_points(_w_vol, [vpd]))
    _, out = sweep_to_arrays(res)
    psi_soil, gs, E, vcmax, A, prof = out.T
    axes[0].plot(_w_vol, gs, label="D=%d Pa" % vpd)
    axes[1].plot(_w_vol, vcmax*1e6)
    axes[2].plot(_w_vol, A*1e6)

axes[0].set_ylabel(r"$\rm g_s^*$ (mol m$^{-2}$ s$^{-1}$ Pa$^{-1}$)")
axes[1].set_ylabel(r"$\rm V_{cmax}$ ($\rm \mu$mol m$^{-2}$ s$^{-1}$)")
axes[2].set_ylabel(r"A ($\rm \mu$mol m$^{-2}$ s$^{-1}$)")
for ax in axes:
    ax.set_xlabel(r"$\rm \theta$ (m$^3$ m$^{-3}$)")
axes[0].legend(handlelength=0.75)
plt.tight_layout()

# %%
