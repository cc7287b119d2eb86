"""Canonical variable names, units, and sign conventions.

SIGN CONVENTIONS:
- ess_power_w: Net ESS power. Positive = discharging, negative = charging
- ess_charge_power_w: Positive = charging (energy into battery)
- ess_discharge_power_w: Positive = discharging (energy from battery)
- grid_power_w: Net grid power. Positive = buying, negative = selling
- grid_buy_power_w: Positive = import from grid
- grid_sell_power_w: Positive = export to grid

UNITS:
- Power: W
- Stored energy: Wm (watt-minutes) inside the model, Wh in results
- Prices: currency per kWh
- Time: minutes per period

COUPLING EQUATIONS (per period):
ess_power = ess_discharge_power - ess_charge_power
grid_power = -ess_power
grid_power = grid_buy_power - grid_sell_power
energy[i] = energy[i-1] - ess_power[i] * minutes_per_period
"""

from fractions import Fraction

# Unit conversion
WATT_MINUTES_PER_WATT_HOUR = 60
MINUTES_PER_HOUR = 60
WATTS_PER_KILOWATT = 1000

# Exact coefficients for identity terms
ONE = Fraction(1)
MINUS_ONE = Fraction(-1)

# Variable name templates, formatted with the period name
VAR_ESS_POWER = "ESS_{}_Power"
VAR_ESS_CHARGE_POWER = "ESS_{}_Charge_Power"
VAR_ESS_DISCHARGE_POWER = "ESS_{}_Discharge_Power"
VAR_ESS_ENERGY = "ESS_{}_Energy"
VAR_GRID_POWER = "Grid_{}_Power"
VAR_GRID_BUY_POWER = "Grid_{}_Buy_Power"
VAR_GRID_SELL_POWER = "Grid_{}_Sell_Power"

# Equality name templates, formatted with the period name
EQ_ESS_CHARGE_DISCHARGE = "ESS_{}_ChargeDischargePower_Expr"
EQ_ESS_ENERGY_FIRST = "ESS_{}_Energy_Expr_1st"
EQ_ESS_ENERGY = "ESS_{}_Energy_Expr"
EQ_GRID_POWER = "Grid_{}_Power_Expr"
EQ_GRID_BUY_SELL = "Grid_{}_BuySellPower_Expr"

# Output columns
COL_PERIOD = "period"
COL_GRID_POWER_W = "grid_power_w"
COL_GRID_BUY_POWER_W = "grid_buy_power_w"
COL_GRID_SELL_POWER_W = "grid_sell_power_w"
COL_ESS_POWER_W = "ess_power_w"
COL_ESS_CHARGE_POWER_W = "ess_charge_power_w"
COL_ESS_DISCHARGE_POWER_W = "ess_discharge_power_w"
COL_ESS_ENERGY_WH = "ess_energy_wh"
COL_BUY_COST = "grid_buy_cost_per_kwh"
COL_SELL_REVENUE = "grid_sell_revenue_per_kwh"

OUTPUT_COLUMNS = [
    COL_GRID_POWER_W,
    COL_GRID_BUY_POWER_W,
    COL_GRID_SELL_POWER_W,
    COL_ESS_POWER_W,
    COL_ESS_CHARGE_POWER_W,
    COL_ESS_DISCHARGE_POWER_W,
    COL_ESS_ENERGY_WH,
]

# Relative tolerance for numerical comparisons on solved values
NUMERICAL_TOLERANCE = 1e-6

# Absolute slack (W or Wh) for solved values near zero
ABSOLUTE_TOLERANCE = 1e-3
