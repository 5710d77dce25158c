"""
Bucket Flow Physics
===================
Pure functions for the water balance of a cylindrical bucket:

    dh/dt = (q_in - q_out - q_spill) / A

All calculations use SI units:
    - Height: meters (m)
    - Volume: cubic meters (m³)
    - Flow rate: cubic meters per second (m³/s)
    - Time: seconds (s)
    - Area: square meters (m²)

Nothing here holds state, so every function may be called standalone
(equilibrium previews, tests) without touching a running driver.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from bucketflow.model.params import InflowParams, InflowPattern, OutflowLaw, OutflowParams, SimulationParams

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class StepResult:
    height: float
    q_in: float
    q_out: float
    q_spill: float
    q_net: float


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def calculate_area(radius: float) -> float:
    """Cross-sectional area A = π r² in m²."""
    return math.pi * radius * radius


def calculate_volume(height: float, area: float) -> float:
    return area * height


def volume_to_litres(volume_m3: float) -> float:
    return volume_m3 * 1000.0


def flow_to_litres_per_second(flow_m3s: float) -> float:
    return flow_m3s * 1000.0


def calculate_inflow(time: float, params: InflowParams) -> float:
    """
    Inflow rate at a given simulation time.

    Constant: q_in = Q_base
    Sine:     q_in = Q_base + Q_amp · sin(2π t / T)

    Args:
        time: Simulation time in seconds.
        params: Inflow parameters.

    Returns:
        Inflow rate in m³/s, never negative.
    """
    if params.pattern == InflowPattern.CONSTANT:
        return max(0.0, params.q_base)

    # A non-positive period has no oscillation to follow
    if params.period <= 0:
        return max(0.0, params.q_base)

    q_in = params.q_base + params.q_amp * math.sin(2.0 * math.pi * time / params.period)
    return max(0.0, q_in)


def calculate_outflow(height: float, params: OutflowParams) -> float:
    """
    Outflow rate at a given water height.

    Linear:            q_out = k_lin · h
    Sqrt (Torricelli): q_out = k_sqrt · √h

    Args:
        height: Water height in meters. Negative values are treated as 0.
        params: Outflow parameters.

    Returns:
        Outflow rate in m³/s.
    """
    h = max(0.0, height)
    if params.law == OutflowLaw.LINEAR:
        return params.k_lin * h
    return params.k_sqrt * math.sqrt(h)


def calculate_spill(height: float, h_max: float, q_in: float, q_out: float) -> float:
    """Spill rate: the net inflow that cannot be stored once the bucket is full."""
    if height >= h_max and q_in > q_out:
        return q_in - q_out
    return 0.0


def calculate_dhdt(q_in: float, q_out: float, q_spill: float, area: float) -> float:
    """Rate of height change in m/s. Degenerate geometry freezes the height."""
    if area <= 0:
        return 0.0
    return (q_in - q_out - q_spill) / area


def integrate_euler(height: float, dhdt: float, dt: float, h_max: float) -> float:
    """Explicit Euler step h + dt·dh/dt, clamped to [0, h_max]."""
    return clamp(height + dhdt * dt, 0.0, h_max)


def calculate_equilibrium_height(q_in: float, outflow: OutflowParams, h_max: float) -> float:
    """
    Height at which outflow balances a constant inflow.

    Linear: h_eq = q_in / k_lin
    Sqrt:   h_eq = (q_in / k_sqrt)²

    A zero outflow coefficient means the bucket can only fill up, so h_max is
    returned. The result is clamped to [0, h_max].
    """
    if q_in <= 0:
        return 0.0

    if outflow.law == OutflowLaw.LINEAR:
        if outflow.k_lin <= 0:
            return h_max
        h_eq = q_in / outflow.k_lin
    else:
        if outflow.k_sqrt <= 0:
            return h_max
        h_eq = (q_in / outflow.k_sqrt) ** 2

    return clamp(h_eq, 0.0, h_max)


def physics_step(
    height: float,
    time: float,
    dt: float,
    h_max: float,
    area: float,
    inflow: InflowParams,
    outflow: OutflowParams,
) -> StepResult:
    """
    Advance the bucket by one fixed increment.

    Flows (including spill) are evaluated on the pre-step state, then the
    height is integrated with explicit Euler and clamped to [0, h_max].

    Args:
        height: Current water height in meters.
        time: Current simulation time in seconds.
        dt: Time step in seconds.
        h_max: Maximum bucket height in meters.
        area: Cross-sectional area in m².
        inflow: Inflow parameters.
        outflow: Outflow parameters.

    Returns:
        New height and the flow rates that produced it.
    """
    q_in = calculate_inflow(time, inflow)
    q_out = calculate_outflow(height, outflow)
    q_spill = calculate_spill(height, h_max, q_in, q_out)
    q_net = q_in - q_out - q_spill

    dhdt = calculate_dhdt(q_in, q_out, q_spill, area)
    new_height = integrate_euler(height, dhdt, dt, h_max)

    return StepResult(height=new_height, q_in=q_in, q_out=q_out, q_spill=q_spill, q_net=q_net)


def preview_trajectory(
    params: SimulationParams,
    duration: float,
    dt: float,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Integrate the bucket from h0 without a driver, e.g. for an equilibrium preview.

    Time is taken as i·dt for step i, like the driver does.

    Args:
        params: Simulation parameters (h0 is used as the start height).
        duration: Simulated seconds to cover.
        dt: Fixed time step in seconds.

    Returns:
        (times, heights) arrays of length n_steps + 1, starting at t = 0.
    """
    n_steps = int(math.floor(duration / dt + 1e-9))
    times = np.arange(n_steps + 1, dtype=np.float64) * dt
    heights = np.empty(n_steps + 1, dtype=np.float64)

    h_max = params.bucket.h_max
    area = calculate_area(params.bucket.radius)
    height = clamp(params.bucket.h0, 0.0, h_max)
    heights[0] = height

    for i in range(n_steps):
        result = physics_step(height, i * dt, dt, h_max, area, params.inflow, params.outflow)
        height = result.height
        heights[i + 1] = height

    return times, heights
