"""
Simulation State (Data Model)
=============================
This module defines the snapshots the driver hands to observers.

Why is this file needed?
------------------------
1. Immutability: `SimulationState` and `HistoryPoint` are frozen, so a
   published snapshot can be shared with any number of observers without
   them being able to write back into the driver.
2. Decoupling: Views and readouts depend only on these value types, never on
   the driver's internal loop state.

Classes:
    SimulationStatus: Run status of the driver.
    SimulationState: State of the bucket at one instant.
    HistoryPoint: Compact projection stored in the history buffer.
    Readouts: Display quantities derived from a state (litres, L/s, fill).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from bucketflow.physics.flow import (
    StepResult,
    calculate_area,
    calculate_volume,
    flow_to_litres_per_second,
    volume_to_litres,
)


class SimulationStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class SimulationState:
    time: float = 0.0     # s
    height: float = 0.0   # m
    q_in: float = 0.0     # m³/s
    q_out: float = 0.0    # m³/s
    q_spill: float = 0.0  # m³/s
    q_net: float = 0.0    # m³/s, q_in - q_out - q_spill

    @property
    def is_spilling(self) -> bool:
        return self.q_spill > 0

    @staticmethod
    def initial(h0: float) -> SimulationState:
        """State at t = 0 before any physics step has run; flows are reported as zero."""
        return SimulationState(time=0.0, height=h0)

    @staticmethod
    def from_step(time: float, result: StepResult) -> SimulationState:
        return SimulationState(
            time=time,
            height=result.height,
            q_in=result.q_in,
            q_out=result.q_out,
            q_spill=result.q_spill,
            q_net=result.q_net,
        )


@dataclass(frozen=True)
class HistoryPoint:
    time: float
    height: float
    q_in: float
    q_out: float
    q_net: float
    q_spill: float

    @staticmethod
    def from_state(state: SimulationState) -> HistoryPoint:
        return HistoryPoint(
            time=state.time,
            height=state.height,
            q_in=state.q_in,
            q_out=state.q_out,
            q_net=state.q_net,
            q_spill=state.q_spill,
        )


@dataclass(frozen=True)
class Readouts:
    """Human-facing quantities for the readout panel."""
    time: float
    height: float
    volume_litres: float
    q_in_lps: float
    q_out_lps: float
    q_net_lps: float
    q_spill_lps: float
    fill_fraction: float
    is_spilling: bool

    @staticmethod
    def from_state(state: SimulationState, radius: float, h_max: float) -> Readouts:
        """
        Convert a state into display units.

        Args:
            state: The published simulation state.
            radius: Bucket radius in meters.
            h_max: Bucket height in meters, used for the fill fraction.
        """
        area = calculate_area(radius)
        fill = max(0.0, min(1.0, state.height / h_max)) if h_max > 0 else 0.0
        return Readouts(
            time=state.time,
            height=state.height,
            volume_litres=volume_to_litres(calculate_volume(state.height, area)),
            q_in_lps=flow_to_litres_per_second(state.q_in),
            q_out_lps=flow_to_litres_per_second(state.q_out),
            q_net_lps=flow_to_litres_per_second(state.q_net),
            q_spill_lps=flow_to_litres_per_second(state.q_spill),
            fill_fraction=fill,
            is_spilling=state.is_spilling,
        )
