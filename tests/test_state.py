import dataclasses

import pytest

from bucketflow.model.state import HistoryPoint, Readouts, SimulationState
from bucketflow.physics.flow import StepResult


def test_spilling_is_derived_from_spill_rate():
    assert not SimulationState(height=0.2).is_spilling
    assert SimulationState(height=0.4, q_spill=0.001).is_spilling


def test_snapshots_are_immutable():
    state = SimulationState(time=1.0, height=0.2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.height = 0.3


def test_from_step_and_history_projection():
    result = StepResult(height=0.4, q_in=0.005, q_out=0.004, q_spill=0.001, q_net=0.0)
    state = SimulationState.from_step(2.5, result)
    point = HistoryPoint.from_state(state)

    assert state.time == 2.5
    assert state.is_spilling
    assert point == HistoryPoint(time=2.5, height=0.4, q_in=0.005, q_out=0.004, q_net=0.0, q_spill=0.001)


def test_readouts_convert_to_display_units():
    state = SimulationState(time=3.0, height=0.2, q_in=0.002, q_out=0.002, q_spill=0.0, q_net=0.0)

    readouts = Readouts.from_state(state, radius=0.15, h_max=0.4)

    assert readouts.volume_litres == pytest.approx(14.137, abs=1e-3)
    assert readouts.q_in_lps == pytest.approx(2.0)
    assert readouts.q_net_lps == 0.0
    assert readouts.fill_fraction == pytest.approx(0.5)
    assert not readouts.is_spilling


def test_readouts_fill_fraction_edge_cases():
    state = SimulationState(height=0.2)
    assert Readouts.from_state(state, radius=0.15, h_max=0.0).fill_fraction == 0.0
    assert Readouts.from_state(state, radius=0.15, h_max=0.1).fill_fraction == 1.0
