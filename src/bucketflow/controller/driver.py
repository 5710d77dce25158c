"""
Simulation Driver
=================
Stateful scheduler that turns wall-clock frame ticks into fixed physics steps.

Why is this file needed?
------------------------
1. Frame-rate independence: Elapsed wall-clock time is collected in an
   accumulator and drained in whole `fixed_dt` steps, so the physics result
   does not depend on how often the host calls `tick()`.
2. Bounded work: A single frame contributes at most `max_frame_dt` seconds;
   anything beyond that is dropped rather than caught up.
3. Throttled publication: Observers only see a new state (and a new history
   point) once per `publish_interval` of simulated time, never the
   intermediate physics states.

Run status transitions:
    IDLE --start--> RUNNING, PAUSED --start--> RUNNING,
    RUNNING --pause--> PAUSED, any --reset--> IDLE.

Classes:
    SimulationDriver: QObject exposing start/pause/reset/tick and Qt signals.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from PySide6.QtCore import QObject, Signal

from bucketflow.config import SimulationConfig
from bucketflow.controller.history import HistoryBuffer
from bucketflow.model.params import SimulationParams
from bucketflow.model.state import HistoryPoint, SimulationState, SimulationStatus
from bucketflow.physics.flow import calculate_area, clamp, physics_step

logger = logging.getLogger(__name__)


class SimulationDriver(QObject):
    """
    Owns the loop state of one simulation instance.

    The step counter is the source of truth for simulated time: a step
    starting at `step_count` runs at `step_count * fixed_dt`, so time never
    drifts from summing float deltas.

    Signals:
        state_published(SimulationState): Emitted at every publish boundary and on reset.
        history_changed(tuple): Immutable copy of the history after it changed.
        status_changed(str): New SimulationStatus value.
    """
    state_published = Signal(object)
    history_changed = Signal(object)
    status_changed = Signal(str)

    def __init__(
        self,
        params: SimulationParams,
        config: Optional[SimulationConfig] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._params = params
        self.config = config or SimulationConfig()

        self._history = HistoryBuffer(self.config.history_capacity)
        self._published_history: tuple[HistoryPoint, ...] = ()
        self._status = SimulationStatus.IDLE

        # Loop state
        self._accumulator = 0.0
        self._last_timestamp: Optional[float] = None
        self._last_published_time = 0.0
        self._step_count = 0

        self._current = SimulationState.initial(self._initial_height())
        self._published = self._current

    # ------------------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------------------

    @property
    def params(self) -> SimulationParams:
        return self._params

    @params.setter
    def params(self, params: SimulationParams) -> None:
        """Swap the parameter object; takes effect on the next physics step."""
        self._params = params

    @property
    def state(self) -> SimulationState:
        """Latest published state."""
        return self._published

    @property
    def history(self) -> tuple[HistoryPoint, ...]:
        """History as of the latest publication."""
        return self._published_history

    @property
    def history_buffer(self) -> HistoryBuffer:
        return self._history

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def step_count(self) -> int:
        return self._step_count

    # ------------------------------------------------------------------------------
    # Control API
    # ------------------------------------------------------------------------------

    def start(self) -> None:
        """Start or resume. No-op while already running."""
        if self._status == SimulationStatus.RUNNING:
            return

        logger.info(f"Simulation started (from {self._status}) at t={self._current.time:.3f}s.")
        self._set_status(SimulationStatus.RUNNING)
        # The first tick after (re)start contributes zero elapsed time
        self._last_timestamp = None

        if len(self._history) == 0:
            self._publish()

    def pause(self) -> None:
        """Pause. No-op unless running."""
        if self._status != SimulationStatus.RUNNING:
            return

        logger.info(f"Simulation paused at t={self._current.time:.3f}s.")
        self._set_status(SimulationStatus.PAUSED)

    def reset(self) -> None:
        """Return to t = 0 with the current h0, clear history and publish the reset state."""
        self._current = SimulationState.initial(self._initial_height())
        self._history.clear()
        self._published_history = ()
        self._accumulator = 0.0
        self._last_timestamp = None
        self._last_published_time = 0.0
        self._step_count = 0

        logger.info(f"Simulation reset (h0={self._current.height:.3f} m).")
        self._set_status(SimulationStatus.IDLE)

        self._published = self._current
        self.state_published.emit(self._published)
        self.history_changed.emit(self._published_history)

    def tick(self, timestamp: float) -> Optional[SimulationState]:
        """
        Ingest one frame.

        Args:
            timestamp: Wall-clock time of the frame in seconds (monotonic clock).

        Returns:
            The published state if a publish boundary was crossed, otherwise None.
        """
        if self._status != SimulationStatus.RUNNING:
            return None

        # A non-finite timestamp adds no time and is not kept as the previous frame
        if not math.isfinite(timestamp):
            frame_dt = 0.0
        else:
            frame_dt = 0.0 if self._last_timestamp is None else timestamp - self._last_timestamp
            self._last_timestamp = timestamp

        # Excess beyond the cap is discarded, not deferred
        self._accumulator += clamp(frame_dt, 0.0, self.config.max_frame_dt)
        self._drain()

        if self._current.time - self._last_published_time >= self.config.publish_interval:
            return self._publish()
        return None

    # ------------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------------

    def _initial_height(self) -> float:
        bucket = self._params.bucket
        h0 = clamp(bucket.h0, 0.0, bucket.h_max)
        if h0 != bucket.h0:
            logger.warning(f"Initial height h0={bucket.h0} outside [0, {bucket.h_max}], using {h0}.")
        return h0

    def _drain(self) -> None:
        fixed_dt = self.config.fixed_dt
        params = self._params
        h_max = params.bucket.h_max
        area = calculate_area(params.bucket.radius)

        while self._accumulator >= fixed_dt:
            sim_time = self._step_count * fixed_dt
            result = physics_step(
                self._current.height,
                sim_time,
                fixed_dt,
                h_max,
                area,
                params.inflow,
                params.outflow,
            )
            self._step_count += 1
            self._current = SimulationState.from_step(self._step_count * fixed_dt, result)
            self._accumulator -= fixed_dt

    def _publish(self) -> SimulationState:
        state = self._current
        self._history.append(HistoryPoint.from_state(state))
        self._published_history = self._history.snapshot()
        self._published = state
        self._last_published_time = state.time

        logger.debug(f"Published t={state.time:.3f}s h={state.height:.4f}m spill={state.q_spill:.5f}")
        self.state_published.emit(state)
        self.history_changed.emit(self._published_history)
        return state

    def _set_status(self, status: SimulationStatus) -> None:
        self._status = status
        self.status_changed.emit(status.value)
