import os

# Qt must not look for a display when the frame loop tests create the application
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from bucketflow.config import SimulationConfig
from bucketflow.controller.driver import SimulationDriver
from bucketflow.model.params import (
    BucketParams,
    InflowParams,
    InflowPattern,
    OutflowLaw,
    OutflowParams,
    SimulationParams,
)

FRAME = 1 / 60


def _feed_ticks(driver: SimulationDriver, start: float, seconds: float, frame: float = FRAME) -> float:
    """Tick the driver at a steady frame rate; returns the last timestamp sent."""
    n_frames = int(round(seconds / frame))
    timestamp = start
    for i in range(n_frames + 1):
        timestamp = start + i * frame
        driver.tick(timestamp)
    return timestamp


@pytest.fixture
def default_params() -> SimulationParams:
    return SimulationParams.default()


@pytest.fixture
def spill_params() -> SimulationParams:
    return SimulationParams(
        bucket=BucketParams(h_max=0.4, radius=0.15, h0=0.4),
        inflow=InflowParams(pattern=InflowPattern.CONSTANT, q_base=0.005),
        outflow=OutflowParams(law=OutflowLaw.LINEAR, k_lin=0.01),
    )


@pytest.fixture
def drain_params() -> SimulationParams:
    return SimulationParams(
        bucket=BucketParams(h_max=0.4, radius=0.15, h0=0.3),
        inflow=InflowParams(pattern=InflowPattern.CONSTANT, q_base=0.0),
        outflow=OutflowParams(law=OutflowLaw.SQRT, k_sqrt=0.002),
    )


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def feed_ticks():
    return _feed_ticks
