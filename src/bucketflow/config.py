"""
Configuration & Path Management
===============================
This module serves as the central registry for simulation constants and
resource paths.

Why is this file needed?
------------------------
1. Abstraction: The scheduler constants (physics step, frame cap, publish rate,
   history size) live in one place instead of being scattered as literals.
2. Input ranges: The parameter bounds used by the input boundary to clamp
   user-supplied values are defined next to the defaults they bound.
3. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (default parameter JSON) when the app is frozen.

Exports:
    SimulationConfig: Bundle of scheduler constants handed to the driver.
    PARAM_RANGES: Min/max/step per configurable parameter.
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_PARAMS_PATH (str): Absolute path to the default parameter file.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/bucketflow/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# =============================================================================
# SIMULATION CONSTANTS
# =============================================================================
FIXED_DT = 1 / 120            # Fixed physics timestep (s), 120 Hz
MAX_FRAME_DT = 0.1            # Max frame delta before excess is discarded (s)
RENDER_RATE = 30              # Publish rate for observers (Hz)
HISTORY_WINDOW = 60           # History window duration (s)
HISTORY_SAMPLE_RATE = 30      # History samples per second
HISTORY_BUFFER_SIZE = HISTORY_WINDOW * HISTORY_SAMPLE_RATE
CHART_WINDOW = 30             # Chart display window (s)

# =============================================================================
# PARAMETER RANGES
# =============================================================================
# (min, max, step). h0 has no fixed max: it is bounded by hMax.
PARAM_RANGES: dict[str, tuple[float, float | None, float]] = {
    "h_max": (0.1, 1.0, 0.05),      # m
    "radius": (0.05, 0.5, 0.01),    # m
    "h0": (0.0, None, 0.01),        # m
    "q_base": (0.0, 0.01, 0.0001),  # m³/s
    "q_amp": (0.0, 0.01, 0.0001),   # m³/s
    "period": (1.0, 30.0, 0.5),     # s
    "k_lin": (0.0, 0.1, 0.001),     # m²/s
    "k_sqrt": (0.0, 0.02, 0.0001),  # m^(5/2)/s
}


@dataclass(frozen=True)
class SimulationConfig:
    """
    Scheduler constants consumed by the simulation driver.

    Attributes:
        fixed_dt: Physics step in seconds.
        max_frame_dt: Upper bound on a single frame's elapsed time in seconds.
        publish_rate: Publications per simulated second.
        history_window: Seconds of history kept.
        history_sample_rate: History samples per second.
    """
    fixed_dt: float = FIXED_DT
    max_frame_dt: float = MAX_FRAME_DT
    publish_rate: float = RENDER_RATE
    history_window: float = HISTORY_WINDOW
    history_sample_rate: float = HISTORY_SAMPLE_RATE

    def __post_init__(self) -> None:
        for name in ("fixed_dt", "max_frame_dt", "publish_rate", "history_window", "history_sample_rate"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"SimulationConfig.{name} must be positive, got {value}.")
        if self.history_capacity < 1:
            raise ValueError(
                f"History of {self.history_window}s at {self.history_sample_rate} Hz holds no samples."
            )

    @property
    def publish_interval(self) -> float:
        """Simulated seconds between publications."""
        return 1.0 / self.publish_rate

    @property
    def history_capacity(self) -> int:
        return int(round(self.history_window * self.history_sample_rate))


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_PARAMS_PATH: str = os.path.join(ASSETS_PATH, "default_params.json")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
