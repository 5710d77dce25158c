"""
Application Initialization
==========================
Builds the simulation objects and runs them headless on the Qt event loop.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Configures logging.
2. Loads parameters (bundled defaults or a user JSON file).
3. Instantiates the driver and the frame loop that ticks it.
4. Runs the Qt event loop for the requested wall-clock duration and logs a
   summary of where the bucket ended up.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication, QTimer

from bucketflow.config import DEFAULT_PARAMS_PATH
from bucketflow.controller.driver import SimulationDriver
from bucketflow.controller.loop import FrameLoop
from bucketflow.logging_config import parse_log_level, setup_logging
from bucketflow.model.params import load_default_params, load_params
from bucketflow.model.state import Readouts, SimulationState
from bucketflow.physics.flow import calculate_equilibrium_height, calculate_inflow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bucketflow",
        description="Simulate the water height of a cylindrical bucket (dh/dt = (q_in - q_out - q_spill) / A).",
    )
    parser.add_argument("--params", default=None, help=f"JSON parameter file (default: {DEFAULT_PARAMS_PATH})")
    parser.add_argument("--duration", type=float, default=5.0, help="Wall-clock seconds to run")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None, help="Optional log file path")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        level = parse_log_level(args.log_level)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    setup_logging(level=level, log_file=args.log_file)

    try:
        params = load_params(args.params) if args.params else load_default_params()
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Could not load parameters: {e}")
        return 1

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    driver = SimulationDriver(params)
    loop = FrameLoop(driver)

    def on_published(state: SimulationState) -> None:
        if state.is_spilling:
            logger.debug(f"t={state.time:.2f}s spilling {state.q_spill * 1000:.3f} L/s")

    driver.state_published.connect(on_published)

    loop.start()
    QTimer.singleShot(int(args.duration * 1000), app.quit)
    app.exec()
    loop.pause()

    readouts = Readouts.from_state(driver.state, params.bucket.radius, params.bucket.h_max)
    h_eq = calculate_equilibrium_height(
        calculate_inflow(driver.state.time, params.inflow), params.outflow, params.bucket.h_max
    )
    logger.info(
        f"Stopped after {loop.frames} frames: t={readouts.time:.2f}s, h={readouts.height:.4f}m, "
        f"V={readouts.volume_litres:.2f}L, fill={readouts.fill_fraction:.0%}, "
        f"spilling={readouts.is_spilling}, h_eq={h_eq:.4f}m"
    )
    logger.debug(f"Parameters: {params.to_dict()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
