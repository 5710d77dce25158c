"""
Simulation Parameters
=====================
Defines the configuration data structures for the bucket.

Why is this file needed?
------------------------
1. Single source: Bucket geometry, the inflow pattern and the outflow law are
   held in one `SimulationParams` object that the driver reads on every drain.
2. Input boundary: `clamped()` applies the same bounds the parameter UI
   enforces, so values injected from a file obey the same rules.
3. Serialization: Parameters round-trip through the camelCase JSON layout used
   by the default parameter file.

Classes:
    InflowPattern, OutflowLaw: Variant selectors.
    BucketParams, InflowParams, OutflowParams: Per-concern parameter groups.
    SimulationParams: The combined container.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Dict
import json
import logging
import os

from bucketflow.config import DEFAULT_PARAMS_PATH, PARAM_RANGES

logger = logging.getLogger(__name__)


class InflowPattern(StrEnum):
    CONSTANT = "constant"
    SINE = "sine"


class OutflowLaw(StrEnum):
    LINEAR = "linear"
    SQRT = "sqrt"


def _clamp_to_range(name: str, value: float) -> float:
    low, high, _step = PARAM_RANGES[name]
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


@dataclass
class BucketParams:
    h_max: float = 0.4    # 40 cm max height
    radius: float = 0.15  # 15 cm radius
    h0: float = 0.2       # 20 cm initial height (at equilibrium with defaults)

    def to_dict(self) -> Dict[str, Any]:
        return {"hMax": self.h_max, "radius": self.radius, "h0": self.h0}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BucketParams:
        defaults = BucketParams()
        return BucketParams(
            h_max=float(data.get("hMax", defaults.h_max)),
            radius=float(data.get("radius", defaults.radius)),
            h0=float(data.get("h0", defaults.h0)),
        )


@dataclass
class InflowParams:
    pattern: InflowPattern = InflowPattern.CONSTANT
    q_base: float = 0.002  # 2 L/s
    q_amp: float = 0.001   # 1 L/s amplitude, sine only
    period: float = 10.0   # s, sine only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern.value,
            "qBase": self.q_base,
            "qAmp": self.q_amp,
            "period": self.period,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> InflowParams:
        defaults = InflowParams()
        return InflowParams(
            pattern=InflowPattern(data.get("pattern", defaults.pattern)),
            q_base=float(data.get("qBase", defaults.q_base)),
            q_amp=float(data.get("qAmp", defaults.q_amp)),
            period=float(data.get("period", defaults.period)),
        )


@dataclass
class OutflowParams:
    law: OutflowLaw = OutflowLaw.LINEAR
    k_lin: float = 0.01    # With h=0.2, gives q_out = 0.002 m³/s
    k_sqrt: float = 0.002  # Torricelli coefficient

    def to_dict(self) -> Dict[str, Any]:
        return {"law": self.law.value, "kLin": self.k_lin, "kSqrt": self.k_sqrt}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> OutflowParams:
        defaults = OutflowParams()
        return OutflowParams(
            law=OutflowLaw(data.get("law", defaults.law)),
            k_lin=float(data.get("kLin", defaults.k_lin)),
            k_sqrt=float(data.get("kSqrt", defaults.k_sqrt)),
        )


@dataclass
class SimulationParams:
    """
    All simulation parameters combined.

    The driver keeps a reference to this object and reads it at the start of
    every drain, so a mutation made between two ticks is picked up by the
    next physics step.
    """
    bucket: BucketParams = field(default_factory=BucketParams)
    inflow: InflowParams = field(default_factory=InflowParams)
    outflow: OutflowParams = field(default_factory=OutflowParams)

    @staticmethod
    def default() -> SimulationParams:
        return SimulationParams()

    def clamped(self) -> SimulationParams:
        """
        Return a copy with every field inside its allowed input range.

        h0 is bounded by the (already clamped) h_max rather than a fixed range.
        """
        h_max = _clamp_to_range("h_max", self.bucket.h_max)
        bucket = BucketParams(
            h_max=h_max,
            radius=_clamp_to_range("radius", self.bucket.radius),
            h0=min(_clamp_to_range("h0", self.bucket.h0), h_max),
        )
        inflow = replace(
            self.inflow,
            q_base=_clamp_to_range("q_base", self.inflow.q_base),
            q_amp=_clamp_to_range("q_amp", self.inflow.q_amp),
            period=_clamp_to_range("period", self.inflow.period),
        )
        outflow = replace(
            self.outflow,
            k_lin=_clamp_to_range("k_lin", self.outflow.k_lin),
            k_sqrt=_clamp_to_range("k_sqrt", self.outflow.k_sqrt),
        )
        result = SimulationParams(bucket=bucket, inflow=inflow, outflow=outflow)
        if result != self:
            logger.warning("Parameters adjusted to allowed input ranges.")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucket": self.bucket.to_dict(),
            "inflow": self.inflow.to_dict(),
            "outflow": self.outflow.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> SimulationParams:
        """
        Build parameters from the nested camelCase layout.

        Missing groups or fields fall back to defaults.

        Raises:
            ValueError: If 'pattern' or 'law' names an unknown variant.
        """
        return SimulationParams(
            bucket=BucketParams.from_dict(data.get("bucket", {})),
            inflow=InflowParams.from_dict(data.get("inflow", {})),
            outflow=OutflowParams.from_dict(data.get("outflow", {})),
        )


def load_params(filepath: str = DEFAULT_PARAMS_PATH) -> SimulationParams:
    """
    Load parameters from a JSON file and clamp them to the allowed input ranges.

    Args:
        filepath: Path to the JSON file. Defaults to the bundled defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a variant name is unknown.
    """
    logger.info(f"Loading parameters from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return SimulationParams.from_dict(data).clamped()


def load_default_params() -> SimulationParams:
    """Bundled defaults from the assets folder, or the built-in defaults if the file is missing."""
    if not os.path.exists(DEFAULT_PARAMS_PATH):
        logger.warning(f"Default parameter file not found at {DEFAULT_PARAMS_PATH}, using built-in defaults.")
        return SimulationParams.default()
    return load_params(DEFAULT_PARAMS_PATH)
