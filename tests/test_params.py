import json

import pytest

from bucketflow.config import SimulationConfig
from bucketflow.model.params import (
    InflowPattern,
    OutflowLaw,
    SimulationParams,
    load_default_params,
    load_params,
)


def test_defaults_match_bundled_file():
    assert load_default_params() == SimulationParams.default()


def test_dict_layout_round_trips():
    params = SimulationParams.default()
    params.inflow.pattern = InflowPattern.SINE
    params.outflow.law = OutflowLaw.SQRT

    data = params.to_dict()

    assert data["bucket"] == {"hMax": 0.4, "radius": 0.15, "h0": 0.2}
    assert data["inflow"]["pattern"] == "sine"
    assert data["outflow"] == {"law": "sqrt", "kLin": 0.01, "kSqrt": 0.002}
    assert SimulationParams.from_dict(data) == params


def test_missing_fields_fall_back_to_defaults():
    params = SimulationParams.from_dict({"bucket": {"hMax": 0.8}})
    assert params.bucket.h_max == 0.8
    assert params.bucket.radius == 0.15
    assert params.inflow == SimulationParams.default().inflow


def test_unknown_variant_is_rejected():
    with pytest.raises(ValueError):
        SimulationParams.from_dict({"inflow": {"pattern": "square"}})
    with pytest.raises(ValueError):
        SimulationParams.from_dict({"outflow": {"law": "cubic"}})


def test_clamped_applies_input_ranges(caplog):
    params = SimulationParams.from_dict({
        "bucket": {"hMax": 5.0, "radius": 0.0, "h0": 2.0},
        "inflow": {"qBase": -1.0, "qAmp": 1.0, "period": 0.0},
        "outflow": {"kLin": -0.5, "kSqrt": 1.0},
    })

    with caplog.at_level("WARNING", logger="bucketflow"):
        clamped = params.clamped()

    assert clamped.bucket.h_max == 1.0
    assert clamped.bucket.radius == 0.05
    assert clamped.bucket.h0 == 1.0
    assert clamped.inflow.q_base == 0.0
    assert clamped.inflow.q_amp == 0.01
    assert clamped.inflow.period == 1.0
    assert clamped.outflow.k_lin == 0.0
    assert clamped.outflow.k_sqrt == 0.02
    assert "adjusted" in caplog.text
    # The original object is left alone
    assert params.bucket.h_max == 5.0


def test_clamped_keeps_valid_params():
    params = SimulationParams.default()
    assert params.clamped() == params


def test_load_params_from_file(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        "bucket": {"hMax": 0.4, "radius": 0.15, "h0": 0.9},
        "outflow": {"law": "sqrt", "kSqrt": 0.002},
    }), encoding="utf-8")

    params = load_params(str(path))

    assert params.bucket.h0 == 0.4
    assert params.outflow.law == OutflowLaw.SQRT


def test_load_params_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_params(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_params(str(broken))


def test_simulation_config_defaults():
    config = SimulationConfig()
    assert config.fixed_dt == pytest.approx(1 / 120)
    assert config.max_frame_dt == 0.1
    assert config.publish_interval == pytest.approx(1 / 30)
    assert config.history_capacity == 1800


@pytest.mark.parametrize("field", ["fixed_dt", "max_frame_dt", "publish_rate", "history_window", "history_sample_rate"])
def test_simulation_config_rejects_non_positive(field):
    with pytest.raises(ValueError):
        SimulationConfig(**{field: 0})


def test_simulation_config_rejects_history_without_samples():
    with pytest.raises(ValueError):
        SimulationConfig(history_window=0.01, history_sample_rate=10)
