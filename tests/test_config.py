"""Tests for snn_config: defaults, dict overrides, JSON file and env var loading."""

import json
import os
import sys
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from fixed_point import SCALE
from snn_config import (
    CONFIG_ENV_VAR,
    EncodingConfig,
    EngineConfig,
    MonitoringConfig,
    PlasticityConfig,
    SimulationConfig,
    TopologyConfig,
    load_engine_config,
)


class TestDefaults:

    def test_topology_defaults(self):
        cfg = TopologyConfig()
        assert cfg.max_neurons == 128
        assert cfg.max_synapses_per_neuron == 32
        assert cfg.max_weight == 1000 * SCALE
        assert cfg.default_threshold == SCALE
        assert cfg.output_refractory_period == 2
        assert cfg.excitatory_percent == 75

    def test_simulation_defaults(self):
        cfg = SimulationConfig()
        assert cfg.leak_numerator == 9 * SCALE // 10
        assert cfg.learning_enabled is True

    def test_plasticity_defaults(self):
        cfg = PlasticityConfig()
        assert cfg.spike_window == 50
        assert cfg.ltp_max_change == SCALE // 10
        assert cfg.ltd_max_change == -SCALE // 20
        assert cfg.tau == 5 * SCALE
        # Potentiation is twice as strong as depression
        assert cfg.ltp_max_change == -2 * cfg.ltd_max_change

    def test_encoding_defaults(self):
        cfg = EncodingConfig()
        assert cfg.input_width == 16
        assert cfg.processing_steps == 10
        assert cfg.max_spikes == 50

    def test_monitoring_disabled_by_default(self):
        assert MonitoringConfig().event_log_enabled is False

    def test_load_without_arguments(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop(CONFIG_ENV_VAR, None)
            cfg = load_engine_config()
        assert isinstance(cfg, EngineConfig)
        assert cfg.random_seed == 0


class TestOverrides:

    def test_dict_overrides(self):
        cfg = load_engine_config({
            "encoding": {"processing_steps": 20},
            "simulation": {"learning_enabled": False},
            "random_seed": 7,
        })
        assert cfg.encoding.processing_steps == 20
        assert cfg.simulation.learning_enabled is False
        assert cfg.random_seed == 7
        # Untouched fields keep defaults
        assert cfg.encoding.input_width == 16

    def test_unknown_keys_ignored(self):
        cfg = load_engine_config({"topology": {"no_such_field": 1}, "nope": {}})
        assert not hasattr(cfg.topology, "no_such_field")

    def test_json_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"topology": {"max_neurons": 64}}))
        cfg = load_engine_config(config_path=str(path))
        assert cfg.topology.max_neurons == 64

    def test_dict_wins_over_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"topology": {"max_neurons": 64}}))
        cfg = load_engine_config(
            {"topology": {"max_neurons": 32}}, config_path=str(path)
        )
        assert cfg.topology.max_neurons == 32

    def test_env_var_file(self, tmp_path):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"plasticity": {"spike_window": 10}}))
        with patch.dict(os.environ, {CONFIG_ENV_VAR: str(path)}):
            cfg = load_engine_config()
        assert cfg.plasticity.spike_window == 10

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        cfg = load_engine_config(config_path=str(path))
        assert cfg.topology.max_neurons == 128

    def test_missing_file_is_ignored(self, tmp_path):
        cfg = load_engine_config(config_path=str(tmp_path / "absent.json"))
        assert cfg.topology.max_neurons == 128

    def test_to_dict_round_trips_through_loader(self):
        original = load_engine_config({"encoding": {"max_spikes": 5}, "random_seed": 3})
        rebuilt = load_engine_config(original.to_dict())
        assert rebuilt == original
