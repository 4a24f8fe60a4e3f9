"""
Engine Configuration: Centralized tunables for the NeuroFingerprint engine.

Provides a single ``EngineConfig`` dataclass grouping every parameter of the
topology store, simulation loop, STDP rule, text encoder and monitoring.
Fixed-point parameters are plain ints scaled by ``fixed_point.SCALE``.
Configuration can be loaded from a dict of overrides, a JSON file, or left
at the defaults.

Usage::

    from snn_config import EngineConfig, load_engine_config

    # Defaults
    cfg = load_engine_config()

    # With overrides
    cfg = load_engine_config({"encoding": {"processing_steps": 20}})

    # From JSON file
    cfg = load_engine_config(config_path="~/.neurofingerprint/engine.json")
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from fixed_point import SCALE

logger = logging.getLogger("neurofingerprint.config")

CONFIG_ENV_VAR = "NEUROFINGERPRINT_CONFIG"

_SECTIONS = ("topology", "simulation", "plasticity", "encoding", "monitoring")


# ── Section dataclasses ────────────────────────────────────────────────


@dataclass
class TopologyConfig:
    """Limits and defaults used when building networks."""

    max_neurons: int = 128
    max_synapses_per_neuron: int = 32
    max_weight: int = 1000 * SCALE
    default_threshold: int = SCALE
    output_refractory_period: int = 2
    hidden_refractory_period: int = 2
    excitatory_percent: int = 75


@dataclass
class SimulationConfig:
    """Per-step dynamics and spike history bounds."""

    # potential *= leak_numerator / SCALE for quiescent neurons (0.9)
    leak_numerator: int = SCALE - SCALE // 10
    spike_log_capacity: int = 1000
    neuron_spike_capacity: int = 100
    learning_enabled: bool = True


@dataclass
class PlasticityConfig:
    """STDP parameters."""

    spike_window: int = 50
    ltp_max_change: int = SCALE // 10
    ltd_max_change: int = -(SCALE * 5 // 100)
    tau: int = 5 * SCALE


@dataclass
class EncodingConfig:
    """Text encoder and memory processing parameters."""

    input_width: int = 16
    processing_steps: int = 10
    max_spikes: int = 50
    output_blend_percent: int = 20


@dataclass
class MonitoringConfig:
    """JSON-line event log settings."""

    event_log_enabled: bool = False
    log_dir: str = "~/.neurofingerprint/logs/"
    max_log_size_mb: int = 10
    backup_count: int = 5


# ── Top-level config ───────────────────────────────────────────────────


@dataclass
class EngineConfig:
    """Top-level engine configuration.

    Use ``load_engine_config()`` to create an instance with user overrides
    applied.
    """

    topology: TopologyConfig = field(default_factory=TopologyConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    plasticity: PlasticityConfig = field(default_factory=PlasticityConfig)
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    random_seed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ── Factory ────────────────────────────────────────────────────────────


def _apply_overrides(obj: Any, overrides: Dict[str, Any]) -> None:
    """Apply a dict of overrides to a dataclass instance (in-place)."""
    for key, value in overrides.items():
        if hasattr(obj, key):
            setattr(obj, key, value)
        else:
            logger.debug("Ignoring unknown config key %r", key)


def _apply_sections(cfg: EngineConfig, data: Dict[str, Any]) -> None:
    for section in _SECTIONS:
        if section in data:
            _apply_overrides(getattr(cfg, section), data[section])
    if "random_seed" in data:
        cfg.random_seed = int(data["random_seed"])


def load_engine_config(
    overrides: Optional[Dict[str, Any]] = None,
    config_path: Optional[str] = None,
) -> EngineConfig:
    """Create an ``EngineConfig`` with defaults, optionally overridden.

    Override precedence (highest wins):
        1. ``overrides`` dict argument
        2. ``config_path`` JSON file (or ``$NEUROFINGERPRINT_CONFIG``)
        3. Built-in defaults

    Args:
        overrides: Dict keyed by section name (``topology``, ``simulation``,
            ``plasticity``, ``encoding``, ``monitoring``) whose values are
            dicts of field→value pairs, plus an optional ``random_seed``.
        config_path: Path to a JSON file with the same structure as
            ``overrides``.

    Returns:
        Fully populated ``EngineConfig``.
    """
    cfg = EngineConfig()

    path = config_path or os.environ.get(CONFIG_ENV_VAR)

    # Layer 1: JSON file
    if path:
        p = Path(path).expanduser()
        if p.exists():
            try:
                with open(p) as f:
                    file_data = json.load(f)
                _apply_sections(cfg, file_data)
            except (OSError, ValueError) as exc:
                logger.warning("Failed to load engine config from %s: %s", p, exc)
        else:
            logger.debug("No engine config at %s", p)

    # Layer 2: dict overrides (win over file)
    if overrides is not None:
        _apply_sections(cfg, overrides)

    return cfg
