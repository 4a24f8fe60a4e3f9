"""
Engine Monitoring: Health summary and rotating JSON-line event log.

Two monitoring layers:

1. ``health_context()``: One-line natural language summary of engine state
   (e.g. "NeuroFingerprint: 2 networks, 36 neurons, ...").
2. ``EventLog``: Rotating file logger writing one JSON object per event to
   ``<log_dir>/events.log``.

Usage::

    from engine_monitoring import EventLog, health_context
    log = EventLog(engine_config.monitoring)
    log.log_event("memory_processed", {"fingerprint": "..."})
    print(health_context(engine))
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import time
from pathlib import Path
from typing import Any, Dict

from snn_config import MonitoringConfig

logger = logging.getLogger("neurofingerprint.monitoring")


# ── Health context (Layer 1) ───────────────────────────────────────────


def health_context(engine: Any) -> str:
    """Generate a one-line health summary.

    Args:
        engine: ``NeuralFingerprintEngine`` instance.

    Returns:
        Human-readable status string.
    """
    stats = engine.stats()
    parts = [
        f"NeuroFingerprint: {stats.get('networks', 0):,} networks",
        f"{stats.get('neurons', 0):,} neurons",
        f"{stats.get('synapses', 0):,} synapses",
        f"{stats.get('concepts', 0):,} concepts",
    ]
    processed = stats.get("memories_processed", 0)
    if processed:
        parts.append(f"{processed:,} memories processed")
    learning = stats.get("learning_networks", 0)
    if learning:
        parts.append(f"learning on {learning}")
    return ", ".join(parts)


# ── Rotating event log (Layer 2) ───────────────────────────────────────


class EventLog:
    """Rotating file logger for engine events.

    Writes structured JSON-line events with automatic rotation based on
    file size.  Does nothing unless ``event_log_enabled`` is set.

    Args:
        cfg: ``MonitoringConfig`` section of the engine config.
    """

    def __init__(self, cfg: MonitoringConfig) -> None:
        self._cfg = cfg
        self._logger = logging.getLogger("neurofingerprint.events")
        self._handler: logging.Handler = logging.NullHandler()
        if cfg.event_log_enabled:
            self._setup_handler()

    @property
    def enabled(self) -> bool:
        return self._cfg.event_log_enabled

    def _setup_handler(self) -> None:
        """Configure rotating file handler."""
        log_dir = Path(self._cfg.log_dir).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / "events.log"

        handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=self._cfg.max_log_size_mb * 1024 * 1024,
            backupCount=self._cfg.backup_count,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self._handler = handler
        self._logger.addHandler(handler)
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        logger.info("Event log writing to %s", log_path)

    def log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Write a structured event to the event log."""
        if not self.enabled:
            return
        event = {
            "timestamp": time.time(),
            "event": event_type,
            "data": data,
        }
        self._logger.info(json.dumps(event, default=str))

    def close(self) -> None:
        """Detach and close the file handler."""
        self._logger.removeHandler(self._handler)
        self._handler.close()
