"""
Settings Manager
Simple JSON-based settings with defaults
"""

import json
from pathlib import Path
from typing import Any, Optional

from loguru import logger


class Settings:
    """Diagnosis settings, optionally overridden by a JSON file."""

    DEFAULTS = {
        'local_timeout_ms': 400,
        'external_timeout_s': 2.0,   # reserved: external connect check
        'http_timeout_s': 4.0,       # reserved: HTTP check
        'probe_port': 80,
        'sweep_concurrency': 32,
        'sweep_rate_per_sec': 200,
        'wifi_timeout_s': 5.0,
        'log_level': 'WARNING',
        'log_dir': None,
    }

    DEFAULT_PATH = Path.home() / ".syswatch" / "settings.json"

    def __init__(self, path: Optional[Path] = None):
        """Initialize settings."""
        self.file = Path(path) if path is not None else self.DEFAULT_PATH
        self.data = self.DEFAULTS.copy()

        self._load()

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value."""
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        """Set setting value and save."""
        self.data[key] = value
        self._save()

    @property
    def local_timeout(self) -> float:
        """Local probe timeout in seconds."""
        return float(self.get('local_timeout_ms')) / 1000.0

    @property
    def external_timeout(self) -> float:
        return float(self.get('external_timeout_s'))

    @property
    def http_timeout(self) -> float:
        return float(self.get('http_timeout_s'))

    @property
    def wifi_timeout(self) -> float:
        return float(self.get('wifi_timeout_s'))

    def _load(self):
        """Load from file."""
        if not self.file.exists():
            return
        try:
            with open(self.file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.file}: {e}")
            return
        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring settings file {self.file}: expected a JSON object")
            return
        self.data.update(loaded)

    def _save(self):
        """Save to file."""
        self.file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=2)
