"""core.config
Configuration core: load/save helpers for config.ini.

ConfigManager reads and persists the session settings used by the Bot
(DPI ratio, input delay, sampling rate, match threshold) and the log level.
API: ConfigManager.load(), get(key, fallback), get_int(), get_float(), save().
"""

import logging
import os
from configparser import ConfigParser
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULTS = {
    "log_level": "INFO",
    "dpi_ratio": "2",
    "wait_time_ms": "90",
    "sample_rate": "3.0",
    "match_threshold": "0.8",
}


class ConfigManager:
    """Simple configuration manager backed by an INI file.

    Behaviour:
    - Uses a single DEFAULT section for lookups.
    - Fills in missing defaults; the file is only written by save().
    - Defaults to a per-user config path (%APPDATA% on Windows,
      XDG_CONFIG_HOME or ~/.config on other systems) unless an explicit
      path is provided.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        if config_path:
            self.config_path = Path(config_path)
        elif os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
            self.config_path = base.joinpath("Screenbot", "config.ini")
        else:
            base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            self.config_path = base.joinpath("screenbot", "config.ini")

        self.config = ConfigParser()
        self.load()

    def load(self) -> None:
        """Load configuration from disk and fill in missing defaults."""
        if self.config_path.exists():
            self.config.read(self.config_path, encoding="utf-8")

        for key, value in DEFAULTS.items():
            if key not in self.config["DEFAULT"]:
                self.config["DEFAULT"][key] = value

    def get(self, key: str, fallback=None):
        """Get a configuration value.

        Precedence is env (SB_<KEY>, then <KEY>) > config.ini > fallback.
        """
        for ek in (f"SB_{str(key).upper()}", str(key).upper()):
            val = os.environ.get(ek)
            if val is not None and str(val) != "":
                return val
        return self.config["DEFAULT"].get(key, fallback)

    def get_int(self, key: str, fallback: int) -> int:
        raw = self.get(key)
        try:
            return int(str(raw).strip())
        except (TypeError, ValueError):
            logger.warning("config: invalid integer for %s=%r, using %d", key, raw, fallback)
            return fallback

    def get_float(self, key: str, fallback: float) -> float:
        raw = self.get(key)
        try:
            return float(str(raw).strip())
        except (TypeError, ValueError):
            logger.warning("config: invalid number for %s=%r, using %s", key, raw, fallback)
            return fallback

    def save(self) -> None:
        """Persist current configuration to disk (creates parent directories)."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as fh:
            self.config.write(fh)
