"""Bridge Configuration for BIM Bridge

Manages .bridge/config.json settings for the server, logging, dispatch, and
extra handler modules.
"""

import copy
import json
from pathlib import Path


class BridgeConfig:
    """Manages bridge configuration"""

    DEFAULT_CONFIG = {
        "server": {
            "name": "bim_bridge",
        },
        "logging": {
            "level": "INFO",
            "log_directory": None,
            "retained_days": 7,
            "to_file": False,
        },
        "dispatch": {
            "include_traceback": True,
        },
        "handler_modules": [],
    }

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or Path.cwd()
        self.bridge_dir = self.base_dir / ".bridge"
        self.config_file = self.bridge_dir / "config.json"

    def exists(self) -> bool:
        """Check if config file exists"""
        return self.config_file.exists()

    def load(self) -> dict:
        """Load config, returning defaults if not exists"""
        merged = copy.deepcopy(self.DEFAULT_CONFIG)
        if not self.config_file.exists():
            return merged

        with open(self.config_file) as f:
            config = json.load(f)

        # Merge with defaults section by section
        for key, value in config.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value

        return merged

    def save(self, config: dict) -> None:
        """Save config to file"""
        self.bridge_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    def init(self, **sections) -> dict:
        """Initialize config file, overriding default sections"""
        config = copy.deepcopy(self.DEFAULT_CONFIG)
        for key, value in sections.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

        self.save(config)
        return config

    def get_log_directory(self, config: dict | None = None) -> Path:
        """Resolve the log directory (relative paths are under base_dir)"""
        config = config or self.load()
        log_dir = config["logging"].get("log_directory")
        if not log_dir:
            return self.bridge_dir / "logs"

        path = Path(log_dir)
        if not path.is_absolute():
            path = self.base_dir / path
        return path
