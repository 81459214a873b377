import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from audio_controller.utils.logging_config import get_logger
from audio_controller.utils.resource_finder import resource_finder

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager - one shared instance via get_instance()."""

    _instance = None

    # Default configuration.
    DEFAULT_CONFIG = {
        "AUDIO_CONTROL": {
            # Force a Linux backend: "pactl", "amixer", "none"; None probes.
            "LINUX_BACKEND": None,
            "ALSA_SPEAKER_CONTROL": "Master",
            "ALSA_MIC_CONTROL": "Capture",
            # Extra directories searched for mac_audio / win_audio builds.
            "ADDON_SEARCH_DIRS": [],
            "USE_PYCAW_FALLBACK": True,
        },
    }

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the configuration manager.
        """
        self._init_config_paths(config_file)
        self._config = self._load_config()

    def _init_config_paths(self, config_file: Optional[Path]):
        """
        Initialize config file paths.
        """
        if config_file is not None:
            self.config_file = Path(config_file)
            self.config_dir = self.config_file.parent
            return

        self.config_dir = resource_finder.find_config_dir()
        if not self.config_dir:
            self.config_dir = resource_finder.get_project_root() / "config"
        self.config_file = self.config_dir / "config.json"
        logger.debug(f"Config file: {self.config_file.absolute()}")

    def _load_config(self) -> Dict[str, Any]:
        """
        Load config file; fall back to defaults when missing or unreadable.
        """
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)
        if not self.config_file.exists():
            logger.debug("Config file missing; using default configuration.")
            return defaults

        try:
            config = json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Config load error: {e}")
            return defaults

        return self._merge_configs(defaults, config)

    def _save_config(self, config: dict) -> bool:
        """
        Save configuration to file.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            logger.debug(f"Config saved to: {self.config_file}")
            return True
        except OSError as e:
            logger.error(f"Config save error: {e}")
            return False

    @staticmethod
    def _merge_configs(default: dict, custom: dict) -> dict:
        """
        Recursively merge configuration dictionaries.
        """
        result = default.copy()
        for key, value in custom.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigManager._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get_config(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value by path.
        path: Dot-separated config path, e.g. "AUDIO_CONTROL.LINUX_BACKEND"
        """
        try:
            value = self._config
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def update_config(self, path: str, value: Any) -> bool:
        """
        Update a specific configuration value and persist it.
        """
        current = self._config
        *parts, last = path.split(".")
        for part in parts:
            current = current.setdefault(part, {})
        current[last] = value
        return self._save_config(self._config)

    def reload_config(self) -> bool:
        """
        Reload the configuration file.
        """
        self._config = self._load_config()
        logger.info("Configuration file reloaded.")
        return True

    @classmethod
    def get_instance(cls):
        """
        Get the shared configuration manager instance.
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance
