"""Platform dispatch: pick the adapter pair for the host OS."""

import importlib
import platform
from typing import Any, Dict, Optional

from audio_controller.backend import UNAVAILABLE
from audio_controller.device_control import (
    MIC,
    SPEAKER,
    AudioController,
    FailingDeviceControl,
)
from audio_controller.utils.config_manager import ConfigManager
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

# platform.system() name -> adapter module under audio_controller.platforms
PLATFORM_MODULES = {
    "Windows": "windows",
    "Darwin": "macos",
    "Linux": "linux",
}

UNSUPPORTED_MESSAGE = "Not implemented on this platform ({system})."


def unsupported_controller(system: str) -> AudioController:
    message = UNSUPPORTED_MESSAGE.format(system=system or "unknown")
    return AudioController(
        speaker=FailingDeviceControl(SPEAKER, message),
        mic=FailingDeviceControl(MIC, message),
        backend=UNAVAILABLE,
        system=system,
    )


def resolve_controller(system: Optional[str] = None, **options) -> AudioController:
    """Build the speaker/mic controls for an OS.

    Args:
        system: platform.system() style name; the host when omitted
        **options: Passed to the adapter's create_controller(), e.g. a fake
            ``runner`` on Linux or an ``addon`` double on Windows/macOS

    Returns:
        AudioController: controls tagged with the selected backend
    """
    if system is None:
        system = platform.system()

    module_name = PLATFORM_MODULES.get(system)
    if module_name is None:
        logger.warning(f"Unsupported operating system: {system}")
        return unsupported_controller(system)

    module = importlib.import_module(f"audio_controller.platforms.{module_name}")
    controller = module.create_controller(**options)
    logger.info(
        f"Audio controller ready on {system}: backend={controller.backend.kind.value}"
    )
    return controller


def options_from_config(system: str, config: ConfigManager) -> Dict[str, Any]:
    """
    Adapter options for ``system`` taken from the AUDIO_CONTROL config section.
    """
    extra_dirs = config.get_config("AUDIO_CONTROL.ADDON_SEARCH_DIRS", []) or []
    if system == "Linux":
        return {
            "forced_backend": config.get_config("AUDIO_CONTROL.LINUX_BACKEND"),
            "alsa_controls": {
                SPEAKER: config.get_config("AUDIO_CONTROL.ALSA_SPEAKER_CONTROL", "Master"),
                MIC: config.get_config("AUDIO_CONTROL.ALSA_MIC_CONTROL", "Capture"),
            },
        }
    if system == "Darwin":
        return {"extra_dirs": extra_dirs}
    if system == "Windows":
        return {
            "extra_dirs": extra_dirs,
            "use_pycaw": bool(config.get_config("AUDIO_CONTROL.USE_PYCAW_FALLBACK", True)),
        }
    return {}


# Process-wide controller.
_audio_controller = None


def get_audio_controller() -> AudioController:
    """
    Resolve the host controller once per process.
    """
    global _audio_controller
    if _audio_controller is None:
        system = platform.system()
        options = options_from_config(system, ConfigManager.get_instance())
        _audio_controller = resolve_controller(system, **options)
    return _audio_controller
