"""Cross-platform speaker and microphone volume control.

Usage:
    from audio_controller import get_audio_controller

    audio = get_audio_controller()
    await audio.speaker.set(40)
    await audio.mic.mute()
"""

from .backend import BackendKind, BackendSelection
from .controller import get_audio_controller, resolve_controller
from .device_control import AudioController, DeviceControl
from .errors import (
    AudioControlError,
    BackendUnavailableError,
    CommandFailedError,
    ConfigurationError,
    InvalidVolumeError,
    NotSupportedError,
    VolumeParseError,
)
from .normalizer import normalize_volume, parse_volume_text, validate_volume

__all__ = [
    "AudioControlError",
    "AudioController",
    "BackendKind",
    "BackendSelection",
    "BackendUnavailableError",
    "CommandFailedError",
    "ConfigurationError",
    "DeviceControl",
    "InvalidVolumeError",
    "NotSupportedError",
    "VolumeParseError",
    "get_audio_controller",
    "normalize_volume",
    "parse_volume_text",
    "resolve_controller",
    "validate_volume",
]
