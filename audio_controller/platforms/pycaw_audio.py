"""Windows Core Audio bindings exposing the win_audio addon functions.

Used when no compiled ``win_audio`` addon is present. Volumes are read and
written as 0..1 scalars, exactly like the compiled addon reports them.
"""

import threading
from typing import Any

from audio_controller.device_control import MIC, SPEAKER
from audio_controller.errors import BackendUnavailableError
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)


class PycawAudio:
    """
    win_audio-compatible object backed by pycaw's IAudioEndpointVolume.
    """

    def __init__(self):
        self._module_cache = {}
        self._local = threading.local()
        # Fail early when pycaw/comtypes are not installed.
        self._lazy_import("pycaw.pycaw", "AudioUtilities")
        self._lazy_import("comtypes", "CLSCTX_ALL")

    def _lazy_import(self, module_name: str, attr: str = None) -> Any:
        if module_name in self._module_cache:
            module = self._module_cache[module_name]
        else:
            module = __import__(
                module_name, fromlist=["*"] if "." in module_name else []
            )
            self._module_cache[module_name] = module

        if attr:
            return getattr(module, attr)
        return module

    def _ensure_com(self):
        # COM has to be initialized on every worker thread that calls in.
        if not getattr(self._local, "com_ready", False):
            self._lazy_import("comtypes").CoInitialize()
            self._local.com_ready = True

    def _endpoint(self, device: str):
        self._ensure_com()
        POINTER = self._lazy_import("ctypes", "POINTER")
        cast = self._lazy_import("ctypes", "cast")
        CLSCTX_ALL = self._lazy_import("comtypes", "CLSCTX_ALL")
        AudioUtilities = self._lazy_import("pycaw.pycaw", "AudioUtilities")
        IAudioEndpointVolume = self._lazy_import("pycaw.pycaw", "IAudioEndpointVolume")

        if device == SPEAKER:
            endpoint_device = AudioUtilities.GetSpeakers()
        else:
            endpoint_device = AudioUtilities.GetMicrophone()
        if endpoint_device is None:
            raise BackendUnavailableError(f"No default Windows {device} device.")

        # Newer pycaw wraps the device and exposes the endpoint directly.
        endpoint = getattr(endpoint_device, "EndpointVolume", None)
        if endpoint is not None:
            return endpoint
        interface = endpoint_device.Activate(
            IAudioEndpointVolume._iid_, CLSCTX_ALL, None
        )
        return cast(interface, POINTER(IAudioEndpointVolume))

    def _get_volume(self, device: str) -> float:
        return self._endpoint(device).GetMasterVolumeLevelScalar()

    def _set_volume(self, device: str, volume: int) -> None:
        self._endpoint(device).SetMasterVolumeLevelScalar(volume / 100.0, None)
        logger.debug(f"Windows {device} volume set: {volume}%")

    def _set_mute(self, device: str, muted: bool) -> None:
        self._endpoint(device).SetMute(int(muted), None)

    def _get_mute(self, device: str) -> bool:
        return bool(self._endpoint(device).GetMute())

    def getSpeakerVolume(self) -> float:
        return self._get_volume(SPEAKER)

    def setSpeakerVolume(self, volume: int) -> None:
        self._set_volume(SPEAKER, volume)

    def muteSpeaker(self) -> None:
        self._set_mute(SPEAKER, True)

    def unmuteSpeaker(self) -> None:
        self._set_mute(SPEAKER, False)

    def isSpeakerMuted(self) -> bool:
        return self._get_mute(SPEAKER)

    def getMicVolume(self) -> float:
        return self._get_volume(MIC)

    def setMicVolume(self, volume: int) -> None:
        self._set_volume(MIC, volume)

    def muteMic(self) -> None:
        self._set_mute(MIC, True)

    def unmuteMic(self) -> None:
        self._set_mute(MIC, False)

    def isMicMuted(self) -> bool:
        return self._get_mute(MIC)
