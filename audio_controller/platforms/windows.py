"""Windows volume control through the win_audio native addon."""

from typing import Any, Iterable, Optional

from audio_controller.backend import UNAVAILABLE, BackendKind, BackendSelection
from audio_controller.device_control import (
    MIC,
    SPEAKER,
    AddonDeviceControl,
    AudioController,
    FailingDeviceControl,
)
from audio_controller.errors import BackendUnavailableError
from audio_controller.native_loader import DEVICE_FUNCTIONS, load_native_addon
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

ADDON_NAME = "win_audio"
ADDON_NATIVE_DIR = "win-audio"

ADDON_MISSING_MESSAGE = (
    "Native win_audio module not loaded. Build it with node-gyp "
    "(native/win-audio) or install pycaw and comtypes."
)


def _pycaw_addon():
    from audio_controller.platforms.pycaw_audio import PycawAudio

    return PycawAudio()


def select_backend(
    addon: Any = None,
    extra_dirs: Iterable = (),
    use_pycaw: bool = True,
) -> BackendSelection:
    fallbacks = [_pycaw_addon] if use_pycaw else []
    native = load_native_addon(
        ADDON_NAME,
        ADDON_NATIVE_DIR,
        injected=addon,
        extra_dirs=extra_dirs,
        fallbacks=fallbacks,
    )
    if native is None:
        return UNAVAILABLE
    if addon is not None:
        source = "injected"
    else:
        # module name for a built addon, class name for the pycaw fallback
        source = getattr(native, "__name__", type(native).__name__)
    return BackendSelection(BackendKind.NATIVE_ADDON, native, source)


def create_controller(
    addon: Any = None,
    extra_dirs: Iterable = (),
    use_pycaw: bool = True,
    selection: Optional[BackendSelection] = None,
) -> AudioController:
    if selection is None:
        selection = select_backend(addon, extra_dirs, use_pycaw)

    if selection.kind is BackendKind.NATIVE_ADDON:
        speaker = AddonDeviceControl(SPEAKER, selection.addon, DEVICE_FUNCTIONS[SPEAKER])
        mic = AddonDeviceControl(MIC, selection.addon, DEVICE_FUNCTIONS[MIC])
    else:
        speaker = FailingDeviceControl(
            SPEAKER, ADDON_MISSING_MESSAGE, BackendUnavailableError
        )
        mic = FailingDeviceControl(MIC, ADDON_MISSING_MESSAGE, BackendUnavailableError)

    return AudioController(speaker=speaker, mic=mic, backend=selection, system="Windows")
