"""macOS volume control.

The speaker goes through AppleScript ``volume settings``; the microphone needs
the ``mac_audio`` native addon.
"""

import asyncio
from typing import Any, Callable, Iterable, Optional

from audio_controller.backend import UNAVAILABLE, BackendKind, BackendSelection
from audio_controller.device_control import (
    MIC,
    SPEAKER,
    AddonDeviceControl,
    AudioController,
    DeviceControl,
    FailingDeviceControl,
)
from audio_controller.errors import CommandFailedError, VolumeParseError
from audio_controller.native_loader import DEVICE_FUNCTIONS, load_native_addon
from audio_controller.normalizer import clamp_volume, validate_volume
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

ScriptRunner = Callable[[str], str]

ADDON_NAME = "mac_audio"
ADDON_NATIVE_DIR = "macos"

MIC_MISSING_MESSAGE = (
    "Microphone control is not implemented on macOS in this build. "
    "Build the native mac_audio addon."
)

GET_VOLUME_SCRIPT = "output volume of (get volume settings)"
SET_VOLUME_SCRIPT = "set volume output volume {volume}"
GET_MUTED_SCRIPT = "output muted of (get volume settings)"
SET_MUTED_SCRIPT = "set volume output muted {muted}"


def run_applescript(source: str) -> str:
    """Run one AppleScript expression and return its trimmed reply.

    Raises:
        CommandFailedError: the script returned a non-zero code
    """
    import applescript

    result = applescript.run(source)
    if result.code != 0:
        raise CommandFailedError(["osascript", "-e", source], result.code, result.err or "")
    return (result.out or "").strip()


class MacSpeakerControl(DeviceControl):
    """
    Default output device through AppleScript.
    """

    device = SPEAKER

    def __init__(self, script_runner: ScriptRunner = run_applescript):
        self._run_script = script_runner

    async def _script(self, source: str) -> str:
        logger.debug(f"[speaker] applescript: {source}")
        return await asyncio.to_thread(self._run_script, source)

    async def get(self) -> int:
        out = await self._script(GET_VOLUME_SCRIPT)
        try:
            return clamp_volume(int(out.strip()))
        except ValueError:
            raise VolumeParseError(out) from None

    async def set(self, volume) -> None:
        await self._script(SET_VOLUME_SCRIPT.format(volume=validate_volume(volume)))

    async def mute(self) -> None:
        await self._script(SET_MUTED_SCRIPT.format(muted="true"))

    async def unmute(self) -> None:
        await self._script(SET_MUTED_SCRIPT.format(muted="false"))

    async def is_muted(self) -> bool:
        out = await self._script(GET_MUTED_SCRIPT)
        return out.strip().lower() in ("true", "yes")


def select_backend(
    addon: Any = None, extra_dirs: Iterable = ()
) -> BackendSelection:
    """
    Locate the mac_audio addon once; the speaker does not depend on it.
    """
    native = load_native_addon(
        ADDON_NAME, ADDON_NATIVE_DIR, injected=addon, extra_dirs=extra_dirs
    )
    if native is None:
        return UNAVAILABLE
    source = "injected" if addon is not None else ADDON_NAME
    return BackendSelection(BackendKind.NATIVE_ADDON, native, source)


def create_controller(
    script_runner: ScriptRunner = run_applescript,
    addon: Any = None,
    extra_dirs: Iterable = (),
    selection: Optional[BackendSelection] = None,
) -> AudioController:
    if selection is None:
        selection = select_backend(addon, extra_dirs)

    speaker = MacSpeakerControl(script_runner)
    if selection.kind is BackendKind.NATIVE_ADDON:
        mic = AddonDeviceControl(MIC, selection.addon, DEVICE_FUNCTIONS[MIC])
    else:
        logger.info("mac_audio addon not loaded; microphone control disabled.")
        mic = FailingDeviceControl(MIC, MIC_MISSING_MESSAGE)

    return AudioController(speaker=speaker, mic=mic, backend=selection, system="Darwin")
