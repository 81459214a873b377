"""Linux volume control through pactl (PulseAudio/PipeWire) or amixer (ALSA)."""

import asyncio
from typing import Any, Dict, List, Optional, Union

from audio_controller.backend import (
    BackendKind,
    BackendSelection,
    CommandRunner,
    probe_linux_backend,
    run_command,
)
from audio_controller.device_control import (
    MIC,
    SPEAKER,
    AudioController,
    DeviceControl,
)
from audio_controller.errors import BackendUnavailableError
from audio_controller.native_loader import DEVICE_FUNCTIONS
from audio_controller.normalizer import (
    AMIXER_MUTED_RE,
    MUTED_TOKENS_RE,
    normalize_volume,
    parse_mute_text,
    parse_volume_text,
    validate_volume,
)
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

NO_BACKEND_MESSAGE = (
    "No supported audio backend found. "
    "Install pactl (pulseaudio-utils) or amixer (alsa-utils)."
)

DEFAULT_ALSA_CONTROLS = {SPEAKER: "Master", MIC: "Capture"}

# pactl sub-commands per device; "{volume}" is filled in by set().
PACTL_COMMANDS = {
    SPEAKER: {
        "get": ["pactl", "get-sink-volume", "@DEFAULT_SINK@"],
        "set": ["pactl", "set-sink-volume", "@DEFAULT_SINK@", "{volume}%"],
        "mute": ["pactl", "set-sink-mute", "@DEFAULT_SINK@", "1"],
        "unmute": ["pactl", "set-sink-mute", "@DEFAULT_SINK@", "0"],
        "is_muted": ["pactl", "get-sink-mute", "@DEFAULT_SINK@"],
    },
    MIC: {
        "get": ["pactl", "get-source-volume", "@DEFAULT_SOURCE@"],
        "set": ["pactl", "set-source-volume", "@DEFAULT_SOURCE@", "{volume}%"],
        "mute": ["pactl", "set-source-mute", "@DEFAULT_SOURCE@", "1"],
        "unmute": ["pactl", "set-source-mute", "@DEFAULT_SOURCE@", "0"],
        "is_muted": ["pactl", "get-source-mute", "@DEFAULT_SOURCE@"],
    },
}

# amixer switch arguments: playback uses mute/unmute, capture uses nocap/cap.
AMIXER_SWITCHES = {
    SPEAKER: {"mute": "mute", "unmute": "unmute"},
    MIC: {"mute": "nocap", "unmute": "cap"},
}


def amixer_commands(device: str, control: str) -> Dict[str, List[str]]:
    switches = AMIXER_SWITCHES[device]
    return {
        "get": ["amixer", "get", control],
        "set": ["amixer", "set", control, "{volume}%"],
        "mute": ["amixer", "set", control, switches["mute"]],
        "unmute": ["amixer", "set", control, switches["unmute"]],
        "is_muted": ["amixer", "get", control],
    }


class LinuxDeviceControl(DeviceControl):
    """One default sink/source driven through the selected command-line tool.

    When the selection carries a native addon, each operation calls the
    addon function if it exists and falls back to the tool otherwise.
    """

    def __init__(
        self,
        device: str,
        selection: BackendSelection,
        runner: CommandRunner = run_command,
        alsa_control: Optional[str] = None,
    ):
        self.device = device
        self.kind = selection.tool
        self._addon = selection.addon
        self._runner = runner

        if self.kind is BackendKind.PACTL:
            self._commands = PACTL_COMMANDS[device]
            self._muted_pattern = MUTED_TOKENS_RE
        elif self.kind is BackendKind.AMIXER:
            control = alsa_control or DEFAULT_ALSA_CONTROLS[device]
            self._commands = amixer_commands(device, control)
            self._muted_pattern = AMIXER_MUTED_RE
        else:
            self._commands = {}
            self._muted_pattern = MUTED_TOKENS_RE

    def _addon_function(self, operation: str):
        if self._addon is None:
            return None
        func = getattr(self._addon, DEVICE_FUNCTIONS[self.device][operation], None)
        return func if callable(func) else None

    async def _call_addon(self, operation: str, func, *args):
        logger.debug(f"[{self.device}] addon {DEVICE_FUNCTIONS[self.device][operation]}{args}")
        return await asyncio.to_thread(func, *args)

    async def _run(self, operation: str, **values) -> str:
        if not self._commands:
            raise BackendUnavailableError(NO_BACKEND_MESSAGE)
        cmd = [arg.format(**values) for arg in self._commands[operation]]
        output = await asyncio.to_thread(self._runner, cmd)
        logger.debug(f"[{self.device}] {' '.join(cmd)} -> {output.strip()!r}")
        return output

    async def get(self) -> int:
        func = self._addon_function("get")
        if func is not None:
            return normalize_volume(await self._call_addon("get", func))
        return parse_volume_text(await self._run("get"))

    async def set(self, volume) -> None:
        volume = validate_volume(volume)
        func = self._addon_function("set")
        if func is not None:
            await self._call_addon("set", func, volume)
        else:
            await self._run("set", volume=volume)

    async def mute(self) -> None:
        func = self._addon_function("mute")
        if func is not None:
            await self._call_addon("mute", func)
        else:
            await self._run("mute")

    async def unmute(self) -> None:
        func = self._addon_function("unmute")
        if func is not None:
            await self._call_addon("unmute", func)
        else:
            await self._run("unmute")

    async def is_muted(self) -> bool:
        func = self._addon_function("is_muted")
        if func is not None:
            return bool(await self._call_addon("is_muted", func))
        return parse_mute_text(await self._run("is_muted"), self._muted_pattern)


def create_controller(
    runner: CommandRunner = run_command,
    forced_backend: Optional[Union[str, BackendKind]] = None,
    addon: Any = None,
    alsa_controls: Optional[Dict[str, str]] = None,
) -> AudioController:
    """Probe the Linux backend once and build the speaker/mic pair.

    Args:
        runner: Runs a command list and returns stdout
        forced_backend: Use this kind instead of probing for a tool
        addon: Native-like object with the win_audio function names; missing
            functions fall back to pactl/amixer
        alsa_controls: amixer control names per device
    """
    selection = probe_linux_backend(runner, forced=forced_backend, addon=addon)
    controls = dict(DEFAULT_ALSA_CONTROLS, **(alsa_controls or {}))

    speaker = LinuxDeviceControl(SPEAKER, selection, runner, controls[SPEAKER])
    mic = LinuxDeviceControl(MIC, selection, runner, controls[MIC])
    return AudioController(speaker=speaker, mic=mic, backend=selection, system="Linux")
