"""The DeviceControl interface and the implementations shared by platforms."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Type

from audio_controller.backend import BackendSelection
from audio_controller.errors import AudioControlError, NotSupportedError
from audio_controller.normalizer import normalize_volume, validate_volume
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

SPEAKER = "speaker"
MIC = "mic"


class DeviceControl(ABC):
    """
    Volume and mute control of one default device.
    """

    device: str = SPEAKER

    @abstractmethod
    async def get(self) -> int:
        """Current volume, 0-100."""

    @abstractmethod
    async def set(self, volume) -> None:
        """Set the volume; raises InvalidVolumeError for non-finite input."""

    @abstractmethod
    async def mute(self) -> None:
        ...

    @abstractmethod
    async def unmute(self) -> None:
        ...

    @abstractmethod
    async def is_muted(self) -> bool:
        ...

    def __repr__(self):
        return f"<{type(self).__name__} {self.device}>"


@dataclass(frozen=True)
class AudioController:
    """
    Speaker and mic controls of the host, tagged with the chosen backend.
    """

    speaker: DeviceControl
    mic: DeviceControl
    backend: BackendSelection
    system: str


class FailingDeviceControl(DeviceControl):
    """
    Every operation raises the same error; used where no backend exists.
    """

    def __init__(
        self,
        device: str,
        message: str,
        error_cls: Type[AudioControlError] = NotSupportedError,
    ):
        self.device = device
        self._message = message
        self._error_cls = error_cls

    def _fail(self):
        raise self._error_cls(self._message)

    async def get(self) -> int:
        self._fail()

    async def set(self, volume) -> None:
        self._fail()

    async def mute(self) -> None:
        self._fail()

    async def unmute(self) -> None:
        self._fail()

    async def is_muted(self) -> bool:
        self._fail()


class AddonDeviceControl(DeviceControl):
    """Delegates to a native addon object.

    The addon exposes plain functions such as ``getSpeakerVolume()`` or
    ``muteMic()`` (see ``native_loader.DEVICE_FUNCTIONS``). Readings are raw
    and normalized here; addon calls block, so they run in a worker thread.
    """

    def __init__(self, device: str, addon: Any, functions: Dict[str, str]):
        self.device = device
        self._addon = addon
        self._functions = functions

    def _function(self, operation: str):
        name = self._functions[operation]
        func = getattr(self._addon, name, None)
        if not callable(func):
            raise NotSupportedError(
                f"Native addon does not provide {name}() for the {self.device}."
            )
        return func

    async def _call(self, operation: str, *args):
        func = self._function(operation)
        logger.debug(f"[{self.device}] addon {self._functions[operation]}{args}")
        return await asyncio.to_thread(func, *args)

    async def get(self) -> int:
        return normalize_volume(await self._call("get"))

    async def set(self, volume) -> None:
        await self._call("set", validate_volume(volume))

    async def mute(self) -> None:
        await self._call("mute")

    async def unmute(self) -> None:
        await self._call("unmute")

    async def is_muted(self) -> bool:
        return bool(await self._call("is_muted"))
