"""Tests for the macOS AppleScript speaker and mac_audio microphone."""

import sys
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from audio_controller.backend import BackendKind
from audio_controller.errors import (
    CommandFailedError,
    InvalidVolumeError,
    NotSupportedError,
    VolumeParseError,
)
from audio_controller.platforms import macos


class FakeAppleScript:
    def __init__(self, volume="42", muted="true"):
        self.replies = {
            macos.GET_VOLUME_SCRIPT: volume,
            macos.GET_MUTED_SCRIPT: muted,
        }
        self.scripts = []

    def __call__(self, source):
        self.scripts.append(source)
        return self.replies.get(source, "")


class MacMicAddon:
    def __init__(self):
        self.volume = 0.3
        self.muted = False

    def getMicVolume(self):
        return self.volume

    def setMicVolume(self, v):
        self.volume = v

    def muteMic(self):
        self.muted = True

    def unmuteMic(self):
        self.muted = False

    def isMicMuted(self):
        return self.muted


@pytest.fixture
def no_mac_addon():
    with patch.object(macos, "load_native_addon", return_value=None) as loader:
        yield loader


class TestSpeaker:
    @pytest.mark.asyncio
    async def test_get_set_and_mute_state(self, no_mac_addon):
        script = FakeAppleScript()
        audio = macos.create_controller(script_runner=script)

        assert await audio.speaker.get() == 42
        await audio.speaker.set(55)
        assert script.scripts[-1] == "set volume output volume 55"
        assert await audio.speaker.is_muted() is True

    @pytest.mark.asyncio
    async def test_mute_and_unmute_scripts(self, no_mac_addon):
        script = FakeAppleScript()
        audio = macos.create_controller(script_runner=script)
        await audio.speaker.mute()
        await audio.speaker.unmute()
        assert script.scripts == [
            "set volume output muted true",
            "set volume output muted false",
        ]

    @pytest.mark.asyncio
    async def test_set_clamps_and_validates(self, no_mac_addon):
        script = FakeAppleScript()
        audio = macos.create_controller(script_runner=script)
        await audio.speaker.set(200)
        assert script.scripts[-1] == "set volume output volume 100"
        with pytest.raises(InvalidVolumeError):
            await audio.speaker.set(float("nan"))
        assert len(script.scripts) == 1

    @pytest.mark.asyncio
    async def test_unmuted_reply(self, no_mac_addon):
        audio = macos.create_controller(script_runner=FakeAppleScript(muted="false"))
        assert await audio.speaker.is_muted() is False

    @pytest.mark.asyncio
    async def test_bad_volume_reply(self, no_mac_addon):
        audio = macos.create_controller(script_runner=FakeAppleScript(volume="missing value"))
        with pytest.raises(VolumeParseError):
            await audio.speaker.get()


class TestMic:
    @pytest.mark.asyncio
    async def test_without_addon_every_operation_is_unsupported(self, no_mac_addon):
        audio = macos.create_controller(script_runner=FakeAppleScript())
        assert audio.backend.kind is BackendKind.NONE
        for call in (audio.mic.get, audio.mic.mute, audio.mic.unmute, audio.mic.is_muted):
            with pytest.raises(NotSupportedError, match="mac_audio"):
                await call()
        with pytest.raises(NotImplementedError):
            await audio.mic.set(10)

    @pytest.mark.asyncio
    async def test_injected_addon(self):
        addon = MacMicAddon()
        audio = macos.create_controller(script_runner=FakeAppleScript(), addon=addon)
        assert audio.backend.kind is BackendKind.NATIVE_ADDON
        assert audio.backend.source == "injected"

        assert await audio.mic.get() == 30
        await audio.mic.set(64.5)
        assert addon.volume == 65
        await audio.mic.mute()
        assert await audio.mic.is_muted() is True
        await audio.mic.unmute()
        assert await audio.mic.is_muted() is False


class TestRunAppleScript:
    def test_returns_trimmed_output(self):
        fake = SimpleNamespace(run=MagicMock(return_value=SimpleNamespace(code=0, out="42\n", err="")))
        with patch.dict(sys.modules, {"applescript": fake}):
            assert macos.run_applescript(macos.GET_VOLUME_SCRIPT) == "42"
        fake.run.assert_called_once_with(macos.GET_VOLUME_SCRIPT)

    def test_error_code_raises(self):
        result = SimpleNamespace(code=1, out="", err="execution error: Not authorized")
        fake = SimpleNamespace(run=MagicMock(return_value=result))
        with patch.dict(sys.modules, {"applescript": fake}):
            with pytest.raises(CommandFailedError, match="Not authorized"):
                macos.run_applescript("set volume output muted true")
