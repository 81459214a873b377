"""Shared fakes for the audio backends."""

import pytest


class FakePactl:
    """Stateful stand-in for pactl; records every command it receives."""

    def __init__(self, sink_volume=100, source_volume=50, sink_muted=True, source_muted=False):
        self.volumes = {"@DEFAULT_SINK@": sink_volume, "@DEFAULT_SOURCE@": source_volume}
        self.muted = {"@DEFAULT_SINK@": sink_muted, "@DEFAULT_SOURCE@": source_muted}
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(cmd)
        if cmd[0] != "pactl":
            raise FileNotFoundError(cmd[0])
        if cmd[1] == "--version":
            return "pactl 16.1\n"

        sub, target = cmd[1], cmd[2]
        if sub.startswith("get-") and sub.endswith("-volume"):
            v = self.volumes[target]
            raw = round(v * 65536 / 100)
            return (
                f"Volume: front-left: {raw} / {v}% / 0.00 dB,   "
                f"front-right: {raw} / {v}% / 0.00 dB\n"
            )
        if sub.endswith("-volume"):
            self.volumes[target] = int(cmd[3].rstrip("%"))
            return ""
        if sub.startswith("get-") and sub.endswith("-mute"):
            return f"Mute: {'yes' if self.muted[target] else 'no'}\n"
        if sub.endswith("-mute"):
            self.muted[target] = cmd[3] == "1"
            return ""
        raise AssertionError(f"unexpected pactl command: {cmd}")


class FakeAddon:
    """Native addon double with the win_audio function names."""

    def __init__(self, speaker_volume=0.55, mic_volume=77):
        self.speaker_volume = speaker_volume
        self.mic_volume = mic_volume
        self.speaker_muted = False
        self.mic_muted = False
        self.speaker_set = None
        self.mic_set = None

    def getSpeakerVolume(self):
        return self.speaker_volume

    def setSpeakerVolume(self, v):
        self.speaker_set = v
        self.speaker_volume = v

    def muteSpeaker(self):
        self.speaker_muted = True

    def unmuteSpeaker(self):
        self.speaker_muted = False

    def isSpeakerMuted(self):
        return self.speaker_muted

    def getMicVolume(self):
        return self.mic_volume

    def setMicVolume(self, v):
        self.mic_set = v
        self.mic_volume = v

    def muteMic(self):
        self.mic_muted = True

    def unmuteMic(self):
        self.mic_muted = False

    def isMicMuted(self):
        return self.mic_muted


@pytest.fixture
def fake_pactl():
    return FakePactl()


@pytest.fixture
def fake_addon():
    return FakeAddon()
