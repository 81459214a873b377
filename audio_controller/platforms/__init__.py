"""
Platform adapters.

Each module exposes ``create_controller(**options) -> AudioController``:
- linux.py: pactl (PulseAudio/PipeWire) or amixer (ALSA)
- macos.py: AppleScript speaker, mac_audio addon microphone
- windows.py: win_audio addon, pycaw fallback (pycaw_audio.py)
"""
