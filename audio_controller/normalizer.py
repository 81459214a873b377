"""Conversion of backend readings into canonical 0-100 volumes.

Native addons report either a 0..1 scalar or an already scaled 0..100 number;
command-line tools report free text. Everything ends up as an ``int`` in
``[MIN_VOLUME, MAX_VOLUME]``.

A raw reading of exactly ``1`` is taken as the scalar 1.0, i.e. 100%. The
win_audio and mac_audio addons report integer percentages, so a volume of 1%
set through them reads back as 100.
"""

import math
import numbers
import re
from typing import Union

from audio_controller.errors import InvalidVolumeError, VolumeParseError

MIN_VOLUME = 0
MAX_VOLUME = 100

# Largest raw value still treated as a 0..1 scalar.
SCALAR_CEILING = 1

_PERCENT_RE = re.compile(r"(\d+)%")

# pactl "Mute: yes", AppleScript "true".
MUTED_TOKENS_RE = re.compile(r"yes|true", re.IGNORECASE)
# amixer "[off]" on playback switches, "[mute]" on some drivers.
AMIXER_MUTED_RE = re.compile(r"\[off\]|\[mute\]", re.IGNORECASE)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_volume(value: Union[int, float]) -> int:
    """
    Round to the nearest integer and clamp to the volume range.
    """
    return max(MIN_VOLUME, min(MAX_VOLUME, _round_half_up(value)))


def normalize_volume(raw: Union[int, float]) -> int:
    """Normalize a numeric backend reading.

    Args:
        raw: Reading from a native addon, either 0..1 or 0..100

    Returns:
        int: Volume in 0..100
    """
    value = float(raw)
    if math.isnan(value):
        return MIN_VOLUME
    if value <= SCALAR_CEILING:
        value *= 100
    if math.isinf(value):
        return MAX_VOLUME if value > 0 else MIN_VOLUME
    return clamp_volume(value)


def parse_volume_text(text: str) -> int:
    """Parse the volume out of command output.

    The first ``<digits>%`` wins ("Volume: front-left: 65536 / 100% / 0.00 dB"
    gives 100). Without one, the whole trimmed text must be a number.
    """
    match = _PERCENT_RE.search(text)
    if match:
        return clamp_volume(int(match.group(1)))

    try:
        value = float(text.strip())
    except ValueError:
        raise VolumeParseError(text) from None
    if not math.isfinite(value):
        raise VolumeParseError(text)
    return clamp_volume(value)


def parse_mute_text(text: str, pattern: re.Pattern = MUTED_TOKENS_RE) -> bool:
    """
    True when the output contains one of the positive mute tokens.
    """
    return bool(pattern.search(text))


def validate_volume(value) -> int:
    """Check a requested volume and bring it into range.

    Raises:
        InvalidVolumeError: value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidVolumeError(value)
    if not math.isfinite(value):
        raise InvalidVolumeError(value)
    return clamp_volume(value)
