"""Errors raised by audio control operations."""

from typing import Optional, Sequence


class AudioControlError(Exception):
    """Base class for every audio control failure."""


class BackendUnavailableError(AudioControlError):
    """No usable mechanism was found for this platform."""


class NotSupportedError(AudioControlError, NotImplementedError):
    """The platform or device has no backend for this operation."""


class VolumeParseError(AudioControlError, ValueError):
    """Tool output could not be converted to a volume."""

    def __init__(self, raw: str):
        super().__init__(f"Failed to parse volume from output: {raw!r}")
        self.raw = raw


class InvalidVolumeError(AudioControlError, TypeError):
    """A volume that is not a finite number was passed to set()."""

    def __init__(self, value):
        super().__init__(f"volume must be a finite number, got {value!r}")
        self.value = value


class CommandFailedError(AudioControlError):
    """An external command or script could not be run or exited non-zero."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"Failed to run command: {' '.join(self.cmd)} -> {detail}")


class ConfigurationError(AudioControlError, ValueError):
    """A backend option names something that cannot be used."""
