"""Backend kinds, command execution and backend probing."""

import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union

from audio_controller.errors import CommandFailedError, ConfigurationError
from audio_controller.utils.logging_config import get_logger

logger = get_logger(__name__)

CommandRunner = Callable[[List[str]], str]


class BackendKind(Enum):
    NATIVE_ADDON = "native"
    PACTL = "pactl"
    AMIXER = "amixer"
    NONE = "none"


@dataclass(frozen=True)
class BackendSelection:
    """
    Backend chosen once at startup and handed to the platform adapters.

    With a native addon, ``fallback`` is the command-line tool used for any
    function the addon does not provide.
    """

    kind: BackendKind
    addon: Any = None
    source: str = ""
    fallback: BackendKind = BackendKind.NONE

    @property
    def available(self) -> bool:
        return self.kind is not BackendKind.NONE

    @property
    def tool(self) -> BackendKind:
        """Command-line tool behind this selection, NONE if there is none."""
        if self.kind is BackendKind.NATIVE_ADDON:
            return self.fallback
        return self.kind


UNAVAILABLE = BackendSelection(BackendKind.NONE)

# Probe order for Linux: richer PulseAudio/PipeWire tool first.
LINUX_PROBE_ORDER = (
    (BackendKind.PACTL, ["pactl", "--version"]),
    (BackendKind.AMIXER, ["amixer", "--version"]),
)


def run_command(cmd: List[str]) -> str:
    """Run a command and return its stdout.

    Raises:
        CommandFailedError: the command is missing or exits non-zero
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise CommandFailedError(cmd, stderr=str(e)) from e

    if result.returncode != 0:
        raise CommandFailedError(cmd, result.returncode, result.stderr or "")
    return result.stdout or ""


def as_backend_kind(value: Union[str, BackendKind]) -> BackendKind:
    if isinstance(value, BackendKind):
        return value
    try:
        return BackendKind(str(value).lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown backend {value!r}; expected one of "
            f"{', '.join(k.value for k in BackendKind)}"
        ) from None


def _probe_tools(runner: CommandRunner, probe_order: Sequence):
    for kind, cmd in probe_order:
        try:
            runner(list(cmd))
        except Exception as e:
            # Absence of one candidate is expected.
            logger.debug(f"Probe {cmd[0]} failed: {e}")
            continue
        return kind, cmd[0]
    return BackendKind.NONE, ""


def probe_linux_backend(
    runner: CommandRunner = run_command,
    forced: Optional[Union[str, BackendKind]] = None,
    addon: Any = None,
    probe_order: Sequence = LINUX_PROBE_ORDER,
) -> BackendSelection:
    """Pick the Linux backend.

    A forced tool kind wins outright. Otherwise the first tool in
    ``probe_order`` whose version query succeeds is selected; an injected
    native addon is layered on top of it and the tool serves whatever the
    addon lacks.

    Raises:
        ConfigurationError: unknown forced kind, or "native" forced without
            an addon
    """
    if forced is not None:
        kind = as_backend_kind(forced)
        if kind is not BackendKind.NATIVE_ADDON:
            logger.info(f"Linux audio backend forced: {kind.value}")
            return BackendSelection(kind, source="forced")
        if addon is None:
            raise ConfigurationError(
                "Backend 'native' was requested but no native addon was provided."
            )

    tool, source = _probe_tools(runner, probe_order)

    if addon is not None:
        logger.info(f"Linux audio backend: native addon (fallback: {tool.value})")
        return BackendSelection(
            BackendKind.NATIVE_ADDON,
            addon,
            "forced" if forced is not None else "injected",
            fallback=tool,
        )

    if tool is BackendKind.NONE:
        logger.warning("No Linux volume tool found (pactl/amixer).")
        return UNAVAILABLE

    logger.info(f"Linux audio backend: {tool.value}")
    return BackendSelection(tool, source=source)
