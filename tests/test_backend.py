"""Tests for command execution and Linux backend probing."""

from unittest.mock import MagicMock, patch

import pytest

from audio_controller.backend import (
    BackendKind,
    BackendSelection,
    probe_linux_backend,
    run_command,
)
from audio_controller.errors import CommandFailedError, ConfigurationError


def make_runner(available):
    """Runner that only knows the tools in ``available``."""
    calls = []

    def runner(cmd):
        calls.append(cmd)
        if cmd[0] in available:
            return f"{cmd[0]} 1.0"
        raise CommandFailedError(cmd, stderr=f"{cmd[0]}: command not found")

    runner.calls = calls
    return runner


class TestRunCommand:
    def test_returns_stdout(self):
        completed = MagicMock(returncode=0, stdout="Mute: no\n", stderr="")
        with patch("audio_controller.backend.subprocess.run", return_value=completed) as run:
            assert run_command(["pactl", "get-sink-mute", "@DEFAULT_SINK@"]) == "Mute: no\n"
        run.assert_called_once_with(
            ["pactl", "get-sink-mute", "@DEFAULT_SINK@"], capture_output=True, text=True
        )

    def test_non_zero_exit_raises(self):
        completed = MagicMock(returncode=1, stdout="", stderr="Connection failure")
        with patch("audio_controller.backend.subprocess.run", return_value=completed):
            with pytest.raises(CommandFailedError) as exc_info:
                run_command(["pactl", "get-sink-volume", "@DEFAULT_SINK@"])
        assert exc_info.value.returncode == 1
        assert "Connection failure" in str(exc_info.value)

    def test_missing_binary_raises(self):
        with patch(
            "audio_controller.backend.subprocess.run",
            side_effect=FileNotFoundError("No such file or directory: 'amixer'"),
        ):
            with pytest.raises(CommandFailedError) as exc_info:
                run_command(["amixer", "--version"])
        assert exc_info.value.cmd == ["amixer", "--version"]


class TestProbeLinuxBackend:
    def test_prefers_pactl_over_amixer(self):
        runner = make_runner({"pactl", "amixer"})
        selection = probe_linux_backend(runner)
        assert selection.kind is BackendKind.PACTL
        assert selection.source == "pactl"
        # amixer is never asked once pactl answered
        assert runner.calls == [["pactl", "--version"]]

    def test_falls_back_to_amixer(self):
        selection = probe_linux_backend(make_runner({"amixer"}))
        assert selection.kind is BackendKind.AMIXER

    def test_nothing_available(self):
        selection = probe_linux_backend(make_runner(set()))
        assert selection.kind is BackendKind.NONE
        assert selection.available is False

    def test_probe_swallows_any_exception(self):
        def runner(cmd):
            raise RuntimeError("boom")

        assert probe_linux_backend(runner).kind is BackendKind.NONE

    def test_forced_backend_skips_probing(self):
        runner = make_runner({"pactl"})
        selection = probe_linux_backend(runner, forced="amixer")
        assert selection.kind is BackendKind.AMIXER
        assert selection.source == "forced"
        assert runner.calls == []

    def test_forced_backend_accepts_enum(self):
        selection = probe_linux_backend(make_runner(set()), forced=BackendKind.NONE)
        assert selection.kind is BackendKind.NONE

    def test_unknown_forced_backend(self):
        with pytest.raises(ConfigurationError, match="Unknown backend"):
            probe_linux_backend(make_runner(set()), forced="oss")
        # still a ValueError for callers that validate input generically
        with pytest.raises(ValueError):
            probe_linux_backend(make_runner(set()), forced="pulse")

    def test_injected_addon_keeps_detected_tool(self, fake_addon):
        runner = make_runner({"amixer"})
        selection = probe_linux_backend(runner, addon=fake_addon)
        assert selection.kind is BackendKind.NATIVE_ADDON
        assert selection.addon is fake_addon
        assert selection.source == "injected"
        assert selection.fallback is BackendKind.AMIXER
        assert selection.tool is BackendKind.AMIXER
        assert runner.calls == [["pactl", "--version"], ["amixer", "--version"]]

    def test_injected_addon_without_tools(self, fake_addon):
        selection = probe_linux_backend(make_runner(set()), addon=fake_addon)
        assert selection.kind is BackendKind.NATIVE_ADDON
        assert selection.available is True
        assert selection.tool is BackendKind.NONE

    def test_forced_native_with_addon_still_finds_a_tool(self, fake_addon):
        selection = probe_linux_backend(
            make_runner({"pactl"}), forced="native", addon=fake_addon
        )
        assert selection.kind is BackendKind.NATIVE_ADDON
        assert selection.source == "forced"
        assert selection.fallback is BackendKind.PACTL

    def test_forced_native_without_addon_is_rejected(self):
        runner = make_runner({"pactl"})
        with pytest.raises(ConfigurationError, match="no native addon"):
            probe_linux_backend(runner, forced="native")
        assert runner.calls == []

    def test_forced_tool_ignores_addon(self, fake_addon):
        selection = probe_linux_backend(
            make_runner(set()), forced="pactl", addon=fake_addon
        )
        assert selection.kind is BackendKind.PACTL
        assert selection.addon is None

    def test_selection_is_immutable(self):
        selection = probe_linux_backend(make_runner({"pactl"}))
        with pytest.raises(AttributeError):
            selection.kind = BackendKind.AMIXER
        assert isinstance(selection, BackendSelection)
