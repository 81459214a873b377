import argparse
import asyncio
import logging
import sys

from audio_controller import AudioControlError, get_audio_controller
from audio_controller.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

DEMO_PAUSE_SECONDS = 3


def parse_args(argv=None):
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(description="System speaker/mic volume control")
    parser.add_argument(
        "--device",
        choices=["speaker", "mic"],
        default="speaker",
        help="Device to control (default: speaker)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log backend selection and every command",
    )
    parser.add_argument(
        "action",
        choices=["get", "set", "mute", "unmute", "status", "demo"],
        help="Operation to run",
    )
    parser.add_argument(
        "value",
        nargs="?",
        type=float,
        help="Volume 0-100 for the set action",
    )
    args = parser.parse_args(argv)
    if args.action == "set" and args.value is None:
        parser.error("set requires a volume value")
    return args


async def run_demo(audio) -> None:
    """Exercise both devices and put everything back afterwards."""
    initial_speaker = await audio.speaker.get()
    initial_speaker_muted = await audio.speaker.is_muted()
    initial_mic = await audio.mic.get()
    initial_mic_muted = await audio.mic.is_muted()

    print(f"Initial speaker: {initial_speaker} muted? {initial_speaker_muted}")
    print(f"Initial mic: {initial_mic} muted? {initial_mic_muted}")

    try:
        print("--- Speaker: set to 75 ---")
        await audio.speaker.set(75)
        print("Now:", await audio.speaker.get())
        await asyncio.sleep(DEMO_PAUSE_SECONDS)

        print("Muting speaker")
        await audio.speaker.mute()
        print("Muted?", await audio.speaker.is_muted())
        await asyncio.sleep(DEMO_PAUSE_SECONDS)

        print("Unmuting and set to 30")
        await audio.speaker.unmute()
        await audio.speaker.set(30)
        print("Now:", await audio.speaker.get())
        await asyncio.sleep(DEMO_PAUSE_SECONDS)

        print("--- Microphone: increase then mute ---")
        await audio.mic.set(min(100, initial_mic + 10))
        print("Mic now:", await audio.mic.get())
        await asyncio.sleep(DEMO_PAUSE_SECONDS)

        print("Muting mic")
        await audio.mic.mute()
        print("Mic muted?", await audio.mic.is_muted())
        await asyncio.sleep(DEMO_PAUSE_SECONDS)
    finally:
        logger.info("Restoring original speaker/mic values.")
        if initial_speaker_muted:
            await audio.speaker.mute()
        else:
            await audio.speaker.unmute()
        await audio.speaker.set(initial_speaker)

        if initial_mic_muted:
            await audio.mic.mute()
        else:
            await audio.mic.unmute()
        await audio.mic.set(initial_mic)


async def run_action(args) -> int:
    audio = get_audio_controller()
    logger.info(f"Backend: {audio.backend.kind.value} ({audio.backend.source or 'n/a'})")

    if args.action == "demo":
        await run_demo(audio)
        return 0

    device = getattr(audio, args.device)
    if args.action == "get":
        print(await device.get())
    elif args.action == "set":
        await device.set(args.value)
    elif args.action == "mute":
        await device.mute()
    elif args.action == "unmute":
        await device.unmute()
    elif args.action == "status":
        volume = await device.get()
        muted = await device.is_muted()
        print(f"{args.device}: volume={volume} muted={muted}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(run_action(args))
    except AudioControlError as e:
        logger.error(f"{args.action} failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
