# Locate and load the mac_audio / win_audio native addons.
import importlib
import importlib.machinery
import importlib.util
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

from audio_controller.utils.logging_config import get_logger
from audio_controller.utils.resource_finder import get_search_dirs

logger = get_logger(__name__)

# Relative build output layouts, most specific first.
BUILD_LAYOUTS = (
    ("build", "Release"),
    ("native", "{native_dir}", "build", "Release"),
    ("native", "{native_dir}", "build", "Debug"),
)

# Addon capability functions per device.
DEVICE_FUNCTIONS = {
    "speaker": {
        "get": "getSpeakerVolume",
        "set": "setSpeakerVolume",
        "mute": "muteSpeaker",
        "unmute": "unmuteSpeaker",
        "is_muted": "isSpeakerMuted",
    },
    "mic": {
        "get": "getMicVolume",
        "set": "setMicVolume",
        "mute": "muteMic",
        "unmute": "unmuteMic",
        "is_muted": "isMicMuted",
    },
}


def get_search_paths(
    name: str, native_dir: str, extra_dirs: Iterable = ()
) -> List[Path]:
    """
    Directories that may hold a built addon, in lookup order.
    """
    roots = [Path(d) for d in extra_dirs] + get_search_dirs()
    search_paths: List[Path] = []
    for root in roots:
        for layout in BUILD_LAYOUTS:
            parts = [p.format(native_dir=native_dir) for p in layout]
            path = root.joinpath(*parts)
            if path not in search_paths:
                search_paths.append(path)
        # extra dirs may point straight at the output directory
        if root not in search_paths:
            search_paths.append(root)

    for path in search_paths:
        logger.debug(f"Addon search path for {name}: {path} (exists: {path.exists()})")
    return search_paths


def find_addon_file(name: str, directories: Sequence[Path]) -> Optional[Path]:
    for directory in directories:
        for suffix in importlib.machinery.EXTENSION_SUFFIXES:
            candidate = directory / f"{name}{suffix}"
            if candidate.is_file():
                return candidate
    return None


def load_addon_file(name: str, path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {name} from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_native_addon(
    name: str,
    native_dir: str,
    injected: Any = None,
    extra_dirs: Iterable = (),
    fallbacks: Sequence[Callable[[], Any]] = (),
) -> Optional[Any]:
    """Find the native addon object for this process.

    Lookup order: injected object, built file under a conventional build
    directory, importable module by name, then each fallback factory. Errors
    along the way only mean "not here" and are logged at debug level.

    Args:
        name: Module name of the addon, e.g. "win_audio"
        native_dir: Folder under native/ holding the addon sources
        injected: Object to use as-is (tests, custom bindings)
        extra_dirs: Additional directories to search first
        fallbacks: Factories tried last; return None when unusable

    Returns:
        The addon object, or None
    """
    if injected is not None:
        logger.info(f"Using injected {name} addon.")
        return injected

    addon_file = find_addon_file(name, get_search_paths(name, native_dir, extra_dirs))
    if addon_file:
        try:
            addon = load_addon_file(name, addon_file)
            logger.info(f"Loaded {name} addon from {addon_file}")
            return addon
        except Exception as e:
            logger.debug(f"Failed to load {name} from {addon_file}: {e}")

    try:
        addon = importlib.import_module(name)
        logger.info(f"Imported {name} addon module.")
        return addon
    except ImportError as e:
        logger.debug(f"Module {name} not importable: {e}")

    for factory in fallbacks:
        try:
            addon = factory()
        except Exception as e:
            logger.debug(f"{name} fallback {factory!r} failed: {e}")
            continue
        if addon is not None:
            logger.info(f"Using fallback for {name}: {type(addon).__name__}")
            return addon

    logger.warning(f"Native {name} addon not found.")
    return None
