# resource_finder.py
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


class ResourceFinder:
    """
    Resolves project files (config, native addon build output) in a source
    checkout, an installed package, or a PyInstaller bundle.
    """

    _instance: "ResourceFinder" = None

    ENV_KEYS = ("AUDIO_CONTROLLER_HOME", "AUDIO_CONTROLLER_RESOURCES_DIR")

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, "_initd", False):
            return
        self._initd = True

        self._base_dir = self._runtime_base_dir()
        self._search_dirs = self._build_search_dirs()

    # -------------- Public API --------------

    def get_project_root(self) -> Path:
        """
        Return source root in dev, runtime base in packaged builds.
        """
        if not self._is_frozen():
            return self._detect_project_root(default=self._base_dir)
        return self._base_dir

    def get_search_dirs(self) -> List[Path]:
        return list(self._search_dirs)

    def find_directory(self, relpath: PathLike) -> Optional[Path]:
        """
        Find a directory by relative path.
        """
        return self._find(relpath, want_dir=True)

    def find_config_dir(self) -> Optional[Path]:
        return self.find_directory("config")

    # -------------- Internal implementation --------------

    def _is_frozen(self) -> bool:
        return getattr(sys, "frozen", False)

    def _runtime_base_dir(self) -> Path:
        """
        Unified runtime base dir: prefer _MEIPASS, then exe_dir, else project root.
        """
        if self._is_frozen():
            return Path(getattr(sys, "_MEIPASS", Path(sys.executable).parent)).resolve()
        # resource_finder.py is in project/audio_controller/utils → parents[2] is project/
        return self._detect_project_root(default=Path(__file__).resolve().parents[2])

    def _detect_project_root(self, default: Path) -> Path:
        """
        Walk upward for marker files/dirs to locate project root.
        """
        markers = {"pyproject.toml", "binding.gyp", ".git"}
        p = default
        for parent in [p] + list(p.parents):
            try:
                entries = {e.name for e in parent.iterdir()}
            except OSError:
                continue
            if markers & entries:
                return parent.resolve()
        return default.resolve()

    def _build_search_dirs(self) -> List[Path]:
        dirs: List[Path] = []

        # 0) Environment variables (highest priority).
        for key in self.ENV_KEYS:
            v = os.getenv(key)
            if v:
                p = Path(v).resolve()
                if p.exists():
                    dirs.append(p)

        # 1) Runtime base dir (_MEIPASS / exe_dir / project_root).
        dirs.append(self._base_dir)

        # 2) PyInstaller onedir v6: _internal next to executable.
        exe_dir = Path(sys.executable).parent.resolve()
        internal = exe_dir / "_internal"
        if self._is_frozen() and internal.exists():
            dirs.append(internal)

        # 3) Final fallback: cwd.
        try:
            dirs.append(Path.cwd().resolve())
        except OSError:
            pass

        # Deduplicate while preserving order.
        out, seen = [], set()
        for d in dirs:
            d = d.resolve()
            if d not in seen:
                out.append(d)
                seen.add(d)
        return out

    def _find(self, relpath: PathLike, want_dir: bool) -> Optional[Path]:
        rp = Path(relpath)
        if rp.is_absolute():
            try:
                ok = rp.is_dir() if want_dir else rp.is_file()
            except OSError:
                ok = False
            return rp if ok else None

        for base in self._search_dirs:
            p = (base / rp).resolve()
            try:
                ok = p.is_dir() if want_dir else p.is_file()
            except OSError:
                ok = False
            if ok:
                return p
        return None


# --------- Singleton and convenience functions ---------
resource_finder = ResourceFinder()


def get_project_root() -> Path:
    return resource_finder.get_project_root()


def get_search_dirs() -> List[Path]:
    return resource_finder.get_search_dirs()
