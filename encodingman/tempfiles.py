# encodingman/tempfiles.py

from __future__ import annotations
import logging
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from .errors import UnwritableOutput

logger = logging.getLogger(__name__)


def default_temp_root() -> Path:
    return Path(tempfile.gettempdir()) / "encodingman"


class TempFileManager:
    """Hands out collision-free output paths for converted files.

    Names follow ``<stem>_<tag><suffix>``; if that name is taken, ``_1``,
    ``_2``, ... are appended. Each name is reserved with an exclusive create,
    so concurrent conversions of same-named files never share an output.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else default_temp_root()
        self._owned: List[Path] = []
        self._lock = threading.Lock()

    def allocate(self, original: Path, tag: str = "utf8") -> Path:
        """Reserve and return a fresh output path for a conversion of ``original``."""
        original = Path(original)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise UnwritableOutput(f"Cannot create temp directory {self.root}: {exc}") from exc

        stem = original.stem or "converted"
        suffix = original.suffix
        candidate = self.root / f"{stem}_{tag}{suffix}"
        i = 1
        while True:
            if candidate.resolve() != original.resolve():
                try:
                    with candidate.open("xb"):
                        pass
                    break
                except FileExistsError:
                    pass
                except OSError as exc:
                    raise UnwritableOutput(f"Cannot create {candidate}: {exc}") from exc
            candidate = self.root / f"{stem}_{tag}_{i}{suffix}"
            i += 1

        with self._lock:
            self._owned.append(candidate)
        return candidate

    def cleanup(self, path: Path) -> bool:
        """Remove one output file. Returns True if something was deleted."""
        path = Path(path)
        with self._lock:
            if path in self._owned:
                self._owned.remove(path)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Could not delete temp file %s: %s", path, exc)
            return False

    def cleanup_all(self) -> int:
        """Remove every file this manager handed out. Returns how many were deleted."""
        with self._lock:
            owned, self._owned = self._owned, []
        removed = 0
        for path in owned:
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not delete temp file %s: %s", path, exc)
        return removed

    def purge(self) -> int:
        """Remove every file left in the root, including ones from earlier runs."""
        if not self.root.is_dir():
            return 0
        removed = 0
        for path in self.root.iterdir():
            if not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Could not delete temp file %s: %s", path, exc)
        with self._lock:
            self._owned = []
        return removed

    @property
    def owned(self) -> List[Path]:
        with self._lock:
            return list(self._owned)
