# encodingman/walk.py

from __future__ import annotations
from pathlib import Path
from typing import AbstractSet, Iterable, Iterator, List

from .classify import BINARY_EXTENSIONS, extension_of

TEXT_EXTENSIONS = frozenset({
    "csv", "tsv", "txt", "tab", "dat", "log", "json", "xml", "html", "htm",
    "md", "ini", "cfg", "sql", "srt", "yaml", "yml", "prn",
})

# office formats are listed so they show up as pass-through rows
RECOGNIZED_EXTENSIONS = TEXT_EXTENSIONS | BINARY_EXTENSIONS


def iter_files(root: Path, extensions: AbstractSet[str] = RECOGNIZED_EXTENSIONS) -> Iterator[Path]:
    """Iterate over files under a path, recursively if it's a directory.

    Files passed directly are always yielded; files found inside a
    directory are filtered by extension and yielded in sorted order.

    Args:
        root (Path): File or directory to scan.
        extensions (AbstractSet[str]): Lower-case extensions without the dot.

    Yields:
        Path: Paths to each file found.
    """
    if root.is_file():
        yield root
        return

    for p in sorted(root.rglob("*")):
        if p.is_file() and extension_of(p) in extensions:
            yield p


def expand_inputs(paths: Iterable[Path], extensions: AbstractSet[str] = RECOGNIZED_EXTENSIONS) -> List[Path]:
    """Flatten files and folders into one ordered, de-duplicated file list.

    Paths that do not exist are kept so the batch can report them.
    """
    seen = set()
    out: List[Path] = []
    for path in paths:
        path = Path(path)
        found = iter_files(path, extensions) if path.is_dir() else [path]
        for fp in found:
            key = fp.resolve()
            if key in seen:
                continue
            seen.add(key)
            out.append(fp)
    return out
