# encodingman/launcher.py

from __future__ import annotations
import os
import subprocess
import sys
from pathlib import Path
from typing import Union

from .errors import LaunchError

SYSTEM_DEFAULT = "system_default"


def _open_with_system_default(path: str) -> None:
    if sys.platform.startswith("win"):
        os.startfile(path)  # type: ignore[attr-defined]
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])


def launch(path: Union[str, Path], app: str = SYSTEM_DEFAULT) -> None:
    """Open ``path`` with ``app``, or with the OS default handler.

    Raises:
        LaunchError: the file or application is missing, or the process
            could not be started.
    """
    target = str(path)
    if not Path(target).exists():
        raise LaunchError(f"File not found: {target}", {"path": target})

    try:
        if not app or app == SYSTEM_DEFAULT:
            _open_with_system_default(target)
            return
        if not Path(app).exists():
            raise LaunchError(f"Application not found: {app}", {"app": app})
        subprocess.Popen([app, target])
    except OSError as exc:
        raise LaunchError(f"Failed to launch {app or SYSTEM_DEFAULT}: {exc}", {"path": target}) from exc
