# src/dvln/workspace.py

from pathlib import Path

from .constants import DEFAULT_WKSPC_META_DIR
from .logs import getAppLogger


def find_workspace_root(
    start: str | Path | None = None, meta_dir: str = DEFAULT_WKSPC_META_DIR
) -> Path | None:
    """Walk up from `start` (default: cwd) to the first dir holding `meta_dir`.

    No workspace is normal and returns None. Filesystem problems (e.g. a
    start directory that does not exist) raise OSError for the caller to wrap.
    """
    logger = getAppLogger()
    current = Path(start).expanduser() if start else Path.cwd()
    current = current.resolve(strict=True)
    if not current.is_dir():
        xmsg = f"Not a directory: {current}"
        raise NotADirectoryError(xmsg)

    while True:
        candidate = current / meta_dir
        logger.trace("[find_workspace_root] Checking %s", candidate)
        if candidate.is_dir():
            return current
        parent = current.parent
        if parent == current:  # Reached filesystem root
            return None
        current = parent
