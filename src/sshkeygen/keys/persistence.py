"""All-or-nothing key file writes."""

import contextlib
import os
import tempfile
from pathlib import Path

from sshkeygen.common.errors import PersistenceError
from sshkeygen.common.logging import get_logger

logger = get_logger(__name__)


def write_atomic(path: str | Path, data: bytes, mode: int) -> None:
    """
    Write ``data`` to ``path`` so the target is never seen half-written.

    The bytes go to a temporary file in the target's directory, which is
    flushed, synced and chmod-ed before being renamed over the target.

    Args:
        path: Destination file
        data: Full file contents
        mode: Permission bits for the final file (e.g. 0o600)

    Raises:
        PersistenceError: If any step fails; the target is left untouched
    """
    path = Path(path)
    directory = path.parent

    try:
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".tmpkey-")
    except OSError as e:
        raise PersistenceError(f"cannot create temporary file for {path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
            os.fchmod(f.fileno(), mode)
        os.replace(tmp_name, path)
    except OSError as e:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise PersistenceError(f"failed to write {path}: {e}") from e

    _sync_directory(directory)
    logger.debug("Wrote key file", path=str(path), mode=oct(mode), size=len(data))


def _sync_directory(directory: Path) -> None:
    # Makes the rename durable; not every platform can open a directory.
    try:
        dir_fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(dir_fd)
    except OSError as e:
        logger.debug("Directory fsync failed", directory=str(directory), error=str(e))
    finally:
        os.close(dir_fd)


def remove_quietly(path: str | Path) -> bool:
    """
    Best-effort delete used to roll back a half-written key pair.

    Returns:
        True if the file is gone afterwards
    """
    try:
        os.unlink(path)
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning("Failed to remove key file", path=str(path), error=str(e))
        return False
    logger.info("Removed key file", path=str(path))
    return True


def any_exists(*paths: str | Path) -> bool:
    """Return True if any of the paths already exists."""
    return any(Path(p).exists() for p in paths)
