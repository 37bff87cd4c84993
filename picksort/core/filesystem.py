import errno
import logging
import os
import shutil
from pathlib import Path

from .errors import CrossDeviceError

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """
    The filesystem operations the transfer routine needs.

    Everything goes through this class so callers (and tests) can swap in a
    variant that fails on purpose. ``rename`` reports a move across volumes
    as :class:`CrossDeviceError` instead of a platform specific errno.
    """

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def exists(self, path: Path) -> bool:
        # lexists: a dangling symlink still occupies the name
        return os.path.lexists(path)

    def copy_file(self, src: Path, dst: Path) -> None:
        try:
            shutil.copy2(str(src), str(dst))
        except BaseException:
            # Never leave a half written file behind
            if os.path.lexists(dst):
                try:
                    os.remove(dst)
                except OSError as cleanup_err:
                    logger.warning("Could not remove partial copy %s: %s", dst, cleanup_err)
            raise

    def rename(self, src: Path, dst: Path) -> None:
        try:
            os.rename(src, dst)
        except OSError as e:
            if e.errno == errno.EXDEV:
                raise CrossDeviceError(e.errno, e.strerror, str(src)) from e
            raise

    def remove(self, path: Path) -> None:
        os.remove(path)
