import logging
from pathlib import Path

from .errors import ScanError

logger = logging.getLogger(__name__)

IMAGE_EXT = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg"}


def is_image(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXT


def list_images(folder: Path | str) -> list[Path]:
    """Image files directly inside ``folder`` (no sub folders), sorted by name."""
    folder = Path(folder)
    try:
        entries = list(folder.iterdir())
    except OSError as e:
        raise ScanError(f"Cannot read folder {folder}: {e.strerror or e}") from e

    files = [p for p in entries if is_image(p) and p.is_file()]
    files.sort(key=lambda p: p.name.lower())
    logger.info("Found %d image(s) in %s", len(files), folder)
    return files
