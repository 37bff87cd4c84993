import logging
from pathlib import Path

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

# Formats Pillow cannot decode; the GUI renders these itself
VECTOR_EXT = {".svg"}


def load_pil_image(path: Path, max_size: int | None = None) -> Image.Image | None:
    """Decode a raster image (first frame for GIF/WebP animations).

    Returns None for vector files or anything Pillow cannot read.
    """
    if path.suffix.lower() in VECTOR_EXT:
        return None

    try:
        img = Image.open(str(path))
        # Force load to check for integrity
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Cannot decode %s: %s", path, e)
        return None

    # Handle EXIF Orientation
    try:
        img = ImageOps.exif_transpose(img)
    except Exception as e:
        logger.debug("EXIF transpose failed for %s: %s", path.name, e)

    # Bilinear is fast enough while scrolling and looks fine at thumbnail size
    if max_size is not None:
        w, h = img.size
        if w > max_size or h > max_size:
            img.thumbnail((max_size, max_size), Image.BILINEAR)

    return img
