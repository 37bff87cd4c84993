import logging
from pathlib import Path

from PIL import Image
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QImage, QPainter
from PySide6.QtSvg import QSvgRenderer

from ..core.image_loader import VECTOR_EXT, load_pil_image

logger = logging.getLogger(__name__)

# Longest edge when rendering an SVG without a size limit (full viewer)
SVG_FULL_SIZE = 2048


def pil_to_qimage(img: Image.Image) -> QImage:
    if img.mode in ("P", "RGBA", "LA", "PA"):
        img = img.convert("RGBA")
        fmt = QImage.Format_RGBA8888
        bpp = 4
    elif img.mode != "RGB":
        img = img.convert("RGB")
        fmt = QImage.Format_RGB888
        bpp = 3
    else:
        fmt = QImage.Format_RGB888
        bpp = 3

    w, h = img.size
    data = img.tobytes("raw", img.mode)
    qimg = QImage(data, w, h, w * bpp, fmt)
    # Detach from the Python buffer before it is garbage collected
    return qimg.copy()


def render_svg(path: Path, max_size: int | None = None) -> QImage:
    renderer = QSvgRenderer(str(path))
    if not renderer.isValid():
        return QImage()
    size = renderer.defaultSize()
    if size.isEmpty():
        size = QSize(SVG_FULL_SIZE, SVG_FULL_SIZE)
    limit = max_size or SVG_FULL_SIZE
    size = size.scaled(limit, limit, Qt.KeepAspectRatio)

    qimg = QImage(size, QImage.Format_ARGB32_Premultiplied)
    qimg.fill(Qt.transparent)
    painter = QPainter(qimg)
    renderer.render(painter)
    painter.end()
    return qimg


def load_qimage(path: Path, max_size: int | None = None) -> QImage | None:
    """Decode any supported image into a QImage (safe to call off the GUI thread)."""
    if path.suffix.lower() in VECTOR_EXT:
        qimg = render_svg(path, max_size)
    else:
        img = load_pil_image(path, max_size=max_size)
        if img is None:
            return None
        qimg = pil_to_qimage(img)
    if qimg.isNull():
        logger.debug("Null image for %s", path)
        return None
    return qimg
