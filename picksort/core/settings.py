from pathlib import Path

from PySide6.QtCore import QByteArray, QSettings

from .selection import DEFAULT_PAGE_SIZE
from .transfer import TransferMode

ORG_NAME = "picksort"
APP_NAME = "picksort"

DEFAULT_ZOOM = 100
MIN_ZOOM = 50
MAX_ZOOM = 300
BASE_THUMB_SIZE = 200
MIN_PAGE_SIZE = 12
MAX_PAGE_SIZE = 500


def _clamp(value, low, high, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, value))


class AppSettings:
    """UI state kept between sessions (last folders, mode, zoom, paging)."""

    def __init__(self, path: Path | str | None = None):
        if path is None:
            self._s = QSettings(ORG_NAME, APP_NAME)
        else:
            self._s = QSettings(str(path), QSettings.IniFormat)

    def _path(self, key: str) -> Path | None:
        raw = str(self._s.value(key, "") or "").strip()
        return Path(raw) if raw else None

    def _set_path(self, key: str, value: Path | None):
        self._s.setValue(key, str(value) if value else "")

    @property
    def source_folder(self) -> Path | None:
        return self._path("folders/source")

    @source_folder.setter
    def source_folder(self, value: Path | None):
        self._set_path("folders/source", value)

    @property
    def target_folder(self) -> Path | None:
        return self._path("folders/target")

    @target_folder.setter
    def target_folder(self, value: Path | None):
        self._set_path("folders/target", value)

    @property
    def mode(self) -> TransferMode:
        raw = str(self._s.value("transfer/mode", TransferMode.COPY.value))
        try:
            return TransferMode(raw)
        except ValueError:
            return TransferMode.COPY

    @mode.setter
    def mode(self, value: TransferMode | str):
        self._s.setValue("transfer/mode", TransferMode(value).value)

    @property
    def zoom(self) -> int:
        return _clamp(self._s.value("view/zoom", DEFAULT_ZOOM), MIN_ZOOM, MAX_ZOOM, DEFAULT_ZOOM)

    @zoom.setter
    def zoom(self, value: int):
        self._s.setValue("view/zoom", _clamp(value, MIN_ZOOM, MAX_ZOOM, DEFAULT_ZOOM))

    @property
    def page_size(self) -> int:
        return _clamp(self._s.value("view/page_size", DEFAULT_PAGE_SIZE),
                      MIN_PAGE_SIZE, MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE)

    @page_size.setter
    def page_size(self, value: int):
        self._s.setValue("view/page_size",
                         _clamp(value, MIN_PAGE_SIZE, MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE))

    @property
    def window_geometry(self) -> QByteArray | None:
        geo = self._s.value("window/geometry")
        return geo if isinstance(geo, QByteArray) else None

    @window_geometry.setter
    def window_geometry(self, value: QByteArray):
        self._s.setValue("window/geometry", value)

    def sync(self):
        self._s.sync()


def thumb_size_for_zoom(zoom: int) -> int:
    return int(BASE_THUMB_SIZE * zoom / 100)
