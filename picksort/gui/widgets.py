from PySide6.QtCore import Qt, QSize, QPoint, Signal
from PySide6.QtGui import QPixmap, QPainter
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QListWidget, QListWidgetItem, QAbstractItemView,
    QGraphicsView, QGraphicsScene, QGraphicsPixmapItem
)

# Distance (px) from the bottom of the grid at which the next page is requested
LOAD_MORE_MARGIN = 300


# ------------------------------------------------------------
# Thumbnail cell: image + file name + check mark when selected
# ------------------------------------------------------------
class ThumbnailWidget(QWidget):
    def __init__(self, file_name: str, thumb_size: int, parent: QWidget | None = None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.thumb_size = thumb_size
        self.is_selected = False
        self._source_pixmap: QPixmap | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.image_label = QLabel()
        self.image_label.setFixedSize(thumb_size, thumb_size)
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setObjectName("ThumbImage")
        layout.addWidget(self.image_label, 0, Qt.AlignHCenter)

        self.name_label = QLabel(file_name)
        self.name_label.setAlignment(Qt.AlignCenter)
        self.name_label.setObjectName("ThumbName")
        self.name_label.setFixedWidth(thumb_size)
        layout.addWidget(self.name_label, 0, Qt.AlignHCenter)

        # Check mark overlay, top right corner of the image
        self.indicator = QLabel("✓", self.image_label)
        self.indicator.setObjectName("SelectionIndicator")
        self.indicator.setFixedSize(28, 28)
        self.indicator.setAlignment(Qt.AlignCenter)
        self._place_indicator()
        self.indicator.hide()

        self._update_style()

    def _place_indicator(self):
        self.indicator.move(self.thumb_size - self.indicator.width() - 6, 6)

    def set_selected(self, selected: bool):
        self.is_selected = selected
        self.indicator.setVisible(selected)
        self._update_style()

    def _update_style(self):
        border = "3px solid #4CAF50" if self.is_selected else "3px solid transparent"
        self.image_label.setStyleSheet(f"background: #2a2a2a; border: {border}; border-radius: 6px;")

    def set_pixmap(self, pixmap: QPixmap | None):
        if pixmap is None or pixmap.isNull():
            return
        self._source_pixmap = pixmap
        scale_mode = Qt.SmoothTransformation if self.thumb_size >= 100 else Qt.FastTransformation
        self.image_label.setPixmap(pixmap.scaled(
            self.thumb_size - 6,
            self.thumb_size - 6,
            Qt.KeepAspectRatio,
            scale_mode
        ))

    def update_thumb_size(self, size: int):
        self.thumb_size = size
        self.image_label.setFixedSize(size, size)
        self.name_label.setFixedWidth(size)
        self._place_indicator()
        # Rescale what we have until the reload at the new size arrives
        if self._source_pixmap is not None:
            self.set_pixmap(self._source_pixmap)


# ------------------------------------------------------------
# Grid of thumbnails. Click toggles selection, double click opens viewer.
# ------------------------------------------------------------
class ImageListWidget(QListWidget):
    itemToggled = Signal(QListWidgetItem)
    itemOpened = Signal(QListWidgetItem)
    zoomStep = Signal(int) # +1 / -1
    nearBottom = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._thumb_size = 200
        self._grid_padding_w = 20
        self._grid_padding_h = 40

        self.setViewMode(QListWidget.IconMode)
        self.setResizeMode(QListWidget.Adjust)
        self.setMovement(QListWidget.Static)
        self.setUniformItemSizes(True)
        self.setSpacing(8)
        # Our own selection set is the source of truth, not Qt's
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)
        self._apply_grid()

        self.verticalScrollBar().valueChanged.connect(self._check_near_bottom)
        self.verticalScrollBar().rangeChanged.connect(lambda *_: self._check_near_bottom())

    def _apply_grid(self):
        self.setIconSize(QSize(self._thumb_size, self._thumb_size))
        self.setGridSize(self.cell_size())

    def cell_size(self) -> QSize:
        return QSize(self._thumb_size + self._grid_padding_w, self._thumb_size + self._grid_padding_h)

    @property
    def thumb_size(self) -> int:
        return self._thumb_size

    def set_thumb_size(self, size: int):
        self._thumb_size = size
        self._apply_grid()
        cell = self.cell_size()
        for i in range(self.count()):
            item = self.item(i)
            widget = self.itemWidget(item)
            if isinstance(widget, ThumbnailWidget):
                widget.update_thumb_size(size)
            item.setSizeHint(cell)
        self._check_near_bottom()

    def _check_near_bottom(self, *_):
        sb = self.verticalScrollBar()
        # No scroll bar yet means everything fits: ask for more as well
        if sb.maximum() - sb.value() <= LOAD_MORE_MARGIN:
            self.nearBottom.emit()

    def _pos(self, event) -> QPoint:
        if hasattr(event, 'position'):
            return event.position().toPoint()
        return QPoint(event.x(), event.y())

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            item = self.itemAt(self._pos(event))
            if item is not None:
                self.setCurrentItem(item)
                self.itemToggled.emit(item)
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseDoubleClickEvent(self, event):
        item = self.itemAt(self._pos(event))
        if item is not None and event.button() == Qt.LeftButton:
            # The first press of the double click already toggled it; undo that
            self.itemToggled.emit(item)
            self.itemOpened.emit(item)
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key_Space:
            item = self.currentItem()
            if item is not None:
                self.itemToggled.emit(item)
            return
        if key in (Qt.Key_Return, Qt.Key_Enter) and not (event.modifiers() & Qt.ControlModifier):
            item = self.currentItem()
            if item is not None:
                self.itemOpened.emit(item)
            return
        super().keyPressEvent(event)

    def wheelEvent(self, event):
        if event.modifiers() & Qt.ControlModifier:
            delta = event.angleDelta().y()
            if delta:
                self.zoomStep.emit(1 if delta > 0 else -1)
            event.accept()
            return
        super().wheelEvent(event)


# ------------------------------------------------------------
# Zoomable / pannable image view used by the full-screen viewer
# ------------------------------------------------------------
class ImageView(QGraphicsView):
    zoomChanged = Signal(float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.pixmap_item = QGraphicsPixmapItem()
        self.pixmap_item.setTransformationMode(Qt.SmoothTransformation)
        self.scene.addItem(self.pixmap_item)

        self.setRenderHint(QPainter.SmoothPixmapTransform, True)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.AnchorViewCenter)
        self.setDragMode(QGraphicsView.ScrollHandDrag)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setStyleSheet("background: transparent; border: none;")
        self._current_zoom = 1.0
        self._fit_mode = True

    def set_pixmap(self, pixmap: QPixmap | None):
        if pixmap is None:
            self.pixmap_item.setPixmap(QPixmap())
            return
        self.pixmap_item.setPixmap(pixmap)
        self.scene.setSceneRect(self.pixmap_item.boundingRect())
        self.fit()

    def fit(self):
        self._fit_mode = True
        self.resetTransform()
        if not self.pixmap_item.pixmap().isNull():
            self.fitInView(self.pixmap_item, Qt.KeepAspectRatio)
        self._current_zoom = self.transform().m11()
        self.zoomChanged.emit(self._current_zoom)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self._fit_mode:
            self.fit()

    def wheelEvent(self, event):
        delta = event.angleDelta().y()
        if delta == 0:
            return
        factor = 1.1 if delta > 0 else 0.9
        new_zoom = self._current_zoom * factor
        if 0.05 <= new_zoom <= 20:
            self._fit_mode = False
            self.scale(factor, factor)
            self._current_zoom = self.transform().m11()
            self.zoomChanged.emit(self._current_zoom)
        event.accept()
