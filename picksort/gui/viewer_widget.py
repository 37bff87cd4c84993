from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame

from .widgets import ImageView


class FullViewerWidget(QWidget):
    request_next = Signal()
    request_prev = Signal()
    request_close = Signal()
    request_toggle = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("FullViewer")
        self.setFocusPolicy(Qt.StrongFocus)
        self.current_path: Path | None = None

        self.main_layout = QVBoxLayout(self)
        self.main_layout.setContentsMargins(0, 0, 0, 0)
        self.main_layout.setSpacing(0)

        self.image_view = ImageView(self)
        self.image_view.setFocusPolicy(Qt.NoFocus)
        self.image_view.zoomChanged.connect(self._on_zoom_changed)
        self.main_layout.addWidget(self.image_view)

        self._setup_overlays()

    def _setup_overlays(self):
        # Top Bar (Filename, position, Close)
        self.top_bar = QFrame(self)
        self.top_bar.setObjectName("ViewerBar")
        self.top_bar.setFixedHeight(50)
        top_layout = QHBoxLayout(self.top_bar)
        top_layout.setContentsMargins(20, 0, 20, 0)

        self.lbl_filename = QLabel("")
        self.lbl_filename.setObjectName("ViewerTitle")
        top_layout.addWidget(self.lbl_filename)

        self.lbl_position = QLabel("")
        self.lbl_position.setObjectName("ViewerInfo")
        top_layout.addWidget(self.lbl_position)
        top_layout.addStretch()

        self.btn_close = QPushButton("Exit Viewer")
        self.btn_close.setObjectName("ViewerButton")
        self.btn_close.setFocusPolicy(Qt.NoFocus)
        self.btn_close.clicked.connect(self.request_close.emit)
        top_layout.addWidget(self.btn_close)

        # Bottom Bar (Navigation, Selection, Zoom)
        self.bottom_bar = QFrame(self)
        self.bottom_bar.setObjectName("ViewerBar")
        self.bottom_bar.setFixedHeight(64)
        bot_layout = QHBoxLayout(self.bottom_bar)
        bot_layout.setContentsMargins(20, 0, 20, 0)

        self.btn_prev = QPushButton("◀")
        self.btn_next = QPushButton("▶")
        self.btn_select = QPushButton("Select")
        self.btn_select.setCheckable(True)
        self.btn_fit = QPushButton("Fit")
        for btn in (self.btn_prev, self.btn_next, self.btn_select, self.btn_fit):
            btn.setObjectName("ViewerButton")
            btn.setFocusPolicy(Qt.NoFocus)
        self.btn_prev.clicked.connect(self.request_prev.emit)
        self.btn_next.clicked.connect(self.request_next.emit)
        self.btn_select.clicked.connect(lambda _checked: self.request_toggle.emit())
        self.btn_fit.clicked.connect(self.image_view.fit)

        self.lbl_zoom = QLabel("")
        self.lbl_zoom.setObjectName("ViewerInfo")

        bot_layout.addWidget(self.btn_prev)
        bot_layout.addStretch()
        bot_layout.addWidget(self.btn_select)
        bot_layout.addWidget(self.btn_fit)
        bot_layout.addWidget(self.lbl_zoom)
        bot_layout.addStretch()
        bot_layout.addWidget(self.btn_next)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.top_bar.setGeometry(0, 0, self.width(), self.top_bar.height())
        self.bottom_bar.setGeometry(0, self.height() - self.bottom_bar.height(), self.width(), self.bottom_bar.height())
        self.top_bar.raise_()
        self.bottom_bar.raise_()

    def _on_zoom_changed(self, factor: float):
        self.lbl_zoom.setText(f"{factor * 100:.0f}%")

    def load_image(self, path: Path, pixmap: QPixmap | None, index: int, total: int, selected: bool):
        self.current_path = path
        self.lbl_filename.setText(path.name)
        self.lbl_position.setText(f"{index + 1} / {total}")
        self.image_view.set_pixmap(pixmap)
        self.set_selected(selected)
        self.setFocus()

    def set_selected(self, selected: bool):
        self.btn_select.setChecked(selected)
        self.btn_select.setText("Selected ✓" if selected else "Select")

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key_Left:
            self.request_prev.emit()
        elif key == Qt.Key_Right:
            self.request_next.emit()
        elif key == Qt.Key_Escape:
            self.request_close.emit()
        elif key == Qt.Key_Space:
            self.request_toggle.emit()
        elif key == Qt.Key_0:
            self.image_view.fit()
        else:
            super().keyPressEvent(event)
