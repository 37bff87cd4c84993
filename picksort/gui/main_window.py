import logging
import os
import concurrent.futures
from pathlib import Path

from PySide6.QtCore import Qt, QThread, QTimer, Signal
from PySide6.QtGui import QImage, QPixmap, QShortcut, QKeySequence
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFileDialog,
    QListWidgetItem, QLabel, QMessageBox, QSlider, QFrame, QSizePolicy,
    QStackedWidget, QProgressBar, QRadioButton, QButtonGroup, QGraphicsDropShadowEffect
)

from ..core.errors import ScanError
from ..core.file_worker import FileOperationWorker
from ..core.scanner import list_images
from ..core.selection import SelectionModel
from ..core.settings import AppSettings, MIN_ZOOM, MAX_ZOOM, thumb_size_for_zoom
from ..core.transfer import BatchResult, TransferMode
from .styles import DARK_STYLE
from .utils import load_qimage
from .viewer_widget import FullViewerWidget
from .widgets import ThumbnailWidget, ImageListWidget

logger = logging.getLogger(__name__)

ZOOM_STEP = 10
# Failing files listed in the partial failure dialog
MAX_FAILURES_SHOWN = 10


class ImagePickerWindow(QMainWindow):
    thumbnail_loaded = Signal(str, int, int, QImage) # Path, load version, requested size, image
    preview_ready = Signal(str, QImage)

    def __init__(self, settings: AppSettings | None = None):
        super().__init__()
        self.setWindowTitle("PickSort")
        self.resize(1400, 900)
        self.setMinimumSize(800, 600)

        self.settings = settings or AppSettings()
        self.model = SelectionModel(page_size=self.settings.page_size)
        self.model.mode = self.settings.mode

        self.current_folder: Path | None = None
        self.target_folder: Path | None = self.settings.target_folder
        self.zoom_level: int = self.settings.zoom

        self._items: dict[Path, QListWidgetItem] = {}
        self._viewer_index: int | None = None
        self._prev_window_state = Qt.WindowNoState

        self.transfer_thread: QThread | None = None
        self.transfer_worker: FileOperationWorker | None = None

        # Keep decoding off the GUI thread without saturating the disk
        cpu = os.cpu_count() or 4
        self.thumb_executor = concurrent.futures.ThreadPoolExecutor(max_workers=min(cpu, 8))
        self.preview_executor = concurrent.futures.ThreadPoolExecutor(max_workers=2)
        self.thumb_load_version: int = 0
        # Size each grid thumbnail was last requested at
        self._decoded_sizes: dict[Path, int] = {}
        self.thumbnail_loaded.connect(self._apply_thumbnail)
        self.preview_ready.connect(self._on_preview_ready)

        self._thumb_reload_timer = QTimer(self)
        self._thumb_reload_timer.setSingleShot(True)
        self._thumb_reload_timer.setInterval(250)
        self._thumb_reload_timer.timeout.connect(self._do_thumb_reload)

        self._setup_ui()
        self._setup_shortcuts()
        self.setStyleSheet(DARK_STYLE)

        geo = self.settings.window_geometry
        if geo is not None:
            self.restoreGeometry(geo)

        if self.target_folder is not None:
            self.btn_target.setText(str(self.target_folder))
        self.update_stats()

        last_source = self.settings.source_folder
        if last_source is not None and last_source.is_dir():
            QTimer.singleShot(0, lambda: self.load_folder(last_source))

    def closeEvent(self, event):
        if self.transfer_thread is not None:
            # Quitting now would kill the worker mid-file
            QMessageBox.information(self, "Transfer Running",
                                    "Please wait until the current transfer has finished.")
            event.ignore()
            return
        self._thumb_reload_timer.stop()
        self.settings.window_geometry = self.saveGeometry()
        self.settings.zoom = self.zoom_level
        self.settings.mode = self.model.mode
        self.settings.sync()
        self.thumb_executor.shutdown(wait=False, cancel_futures=True)
        self.preview_executor.shutdown(wait=False, cancel_futures=True)
        super().closeEvent(event)

    # ------------------------------------------------------------
    # UI
    # ------------------------------------------------------------
    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)

        # Folder row
        folder_row = QHBoxLayout()
        main_layout.addLayout(folder_row)

        self.btn_source = QPushButton("Select Source Folder")
        self.btn_source.setObjectName("FolderButton")
        self.btn_source.setFixedHeight(40)
        self.btn_source.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.btn_source.clicked.connect(self.choose_folder)
        folder_row.addWidget(self.btn_source)

        self.btn_target = QPushButton("Select Target Folder")
        self.btn_target.setObjectName("FolderButton")
        self.btn_target.setFixedHeight(40)
        self.btn_target.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.btn_target.clicked.connect(self.choose_target)
        folder_row.addWidget(self.btn_target)

        # Controls row
        ctrl_row = QHBoxLayout()
        main_layout.addLayout(ctrl_row)

        self.bg_mode = QButtonGroup(self)
        self.rb_copy = QRadioButton("Copy")
        self.rb_move = QRadioButton("Move")
        self.bg_mode.addButton(self.rb_copy, 1)
        self.bg_mode.addButton(self.rb_move, 2)
        if self.model.mode == TransferMode.MOVE:
            self.rb_move.setChecked(True)
        else:
            self.rb_copy.setChecked(True)
        self.bg_mode.idClicked.connect(self.on_mode_changed)
        ctrl_row.addWidget(QLabel("Mode:"))
        ctrl_row.addWidget(self.rb_copy)
        ctrl_row.addWidget(self.rb_move)
        ctrl_row.addSpacing(24)

        ctrl_row.addWidget(QLabel("Zoom:"))
        self.slider_zoom = QSlider(Qt.Horizontal)
        self.slider_zoom.setRange(MIN_ZOOM, MAX_ZOOM)
        self.slider_zoom.setSingleStep(ZOOM_STEP)
        self.slider_zoom.setValue(self.zoom_level)
        self.slider_zoom.setMaximumWidth(260)
        self.slider_zoom.valueChanged.connect(self.on_zoom_changed)
        ctrl_row.addWidget(self.slider_zoom)
        self.lbl_zoom = QLabel(f"{self.zoom_level}%")
        self.lbl_zoom.setFixedWidth(48)
        ctrl_row.addWidget(self.lbl_zoom)
        ctrl_row.addStretch()

        self.btn_select_all = QPushButton("Select All")
        self.btn_select_all.setObjectName("TonalButton")
        self.btn_select_all.clicked.connect(self.select_all)
        ctrl_row.addWidget(self.btn_select_all)

        self.btn_deselect_all = QPushButton("Deselect All")
        self.btn_deselect_all.setObjectName("TonalButton")
        self.btn_deselect_all.clicked.connect(self.deselect_all)
        ctrl_row.addWidget(self.btn_deselect_all)

        # Stack: 0 grid, 1 empty state, 2 viewer
        self.stack = QStackedWidget()

        self.list_frame = QFrame()
        self.list_frame.setObjectName("glassPanel")
        list_layout = QVBoxLayout(self.list_frame)
        list_layout.setContentsMargins(12, 12, 12, 12)
        self.list_widget = ImageListWidget()
        self.list_widget.set_thumb_size(thumb_size_for_zoom(self.zoom_level))
        self.list_widget.itemToggled.connect(self.toggle_item)
        self.list_widget.itemOpened.connect(self.open_viewer_for_item)
        self.list_widget.zoomStep.connect(self.on_zoom_step)
        self.list_widget.nearBottom.connect(self.load_next_page)
        list_layout.addWidget(self.list_widget)
        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(24)
        shadow.setOffset(0, 8)
        shadow.setColor(Qt.black)
        self.list_frame.setGraphicsEffect(shadow)
        self.stack.addWidget(self.list_frame)

        self.lbl_empty = QLabel("Choose a source folder to start")
        self.lbl_empty.setObjectName("EmptyState")
        self.lbl_empty.setAlignment(Qt.AlignCenter)
        self.stack.addWidget(self.lbl_empty)

        self.viewer = FullViewerWidget()
        self.viewer.request_next.connect(lambda: self.step_viewer(1))
        self.viewer.request_prev.connect(lambda: self.step_viewer(-1))
        self.viewer.request_toggle.connect(self.toggle_viewer_selection)
        self.viewer.request_close.connect(self.close_viewer)
        self.stack.addWidget(self.viewer)

        self.stack.setCurrentWidget(self.lbl_empty)
        main_layout.addWidget(self.stack, 1)

        # Bottom row: stats, progress, execute
        bottom_row = QHBoxLayout()
        main_layout.addLayout(bottom_row)

        self.stat_values: dict[str, QLabel] = {}
        for key, title in (("total", "Total"), ("selected", "Selected"), ("unselected", "Unselected")):
            lbl = QLabel(f"{title}:")
            lbl.setObjectName("StatLabel")
            val = QLabel("0")
            val.setObjectName("StatValue")
            bottom_row.addWidget(lbl)
            bottom_row.addWidget(val)
            bottom_row.addSpacing(16)
            self.stat_values[key] = val
        bottom_row.addStretch()

        self.progress = QProgressBar()
        self.progress.setFixedWidth(240)
        self.progress.hide()
        bottom_row.addWidget(self.progress)

        self.btn_execute = QPushButton()
        self.btn_execute.setObjectName("PrimaryButton")
        self.btn_execute.setFixedHeight(40)
        self.btn_execute.clicked.connect(self.execute_operation)
        bottom_row.addWidget(self.btn_execute)

    def _setup_shortcuts(self):
        self.select_all_shortcut = QShortcut(QKeySequence("Ctrl+A"), self)
        self.select_all_shortcut.activated.connect(self.select_all)

        self.deselect_shortcut = QShortcut(QKeySequence("Ctrl+Shift+A"), self)
        self.deselect_shortcut.activated.connect(self.deselect_all)

        self.execute_shortcut = QShortcut(QKeySequence("Ctrl+Return"), self)
        self.execute_shortcut.activated.connect(self.execute_operation)

    # ------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------
    def choose_folder(self):
        start = str(self.current_folder or self.settings.source_folder or "")
        folder = QFileDialog.getExistingDirectory(self, "Select Source Image Folder", start)
        if not folder: return
        self.load_folder(Path(folder))

    def choose_target(self):
        start = str(self.target_folder or "")
        folder = QFileDialog.getExistingDirectory(self, "Select Target Folder", start)
        if not folder: return
        self.target_folder = Path(folder)
        self.settings.target_folder = self.target_folder
        self.btn_target.setText(str(self.target_folder))
        self.update_execute_button()

    def load_folder(self, folder: Path):
        try:
            images = list_images(folder)
        except ScanError as e:
            logger.error("%s", e)
            QMessageBox.critical(self, "Error", f"Failed to load images:\n{e}")
            return

        self.current_folder = folder
        self.settings.source_folder = folder
        self.btn_source.setText(str(folder))

        self.model.set_images(images)
        self._rebuild_grid()
        self.update_stats()

    def _rebuild_grid(self):
        self.thumb_load_version += 1
        self.list_widget.clear()
        self._items.clear()
        self._decoded_sizes.clear()
        self.model.loaded_count = 0

        if not self.model.images:
            self.lbl_empty.setText("No images found in this folder" if self.current_folder else
                                   "Choose a source folder to start")
            self.stack.setCurrentWidget(self.lbl_empty)
            return

        self.stack.setCurrentWidget(self.list_frame)
        self.list_widget.scrollToTop()
        self.load_next_page()

    # ------------------------------------------------------------
    # Lazy grid
    # ------------------------------------------------------------
    def load_next_page(self):
        if not self.model.has_more:
            return
        page = self.model.load_next_page()
        size = self.list_widget.thumb_size
        cell = self.list_widget.cell_size()
        for path in page:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, str(path))
            item.setSizeHint(cell)
            self.list_widget.addItem(item)
            widget = ThumbnailWidget(path.name, size)
            widget.set_selected(self.model.is_selected(path))
            self.list_widget.setItemWidget(item, widget)
            self._items[path] = item
            self._decoded_sizes[path] = size
            self.thumb_executor.submit(self._load_thumbnail_task, str(path), size, self.thumb_load_version)
        logger.debug("Grid page loaded: %d/%d", self.model.loaded_count, len(self.model.images))

    def _load_thumbnail_task(self, path: str, size: int, version: int):
        if version != self.thumb_load_version: return
        try:
            qimg = load_qimage(Path(path), max_size=size)
        except Exception as e:
            logger.debug("Thumbnail failed for %s: %s", path, e)
            return
        if qimg is not None and version == self.thumb_load_version:
            self.thumbnail_loaded.emit(path, version, size, qimg)

    def _apply_thumbnail(self, path: str, version: int, size: int, qimg: QImage):
        if version != self.thumb_load_version: return
        # A larger decode was requested since
        if self._decoded_sizes.get(Path(path)) != size: return
        item = self._items.get(Path(path))
        if item is None: return
        widget = self.list_widget.itemWidget(item)
        if isinstance(widget, ThumbnailWidget):
            widget.set_pixmap(QPixmap.fromImage(qimg))

    # ------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------
    def on_zoom_changed(self, value: int):
        self.zoom_level = value
        self.lbl_zoom.setText(f"{value}%")
        self.list_widget.set_thumb_size(thumb_size_for_zoom(value))
        self._thumb_reload_timer.start()

    def on_zoom_step(self, direction: int):
        self.slider_zoom.setValue(self.slider_zoom.value() + direction * ZOOM_STEP)

    def _do_thumb_reload(self):
        self.settings.zoom = self.zoom_level
        size = self.list_widget.thumb_size
        # Only re-decode the thumbnails the cells have outgrown
        stale = [p for p in self.model.loaded_images() if self._decoded_sizes.get(p, 0) < size]
        if not stale:
            return
        for path in stale:
            self._decoded_sizes[path] = size
            self.thumb_executor.submit(self._load_thumbnail_task, str(path), size, self.thumb_load_version)

    # ------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------
    def _path_of(self, item: QListWidgetItem) -> Path:
        return Path(item.data(Qt.UserRole))

    def _refresh_item(self, path: Path):
        item = self._items.get(path)
        if item is None: return
        widget = self.list_widget.itemWidget(item)
        if isinstance(widget, ThumbnailWidget):
            widget.set_selected(self.model.is_selected(path))

    def toggle_item(self, item: QListWidgetItem):
        path = self._path_of(item)
        self.model.toggle(path)
        self._refresh_item(path)
        self.update_stats()

    def select_all(self):
        self.model.select_all()
        self._refresh_all_items()
        self.update_stats()

    def deselect_all(self):
        self.model.clear_selection()
        self._refresh_all_items()
        self.update_stats()

    def _refresh_all_items(self):
        for path in self._items:
            self._refresh_item(path)

    def on_mode_changed(self, button_id: int):
        self.model.mode = TransferMode.MOVE if button_id == 2 else TransferMode.COPY
        self.settings.mode = self.model.mode
        self.update_execute_button()

    def update_stats(self):
        total, selected, unselected = self.model.stats()
        self.stat_values["total"].setText(str(total))
        self.stat_values["selected"].setText(str(selected))
        self.stat_values["unselected"].setText(str(unselected))
        self.update_execute_button()

    def update_execute_button(self):
        busy = self.transfer_thread is not None
        self.btn_execute.setEnabled(not busy and self.model.can_execute(self.target_folder))
        verb = "Copy" if self.model.mode == TransferMode.COPY else "Move"
        self.btn_execute.setText(f"{verb} Selected Images to Target Folder")

    # ------------------------------------------------------------
    # Full viewer
    # ------------------------------------------------------------
    def open_viewer_for_item(self, item: QListWidgetItem):
        path = self._path_of(item)
        if path in self.model.images:
            self.open_viewer(self.model.images.index(path))

    def open_viewer(self, index: int):
        if not self.model.images: return
        if self._viewer_index is None:
            self._prev_window_state = self.windowState()
            self.stack.setCurrentWidget(self.viewer)
            self.showFullScreen()
        self._viewer_index = max(0, min(index, len(self.model.images) - 1))
        path = self.model.images[self._viewer_index]
        self.viewer.load_image(path, None, self._viewer_index, len(self.model.images),
                               self.model.is_selected(path))
        self.preview_executor.submit(self._load_preview_task, str(path))

    def _load_preview_task(self, path: str):
        try:
            qimg = load_qimage(Path(path))
        except Exception as e:
            logger.debug("Preview failed for %s: %s", path, e)
            return
        if qimg is not None:
            self.preview_ready.emit(path, qimg)

    def _on_preview_ready(self, path: str, qimg: QImage):
        # Ignore stale results after the user navigated away
        if self.viewer.current_path is None or str(self.viewer.current_path) != path:
            return
        self.viewer.image_view.set_pixmap(QPixmap.fromImage(qimg))

    def step_viewer(self, delta: int):
        if self._viewer_index is None or not self.model.images: return
        new_index = self._viewer_index + delta
        if 0 <= new_index < len(self.model.images):
            self.open_viewer(new_index)

    def toggle_viewer_selection(self):
        path = self.viewer.current_path
        if path is None: return
        self.model.toggle(path)
        self.viewer.set_selected(self.model.is_selected(path))
        self._refresh_item(path)
        self.update_stats()

    def close_viewer(self):
        if self._viewer_index is None: return
        path = self.viewer.current_path
        self._viewer_index = None
        self.viewer.current_path = None
        self.viewer.image_view.set_pixmap(None)
        self.setWindowState(self._prev_window_state)
        self.stack.setCurrentWidget(self.list_frame if self.model.images else self.lbl_empty)
        if path is not None:
            # Make sure the item is in the grid before scrolling to it
            while path not in self._items and self.model.has_more:
                self.load_next_page()
            item = self._items.get(path)
            if item is not None:
                self.list_widget.setCurrentItem(item)
                self.list_widget.scrollToItem(item)
        self.list_widget.setFocus()

    # ------------------------------------------------------------
    # Copy / Move
    # ------------------------------------------------------------
    def execute_operation(self):
        if self.transfer_thread is not None: return
        if not self.model.can_execute(self.target_folder): return

        sources = self.model.selected_paths()
        mode = self.model.mode
        logger.info("Executing %s of %d image(s) to %s", mode.value, len(sources), self.target_folder)

        self.transfer_thread = QThread()
        self.transfer_worker = FileOperationWorker(sources, self.target_folder, mode)
        self.transfer_worker.moveToThread(self.transfer_thread)

        self.transfer_thread.started.connect(self.transfer_worker.run)
        self.transfer_worker.progress.connect(self._on_transfer_progress)
        self.transfer_worker.result.connect(self._on_transfer_result)
        self.transfer_worker.error.connect(self._on_transfer_error)
        self.transfer_worker.finished.connect(self.transfer_thread.quit)
        self.transfer_worker.finished.connect(self.transfer_worker.deleteLater)
        self.transfer_thread.finished.connect(self.transfer_thread.deleteLater)
        self.transfer_thread.finished.connect(self._on_transfer_thread_finished)

        self.progress.setRange(0, len(sources))
        self.progress.setValue(0)
        self.progress.show()
        self._set_busy(True)
        self.transfer_thread.start()

    def _set_busy(self, busy: bool):
        for w in (self.btn_source, self.btn_target, self.rb_copy, self.rb_move,
                  self.btn_select_all, self.btn_deselect_all):
            w.setEnabled(not busy)
        if busy:
            self.btn_execute.setEnabled(False)
            self.setCursor(Qt.BusyCursor)
        else:
            self.unsetCursor()

    def _on_transfer_progress(self, current: int, total: int):
        self.progress.setMaximum(total)
        self.progress.setValue(current)

    def _on_transfer_result(self, result: BatchResult):
        verb = "Copied" if result.mode == TransferMode.COPY else "Moved"
        removed = self.model.apply_result(result)
        for path in removed:
            self._decoded_sizes.pop(path, None)
            item = self._items.pop(path, None)
            if item is not None:
                self.list_widget.takeItem(self.list_widget.row(item))
        self._refresh_all_items()
        if not self.model.images:
            self._rebuild_grid()
        self.update_stats()

        if result.success:
            QMessageBox.information(self, "Done", f"{verb} {len(result.outcomes)} image(s) successfully.")
            return

        lines = [f"{o.source.name}: {o.error}" for o in result.failed[:MAX_FAILURES_SHOWN]]
        if len(result.failed) > MAX_FAILURES_SHOWN:
            lines.append(f"... and {len(result.failed) - MAX_FAILURES_SHOWN} more")
        msg = (f"{verb} {len(result.succeeded)} of {len(result.outcomes)} image(s).\n"
               f"{result.error}\n\n" + "\n".join(lines))
        if result.succeeded:
            QMessageBox.warning(self, "Partially Completed", msg)
        else:
            QMessageBox.critical(self, "Failed", msg)

    def _on_transfer_error(self, message: str):
        logger.error("Transfer aborted: %s", message)
        QMessageBox.critical(self, "Error", message)

    def _on_transfer_thread_finished(self):
        self.transfer_thread = None
        self.transfer_worker = None
        self.progress.hide()
        self._set_busy(False)
        self.update_execute_button()
