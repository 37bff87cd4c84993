import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot

from .errors import DestinationError
from .filesystem import LocalFileSystem
from .transfer import TransferMode, transfer

logger = logging.getLogger(__name__)


class FileOperationWorker(QObject):
    """
    Runs one copy/move batch in a background thread.

    ``result`` carries the BatchResult, ``error`` is only emitted when the
    target folder could not be prepared. ``finished`` always fires last.
    """
    finished = Signal()
    error = Signal(str)
    progress = Signal(int, int) # current, total
    result = Signal(object) # BatchResult

    def __init__(self, sources: list[Path], destination: Path, op_type: TransferMode | str = TransferMode.COPY,
                 fs: LocalFileSystem | None = None):
        super().__init__()
        self.sources = list(sources)
        self.destination = destination
        self.op_type = TransferMode(op_type)
        self.fs = fs

    @Slot()
    def run(self):
        try:
            res = transfer(self.sources, self.destination, self.op_type,
                           fs=self.fs, progress_cb=self.progress.emit)
            self.result.emit(res)
        except DestinationError as e:
            self.error.emit(str(e))
        except Exception as e:
            logger.exception("Unexpected failure during %s", self.op_type.value)
            self.error.emit(f"Failed to {self.op_type.value} files: {e}")
        finally:
            self.finished.emit()
