import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from .gui.main_window import ImagePickerWindow

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging():
    level_name = os.environ.get("PICKSORT_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def main():
    setup_logging()
    app = QApplication(sys.argv)
    app.setOrganizationName("picksort")
    app.setApplicationName("picksort")
    window = ImagePickerWindow()
    window.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
