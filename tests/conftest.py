import os
from pathlib import Path

import pytest

# Widgets need a platform plugin; never open real windows from the suite
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """One Qt application shared by every test that touches Qt objects."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def make_file(tmp_path):
    def _make(relative: str, content: bytes | None = None) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content if content is not None else f"data:{relative}".encode())
        return path
    return _make
