# Dark theme
# Colors:
# Bg: #1e1e1e
# Panel: #252526
# Button (Secondary): #3b3b3b
# Accent: #2E7D32 (green) / #4CAF50 (selection)
# Border: #454545

DARK_STYLE = """
QMainWindow {
    background-color: #1e1e1e;
    color: #cccccc;
}
QWidget {
    background-color: #1e1e1e;
    color: #cccccc;
    font-family: 'Segoe UI', 'Noto Sans', sans-serif;
    font-size: 10pt;
}

/* --- Buttons --- */
QPushButton {
    background-color: #3b3b3b;
    color: #ffffff;
    border: 1px solid #3b3b3b;
    border-radius: 4px;
    padding: 6px 12px;
}
QPushButton:hover {
    background-color: #454545;
    border-color: #454545;
}
QPushButton:pressed {
    background-color: #2D2D2D;
}
QPushButton:disabled {
    background-color: #2a2a2a;
    border-color: #2a2a2a;
    color: #6a6a6a;
}

/* Execute */
QPushButton#PrimaryButton {
    background-color: #2E7D32;
    border: 1px solid #2E7D32;
    font-weight: bold;
}
QPushButton#PrimaryButton:hover {
    background-color: #388E3C;
}
QPushButton#PrimaryButton:disabled {
    background-color: #2a2a2a;
    border-color: #2a2a2a;
    color: #6a6a6a;
}

/* Folder pickers show the chosen path, left aligned */
QPushButton#FolderButton {
    text-align: left;
    padding-left: 10px;
}

QPushButton#TonalButton {
    background-color: transparent;
    border: 1px solid #454545;
    color: #cccccc;
}
QPushButton#TonalButton:hover {
    background-color: #2a2d2e;
    color: #ffffff;
}

/* --- Grid --- */
QListWidget {
    background-color: #252526;
    border: 1px solid #454545;
    outline: none;
}
QListWidget::item {
    border-radius: 3px;
    padding: 4px;
    color: #cccccc;
}
QListWidget::item:hover {
    background-color: #2a2d2e;
}
QLabel#ThumbName {
    background: transparent;
    color: #E0E0E0;
    font-size: 9pt;
    padding-top: 2px;
}
QLabel#SelectionIndicator {
    background-color: #4CAF50;
    color: #ffffff;
    border-radius: 14px;
    font-weight: bold;
    font-size: 12pt;
}
QLabel#EmptyState {
    color: #777777;
    font-size: 14pt;
}

/* --- Stats --- */
QLabel#StatLabel {
    color: #9e9e9e;
}
QLabel#StatValue {
    color: #ffffff;
    font-weight: bold;
}

/* --- Scrollbar --- */
QScrollBar:vertical {
    background: #1e1e1e;
    width: 10px;
    margin: 0;
}
QScrollBar::handle:vertical {
    background: #424242;
    min-height: 20px;
    border-radius: 5px;
    margin: 2px;
}
QScrollBar::handle:vertical:hover {
    background: #4f4f4f;
}
QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {
    height: 0px;
}

/* --- Sliders --- */
QSlider::groove:horizontal {
    border: none;
    height: 4px;
    background: #3c3c3c;
    border-radius: 2px;
}
QSlider::handle:horizontal {
    background: #cccccc;
    width: 12px;
    height: 12px;
    margin: -4px 0;
    border-radius: 6px;
}
QSlider::sub-page:horizontal {
    background: #4CAF50;
    border-radius: 2px;
}

QProgressBar {
    border: 1px solid #454545;
    border-radius: 4px;
    background: #252526;
    text-align: center;
    height: 14px;
}
QProgressBar::chunk {
    background-color: #2E7D32;
    border-radius: 3px;
}

/* --- Panels --- */
QFrame#glassPanel {
    background-color: #252526;
    border: 1px solid #454545;
    border-radius: 6px;
}

/* --- Full viewer --- */
QWidget#FullViewer {
    background-color: #000000;
}
QFrame#ViewerBar {
    background-color: rgba(0, 0, 0, 150);
    border: none;
}
QLabel#ViewerTitle {
    background: transparent;
    color: white;
    font-size: 14pt;
    font-weight: bold;
}
QLabel#ViewerInfo {
    background: transparent;
    color: #aaaaaa;
    padding-left: 12px;
}
QPushButton#ViewerButton {
    background: transparent;
    color: #CCCCCC;
    font-size: 11pt;
    border: 1px solid #555;
    border-radius: 4px;
    padding: 5px 12px;
}
QPushButton#ViewerButton:hover {
    background-color: #333;
    color: white;
}
QPushButton#ViewerButton:checked {
    background-color: #2E7D32;
    border-color: #2E7D32;
    color: white;
}

QLabel {
    color: #cccccc;
}
"""
