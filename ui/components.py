from PyQt6.QtWidgets import QSpinBox, QWidget, QHBoxLayout, QLabel, QPushButton
from PyQt6.QtCore import Qt, pyqtSignal


class BreadcrumbBar(QWidget):
    """面包屑导航：前面的条目可点击，最后一项是当前位置"""
    crumbClicked = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedHeight(28)
        self.setStyleSheet("""
            QPushButton { background-color: transparent; color: #4ECCA3; border: none; font-size: 13px; padding: 2px 4px; }
            QPushButton:hover { color: white; text-decoration: underline; }
            QLabel#Current { color: white; font-size: 13px; font-weight: bold; padding: 2px 4px; }
            QLabel#Sep { color: #777; font-size: 13px; }
        """)
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(4, 0, 4, 0)
        self._layout.setSpacing(2)
        self.entries = []
        self.buttons = {}

    def set_entries(self, entries):
        self.entries = list(entries)
        self.buttons = {}
        while self._layout.count():
            child = self._layout.takeAt(0).widget()
            if child is not None:
                child.deleteLater()

        for i, entry in enumerate(self.entries):
            if i > 0:
                sep = QLabel("›"); sep.setObjectName("Sep")
                self._layout.addWidget(sep)
            if entry.is_current:
                lbl = QLabel(entry.label); lbl.setObjectName("Current")
                lbl.setToolTip(entry.path)
                self._layout.addWidget(lbl)
            else:
                btn = QPushButton(entry.label)
                btn.setCursor(Qt.CursorShape.PointingHandCursor)
                btn.setToolTip(entry.path)
                btn.clicked.connect(lambda checked, idx=i: self.crumbClicked.emit(idx))
                self._layout.addWidget(btn)
                self.buttons[i] = btn
        self._layout.addStretch()


class SafeSpinBox(QSpinBox):
    """只有在获得焦点（点击）后才响应滚轮事件，防止滚动页面时误触"""
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def wheelEvent(self, event):
        if self.hasFocus():
            super().wheelEvent(event)
        else:
            event.ignore()

