from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
                             QTableWidget, QTableWidgetItem, QHeaderView, QComboBox,
                             QFrame, QColorDialog, QCheckBox)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor
from ui.components import SafeSpinBox
from ui.presentation import property_rows
from config import I18N, get_text

COLOR_KEYS = [('bg', 'color_bg'), ('border', 'color_border'), ('text', 'color_text')]


class DetailWindow(QDialog):
    """单个矩形对应条目的属性"""
    def __init__(self, parent, item, total, lang='en'):
        super().__init__(parent)
        self.item = item
        self.setWindowTitle(f"{item.name} - {get_text('detail_title', lang)}")
        self.resize(520, 300)
        self.setStyleSheet("""
            QDialog { background-color: #1E1E1E; color: white; }
            QTableWidget {
                background-color: #252526;
                color: #EEE;
                gridline-color: #333;
                border: 1px solid #333;
                selection-background-color: #094771;
            }
        """)

        layout = QVBoxLayout(self)
        header = QLabel(f"{item.name} | {item.formatted_size()}")
        header.setStyleSheet("font-size: 16px; font-weight: bold; color: #4ECCA3; margin-bottom: 10px;")
        layout.addWidget(header)

        rows = property_rows(item, total, lang)
        self.table = QTableWidget(len(rows), 2)
        self.table.horizontalHeader().setVisible(False)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        for i, (label, value) in enumerate(rows):
            for col, text in enumerate((label, value)):
                cell = QTableWidgetItem(text)
                cell.setFlags(Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsEnabled)
                self.table.setItem(i, col, cell)
        layout.addWidget(self.table)

        close_btn = QPushButton(get_text('close', lang))
        close_btn.clicked.connect(self.accept)
        close_btn.setStyleSheet("""
            QPushButton { background-color: #3E3E42; color: white; padding: 10px; border: none; }
            QPushButton:hover { background-color: #505050; }
        """)
        layout.addWidget(close_btn)


class SettingsDialog(QDialog):
    settingsChanged = pyqtSignal()

    def __init__(self, parent, current_settings):
        super().__init__(parent)
        self.settings = current_settings
        self.resize(400, 420)
        self.setStyleSheet("""
            QDialog { background-color: #1E1E1E; color: #EEE; }
            QLabel { background-color: transparent; color: #BBB; font-size: 13px; }
            QFrame#SectionPanel {
                background-color: #252526;
                border: 1px solid #333;
                border-radius: 10px;
            }
            QComboBox, QSpinBox {
                background-color: #1E1E1E; color: white; border: 1px solid #444;
                border-radius: 4px; padding: 5px; min-width: 110px;
            }
            QComboBox:hover, QSpinBox:hover { border: 1px solid #4ECCA3; }
            QCheckBox::indicator { width: 18px; height: 18px; border: 1px solid #555; border-radius: 4px; background-color: #1E1E1E; }
            QCheckBox::indicator:checked { background-color: #4ECCA3; border: 1px solid #4ECCA3; }
        """)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(15, 15, 15, 15)
        main_layout.setSpacing(15)

        layout_base = self._add_section(main_layout)
        self.lbl_lang = QLabel()
        self.combo_lang = QComboBox()
        self.combo_lang.addItem("简体中文", 'zh'); self.combo_lang.addItem("English", 'en')
        self.combo_lang.setCurrentIndex(self.combo_lang.findData(self.settings.get('lang', 'en')))
        self._add_row(layout_base, self.lbl_lang, self.combo_lang)

        self.lbl_debounce = QLabel()
        self.spin_debounce = SafeSpinBox(); self.spin_debounce.setRange(0, 2000); self.spin_debounce.setSingleStep(50)
        self.spin_debounce.setValue(int(self.settings.get('resize_debounce_ms', 200)))
        self._add_row(layout_base, self.lbl_debounce, self.spin_debounce)

        self.lbl_own_files = QLabel()
        self.chk_own_files = QCheckBox(); self.chk_own_files.setChecked(self.settings.get('show_own_files', True))
        self._add_row(layout_base, self.lbl_own_files, self.chk_own_files)

        layout_color = self._add_section(main_layout)
        self.lbl_colors = QLabel(); self.lbl_colors.setStyleSheet("color: #4ECCA3; font-weight: bold;")
        layout_color.addWidget(self.lbl_colors)
        self.color_buttons = {}
        colors = self.settings.get('colors', {})
        for key, label_key in COLOR_KEYS:
            lbl = QLabel(); btn = QPushButton(); btn.setFixedSize(45, 22)
            btn.setCursor(Qt.CursorShape.PointingHandCursor); btn.setAutoDefault(False)
            btn.setStyleSheet(f"background-color: {colors.get(key, '#888888')}; border: 1px solid #555; border-radius: 4px;")
            btn.clicked.connect(lambda checked, k=key: self.pick_color(k))
            self._add_row(layout_color, lbl, btn)
            self.color_buttons[key] = (lbl, btn)

        main_layout.addStretch()
        self.btn_done = QPushButton()
        self.btn_done.setFixedSize(120, 35); self.btn_done.setDefault(True)
        self.btn_done.setStyleSheet("""
            QPushButton { background-color: #007ACC; color: white; border-radius: 6px; font-weight: bold; border: none; }
            QPushButton:hover { background-color: #0098FF; }
        """)
        self.btn_done.clicked.connect(self.accept)
        btn_layout = QHBoxLayout()
        btn_layout.addStretch(); btn_layout.addWidget(self.btn_done); btn_layout.addStretch()
        main_layout.addLayout(btn_layout)

        self.combo_lang.currentIndexChanged.connect(self.on_lang_changed)
        self.spin_debounce.valueChanged.connect(self.sync_settings)
        self.chk_own_files.toggled.connect(self.sync_settings)

        self.retranslate_ui()

    def _add_section(self, parent_layout):
        panel = QFrame(); panel.setObjectName("SectionPanel")
        layout = QVBoxLayout(panel); layout.setContentsMargins(15, 12, 15, 12); layout.setSpacing(10)
        parent_layout.addWidget(panel)
        return layout

    def _add_row(self, parent_layout, label_widget, control_widget):
        row = QHBoxLayout()
        row.addWidget(label_widget); row.addStretch(); row.addWidget(control_widget)
        parent_layout.addLayout(row)

    def on_lang_changed(self):
        self.settings['lang'] = self.combo_lang.currentData()
        self.retranslate_ui()
        self.settingsChanged.emit()

    def pick_color(self, key):
        current_color = self.settings.get('colors', {}).get(key, "#888888")
        c = QColorDialog.getColor(QColor(current_color), self, "Select Color")
        if c.isValid():
            hex_c = c.name().upper()
            self.settings.setdefault('colors', {})[key] = hex_c
            self.color_buttons[key][1].setStyleSheet(f"background-color: {hex_c}; border: 1px solid #666; border-radius: 4px;")
            self.settingsChanged.emit()

    def retranslate_ui(self):
        lang = self.settings.get('lang', 'en')
        if lang not in I18N: lang = 'en'
        t = I18N[lang]
        self.setWindowTitle(t['settings_title'])
        self.lbl_lang.setText(t['lang_label'])
        self.lbl_debounce.setText(t['debounce_label'])
        self.lbl_own_files.setText(t['show_own_files'])
        self.lbl_colors.setText(t['color_label'])
        for key, label_key in COLOR_KEYS:
            self.color_buttons[key][0].setText(t[label_key])
        self.btn_done.setText(t['done'])
        self.combo_lang.blockSignals(True)
        self.combo_lang.setItemText(0, t['lang_zh']); self.combo_lang.setItemText(1, t['lang_en'])
        self.combo_lang.blockSignals(False)

    def sync_settings(self):
        self.settings['resize_debounce_ms'] = self.spin_debounce.value()
        self.settings['show_own_files'] = self.chk_own_files.isChecked()
        self.settingsChanged.emit()
