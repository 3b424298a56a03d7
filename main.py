import sys
import os
import logging
import traceback

# 1. 基础环境检查 (必须在所有业务导入之前)
try:
    import psutil
    from PyQt6.QtWidgets import QApplication, QMessageBox
except ImportError as e:
    print(f"Critical System Import Error: {e}")
    sys.exit(1)

logger = logging.getLogger("folder_treemap")


def exception_hook(exctype, value, tb):
    """全局未捕获异常句柄"""
    err_msg = "".join(traceback.format_exception(exctype, value, tb))
    logger.critical("Unhandled exception:\n%s", err_msg)
    if QApplication.instance():
        QMessageBox.critical(None, "Critical Error", f"An unexpected error occurred:\n\n{err_msg}")
    sys.exit(1)


sys.excepthook = exception_hook

# 2. 业务模块
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
                             QPushButton, QMenu, QComboBox, QFileDialog)
from PyQt6.QtCore import QThread, QUrl, pyqtSignal
from PyQt6.QtGui import QDesktopServices

from config import I18N, load_settings, save_settings, get_text
from utils.navigation import NavigationController
from utils.treemap_logic import format_bytes
from utils.worker import SubtreeWorker
from utils.system_utils import list_drives, set_process_priority
from ui.components import BreadcrumbBar
from ui.treemap_widget import TreeMapWidget
from ui.dialogs import SettingsDialog, DetailWindow

BUTTON_STYLE = """
    QPushButton { background-color: #3E3E42; color: #CCC; border: none; font-size: 12px; padding: 4px 10px; }
    QPushButton:hover { background-color: #505050; color: white; }
"""
MENU_STYLE = ("QMenu { background-color: #252526; color: white; border: 1px solid #444; } "
              "QMenu::item { padding: 8px 25px; } QMenu::item:selected { background-color: #094771; }")


class MainWindow(QMainWindow):
    request_scan = pyqtSignal(str)
    request_rescan = pyqtSignal(str)

    def __init__(self):
        super().__init__()

        set_process_priority()
        self.settings = load_settings()
        self.scan_stats = None
        lang = self.lang

        self.controller = NavigationController(
            remainder_label=get_text('own_files', lang),
            fetch_depth=int(self.settings.get('fetch_depth', 2)),
            debounce_ms=int(self.settings.get('resize_debounce_ms', 200)),
            include_remainder=self.settings.get('show_own_files', True),
            parent=self,
        )

        # 扫描与数据获取在工作线程中完成，结果通过排队信号回到 GUI 线程
        self.worker_thread = QThread()
        self.worker = SubtreeWorker()
        self.worker.moveToThread(self.worker_thread)
        self.request_scan.connect(self.worker.scan)
        self.request_rescan.connect(self.worker.rescan)
        self.controller.fetchRequested.connect(self.worker.fetch_subtree)
        self.worker.subtree_ready.connect(self.controller.on_subtree_ready)
        self.worker.fetch_failed.connect(self.controller.on_fetch_failed)
        self.worker.scan_finished.connect(self.on_scan_finished)
        self.worker.scan_failed.connect(self.on_scan_failed)
        self.worker_thread.start()

        self.resize(1200, 800)
        self.setStyleSheet("background-color: #1e1e1e;")

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(4)

        top_bar = QHBoxLayout()
        self.drives_label = QLabel("")
        self.drives_label.setStyleSheet("color: #BBB; font-size: 12px;")
        self.drive_combo = QComboBox()
        self.drive_combo.setStyleSheet("QComboBox { background-color: #3E3E42; color: #EEE; border: none; padding: 3px 8px; min-width: 160px; }")
        self.populate_drives()
        self.drive_combo.activated.connect(self.on_drive_selected)

        self.open_btn = QPushButton("")
        self.open_btn.setStyleSheet(BUTTON_STYLE)
        self.open_btn.clicked.connect(self.open_folder)
        self.refresh_btn = QPushButton("")
        self.refresh_btn.setStyleSheet(BUTTON_STYLE)
        self.refresh_btn.clicked.connect(self.refresh)
        self.settings_btn = QPushButton("")
        self.settings_btn.setStyleSheet(BUTTON_STYLE)
        self.settings_btn.clicked.connect(self.open_settings)

        top_bar.addWidget(self.drives_label)
        top_bar.addWidget(self.drive_combo)
        top_bar.addWidget(self.open_btn)
        top_bar.addWidget(self.refresh_btn)
        top_bar.addStretch(1)
        top_bar.addWidget(self.settings_btn)
        layout.addLayout(top_bar)

        self.breadcrumb = BreadcrumbBar()
        self.breadcrumb.crumbClicked.connect(self.controller.on_breadcrumb_clicked)
        self.controller.breadcrumbChanged.connect(self.breadcrumb.set_entries)
        layout.addWidget(self.breadcrumb)

        self.treemap = TreeMapWidget(self.controller, lang)
        self.treemap.itemRightClicked.connect(self.on_context_menu)
        self.treemap.set_colors(self.settings.get('colors', {}), self.settings.get('palette'))
        layout.addWidget(self.treemap, 1)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #00FF00; font-family: Consolas; font-size: 12px; padding: 2px;")
        self.status_label.setFixedHeight(22)
        layout.addWidget(self.status_label)

        self.controller.fetchFailed.connect(self.on_fetch_failed)
        self.controller.layoutChanged.connect(self.on_layout_changed)

        self.apply_i18n()
        self.set_status(get_text('status_init', lang))

    @property
    def lang(self):
        lang = self.settings.get('lang', 'en')
        return lang if lang in I18N else 'en'

    def populate_drives(self):
        self.drive_combo.clear()
        for drive in list_drives():
            self.drive_combo.addItem(
                f"{drive['mountpoint']}  ({format_bytes(drive['used'])} / {format_bytes(drive['total'])})",
                drive['mountpoint'])

    def apply_i18n(self):
        t = I18N[self.lang]
        self.setWindowTitle(t['title'])
        self.drives_label.setText(t['drives_label'])
        self.open_btn.setText(t['open_btn'])
        self.refresh_btn.setText(t['refresh_btn'])
        self.settings_btn.setText(t['settings_btn'])
        self.controller.set_remainder_label(t['own_files'])
        self.treemap.set_lang(self.lang)

    def set_status(self, text, error=False):
        color = self.settings.get('colors', {}).get('error', '#FF5555') if error else '#00FF00'
        self.status_label.setStyleSheet(f"color: {color}; font-family: Consolas; font-size: 12px; padding: 2px;")
        self.status_label.setText(text)

    # ------------------------------------------------------------------
    # 扫描
    # ------------------------------------------------------------------
    def start_scan(self, path):
        self.scan_stats = None
        self.set_status(get_text('status_scanning', self.lang).format(path=path))
        self.request_scan.emit(path)

    def on_drive_selected(self, index):
        path = self.drive_combo.itemData(index)
        if path:
            self.start_scan(path)

    def open_folder(self):
        path = QFileDialog.getExistingDirectory(self, get_text('open_btn', self.lang))
        if path:
            self.start_scan(path)

    def on_scan_finished(self, root_path, stats):
        self.scan_stats = stats
        self.controller.open(root_path)

    def on_scan_failed(self, root_path, message):
        self.set_status(get_text('status_scan_error', self.lang).format(path=root_path, message=message), error=True)

    def refresh(self):
        path = self.controller.current_path
        if path is None:
            return
        # 先在工作线程中重新扫描该子树，再重新获取
        self.request_rescan.emit(path)
        self.controller.refresh()

    # ------------------------------------------------------------------
    # 控制器回调
    # ------------------------------------------------------------------
    def on_layout_changed(self, rectangles):
        node = self.controller.current_node
        if node is None:
            return
        stats = self.scan_stats or {}
        self.set_status(get_text('status_ready', self.lang).format(
            path=node.get('path', ''), size=format_bytes(node.get('size', 0)),
            dirs=node.get('dir_count', 0), files=node.get('file_count', 0),
            errors=stats.get('errors_count', 0)))

    def on_fetch_failed(self, path, message):
        self.set_status(get_text('status_fetch_error', self.lang).format(path=path, message=message), error=True)

    def on_context_menu(self, item, pos):
        t = I18N[self.lang]
        menu = QMenu(self)
        menu.setStyleSheet(MENU_STYLE)
        action_drill = menu.addAction(t['menu_drill']) if item.is_navigable else None
        action_path = menu.addAction(t['menu_open_path'])
        action_copy = menu.addAction(t['menu_copy_path'])
        menu.addSeparator()
        action_props = menu.addAction(t['menu_properties'])
        selected = menu.exec(pos.toPoint())
        if selected is None:
            return
        if action_drill and selected == action_drill:
            self.controller.drill_into(item.path)
        elif selected == action_path:
            QDesktopServices.openUrl(QUrl.fromLocalFile(item.path))
        elif selected == action_copy:
            QApplication.clipboard().setText(item.path)
        elif selected == action_props:
            DetailWindow(self, item, self.controller.total_size, self.lang).show()

    # ------------------------------------------------------------------
    # 设置
    # ------------------------------------------------------------------
    def open_settings(self):
        dialog = SettingsDialog(self, self.settings)
        dialog.settingsChanged.connect(self.on_settings_changed)
        dialog.exec()

    def on_settings_changed(self):
        self.apply_i18n()
        save_settings(self.settings)
        self.treemap.set_colors(self.settings.get('colors', {}), self.settings.get('palette'))
        self.controller.set_debounce_interval(self.settings.get('resize_debounce_ms', 200))
        self.controller.set_include_remainder(self.settings.get('show_own_files', True))

    def closeEvent(self, event):
        self.worker_thread.quit()
        self.worker_thread.wait()
        super().closeEvent(event)


def run(argv=None):
    argv = sys.argv if argv is None else argv
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.get('log_level', 'INFO')).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(argv)
    window = MainWindow()
    window.show()
    # 可选参数：启动后立即扫描的文件夹
    if len(argv) > 1 and os.path.isdir(argv[1]):
        window.start_scan(argv[1])
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
