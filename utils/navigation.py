import logging
from typing import NamedTuple

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from utils.data_provider import display_name
from utils.treemap_logic import build_layout_items, squarify_layout

logger = logging.getLogger(__name__)


class BreadcrumbEntry(NamedTuple):
    label: str
    path: str
    is_current: bool


class NavigationState:
    """下钻历史：最早的路径在前，当前路径永远是最后一个"""

    def __init__(self, root_path):
        self.history_stack = [root_path]

    @property
    def current_path(self):
        return self.history_stack[-1]

    def push(self, path):
        self.history_stack.append(path)

    def truncate(self, index):
        if index < 0 or index >= len(self.history_stack):
            raise IndexError(f"breadcrumb index {index} out of range")
        del self.history_stack[index + 1:]

    def snapshot(self):
        return list(self.history_stack)

    def restore(self, history):
        if not history:
            raise ValueError("history must not be empty")
        self.history_stack = list(history)

    def breadcrumb(self):
        last = len(self.history_stack) - 1
        return [BreadcrumbEntry(display_name(path), path, i == last)
                for i, path in enumerate(self.history_stack)]


class NavigationController(QObject):
    """
    管理当前查看的子树、面包屑历史以及重新布局的时机。

    数据获取是异步的：每次导航都会递增 generation 并发出 fetchRequested，
    数据端用相同的 generation 回调 on_subtree_ready / on_fetch_failed。
    generation 已经前进的结果会被直接丢弃。
    """
    fetchRequested = pyqtSignal(str, int, int)  # (path, depth, generation)
    layoutChanged = pyqtSignal(list)            # [LayoutRectangle]
    breadcrumbChanged = pyqtSignal(list)        # [BreadcrumbEntry]
    fetchFailed = pyqtSignal(str, str)          # (path, message)

    def __init__(self, remainder_label="[Files in this folder]", fetch_depth=2,
                 debounce_ms=200, include_remainder=True, parent=None):
        super().__init__(parent)
        self.remainder_label = remainder_label
        self.fetch_depth = fetch_depth
        self.include_remainder = include_remainder

        self.state = None
        self._committed = None
        self._generation = 0
        self._node = None
        self._rectangles = []
        self._viewport = (0, 0)
        self._pending_viewport = None

        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.setInterval(debounce_ms)
        self._resize_timer.timeout.connect(self._on_resize_settled)

    # ------------------------------------------------------------------
    # 只读状态
    # ------------------------------------------------------------------
    @property
    def current_path(self):
        return self.state.current_path if self.state else None

    @property
    def history_stack(self):
        return self.state.snapshot() if self.state else []

    @property
    def generation(self):
        return self._generation

    @property
    def current_node(self):
        return self._node

    @property
    def total_size(self):
        return self._node.get('size', 0) if self._node else 0

    @property
    def viewport(self):
        return self._viewport

    def get_rectangles(self):
        return list(self._rectangles)

    def get_breadcrumb(self):
        return self.state.breadcrumb() if self.state else []

    # ------------------------------------------------------------------
    # 状态转换
    # ------------------------------------------------------------------
    def open(self, root_path):
        # _committed 保持不变：新根目录获取失败时回退到之前显示的视图
        self.state = NavigationState(root_path)
        self._begin_transition()

    def drill_into(self, child_path):
        self._require_open()
        self.state.push(child_path)
        self._begin_transition()

    def breadcrumb_select(self, index):
        self._require_open()
        if index == len(self.state.history_stack) - 1:
            return
        self.state.truncate(index)
        self._begin_transition()

    def refresh(self):
        self._require_open()
        self._begin_transition()

    def resize(self, width, height):
        """立即按新的视口尺寸重新布局最近一次获取的数据，不重新获取"""
        self._viewport = (width, height)
        self._relayout()

    # ------------------------------------------------------------------
    # 表现层事件入口
    # ------------------------------------------------------------------
    def on_rectangle_clicked(self, rect):
        if not rect.item.is_navigable:
            return False
        self.drill_into(rect.item.path)
        return True

    def on_breadcrumb_clicked(self, index):
        self.breadcrumb_select(index)

    def on_viewport_resized(self, width, height):
        # 防抖：窗口连续调整大小时只在最后一次之后重新布局
        self._pending_viewport = (width, height)
        self._resize_timer.start()

    def has_pending_resize(self):
        return self._resize_timer.isActive()

    # ------------------------------------------------------------------
    # 数据端回调
    # ------------------------------------------------------------------
    def on_subtree_ready(self, generation, node):
        if generation != self._generation:
            logger.debug("Dropping stale subtree %s (generation %d, current %d)",
                         node.get('path'), generation, self._generation)
            return
        self._node = node
        self._committed = self.state.snapshot()
        self._relayout()

    def on_fetch_failed(self, generation, message):
        if generation != self._generation:
            logger.debug("Dropping stale fetch failure (generation %d, current %d): %s",
                         generation, self._generation, message)
            return
        failed_path = self.state.current_path
        logger.warning("Fetch failed for %s: %s", failed_path, message)
        # 回退到正在显示的那一份历史，保留上一次成功的布局
        if self._committed is not None:
            self.state.restore(self._committed)
        self.breadcrumbChanged.emit(self.get_breadcrumb())
        self.fetchFailed.emit(failed_path, message)

    # ------------------------------------------------------------------
    # 设置
    # ------------------------------------------------------------------
    def set_include_remainder(self, include):
        if include != self.include_remainder:
            self.include_remainder = include
            self._relayout()

    def set_remainder_label(self, label):
        if label != self.remainder_label:
            self.remainder_label = label
            self._relayout()

    def set_debounce_interval(self, ms):
        self._resize_timer.setInterval(int(ms))

    # ------------------------------------------------------------------
    def _require_open(self):
        if self.state is None:
            raise RuntimeError("navigation has not been opened")

    def _begin_transition(self):
        self._generation += 1
        self.breadcrumbChanged.emit(self.get_breadcrumb())
        self.fetchRequested.emit(self.state.current_path, self.fetch_depth, self._generation)

    def _on_resize_settled(self):
        if self._pending_viewport is None:
            return
        width, height = self._pending_viewport
        self._pending_viewport = None
        self.resize(width, height)

    def _relayout(self):
        if self._node is None:
            self._rectangles = []
        else:
            items = build_layout_items(self._node, self.remainder_label, self.include_remainder)
            width, height = self._viewport
            self._rectangles = squarify_layout(items, self._node.get('size', 0), width, height)
        self.layoutChanged.emit(self.get_rectangles())
