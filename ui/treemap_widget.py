from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QPointF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QLinearGradient, QFontMetrics
from config import DEFAULT_COLORS, DEFAULT_PALETTE
from ui.presentation import palette_color, cell_labels, tooltip_lines, empty_state_text


class TreeMapWidget(QWidget):
    # 右键信号：传递被点击的 SizedItem 和全局坐标
    itemRightClicked = pyqtSignal(object, QPointF)

    def __init__(self, controller, lang='en'):
        super().__init__()
        self.controller = controller
        self.lang = lang
        self.rectangles = []
        self.total = 0
        self.hovered_rect = None
        self.setMouseTracking(True)
        self.setMinimumSize(200, 200)

        self.palette_colors = [QColor(c) for c in DEFAULT_PALETTE]
        self.colors = {key: QColor(val) for key, val in DEFAULT_COLORS.items()}

        controller.layoutChanged.connect(self.set_rectangles)

    def set_colors(self, color_map, palette=None):
        """由 MainWindow 调用，更新自定义颜色"""
        for key, hex_val in color_map.items():
            if key in self.colors:
                self.colors[key] = QColor(hex_val)
        if palette:
            self.palette_colors = [QColor(c) for c in palette]
        self.update()

    def set_lang(self, lang):
        self.lang = lang
        self.update()

    def set_rectangles(self, rectangles):
        self.rectangles = rectangles
        self.total = self.controller.total_size
        self.hovered_rect = None
        self.setToolTip("")
        self.update()

    def resizeEvent(self, event):
        self.controller.on_viewport_resized(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.colors['bg'])

        if not self.rectangles:
            self._draw_empty_state(painter)
            return

        for i, rect in enumerate(self.rectangles):
            self._draw_rect(painter, rect, palette_color(i, self.palette_colors))

    def _draw_empty_state(self, painter):
        painter.setPen(self.colors['empty_text'])
        font = painter.font(); font.setPointSize(12)
        painter.setFont(font)
        text = empty_state_text(self.controller.current_path is not None, self.lang)
        painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, text)

    def _draw_rect(self, painter, rect, base_color):
        # 零面积矩形仍是合法的块，只是不值得绘制
        if rect.w < 1 or rect.h < 1: return

        draw_rect = rect.qrect().adjusted(0.5, 0.5, -0.5, -0.5)
        color = base_color.lighter(130) if rect is self.hovered_rect else base_color
        gradient = QLinearGradient(draw_rect.topLeft(), draw_rect.bottomRight())
        gradient.setColorAt(0, color.lighter(110)); gradient.setColorAt(1, color.darker(110))

        painter.setBrush(QBrush(gradient))
        painter.setPen(QPen(self.colors['border'], 0.5))
        painter.drawRoundedRect(draw_rect, 3, 3)

        lines = cell_labels(rect, self.total)
        if not lines: return

        painter.setPen(self.colors['text'])
        font = QFont(painter.font()); font.setBold(True)
        font.setPointSize(min(10, max(7, int(draw_rect.height() / 5))))
        painter.setFont(font)
        metrics = QFontMetrics(font)
        width = int(draw_rect.width() - 6)

        if len(lines) == 1:
            painter.drawText(draw_rect.adjusted(3, 2, -3, -2), Qt.AlignmentFlag.AlignCenter,
                             metrics.elidedText(lines[0], Qt.TextElideMode.ElideRight, width))
            return

        name_rect = draw_rect.adjusted(3, 2, -3, -draw_rect.height() / 2)
        painter.drawText(name_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom,
                         metrics.elidedText(lines[0], Qt.TextElideMode.ElideRight, width))
        font.setBold(False); painter.setFont(font)
        size_rect = draw_rect.adjusted(3, draw_rect.height() / 2, -3, -2)
        painter.drawText(size_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
                         QFontMetrics(font).elidedText(lines[1], Qt.TextElideMode.ElideRight, width))

    def contextMenuEvent(self, event):
        rect = self._get_rect_at(QPointF(event.pos()))
        if rect and not rect.item.is_remainder:
            self.itemRightClicked.emit(rect.item, QPointF(event.globalPos()))

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            rect = self._get_rect_at(event.position())
            if rect:
                self.controller.on_rectangle_clicked(rect)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        rect = self._get_rect_at(event.position())
        if rect is not self.hovered_rect:
            self.hovered_rect = rect
            self.update()

        if rect:
            self.setToolTip("\n".join(tooltip_lines(rect.item, self.total, self.lang)))
            cursor = Qt.CursorShape.PointingHandCursor if rect.item.is_navigable else Qt.CursorShape.ArrowCursor
            self.setCursor(cursor)
        else:
            self.setToolTip("")
            self.unsetCursor()

    def leaveEvent(self, event):
        if self.hovered_rect is not None:
            self.hovered_rect = None
            self.update()
        super().leaveEvent(event)

    def _get_rect_at(self, pos):
        x, y = pos.x(), pos.y()
        for rect in self.rectangles:
            if rect.contains(x, y):
                return rect
        return None
