import math
from typing import NamedTuple

from PyQt6.QtCore import QRectF

# 面积守恒/重叠检查的容差 (相对于视口面积)
AREA_TOLERANCE = 1e-6
# 行尾/最后一行对齐剩余空间时使用的相对容差
_SNAP_TOLERANCE = 1e-9


def format_bytes(num):
    if num == 0:
        return "0 B"
    units = ['B', 'KB', 'MB', 'GB', 'TB', 'PB']
    i = 0
    size = float(num)
    while size >= 1024 and i < len(units) - 1:
        size /= 1024.0
        i += 1
    if i == 0:
        return f"{int(round(size))} {units[i]}"
    return f"{size:.1f} {units[i]}"


class SizedItem:
    def __init__(self, name, path, size, is_navigable=False,
                 child_dir_count=0, child_file_count=0, is_remainder=False):
        self.name = name
        self.path = path
        self.size = size
        self.is_navigable = is_navigable
        self.child_dir_count = child_dir_count
        self.child_file_count = child_file_count
        self.is_remainder = is_remainder

    @classmethod
    def from_node(cls, node):
        """由 fetch_subtree 返回的子节点字典构造"""
        dir_count = node.get('dir_count', 0)
        return cls(
            name=node.get('name', ''),
            path=node.get('path', ''),
            size=node.get('size', 0),
            is_navigable=dir_count > 0,
            child_dir_count=dir_count,
            child_file_count=node.get('file_count', 0),
        )

    @classmethod
    def remainder(cls, node, label):
        """"当前文件夹中的文件" 汇总项，不可下钻"""
        return cls(
            name=label,
            path=node.get('path', ''),
            size=node.get('own_size', 0),
            is_navigable=False,
            child_dir_count=0,
            child_file_count=node.get('file_count', 0),
            is_remainder=True,
        )

    def formatted_size(self):
        return format_bytes(self.size)

    def __repr__(self):
        return f"SizedItem({self.name!r}, {self.path!r}, {self.size!r})"


class LayoutRectangle(NamedTuple):
    x: float
    y: float
    w: float
    h: float
    item: SizedItem

    @property
    def area(self):
        return self.w * self.h

    def contains(self, px, py):
        return self.x <= px < self.x + self.w and self.y <= py < self.y + self.h

    def qrect(self):
        return QRectF(self.x, self.y, self.w, self.h)


def build_layout_items(node, remainder_label, include_remainder=True):
    """
    把 fetch_subtree 的结果转换为布局输入：
    过滤掉 size <= 0 的子项，追加 "当前文件夹中的文件" 汇总项，按大小降序排序。
    """
    items = [SizedItem.from_node(child) for child in node.get('children') or []
             if child.get('size', 0) > 0]
    if include_remainder and node.get('own_size', 0) > 0:
        items.append(SizedItem.remainder(node, remainder_label))
    # sorted 是稳定排序，大小相同的项保持数据源顺序
    return sorted(items, key=lambda i: i.size, reverse=True)


def squarify_layout(items, total, width, height, x=0.0, y=0.0):
    """
    Squarified treemap 布局。

    items 必须已按 size 降序排列且全部为正数 (调用方负责过滤和排序)，
    total 是面积比例的分母，可以大于 items 的总和，多出的部分不会被铺满。
    返回与 items 一一对应、顺序相同的 LayoutRectangle 列表，不修改任何输入。
    """
    if width <= 0 or height <= 0 or not items or total <= 0:
        return []

    viewport_area = width * height
    # 比它更窄的剩余空间只是舍入误差
    min_span = _SNAP_TOLERANCE * max(width, height)
    rx, ry, rw, rh = x, y, width, height
    result = []
    start = 0
    count = len(items)

    while start < count:
        is_wide = rw >= rh
        span = rh if is_wide else rw
        if span <= min_span:
            # 剩余空间已被舍入误差耗尽：其余项作为零面积矩形输出
            result.extend(LayoutRectangle(rx, ry, 0.0, 0.0, item) for item in items[start:])
            break

        # 1. 贪心地扩展当前行，直到最差宽高比变大
        first = items[start].size
        row_size, largest, smallest = first, first, first
        best = _worst_ratio(row_size, largest, smallest, span, total, viewport_area)
        end = start + 1
        while end < count:
            size = items[end].size
            candidate = _worst_ratio(row_size + size, max(largest, size), min(smallest, size),
                                     span, total, viewport_area)
            if candidate > best:
                break
            row_size += size
            largest = max(largest, size)
            smallest = min(smallest, size)
            best = candidate
            end += 1

        # 2. 计算行厚度，最后一行对齐到剩余空间
        extent = rw if is_wide else rh
        thickness = min(max(0.0, (row_size / total) * viewport_area / span), extent)
        if end == count and math.isclose(thickness, extent, rel_tol=_SNAP_TOLERANCE):
            thickness = extent

        # 3. 行内按大小分配长度
        result.extend(_layout_row(items[start:end], row_size, rx, ry, thickness, span, is_wide))

        # 4. 收缩剩余矩形
        if is_wide:
            rx += thickness
            rw = max(0.0, rw - thickness)
        else:
            ry += thickness
            rh = max(0.0, rh - thickness)
        start = end

    return result


def _worst_ratio(row_size, largest, smallest, span, total, viewport_area):
    # 单项宽高比只在最大项或最小项处取得最大值
    row_area = (row_size / total) * viewport_area
    if row_area <= 0 or span <= 0:
        return float('inf')
    thickness = row_area / span
    worst = 0.0
    for size in (largest, smallest):
        length = (size / row_size) * span
        if length <= 0 or thickness <= 0:
            return float('inf')
        worst = max(worst, length / thickness, thickness / length)
    return worst


def _layout_row(row, row_size, x, y, thickness, span, is_wide):
    rects = []
    offset = 0.0
    last = len(row) - 1
    for i, item in enumerate(row):
        length = (item.size / row_size) * span if row_size > 0 else 0.0
        if i == last and math.isclose(offset + length, span, rel_tol=_SNAP_TOLERANCE):
            length = span - offset
        length = max(0.0, length)
        if is_wide:
            # 竖条：行宽为 thickness，项沿高度排列
            rects.append(LayoutRectangle(x, y + offset, thickness, length, item))
        else:
            rects.append(LayoutRectangle(x + offset, y, length, thickness, item))
        offset += length
    return rects
