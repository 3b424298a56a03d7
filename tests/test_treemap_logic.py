"""Tests for the squarified layout engine."""

import math

import pytest

from conftest import make_items, make_node
from utils.treemap_logic import (
    AREA_TOLERANCE,
    LayoutRectangle,
    SizedItem,
    build_layout_items,
    format_bytes,
    squarify_layout,
)


def overlap_area(a, b):
    dx = min(a.x + a.w, b.x + b.w) - max(a.x, b.x)
    dy = min(a.y + a.h, b.y + b.h) - max(a.y, b.y)
    return max(0.0, dx) * max(0.0, dy)


def descending_sizes(n):
    return sorted((((i * 7919) % 97) + 1) * 13 for i in range(n))[::-1]


class TestScenarios:
    def test_three_items_fill_square(self):
        items = make_items(50, 30, 20)
        rects = squarify_layout(items, 100, 100, 100)

        assert len(rects) == 3
        for rect, expected in zip(rects, [5000, 3000, 2000]):
            assert rect.area == pytest.approx(expected)
        assert sum(r.area for r in rects) == pytest.approx(100 * 100)

    def test_three_items_geometry(self):
        rects = squarify_layout(make_items(50, 30, 20), 100, 100, 100)
        assert rects[0][:4] == pytest.approx((0, 0, 50, 100))
        assert rects[1][:4] == pytest.approx((50, 0, 50, 60))
        assert rects[2][:4] == pytest.approx((50, 60, 50, 40))

    def test_empty_items(self):
        assert squarify_layout([], 0, 100, 100) == []

    def test_zero_width_viewport(self):
        assert squarify_layout(make_items(10, 5), 15, 0, 50) == []

    @pytest.mark.parametrize("width,height", [(100, 0), (-5, 50), (50, -1)])
    def test_degenerate_viewport(self, width, height):
        assert squarify_layout(make_items(10, 5), 15, width, height) == []

    @pytest.mark.parametrize("total", [0, -10])
    def test_non_positive_total(self, total):
        assert squarify_layout(make_items(10, 5), total, 100, 100) == []


class TestRowBuilding:
    def test_classic_example_first_row(self):
        # 经典 6x4 例子：前两项组成第一列
        items = make_items(6, 6, 4, 3, 2, 2, 1)
        rects = squarify_layout(items, 24, 6, 4)

        assert rects[0][:4] == pytest.approx((0, 0, 3, 2))
        assert rects[1][:4] == pytest.approx((0, 2, 3, 2))

    def test_classic_example_second_row_is_horizontal(self):
        items = make_items(6, 6, 4, 3, 2, 2, 1)
        rects = squarify_layout(items, 24, 6, 4)

        assert rects[2].y == pytest.approx(0)
        assert rects[3].y == pytest.approx(0)
        assert rects[2].h == pytest.approx(rects[3].h)
        assert rects[2].x == pytest.approx(3)
        assert rects[3].x == pytest.approx(3 + rects[2].w)

    def test_single_item_fills_viewport_exactly(self):
        rects = squarify_layout(make_items(42), 42, 640, 480)
        assert rects == [LayoutRectangle(0.0, 0.0, 640, 480, rects[0].item)]

    def test_origin_offset(self):
        rects = squarify_layout(make_items(1), 1, 10, 20, x=5, y=7)
        assert rects[0][:4] == (5, 7, 10, 20)

    def test_equal_items_accept_ties(self):
        rects = squarify_layout(make_items(1, 1, 1, 1), 4, 100, 100)
        # 四个相等的项形成 2x2 网格
        for rect in rects:
            assert rect.w == pytest.approx(50)
            assert rect.h == pytest.approx(50)


class TestProperties:
    @pytest.mark.parametrize("width,height", [(100, 100), (800, 200), (120, 900), (1.5, 3.25)])
    def test_area_conservation_when_total_matches(self, width, height):
        sizes = descending_sizes(60)
        rects = squarify_layout(make_items(*sizes), sum(sizes), width, height)
        viewport_area = width * height
        assert abs(sum(r.area for r in rects) - viewport_area) <= AREA_TOLERANCE * viewport_area

    def test_area_conservation_with_unaccounted_total(self):
        sizes = [40, 25, 10, 5]
        total = 100
        rects = squarify_layout(make_items(*sizes), total, 300, 200)
        expected = sum(sizes) / total * 300 * 200
        assert sum(r.area for r in rects) == pytest.approx(expected, rel=AREA_TOLERANCE)

    def test_item_areas_are_proportional(self):
        sizes = descending_sizes(25)
        total = sum(sizes)
        rects = squarify_layout(make_items(*sizes), total, 400, 300)
        for rect in rects:
            assert rect.area == pytest.approx(rect.item.size / total * 400 * 300, rel=1e-6)

    def test_no_overlaps(self):
        sizes = descending_sizes(120)
        rects = squarify_layout(make_items(*sizes), sum(sizes), 1024, 768)
        tolerance = AREA_TOLERANCE * 1024 * 768
        for i, a in enumerate(rects):
            for b in rects[i + 1:]:
                assert overlap_area(a, b) <= tolerance

    def test_rectangles_stay_inside_viewport(self):
        sizes = descending_sizes(80)
        rects = squarify_layout(make_items(*sizes), sum(sizes), 500, 300)
        eps = 1e-6
        for rect in rects:
            assert rect.x >= -eps and rect.y >= -eps
            assert rect.x + rect.w <= 500 + eps
            assert rect.y + rect.h <= 300 + eps

    @pytest.mark.parametrize(
        "sizes,width,height",
        [
            ([572334586180, 0.00030360102395245175], 1370.04, 1807.44),
            ([1450622454887, 12], 1274, 1144),
            ([10 ** 15, 10 ** 8, 3, 1], 1920, 1080),
        ],
    )
    def test_dwarfed_items_stay_inside_viewport(self, sizes, width, height):
        rects = squarify_layout(make_items(*sizes), sum(sizes), width, height)
        eps = 1e-6
        assert len(rects) == len(sizes)
        for rect in rects:
            assert rect.w >= 0 and rect.h >= 0
            assert rect.x >= -eps and rect.y >= -eps
            assert rect.x + rect.w <= width + eps
            assert rect.y + rect.h <= height + eps
        assert rects[0].area == pytest.approx(width * height, rel=AREA_TOLERANCE)

    def test_non_negative_geometry(self):
        sizes = [10 ** 12, 10 ** 6, 1, 1]
        rects = squarify_layout(make_items(*sizes), sum(sizes), 300, 10)
        assert all(r.w >= 0 and r.h >= 0 for r in rects)

    def test_output_order_matches_input(self):
        items = make_items(*descending_sizes(40))
        rects = squarify_layout(items, sum(i.size for i in items), 640, 480)
        assert [r.item for r in rects] == items

    def test_deterministic(self):
        items = make_items(*descending_sizes(50))
        total = sum(i.size for i in items)
        first = [tuple(r[:4]) for r in squarify_layout(items, total, 333, 777)]
        second = [tuple(r[:4]) for r in squarify_layout(items, total, 333, 777)]
        assert first == second

    def test_inputs_are_not_modified(self):
        items = make_items(5, 3, 1)
        before = list(items)
        squarify_layout(items, 9, 10, 10)
        assert items == before
        assert [i.size for i in items] == [5, 3, 1]

    def test_many_siblings(self):
        sizes = descending_sizes(1500)
        rects = squarify_layout(make_items(*sizes), sum(sizes), 1920, 1080)
        area = 1920 * 1080
        assert len(rects) == 1500
        assert abs(sum(r.area for r in rects) - area) <= AREA_TOLERANCE * area
        assert all(math.isfinite(v) for r in rects for v in r[:4])


class TestBuildLayoutItems:
    def test_filters_sorts_and_adds_remainder(self, root_node):
        items = build_layout_items(root_node, "[Files in this folder]")

        assert [i.name for i in items] == ["music", "docs", "photos", "[Files in this folder]"]
        assert [i.size for i in items] == [500, 300, 100, 100]

    def test_remainder_item(self, root_node):
        remainder = build_layout_items(root_node, "rest")[-1]
        assert remainder.is_remainder
        assert not remainder.is_navigable
        assert remainder.path == "/data"
        assert remainder.child_file_count == 3

    def test_navigable_follows_dir_count(self, root_node):
        items = {i.name: i for i in build_layout_items(root_node, "rest")}
        assert items["music"].is_navigable
        assert not items["docs"].is_navigable

    def test_remainder_can_be_disabled(self, root_node):
        items = build_layout_items(root_node, "rest", include_remainder=False)
        assert not any(i.is_remainder for i in items)

    def test_no_remainder_without_own_size(self):
        node = make_node("/x", 10, children=[("a", 10, 0)])
        items = build_layout_items(node, "rest")
        assert [i.name for i in items] == ["a"]

    def test_ties_keep_source_order(self):
        node = make_node("/x", 30, children=[("b", 10, 0), ("a", 10, 0), ("c", 10, 0)])
        assert [i.name for i in build_layout_items(node, "rest")] == ["b", "a", "c"]

    def test_layout_of_real_node_conserves_area(self, root_node):
        items = build_layout_items(root_node, "rest")
        rects = squarify_layout(items, root_node["size"], 400, 250)
        assert sum(r.area for r in rects) == pytest.approx(400 * 250)


class TestSizedItem:
    def test_from_node(self):
        item = SizedItem.from_node({"name": "a", "path": "/a", "size": 5, "dir_count": 2, "file_count": 7})
        assert (item.name, item.path, item.size) == ("a", "/a", 5)
        assert item.is_navigable
        assert item.child_dir_count == 2
        assert item.child_file_count == 7
        assert not item.is_remainder

    def test_contains(self):
        rect = LayoutRectangle(10, 10, 20, 5, SizedItem("a", "/a", 1))
        assert rect.contains(10, 10)
        assert rect.contains(29.9, 14.9)
        assert not rect.contains(30, 12)
        assert not rect.contains(15, 15)


class TestFormatBytes:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 ** 2, "5.0 MB"),
            (1024 ** 3, "1.0 GB"),
            (1024 ** 6, "1024.0 PB"),
        ],
    )
    def test_format(self, value, expected):
        assert format_bytes(value) == expected
