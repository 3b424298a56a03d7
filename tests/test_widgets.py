"""Smoke tests for the treemap and breadcrumb widgets."""

import pytest
from PyQt6.QtCore import QPoint, Qt

from conftest import make_node
from ui.components import BreadcrumbBar
from ui.dialogs import SettingsDialog
from ui.treemap_widget import TreeMapWidget
from utils.navigation import BreadcrumbEntry, NavigationController


@pytest.fixture
def controller(qtbot):
    return NavigationController(remainder_label="[rest]", debounce_ms=10)


@pytest.fixture
def widget(qtbot, controller):
    w = TreeMapWidget(controller)
    qtbot.addWidget(w)
    w.resize(400, 300)
    w.show()
    qtbot.waitExposed(w)
    return w


def load(controller, node):
    requests = []
    controller.fetchRequested.connect(lambda *args: requests.append(args))
    controller.open(node["path"])
    controller.resize(400, 300)
    controller.on_subtree_ready(requests[-1][2], node)


def center(rect):
    return QPoint(int(rect.x + rect.w / 2), int(rect.y + rect.h / 2))


class TestTreeMapWidget:
    def test_receives_layout(self, widget, controller, root_node):
        load(controller, root_node)
        assert widget.rectangles == controller.get_rectangles()
        assert widget.total == 1000

    def test_hit_testing(self, widget, controller, root_node):
        load(controller, root_node)
        music = widget.rectangles[0]
        pos = center(music)
        assert widget._get_rect_at(pos) is music

    def test_click_drills_into_navigable(self, qtbot, widget, controller, root_node):
        load(controller, root_node)
        music = next(r for r in widget.rectangles if r.item.name == "music")

        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=center(music))

        assert controller.current_path == "/data/music"

    def test_click_on_leaf_does_nothing(self, qtbot, widget, controller, root_node):
        load(controller, root_node)
        docs = next(r for r in widget.rectangles if r.item.name == "docs")

        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=center(docs))

        assert controller.history_stack == ["/data"]

    def test_resize_is_forwarded(self, qtbot, widget, controller, root_node):
        load(controller, root_node)
        widget.resize(640, 480)
        qtbot.waitUntil(lambda: controller.viewport == (widget.width(), widget.height()), timeout=2000)

    def test_paints_without_error(self, widget, controller, root_node):
        load(controller, root_node)
        assert not widget.grab().isNull()

    def test_paints_empty_state(self, widget):
        assert not widget.grab().isNull()


class TestBreadcrumbBar:
    def test_entries_and_click(self, qtbot):
        bar = BreadcrumbBar()
        qtbot.addWidget(bar)
        bar.set_entries([
            BreadcrumbEntry("C:", "C:\\", False),
            BreadcrumbEntry("Users", "C:\\Users", False),
            BreadcrumbEntry("Bob", "C:\\Users\\Bob", True),
        ])

        assert sorted(bar.buttons) == [0, 1]
        with qtbot.waitSignal(bar.crumbClicked, timeout=1000) as blocker:
            bar.buttons[1].click()
        assert blocker.args == [1]

    def test_rebuild_replaces_entries(self, qtbot):
        bar = BreadcrumbBar()
        qtbot.addWidget(bar)
        bar.set_entries([BreadcrumbEntry("a", "/a", False), BreadcrumbEntry("b", "/a/b", True)])
        bar.set_entries([BreadcrumbEntry("a", "/a", True)])
        assert bar.buttons == {}
        assert len(bar.entries) == 1

    def test_driven_by_controller(self, qtbot, controller):
        bar = BreadcrumbBar()
        qtbot.addWidget(bar)
        controller.breadcrumbChanged.connect(bar.set_entries)
        bar.crumbClicked.connect(controller.on_breadcrumb_clicked)

        controller.open("/data")
        controller.drill_into("/data/music")
        bar.buttons[0].click()

        assert controller.history_stack == ["/data"]


class TestSettingsDialog:
    def test_own_files_toggle_updates_settings(self, qtbot):
        settings = {'lang': 'en', 'resize_debounce_ms': 200, 'show_own_files': True,
                    'colors': {'bg': '#1E1E1E'}}
        dialog = SettingsDialog(None, settings)
        qtbot.addWidget(dialog)
        assert dialog.chk_own_files.isChecked()

        with qtbot.waitSignal(dialog.settingsChanged, timeout=1000):
            dialog.chk_own_files.setChecked(False)

        assert settings['show_own_files'] is False

    def test_debounce_spin_updates_settings(self, qtbot):
        settings = {'lang': 'zh', 'resize_debounce_ms': 200, 'show_own_files': False}
        dialog = SettingsDialog(None, settings)
        qtbot.addWidget(dialog)
        assert not dialog.chk_own_files.isChecked()

        dialog.spin_debounce.setValue(350)

        assert settings['resize_debounce_ms'] == 350
