"""Qt host widget for the waterfall (masonry) layout of dream cards."""

import math
import traceback

from PySide6.QtCore import QEasingCurve, QPropertyAnimation, QRect, QTimer, Signal
from PySide6.QtWidgets import QWidget

from dreamjournal.utils.flow_log import log_flow
from dreamjournal.utils.settings import get_int_setting, settings
from dreamjournal.widgets.dream_card import DreamCard
from dreamjournal.widgets.waterfall_corrector import item_key, item_keys
from dreamjournal.widgets.waterfall_estimator import get_estimator_config
from dreamjournal.widgets.waterfall_lifecycle_service import WaterfallLifecycleService
from dreamjournal.widgets.waterfall_packer import WaterfallPass


def render_dream_card(item, index):
    del index
    return DreamCard(item)


class WidgetMeasurementSource:
    """Reads realized card heights for a given column width."""

    def __init__(self, widgets_by_key: dict, width: float):
        self._widgets_by_key = widgets_by_key
        self._width = max(1, int(width))

    def measure(self, key) -> float | None:
        widget = self._widgets_by_key.get(key)
        if widget is None:
            return None
        if widget.hasHeightForWidth():
            height = widget.heightForWidth(self._width)
        else:
            height = widget.sizeHint().height()
        return float(height) if height > 0 else None


class WaterfallView(QWidget):
    """Places one card per item in equal-width columns, shortest column first.

    `render_item(item, index)` returns the QWidget for an item (or None to
    leave the slot empty). Cards are positioned absolutely; the widget's
    minimum height tracks the container height of the latest pass.
    """

    layout_applied = Signal(object)

    def __init__(self, render_item=None, columns: int | None = None,
                 gap: float | None = None, parent=None):
        super().__init__(parent)
        self._render_item = render_item or render_dream_card
        self._cards: list[QWidget | None] = []
        self._cards_by_key: dict = {}
        self._animations: dict[int, QPropertyAnimation] = {}

        self._service = WaterfallLifecycleService(self, get_estimator_config())
        self._service.columns = max(1, int(columns if columns is not None
                                           else get_int_setting('waterfall_columns', minimum=1)))
        self._service.gap = float(gap if gap is not None
                                  else get_int_setting('waterfall_gap', minimum=0))

        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self._on_resize_finished)

        settings.change.connect(self._on_setting_changed)

    # Inputs

    @property
    def service(self) -> WaterfallLifecycleService:
        return self._service

    @property
    def items(self) -> list:
        return self._service.items

    def set_items(self, items: list):
        if items is self._service.items:
            return
        self._rebuild_cards(items)
        self._service.set_inputs(items=items)

    def set_columns(self, columns: int):
        self._service.set_inputs(columns=columns)

    def set_gap(self, gap: float):
        self._service.set_inputs(gap=gap)

    def relayout(self):
        self._service.request_layout(reason="manual")

    def last_pass(self) -> WaterfallPass | None:
        return self._service.last_pass

    def card_at(self, index: int) -> QWidget | None:
        if 0 <= index < len(self._cards):
            return self._cards[index]
        return None

    # Hooks used by WaterfallLifecycleService

    def container_width(self) -> float:
        if not self.isVisible():
            return 0.0
        return float(self.width())

    def correction_delay_ms(self) -> int:
        return get_int_setting('waterfall_correction_delay_ms', minimum=0)

    def measurement_source(self) -> WidgetMeasurementSource:
        result = self._service.last_pass
        width = result.column_width if result else self.width()
        return WidgetMeasurementSource(self._cards_by_key, width)

    def _apply_waterfall_pass(self, items: list, result: WaterfallPass):
        animate = result.measured and get_int_setting('waterfall_transition_ms', minimum=0) > 0
        for position in result.positions:
            if position.index >= len(items):
                log_flow("WATERFALL", f"Item not found at index: {position.index}",
                         level="WARNING")
                continue
            widget = self.card_at(position.index)
            if widget is None:
                continue
            rect = QRect(int(round(position.left)), int(round(position.top)),
                         max(1, int(position.width)), max(1, int(round(position.height))))
            widget.setFixedWidth(rect.width())
            if animate:
                self._animate_to(position.index, widget, rect)
            else:
                self._stop_animation(position.index)
                widget.setGeometry(rect)
            widget.show()

        height = result.container_height
        if not math.isfinite(height) or height < 0:
            height = 0
        self.setMinimumHeight(int(math.ceil(height)))
        self.layout_applied.emit(result)

    # Cards

    def _rebuild_cards(self, items: list):
        for animation in self._animations.values():
            animation.stop()
        self._animations.clear()
        for widget in self._cards:
            if widget is not None:
                widget.hide()
                widget.deleteLater()
        self._cards = []
        self._cards_by_key = {}

        keys = item_keys(items)
        for index, item in enumerate(items):
            widget = None
            try:
                widget = self._render_item(item, index)
            except Exception as e:
                print(f"[WATERFALL] Failed to render item {index}: {e}")
                traceback.print_exc()
            if widget is not None:
                widget.setParent(self)
                widget.hide()
                if keys[index] != item_key(item, index):
                    log_flow("WATERFALL", f"Duplicate item id {item_key(item, index)!r} at index {index}",
                             level="WARNING")
                self._cards_by_key[keys[index]] = widget
            self._cards.append(widget)

    def _animate_to(self, index: int, widget: QWidget, rect: QRect):
        self._stop_animation(index)
        if widget.geometry() == rect:
            return
        animation = QPropertyAnimation(widget, b"geometry", self)
        animation.setDuration(get_int_setting('waterfall_transition_ms', minimum=0))
        animation.setEasingCurve(QEasingCurve.Type.OutCubic)
        animation.setStartValue(widget.geometry())
        animation.setEndValue(rect)
        self._animations[index] = animation
        animation.start()

    def _stop_animation(self, index: int):
        animation = self._animations.pop(index, None)
        if animation is not None:
            animation.stop()

    # Events

    def showEvent(self, event):
        super().showEvent(event)
        if self._service.container_width != self.container_width():
            self._resize_timer.start(0)

    def resizeEvent(self, event):
        """Recalculate the layout on resize (debounced)."""
        super().resizeEvent(event)
        if event.size().width() == event.oldSize().width():
            return
        self._resize_timer.stop()
        self._resize_timer.start(get_int_setting('waterfall_resize_debounce_ms', minimum=0))

    def _on_resize_finished(self):
        self._service.on_resize_finished()

    def _on_setting_changed(self, key, value):
        if key == 'waterfall_columns':
            self.set_columns(int(value))
        elif key == 'waterfall_gap':
            self.set_gap(float(value))
        elif key.startswith('estimate_'):
            self._service.estimator_config = get_estimator_config()
            self.relayout()
