from enum import Enum

from PySide6.QtCore import QTimer

from dreamjournal.utils.flow_log import log_flow
from dreamjournal.widgets.waterfall_corrector import run_correction_pass
from dreamjournal.widgets.waterfall_estimator import (DEFAULT_ESTIMATOR_CONFIG,
                                                      EstimatorConfig,
                                                      estimate_item_height)
from dreamjournal.widgets.waterfall_packer import (WaterfallPass,
                                                   compute_column_width,
                                                   pack_items)


class LayoutPhase(str, Enum):
    IDLE = 'idle'
    ESTIMATING = 'estimating'
    PACKING_PASS1 = 'packing_pass1'
    AWAITING_PAINT = 'awaiting_paint'
    MEASURING_AND_PACKING_PASS2 = 'measuring_and_packing_pass2'


class WaterfallLifecycleService:
    """Owns the two-pass waterfall recompute for a WaterfallView.

    The view provides `container_width()`, `measurement_source()`,
    `correction_delay_ms()` and `_apply_waterfall_pass(items, result)`.
    """

    def __init__(self, view, estimator_config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG):
        self._view = view
        self.estimator_config = estimator_config
        self.phase = LayoutPhase.IDLE
        # Bumped on every trigger; a delayed correction from an older
        # generation is dropped instead of overwriting newer positions.
        self.generation = 0
        self.items: list = []
        self.columns = 2
        self.gap = 16.0
        self.container_width = 0.0
        self.estimated_heights: list[float] = []
        self.last_pass: WaterfallPass | None = None

    def set_inputs(self, items=None, columns: int | None = None,
                   gap: float | None = None) -> bool:
        """Update inputs and recompute if any of them changed.

        Items are compared by reference, a new list always recomputes.
        """
        changed = []
        if items is not None and items is not self.items:
            self.items = items
            changed.append("items")
        if columns is not None and max(1, int(columns)) != self.columns:
            self.columns = max(1, int(columns))
            changed.append("columns")
        if gap is not None and max(0.0, float(gap)) != self.gap:
            self.gap = max(0.0, float(gap))
            changed.append("gap")
        if not changed:
            return False
        self.request_layout(reason="+".join(changed))
        return True

    def on_resize_finished(self) -> bool:
        """Recompute after a (debounced) resize if the width really changed."""
        width = self._view.container_width()
        if width == self.container_width:
            return False
        self.request_layout(reason="resize")
        return True

    def request_layout(self, reason: str = "manual"):
        """Run the estimated pass now and schedule the measured pass."""
        self.generation += 1
        generation = self.generation

        width = float(self._view.container_width())
        self.container_width = width
        if width <= 0:
            # Not mounted or hidden: nothing to place yet.
            log_flow("WATERFALL", f"Skipping layout ({reason}): container width {width}",
                     throttle_key="waterfall_zero_width", every_s=1.0)
            self.phase = LayoutPhase.IDLE
            self.last_pass = None
            return

        self.phase = LayoutPhase.ESTIMATING
        items = self.items
        column_width = compute_column_width(width, self.columns, self.gap)
        self.estimated_heights = [
            estimate_item_height(item, column_width, self.estimator_config)
            for item in items
        ]

        self.phase = LayoutPhase.PACKING_PASS1
        result = pack_items(self.estimated_heights, self.columns, column_width, self.gap)
        self.last_pass = result
        log_flow("WATERFALL",
                 f"Pass 1 ({reason}): {len(items)} items, {self.columns} cols, "
                 f"col_w={column_width:.1f}, height={result.container_height:.0f}")
        self._view._apply_waterfall_pass(items, result)

        self.phase = LayoutPhase.AWAITING_PAINT
        QTimer.singleShot(self._view.correction_delay_ms(),
                          lambda: self.run_correction(generation))

    def run_correction(self, generation: int):
        """Re-pack with measured heights. Runs once per layout generation."""
        if generation != self.generation:
            log_flow("WATERFALL", f"Dropping stale correction (gen {generation} < {self.generation})")
            return
        if self.phase != LayoutPhase.AWAITING_PAINT:
            return

        self.phase = LayoutPhase.MEASURING_AND_PACKING_PASS2
        items = self.items
        if len(self.estimated_heights) != len(items):
            # Items were swapped without a trigger; estimates no longer line up.
            log_flow("WATERFALL", "Estimates out of sync with items, skipping correction",
                     level="WARNING")
            self.phase = LayoutPhase.IDLE
            return

        column_width = compute_column_width(self.container_width, self.columns, self.gap)
        result = run_correction_pass(items, self.estimated_heights,
                                     self._view.measurement_source(),
                                     self.columns, column_width, self.gap)
        self.last_pass = result
        log_flow("WATERFALL",
                 f"Pass 2: height={result.container_height:.0f} (gen {generation})")
        self._view._apply_waterfall_pass(items, result)
        self.phase = LayoutPhase.IDLE
