"""Measured-height correction for the second waterfall pass."""

import math
from typing import Protocol

from dreamjournal.models.dream_item import item_field
from dreamjournal.widgets.waterfall_packer import WaterfallPass, pack_items


class MeasurementSource(Protocol):
    """Anything that can report the realized height of a mounted card."""

    def measure(self, key) -> float | None:
        ...


def item_key(item, index: int):
    """Identifier used to look a card up on the rendering surface."""
    key = item_field(item, 'id')
    return index if key is None else key


def item_keys(items: list) -> list:
    """One distinct key per item, in order.

    An item whose key was already taken (shared id, or an index clashing
    with another item's id) gets a `('slot', index)` key instead.
    """
    keys = []
    seen = set()
    for index, item in enumerate(items):
        key = item_key(item, index)
        try:
            taken = key in seen
        except TypeError:
            # Unhashable id
            taken = True
        if taken:
            key = ('slot', index)
        seen.add(key)
        keys.append(key)
    return keys


def _usable(height) -> bool:
    if height is None:
        return False
    try:
        height = float(height)
    except (TypeError, ValueError):
        return False
    return math.isfinite(height) and height > 0


def corrected_heights(items: list, estimated: list[float],
                      source: MeasurementSource) -> tuple[list[float], int]:
    """
    Replace estimates with measured heights where a measurement exists.

    Returns:
        (heights, measured_count). A missing, zero or non-finite measurement
        keeps the estimate for that item.
    """
    heights = []
    measured_count = 0
    for index, key in enumerate(item_keys(items)):
        estimate = estimated[index] if index < len(estimated) else 0.0
        try:
            measured = source.measure(key)
        except (RuntimeError, LookupError):
            # Widget already deleted or never mounted.
            measured = None
        if _usable(measured):
            heights.append(float(measured))
            measured_count += 1
        else:
            heights.append(estimate)
    return heights, measured_count


def run_correction_pass(items: list, estimated: list[float], source: MeasurementSource,
                        columns: int, column_width: float, gap: float) -> WaterfallPass:
    heights, _ = corrected_heights(items, estimated, source)
    return pack_items(heights, columns, column_width, gap, measured=True)
