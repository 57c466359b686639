"""Shortest-column-next packing for the waterfall layout."""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WaterfallPosition:
    """Represents a positioned item in the waterfall layout."""
    index: int
    column: int
    left: float
    top: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class WaterfallPass:
    """Result of one full packing pass over all items."""
    positions: list[WaterfallPosition] = field(default_factory=list)
    column_heights: list[float] = field(default_factory=list)
    container_height: float = 0.0
    column_width: float = 0.0
    measured: bool = False


def _finite_or_zero(value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def compute_column_width(container_width: float, columns: int, gap: float) -> float:
    """Width of one column once the gaps between columns are taken out."""
    columns = max(1, int(columns))
    width = (container_width - gap * (columns - 1)) / columns
    return _finite_or_zero(width)


def container_height_for(column_heights: list[float], gap: float) -> float:
    """Height to reserve: tallest column minus its trailing gap, never negative."""
    if not column_heights:
        return 0.0
    return _finite_or_zero(max(column_heights) - gap)


def pack_items(heights: list[float], columns: int, column_width: float,
               gap: float, measured: bool = False) -> WaterfallPass:
    """
    Place items, in order, into the currently shortest column.

    Args:
        heights: Height of each item, in input order
        columns: Number of columns
        column_width: Width of each column
        gap: Spacing between columns and between stacked items
        measured: Whether the heights are measured (pass 2) or estimated

    Returns:
        WaterfallPass with one position per item
    """
    columns = max(1, int(columns))
    column_heights = [0.0] * columns
    positions = []

    for index, raw_height in enumerate(heights):
        height = _finite_or_zero(raw_height)

        # list.index returns the first minimum, so ties go to the leftmost column
        column = column_heights.index(min(column_heights))

        positions.append(WaterfallPosition(
            index=index,
            column=column,
            left=column * (column_width + gap),
            top=column_heights[column],
            width=column_width,
            height=height,
        ))

        column_heights[column] += height + gap

    return WaterfallPass(
        positions=positions,
        column_heights=column_heights,
        container_height=container_height_for(column_heights, gap) if positions else 0.0,
        column_width=column_width,
        measured=measured,
    )
