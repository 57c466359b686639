"""Provisional card heights for the first waterfall pass."""

import math
from dataclasses import dataclass

from dreamjournal.models.dream_item import item_field
from dreamjournal.utils.settings import get_float_setting, get_int_setting


@dataclass(frozen=True)
class EstimatorConfig:
    """Pixel constants for the default dream card design."""
    base_height: float = 120
    image_height: float = 200
    chars_per_line: int = 50
    line_height: float = 20
    max_lines: int = 0  # 0 = uncapped
    tag_row_height: float = 30
    min_height: float = 150
    average_char_width: float = 0.0


DEFAULT_ESTIMATOR_CONFIG = EstimatorConfig()


def _chars_per_line(column_width: float, config: EstimatorConfig) -> int:
    if (config.average_char_width > 0 and math.isfinite(column_width)
            and column_width > 0):
        return max(1, int(column_width // config.average_char_width))
    return max(1, int(config.chars_per_line))


def estimate_item_height(item, column_width: float,
                         config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG) -> float:
    """
    Estimate the rendered height of a card before it can be measured.

    Args:
        item: Dream record (dataclass, mapping or object with `image`,
            `content` and `tags`)
        column_width: Width of one column in pixels
        config: Estimation constants

    Returns:
        Estimated height, never below `config.min_height`
    """
    height = config.base_height

    if item_field(item, 'image'):
        height += config.image_height

    content = item_field(item, 'content') or ''
    lines = len(str(content)) // _chars_per_line(column_width, config)
    if config.max_lines > 0:
        lines = min(lines, config.max_lines)
    height += lines * config.line_height

    tags = item_field(item, 'tags')
    if tags:
        height += config.tag_row_height

    return max(config.min_height, height)


def get_estimator_config() -> EstimatorConfig:
    """Build an `EstimatorConfig` from the stored estimation constants."""
    return EstimatorConfig(
        base_height=get_float_setting('estimate_base_height'),
        image_height=get_float_setting('estimate_image_height'),
        chars_per_line=get_int_setting('estimate_chars_per_line', minimum=1),
        line_height=get_float_setting('estimate_line_height'),
        max_lines=get_int_setting('estimate_max_lines', minimum=0),
        tag_row_height=get_float_setting('estimate_tag_row_height'),
        min_height=get_float_setting('estimate_min_height'),
        average_char_width=get_float_setting('estimate_average_char_width'),
    )
