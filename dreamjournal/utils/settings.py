from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'waterfall_columns': 2,
    'waterfall_gap': 16,
    # Delay between the estimated pass and the measured pass, so the cards
    # have been laid out and painted once before their heights are read.
    'waterfall_correction_delay_ms': 100,
    'waterfall_resize_debounce_ms': 140,
    'waterfall_transition_ms': 180,  # 0 = move cards without animation
    # Height estimation constants (pixels), tuned for the default dream card.
    'estimate_base_height': 120,
    'estimate_image_height': 200,
    'estimate_chars_per_line': 50,
    'estimate_line_height': 20,
    'estimate_max_lines': 0,  # 0 = uncapped
    'estimate_tag_row_height': 30,
    'estimate_min_height': 150,
    'estimate_average_char_width': 0.0,  # > 0 derives chars per line from the column width
    'trace_logs': False,
    'library_path': '',
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('dreamjournal', 'dreamjournal')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_int_setting(key: str, minimum: int | None = None) -> int:
    default = DEFAULT_SETTINGS[key]
    try:
        value = int(settings.value(key, defaultValue=default, type=int))
    except (TypeError, ValueError):
        value = default
    if minimum is not None:
        value = max(minimum, value)
    return value


def get_float_setting(key: str) -> float:
    default = DEFAULT_SETTINGS[key]
    try:
        return float(settings.value(key, defaultValue=default, type=float))
    except (TypeError, ValueError):
        return float(default)

