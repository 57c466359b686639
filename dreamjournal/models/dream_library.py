import json
from pathlib import Path

from dreamjournal.models.dream_item import DreamItem, dreams_from_payload
from dreamjournal.utils.flow_log import log_flow


def load_library(path: Path | str) -> list[DreamItem]:
    """
    Load dreams from a JSON export.

    Accepts either a bare list of dreams or the dreams API envelope
    (`{"success": true, "data": {"dreams": [...]}}`). Unreadable files give an
    empty library.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        log_flow("LIBRARY", f"Dream library not found: {path}", level="WARNING")
        return []
    except (OSError, json.JSONDecodeError) as e:
        log_flow("LIBRARY", f"Failed to read dream library {path.name}: {e}", level="ERROR")
        return []

    if isinstance(payload, dict) and payload.get('success') is False:
        log_flow("LIBRARY", f"Library export reports failure: {payload.get('message', '')}",
                 level="WARNING")
        return []

    dreams = dreams_from_payload(payload)
    log_flow("LIBRARY", f"Loaded {len(dreams)} dreams from {path.name}")
    return dreams
