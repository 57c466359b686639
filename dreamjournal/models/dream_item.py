"""Dream records shown in the library grid."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from dreamjournal.utils.flow_log import log_flow


@dataclass(frozen=True)
class EmotionOption:
    value: str
    label: str
    icon: str


EMOTION_OPTIONS = [
    EmotionOption('happy', 'Happy', '😊'),
    EmotionOption('sad', 'Sad', '😢'),
    EmotionOption('anxious', 'Anxious', '😰'),
    EmotionOption('peaceful', 'Peaceful', '😌'),
    EmotionOption('excited', 'Excited', '🤩'),
    EmotionOption('confused', 'Confused', '😕'),
    EmotionOption('angry', 'Angry', '😠'),
    EmotionOption('nostalgic', 'Nostalgic', '🥺'),
]

ALL_EMOTIONS = 'all'


def get_emotion_option(value: str | None) -> EmotionOption | None:
    for option in EMOTION_OPTIONS:
        if option.value == value:
            return option
    return None


@dataclass(frozen=True)
class DreamItem:
    """A single recorded dream, as returned by the dreams API."""
    id: int | str | None
    title: str = ''
    content: str = ''
    image: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    emotion: str | None = None
    category: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'DreamItem':
        tags = data.get('tags') or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            id=data.get('id'),
            title=str(data.get('title') or ''),
            content=str(data.get('content') or ''),
            image=data.get('image') or None,
            tags=tuple(str(tag) for tag in tags),
            emotion=data.get('emotion') or None,
            category=data.get('category') or None,
            created_at=parse_timestamp(data.get('createdAt')),
        )


def parse_timestamp(value) -> datetime | None:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    try:
        # API timestamps are ISO 8601, usually with a trailing 'Z'.
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


def item_field(item, name: str, default=None):
    """Read a field from a dream record, a mapping or any object."""
    if item is None:
        return default
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def dreams_from_payload(payload) -> list[DreamItem]:
    """Convert a list of dreams or an API envelope into `DreamItem`s.

    Entries that are not mappings are skipped with a warning.
    """
    if isinstance(payload, Mapping):
        data = payload.get('data') or {}
        payload = data.get('dreams') if isinstance(data, Mapping) else None
    if not isinstance(payload, list):
        return []

    dreams = []
    for position, entry in enumerate(payload):
        if not isinstance(entry, Mapping):
            log_flow("LIBRARY", f"Skipping invalid dream entry at {position}: {entry!r}",
                     level="WARNING")
            continue
        dreams.append(DreamItem.from_dict(entry))
    return dreams


def filter_dreams(dreams: list, emotion: str = ALL_EMOTIONS) -> list:
    if not emotion or emotion == ALL_EMOTIONS:
        return list(dreams)
    return [dream for dream in dreams if item_field(dream, 'emotion') == emotion]
