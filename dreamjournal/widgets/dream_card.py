from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout

from dreamjournal.models.dream_item import get_emotion_option, item_field

PREVIEW_LENGTH = 100
UNTITLED_TITLE = 'Untitled dream'
IMAGE_BLOCK_HEIGHT = 200


def content_preview(content: str | None, length: int = PREVIEW_LENGTH) -> str:
    """First `length` characters of the dream, with an ellipsis if cut."""
    content = content or ''
    if len(content) > length:
        return content[:length] + '...'
    return content


def format_created_at(created_at) -> str:
    if created_at is None:
        return ''
    if hasattr(created_at, 'strftime'):
        return created_at.strftime('%Y-%m-%d')
    return str(created_at)


class TagLabel(QLabel):
    def __init__(self, text: str, background: str, parent=None):
        super().__init__(text, parent)
        self.setStyleSheet(f'background-color: {background}; color: #333; '
                           'border-radius: 4px; padding: 2px 6px; font-size: 11px;')


class DreamCard(QFrame):
    """Library card for a single dream."""

    def __init__(self, dream, parent=None):
        super().__init__(parent)
        self.dream = dream
        self.setObjectName('dreamCard')
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setStyleSheet('#dreamCard { background: #ffffff; border-radius: 8px; '
                           'border: 1px solid #eeeeee; }')

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(6)

        image = item_field(dream, 'image')
        if image:
            self.image_label = QLabel()
            self.image_label.setFixedHeight(IMAGE_BLOCK_HEIGHT)
            self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.image_label.setStyleSheet('background: #f5f5f5; border-radius: 6px;')
            pixmap = QPixmap(str(image)) if Path(str(image)).exists() else QPixmap()
            if not pixmap.isNull():
                self.image_label.setPixmap(pixmap.scaledToHeight(
                    IMAGE_BLOCK_HEIGHT, Qt.TransformationMode.SmoothTransformation))
            layout.addWidget(self.image_label)
        else:
            self.image_label = None

        self.title_label = QLabel(item_field(dream, 'title') or UNTITLED_TITLE)
        self.title_label.setWordWrap(True)
        self.title_label.setStyleSheet('font-weight: bold; font-size: 14px;')
        layout.addWidget(self.title_label)

        self.description_label = QLabel(content_preview(item_field(dream, 'content')))
        self.description_label.setWordWrap(True)
        self.description_label.setStyleSheet('color: #666; font-size: 12px;')
        layout.addWidget(self.description_label)

        tags_layout = QHBoxLayout()
        tags_layout.setSpacing(4)
        self.tag_labels = []
        emotion = get_emotion_option(item_field(dream, 'emotion'))
        if emotion is not None:
            self.tag_labels.append(TagLabel(f'{emotion.icon} {emotion.label}', '#f0f0f0'))
        category = item_field(dream, 'category')
        if category:
            self.tag_labels.append(TagLabel(str(category), '#e8f4ff'))
        for tag in item_field(dream, 'tags') or ():
            self.tag_labels.append(TagLabel(f'#{tag}', '#f6f0ff'))
        for tag_label in self.tag_labels:
            tags_layout.addWidget(tag_label)
        tags_layout.addStretch()
        layout.addLayout(tags_layout)

        self.date_label = QLabel(format_created_at(
            item_field(dream, 'created_at', item_field(dream, 'createdAt'))))
        self.date_label.setStyleSheet('color: #999; font-size: 11px;')
        layout.addWidget(self.date_label)
