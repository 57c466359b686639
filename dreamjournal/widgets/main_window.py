from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QApplication, QFileDialog, QLabel, QMainWindow,
                               QScrollArea, QStackedWidget, QTabBar,
                               QVBoxLayout, QWidget)
from PySide6.QtGui import QAction

from dreamjournal.models.dream_item import ALL_EMOTIONS, EMOTION_OPTIONS, filter_dreams
from dreamjournal.models.dream_library import load_library
from dreamjournal.utils.settings import settings
from dreamjournal.widgets.waterfall_view import WaterfallView

# Emotions offered as library tabs, after "All".
TAB_EMOTION_COUNT = 6
EMPTY_LIBRARY_TEXT = 'No dreams recorded yet'


class DreamLibraryWindow(QMainWindow):
    def __init__(self, app: QApplication, dreams: list | None = None):
        super().__init__()
        self.app = app
        self.dreams = list(dreams or [])
        self.active_emotion = ALL_EMOTIONS
        self.setWindowTitle('Dream Library')
        self.resize(420, 760)

        self.tab_bar = QTabBar()
        self.tab_bar.setExpanding(False)
        self.tab_emotions = [ALL_EMOTIONS]
        self.tab_bar.addTab('All')
        for option in EMOTION_OPTIONS[:TAB_EMOTION_COUNT]:
            self.tab_bar.addTab(f'{option.icon} {option.label}')
            self.tab_emotions.append(option.value)
        self.tab_bar.currentChanged.connect(self.on_tab_changed)

        self.waterfall_view = WaterfallView()
        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setHorizontalScrollBarPolicy(
            Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.scroll_area.setWidget(self.waterfall_view)

        self.empty_label = QLabel(EMPTY_LIBRARY_TEXT)
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet('color: #999; font-size: 14px;')

        self.stack = QStackedWidget()
        self.stack.addWidget(self.scroll_area)
        self.stack.addWidget(self.empty_label)

        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.addWidget(self.tab_bar)
        layout.addWidget(self.stack)
        self.setCentralWidget(central_widget)

        open_action = QAction('Open Library...', self)
        open_action.triggered.connect(self.select_library_file)
        self.menuBar().addMenu('File').addAction(open_action)

        self.refresh_dreams()

    def visible_dreams(self) -> list:
        return filter_dreams(self.dreams, self.active_emotion)

    def refresh_dreams(self):
        visible = self.visible_dreams()
        self.waterfall_view.set_items(visible)
        self.stack.setCurrentWidget(self.scroll_area if visible else self.empty_label)

    def on_tab_changed(self, index: int):
        if 0 <= index < len(self.tab_emotions):
            self.active_emotion = self.tab_emotions[index]
            self.refresh_dreams()

    def load_library_file(self, path: Path | str):
        self.dreams = load_library(path)
        settings.setValue('library_path', str(path))
        self.refresh_dreams()

    def select_library_file(self):
        initial = settings.value('library_path', defaultValue='', type=str)
        path, _ = QFileDialog.getOpenFileName(
            self, 'Open Dream Library', initial, 'JSON files (*.json)')
        if path:
            self.load_library_file(path)
