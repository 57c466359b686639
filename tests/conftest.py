import os
import tempfile

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings

# Keep test runs away from the user's real settings file.
QSettings.setDefaultFormat(QSettings.Format.IniFormat)
QSettings.setPath(QSettings.Format.IniFormat, QSettings.Scope.UserScope,
                  tempfile.mkdtemp(prefix="dreamjournal-settings-"))


@pytest.fixture(autouse=True)
def clean_settings():
    from dreamjournal.utils import flow_log
    from dreamjournal.utils.settings import settings

    settings.clear()
    flow_log.reset_throttle()
    yield
    settings.clear()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
