import logging
import os
import sys
import traceback
import warnings
from datetime import datetime

from PySide6.QtWidgets import QApplication, QMessageBox

from dreamjournal.models.dream_library import load_library
from dreamjournal.utils.settings import settings
from dreamjournal.widgets.main_window import DreamLibraryWindow

CRASH_LOG_PATH = os.path.abspath('dreamjournal_crash.log')
_crash_handlers_installed = False


def _append_crash_log(title: str, exc_info=None):
    """Append a timestamped crash entry to the crash log."""
    ts = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"{ts} | {title}\n")
            f.write("=" * 80 + "\n")
            if exc_info is None:
                f.write(traceback.format_exc())
            else:
                f.writelines(traceback.format_exception(*exc_info))
            f.write("\n")
    except OSError as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def install_crash_handlers():
    """Route uncaught exceptions from Qt callbacks into the crash log."""
    global _crash_handlers_installed
    if _crash_handlers_installed:
        return

    def _unhandled_exception(exc_type, exc_value, exc_traceback):
        _append_crash_log("UNHANDLED EXCEPTION", (exc_type, exc_value, exc_traceback))
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = _unhandled_exception
    _crash_handlers_installed = True


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('DREAMJOURNAL_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        logging.basicConfig(level=logging.DEBUG)
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


def run_gui(argv: list[str] | None = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    app = QApplication(argv)
    # The application name is shown in the taskbar.
    app.setApplicationName('DreamJournal')
    app.setApplicationDisplayName('DreamJournal')
    app.setStyle('Fusion')

    # Library file from the command line, else the last one opened.
    library_path = argv[1] if len(argv) > 1 else settings.value(
        'library_path', defaultValue='', type=str)
    dreams = load_library(library_path) if library_path else []

    main_window = DreamLibraryWindow(app, dreams)
    main_window.show()
    return int(app.exec())


def main():
    suppress_warnings()
    install_crash_handlers()
    try:
        sys.exit(run_gui())
    except Exception as exception:
        _append_crash_log("TOP-LEVEL EXCEPTION", sys.exc_info())
        error_message_box = QMessageBox()
        error_message_box.setWindowTitle('Error')
        error_message_box.setIcon(QMessageBox.Icon.Critical)
        error_message_box.setText(str(exception))
        error_message_box.setDetailedText(traceback.format_exc())
        error_message_box.exec()
        sys.exit(1)


if __name__ == '__main__':
    main()
