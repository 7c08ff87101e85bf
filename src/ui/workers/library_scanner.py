# ui/workers/library_scanner.py
from PySide6.QtCore import QThread, Signal

from core.errors import ScanCancelled
from library.scan_library import scan_music_directory

class LibraryScanner(QThread):
    songs_signal = Signal(object)          # list[Song]
    finished_signal = Signal(bool, str)    # ok, message

    def __init__(self, directory: str, parent=None):
        super().__init__(parent)
        self.directory = directory
        self._cancel_requested = False

    def cancel(self):
        self._cancel_requested = True

    def run(self):
        try:
            songs = scan_music_directory(self.directory, cancel=lambda: self._cancel_requested)
        except ScanCancelled:
            self.finished_signal.emit(False, "Scan cancelled")
            return
        except Exception as e:
            self.finished_signal.emit(False, f"Error scanning directory: {e}")
            return

        self.songs_signal.emit(songs)
        self.finished_signal.emit(True, f"Found {len(songs)} songs")
