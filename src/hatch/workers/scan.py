from PyQt6.QtCore import QThread, pyqtSignal
from ..utils import scan_paths, read_structure, debug_log

class PathScanWorker(QThread):
    finished_signal = pyqtSignal(list)
    def __init__(self, paths): super().__init__(); self.paths = list(paths)
    def run(self):
        found = scan_paths(self.paths)
        debug_log(f"PathScanWorker: {len(found)} files ready")
        self.finished_signal.emit(found)

class StructureWorker(QThread):
    finished_signal = pyqtSignal(list)
    def __init__(self, root_path): super().__init__(); self.root_path = root_path
    def run(self): self.finished_signal.emit(read_structure(self.root_path))
