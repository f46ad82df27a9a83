from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QFileDialog
from .config import AppConfig, debug_log, info_log
from .utils import OperationLog, VerifiedCopier, scan_paths, read_structure
from .workers import IngestOrchestrator, ConflictResolver, IngestWorker, ResolveWorker, PathScanWorker

class IngestSession(QObject):
    """Entry points the UI layer talks to.

    Long operations run on worker threads and report through the session's
    signals. The session also keeps the caller-side view of the current run,
    folding each conflict-resolution round into it.
    """
    progress = pyqtSignal(int, str); log_line = pyqtSignal(str); error = pyqtSignal(str)
    scan_finished = pyqtSignal(list); ingest_finished = pyqtSignal(object); resolve_finished = pyqtSignal(object)

    def __init__(self, log=None, verify_checksum=None, parent=None):
        super().__init__(parent)
        self.log = log if log is not None else OperationLog()
        if verify_checksum is None: verify_checksum = AppConfig.get_verify_checksum()
        self.copier = VerifiedCopier(verify_checksum)
        self.current_result = None; self.destination = None; self.metadata = None
        self.scan_worker = None; self.ingest_worker = None; self.resolve_worker = None; self._pending_conflicts = []

    # --- Enumeration ---
    def select_files(self, parent=None):
        paths, _ = QFileDialog.getOpenFileNames(parent, "Select Media")
        return scan_paths(paths) if paths else []

    def scan_paths(self, paths):
        self.scan_worker = PathScanWorker(paths)
        self.scan_worker.finished_signal.connect(self.scan_finished)
        self.scan_worker.start()

    def read_structure(self, root_path):
        return read_structure(root_path)

    # --- Ingest ---
    def process_ingest(self, files, destination, metadata=None):
        self._begin_run(destination, metadata)
        self.ingest_worker = IngestWorker(files, destination, metadata, self.log, self.copier)
        self._wire(self.ingest_worker, self._on_ingest_finished)
        self.ingest_worker.start()

    def process_ingest_sync(self, files, destination, metadata=None):
        self._begin_run(destination, metadata)
        result = IngestOrchestrator(self.log, self.copier, self.progress.emit, self.log_line.emit).run(files, destination, metadata)
        self._on_ingest_finished(result)
        return result

    # --- Conflicts ---
    def resolve_conflicts(self, action, conflicts=None, destination=None, metadata=None, log_id=None):
        conflicts, destination, metadata, log_id = self._resolve_args(conflicts, destination, metadata, log_id)
        self.resolve_worker = ResolveWorker(conflicts, action, destination, metadata, log_id, self.log, self.copier)
        self._pending_conflicts = conflicts
        self._wire(self.resolve_worker, self._on_resolve_round)
        self.resolve_worker.start()

    def resolve_conflicts_sync(self, action, conflicts=None, destination=None, metadata=None, log_id=None):
        conflicts, destination, metadata, log_id = self._resolve_args(conflicts, destination, metadata, log_id)
        resolver = ConflictResolver(self.log, self.copier, self.progress.emit, self.log_line.emit)
        result = resolver.resolve(conflicts, action, destination, metadata, log_id)
        self._on_resolve_finished(conflicts, result)
        return result

    # --- History ---
    def get_logs(self): return self.log.list()
    def clear_logs(self): self.log.clear()

    def is_busy(self):
        return any(w is not None and w.isRunning() for w in (self.scan_worker, self.ingest_worker, self.resolve_worker))

    def _begin_run(self, destination, metadata):
        self.current_result = None; self.destination = destination; self.metadata = metadata

    def _wire(self, worker, on_finished=None):
        worker.progress_signal.connect(self.progress)
        worker.log_signal.connect(self.log_line)
        worker.error_signal.connect(self.error)
        if on_finished: worker.finished_signal.connect(on_finished)

    def _resolve_args(self, conflicts, destination, metadata, log_id):
        current = self.current_result or {}
        if conflicts is None: conflicts = list(current.get('conflicts', []))
        if destination is None: destination = self.destination
        if metadata is None: metadata = self.metadata
        if log_id is None: log_id = current.get('log_id')
        return conflicts, destination, metadata, log_id

    def _on_ingest_finished(self, result):
        self.current_result = result
        debug_log(f"Session: Run {result.get('log_id')} finished with {len(result['conflicts'])} conflicts")
        self.ingest_finished.emit(result)

    def _on_resolve_round(self, result):
        self._on_resolve_finished(self._pending_conflicts, result)

    def _on_resolve_finished(self, resolved, result):
        if self.current_result is not None:
            cur = self.current_result
            for key in ('copied', 'skipped', 'failed'): cur[key] = cur[key] + result[key]
            handled = {c['dest_path'] for c in resolved}
            cur['conflicts'] = [c for c in cur['conflicts'] if c['dest_path'] not in handled]
            info_log(f"Session: Round merged, {len(cur['conflicts'])} conflicts left")
        self.resolve_finished.emit(result)
