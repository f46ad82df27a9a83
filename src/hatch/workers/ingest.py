import os
import uuid
from datetime import datetime
from PyQt6.QtCore import QThread, pyqtSignal
from ..config import AppConfig
from ..utils import (OperationLog, VerifiedCopier, require_destination, display_name_for,
                     MATCH, OVERWRITTEN, debug_log, info_log, error_log)

OVERWRITE = "overwrite"
SKIP = "skip"
SKIP_REASON = "User Skipped [Resolved]"

def empty_result():
    return {'copied': [], 'skipped': [], 'failed': [], 'conflicts': [], 'total_size': 0, 'log_id': None}

def percent_of(done, total):
    return int(round(done / total * 100)) if total else 100

def flatten_metadata(metadata):
    metadata = metadata or {}
    return {k: metadata.get(k) for k in ("project_name", "client_name", "project_type", "date")}

class _RunBase:
    def __init__(self, log=None, copier=None, progress_callback=None, log_callback=None):
        self.log = log if log is not None else OperationLog()
        self.copier = copier if copier is not None else VerifiedCopier(AppConfig.get_verify_checksum())
        self.progress_callback = progress_callback
        self.log_callback = log_callback

    def report(self, done, total, message):
        if self.progress_callback: self.progress_callback(percent_of(done, total), message)

    def note(self, line):
        if self.log_callback: self.log_callback(line)

class IngestOrchestrator(_RunBase):
    """Copies a batch of files into ``destination`` one at a time.

    Files whose destination already exists are set aside as conflicts. Every
    other file is copied and verified; per-file problems become failure
    records and never stop the batch. Only a missing destination raises.
    """

    def run(self, files, destination, metadata=None):
        destination = require_destination(destination)
        result = empty_result()
        if not files: return result

        os.makedirs(destination, exist_ok=True)
        total = len(files)
        info_log(f"Ingest: {total} files -> {destination}")
        for idx, f in enumerate(files):
            bucket, record = self.process_file(f, destination)
            result[bucket].append(record)
            name = record['display_name']
            if bucket == 'copied':
                result['total_size'] += record['size']
                self.note(f"✔️ Copied: {name}"); message = f"Copied {name}"
            elif bucket == 'conflicts':
                self.note(f"⚠️ Exists: {name}"); message = f"Conflict: {name}"
            else:
                self.note(f"❌ Error {name}: {record['error']}"); message = f"Failed: {name}"
            self.report(idx + 1, total, message)

        result['log_id'] = uuid.uuid4().hex
        self.log.record({
            'id': result['log_id'],
            'timestamp': datetime.now().isoformat(),
            'metadata': flatten_metadata(metadata),
            'destination': destination,
            'source_directory': self.source_directory(files),
            'description': f"Ingest of {total} file{'s' if total != 1 else ''}",
            'copied': result['copied'], 'skipped': result['skipped'], 'failed': result['failed'],
            'conflicts': result['conflicts'],
            'total_size': result['total_size']
        })
        info_log(f"Ingest: Done. {len(result['copied'])} copied, {len(result['conflicts'])} conflicts, {len(result['failed'])} failed")
        return result

    def process_file(self, f, destination):
        name = display_name_for(f)
        dest_path = os.path.join(destination, name)
        if os.path.exists(dest_path):
            return 'conflicts', {'source_path': f.path, 'dest_path': dest_path, 'display_name': name, 'size': f.size, 'relative_path': f.relative_path}
        bucket, record = self.copier.copy(f.path, dest_path, name, MATCH)
        if bucket == 'failed': error_log(f"Ingest: {name}: {record['error']}")
        return bucket, record

    @staticmethod
    def source_directory(files):
        try: return os.path.commonpath([os.path.dirname(f.path) for f in files])
        except ValueError: return None

class ConflictResolver(_RunBase):
    """Applies one overwrite/skip decision to a set of previously detected conflicts."""

    def resolve(self, conflicts, action, destination, metadata=None, log_id=None, remaining_conflicts=None):
        destination = require_destination(destination)
        if action not in (OVERWRITE, SKIP): raise ValueError(f"Unknown conflict action: {action}")
        result = {'copied': [], 'skipped': [], 'failed': []}
        total = len(conflicts)
        for idx, c in enumerate(conflicts):
            name = c['display_name']
            self.report(idx + 1, total, f"Resolving {name} ({idx + 1}/{total})")
            if action == SKIP:
                result['skipped'].append({'display_name': name, 'source_path': c['source_path'], 'reason': SKIP_REASON})
                self.note(f"⏭️ Skipped: {name}")
                continue
            dest_path = c.get('dest_path') or os.path.join(destination, c.get('relative_path') or name)
            bucket, record = self.copier.copy(c['source_path'], dest_path, name, OVERWRITTEN)
            result[bucket].append(record)
            if bucket == 'copied': self.note(f"✔️ Overwritten: {name}")
            else: self.note(f"❌ Error {name}: {record['error']}"); error_log(f"Resolve: {name}: {record['error']}")

        if log_id:
            entry = dict(result, id=log_id, metadata=flatten_metadata(metadata), destination=destination, resolved_conflicts=total)
            if remaining_conflicts is not None: entry['remaining_conflicts'] = remaining_conflicts
            self.log.record(entry)
        else:
            debug_log("Resolve: No log id given, round not recorded")
        return result

class IngestWorker(QThread):
    progress_signal = pyqtSignal(int, str); log_signal = pyqtSignal(str); finished_signal = pyqtSignal(object); error_signal = pyqtSignal(str)

    def __init__(self, files, destination, metadata=None, log=None, copier=None):
        super().__init__(); self.files = list(files); self.destination = destination; self.metadata = metadata; self.log = log; self.copier = copier

    def run(self):
        try:
            orchestrator = IngestOrchestrator(self.log, self.copier, self._on_progress, self._on_log)
            result = orchestrator.run(self.files, self.destination, self.metadata)
        except Exception as e:
            error_log(f"Ingest: Aborted: {e}"); self.error_signal.emit(str(e)); return
        self.finished_signal.emit(result)

    def _on_progress(self, percent, message): self.progress_signal.emit(percent, message)
    def _on_log(self, line): self.log_signal.emit(line)

class ResolveWorker(QThread):
    progress_signal = pyqtSignal(int, str); log_signal = pyqtSignal(str); finished_signal = pyqtSignal(object); error_signal = pyqtSignal(str)

    def __init__(self, conflicts, action, destination, metadata=None, log_id=None, log=None, copier=None, remaining_conflicts=None):
        super().__init__(); self.conflicts = list(conflicts); self.action = action; self.destination = destination; self.metadata = metadata
        self.log_id = log_id; self.log = log; self.copier = copier; self.remaining_conflicts = remaining_conflicts

    def run(self):
        try:
            resolver = ConflictResolver(self.log, self.copier, self._on_progress, self._on_log)
            result = resolver.resolve(self.conflicts, self.action, self.destination, self.metadata, self.log_id, self.remaining_conflicts)
        except Exception as e:
            error_log(f"Resolve: Aborted: {e}"); self.error_signal.emit(str(e)); return
        self.finished_signal.emit(result)

    def _on_progress(self, percent, message): self.progress_signal.emit(percent, message)
    def _on_log(self, line): self.log_signal.emit(line)
