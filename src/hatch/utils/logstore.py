import json
import copy
import threading
from datetime import datetime
from .common import debug_log, info_log, error_log
from ..config import AppConfig

SUCCESS = "SUCCESS"
WARNING = "WARNING"
METADATA_FIELDS = ("project_name", "client_name", "project_type", "date")

# One lock per backing store, shared by every OperationLog that writes to it
_STORE_LOCKS = {}
_STORE_LOCKS_GUARD = threading.Lock()

def lock_for(store):
    with _STORE_LOCKS_GUARD:
        return _STORE_LOCKS.setdefault(store.lock_key(), threading.Lock())

class OperationLogStore:
    """Persistence for the list of log entries, newest first."""
    def get_all(self): raise NotImplementedError
    def save_all(self, entries): raise NotImplementedError
    def clear(self): self.save_all([])
    def lock_key(self): return (type(self).__name__, id(self))

class MemoryLogStore(OperationLogStore):
    def __init__(self, entries=None): self.entries = list(entries or [])
    def get_all(self): return copy.deepcopy(self.entries)
    def save_all(self, entries): self.entries = copy.deepcopy(list(entries))

class SettingsLogStore(OperationLogStore):
    """Keeps the log as a JSON document under one QSettings key."""

    def __init__(self, settings=None, key=AppConfig.LOGS_KEY):
        self.settings = settings if settings is not None else AppConfig.get_settings()
        self.key = key

    def lock_key(self):
        return ("settings", self.settings.fileName(), self.key)

    def get_all(self):
        raw = self.settings.value(self.key, "", type=str)
        if not raw: return []
        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            error_log(f"Logs: Stored ingest log is unreadable, ignoring it: {e}")
            return []
        return entries if isinstance(entries, list) else []

    def save_all(self, entries):
        self.settings.setValue(self.key, json.dumps(list(entries)))
        self.settings.sync()

class OperationLog:
    """Upserts ingest run outcomes keyed by run id.

    The first write for an id creates the entry. Later writes for the same id
    are conflict-resolution rounds: their copied/skipped/failed records are
    appended to the existing details and the counters and status recomputed.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else SettingsLogStore()
        self._lock = lock_for(self.store)

    def record(self, entry):
        with self._lock:
            logs = self.store.get_all()
            for i, existing in enumerate(logs):
                if existing.get('id') == entry['id']:
                    logs[i] = self._merge(existing, entry)
                    self.store.save_all(logs)
                    return logs[i]
            created = self._create(entry)
            self.store.save_all([created] + logs)
            return created

    def get(self, log_id):
        for entry in self.store.get_all():
            if entry.get('id') == log_id: return entry
        return None

    def list(self):
        return self.store.get_all()

    def clear(self):
        with self._lock:
            self.store.clear()
        info_log("Logs: Ingest history cleared")

    @staticmethod
    def _create(entry):
        copied = list(entry.get('copied', [])); skipped = list(entry.get('skipped', [])); failed = list(entry.get('failed', []))
        conflicts = entry.get('conflicts', [])
        metadata = entry.get('metadata') or {}
        new = {
            'id': entry['id'],
            'timestamp': entry.get('timestamp') or datetime.now().isoformat(),
        }
        for field in METADATA_FIELDS: new[field] = metadata.get(field)
        new.update({
            'destination': entry.get('destination'),
            'source_directory': entry.get('source_directory'),
            'description': entry.get('description') or "Ingest Operation",
            'details': {'copied': copied, 'skipped': skipped, 'failed': failed},
            'files_copied': len(copied),
            'files_skipped': len(skipped),
            'files_failed': len(failed),
            'files_conflict': len(conflicts),
            'total_size': entry.get('total_size', 0),
            'status': WARNING if failed or conflicts else SUCCESS
        })
        debug_log(f"Logs: Created entry {new['id']} ({new['status']})")
        return new

    @staticmethod
    def _merge(existing, entry):
        merged = dict(existing)
        details = existing.get('details') or {}
        merged['details'] = {k: list(details.get(k, [])) + list(entry.get(k, [])) for k in ('copied', 'skipped', 'failed')}
        merged['files_copied'] = len(merged['details']['copied'])
        merged['files_skipped'] = len(merged['details']['skipped'])
        merged['files_failed'] = len(merged['details']['failed'])
        remaining = entry.get('remaining_conflicts')
        if remaining is None and entry.get('resolved_conflicts') is not None:
            remaining = max(0, existing.get('files_conflict', 0) - entry['resolved_conflicts'])
        if remaining is not None: merged['files_conflict'] = remaining
        has_pending = remaining is not None and remaining > 0
        merged['status'] = WARNING if merged['details']['failed'] or has_pending else SUCCESS
        debug_log(f"Logs: Merged round into {merged['id']} ({merged['status']})")
        return merged
