from .scan import PathScanWorker, StructureWorker
from .ingest import IngestOrchestrator, ConflictResolver, IngestWorker, ResolveWorker, OVERWRITE, SKIP, SKIP_REASON
