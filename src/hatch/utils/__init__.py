from .common import EnvUtils, InvalidDestination, HAS_XXHASH, require_destination, display_name_for, debug_log, info_log, error_log
from .scanner import FileDescriptor, iter_files, scan_paths, read_structure, get_dir_stats
from .copier import VerifiedCopier, calculate_hash, MATCH, OVERWRITTEN, SIZE_MISMATCH, HASH_MISMATCH
from .logstore import OperationLog, OperationLogStore, SettingsLogStore, MemoryLogStore, SUCCESS, WARNING
from .scaffold import ProjectScaffolder
