import os
import platform
import subprocess
from ..config import debug_log, info_log, error_log

try:
    import xxhash
    HAS_XXHASH = True
except ImportError:
    HAS_XXHASH = False

class InvalidDestination(ValueError):
    """Raised before a run touches any file when no usable destination is given."""

def require_destination(destination):
    if not isinstance(destination, (str, os.PathLike)) or not str(destination).strip():
        raise InvalidDestination("Destination path is required.")
    return os.fspath(destination)

def display_name_for(file_desc):
    return file_desc.relative_path or file_desc.name

class EnvUtils:
    @staticmethod
    def open_file(path):
        if not os.path.exists(path): return
        try:
            if platform.system() == "Windows": os.startfile(path)
            elif platform.system() == "Darwin": subprocess.Popen(["open", path])
            else: subprocess.Popen(["xdg-open", path])
        except OSError as e: error_log(f"UI: Failed to open {path}: {e}")
