import os
import shutil
import hashlib
from .common import HAS_XXHASH, debug_log
if HAS_XXHASH: import xxhash

MATCH = "MATCH"
OVERWRITTEN = "OVERWRITTEN"
SIZE_MISMATCH = "Size Mismatch Verification Failed"
HASH_MISMATCH = "Checksum Verification Failed"

def calculate_hash(file_path):
    h = xxhash.xxh64() if HAS_XXHASH else hashlib.md5()
    with open(file_path, 'rb') as f:
        while chunk := f.read(4194304): h.update(chunk)
    return h.hexdigest(), "xxHash64" if HAS_XXHASH else "MD5"

class VerifiedCopier:
    """Copies one file and checks the destination against the source.

    ``copy`` never raises: every outcome is returned as a ``(bucket, record)``
    pair where bucket is ``"copied"`` or ``"failed"``. A copy that fails
    verification is left on disk for inspection.
    """

    def __init__(self, verify_checksum=False):
        self.verify_checksum = verify_checksum

    def copy(self, source_path, dest_path, display_name, tag=MATCH):
        try:
            os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)
            shutil.copy2(source_path, dest_path)
            src_size = os.path.getsize(source_path)
            dest_size = os.path.getsize(dest_path)
            if src_size != dest_size:
                debug_log(f"Copier: {display_name} size {src_size} != {dest_size}")
                return "failed", self._failure(display_name, source_path, SIZE_MISMATCH)

            record = {'display_name': display_name, 'source_path': source_path, 'dest_path': dest_path, 'size': dest_size, 'verification': tag}
            if self.verify_checksum:
                src_hash, hash_type = calculate_hash(source_path)
                dest_hash, _ = calculate_hash(dest_path)
                if src_hash != dest_hash:
                    return "failed", self._failure(display_name, source_path, HASH_MISMATCH)
                record['hash'] = src_hash; record['hash_type'] = hash_type
            return "copied", record
        except Exception as e:
            return "failed", self._failure(display_name, source_path, str(e) or type(e).__name__)

    @staticmethod
    def _failure(display_name, source_path, error):
        return {'display_name': display_name, 'source_path': source_path, 'error': error}
