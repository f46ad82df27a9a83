import os
from collections import namedtuple
from .common import debug_log, error_log

FileDescriptor = namedtuple("FileDescriptor", ["path", "name", "size", "relative_path"])

def is_hidden(name):
    return name.startswith(".")

def _sorted_entries(path):
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)

def iter_files(path):
    """Yields a FileDescriptor for every visible regular file under ``path``.

    A file input yields itself with its bare name as the relative path. A
    directory input yields its contents relative to the directory's parent,
    so the selected folder's own name stays the first path segment.
    """
    path = os.path.abspath(path)
    name = os.path.basename(path)
    if is_hidden(name): return
    if os.path.isfile(path):
        yield FileDescriptor(path, name, os.path.getsize(path), name)
        return
    if not os.path.isdir(path):
        raise FileNotFoundError(f"No such file or directory: '{path}'")
    base = os.path.dirname(path)
    stack = [path]
    while stack:
        current = stack.pop()
        subdirs = []
        for entry in _sorted_entries(current):
            if is_hidden(entry.name): continue
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(entry.path)
            elif entry.is_file():
                yield FileDescriptor(entry.path, entry.name, entry.stat().st_size, os.path.relpath(entry.path, base))
        # Reverse so the stack pops subdirectories in name order
        stack.extend(reversed(subdirs))

def scan_paths(paths):
    """Flattens selected files and folders into FileDescriptors, in input order."""
    found = []
    for p in paths:
        try:
            found.extend(list(iter_files(p)))
        except OSError as e:
            error_log(f"Scanner: Skipping {p}: {e}")
    debug_log(f"Scanner: {len(found)} files from {len(paths)} selections")
    return found

def read_structure(root_path):
    """Folder-only tree of ``root_path`` for read-only display."""
    root_path = os.path.abspath(root_path)

    def walk(path):
        nodes = []
        try:
            entries = _sorted_entries(path)
        except OSError as e:
            debug_log(f"Structure: Cannot read {path}: {e}")
            return nodes
        for entry in entries:
            if is_hidden(entry.name) or not entry.is_dir(follow_symlinks=False): continue
            nodes.append({
                'id': os.path.relpath(entry.path, root_path),
                'name': entry.name,
                'path': entry.path,
                'children': walk(entry.path)
            })
        return nodes

    return walk(root_path)

def get_dir_stats(path):
    size = 0; files = 0
    for root, dirs, names in os.walk(path):
        for n in names:
            try: size += os.path.getsize(os.path.join(root, n)); files += 1
            except OSError as e: debug_log(f"Stats: {n}: {e}")
    return {'size': size, 'files': files}
