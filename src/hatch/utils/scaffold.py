import os
from .common import EnvUtils, info_log, error_log

class ProjectScaffolder:
    @staticmethod
    def create(destination, root_name, structure, open_folder=False):
        """Creates ``destination/root_name`` and every relative folder in ``structure``."""
        try:
            if not destination or not root_name: raise ValueError("Missing params")
            root_path = os.path.join(destination, root_name)
            if os.path.exists(root_path): return {'success': False, 'error': 'Folder already exists!'}
            os.makedirs(root_path)
            for rel in structure or []:
                if not isinstance(rel, str) or not rel.strip(): continue
                safe = rel.replace("..", "").lstrip("/\\")
                os.makedirs(os.path.join(root_path, safe), exist_ok=True)
            info_log(f"Scaffold: Created project tree at {root_path}")
            if open_folder: EnvUtils.open_file(root_path)
            return {'success': True, 'path': root_path}
        except (OSError, ValueError) as e:
            error_log(f"Scaffold: {e}")
            return {'success': False, 'error': str(e)}
