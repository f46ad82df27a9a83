import sys
import os
sys.path.insert(0, os.path.abspath("src"))
try:
    from hatch_ingest import HeadlessIngest
    from hatch.session import IngestSession
    print("SMOKE TEST: Ingest engine imported successfully.")
except Exception as e:
    print(f"SMOKE TEST FAILED: {e}")
    sys.exit(1)
