import sys
import signal
from PyQt6.QtCore import QCoreApplication, QTimer

from hatch.config import AppConfig, AppLogger, info_log
from hatch.session import IngestSession
from hatch.utils import get_dir_stats
from hatch.workers import OVERWRITE, SKIP

USAGE = "Usage: hatch_ingest.py [--overwrite | --skip] [--project NAME] [--debug] DESTINATION SOURCE [SOURCE ...]"

def parse_args(argv):
    opts = {'action': None, 'project_name': None, 'debug': False}; positional = []
    args = list(argv)
    while args:
        a = args.pop(0)
        if a == "--overwrite": opts['action'] = OVERWRITE
        elif a == "--skip": opts['action'] = SKIP
        elif a == "--debug": opts['debug'] = True
        elif a == "--project":
            if not args: raise ValueError("--project needs a value")
            opts['project_name'] = args.pop(0)
        elif a.startswith("--"): raise ValueError(f"Unknown option {a}")
        else: positional.append(a)
    if len(positional) < 2: raise ValueError("A destination and at least one source are required")
    opts['destination'] = positional[0]; opts['sources'] = positional[1:]
    return opts

class HeadlessIngest:
    """Runs scan -> ingest -> optional resolution on the Qt event loop and prints progress."""

    def __init__(self, app, opts, session=None):
        self.app = app; self.opts = opts
        self.session = session or IngestSession()
        self.metadata = {'project_name': opts.get('project_name')}
        self.session.progress.connect(self.on_progress)
        self.session.error.connect(self.on_error)
        self.session.scan_finished.connect(self.on_scanned)
        self.session.ingest_finished.connect(self.on_ingested)
        self.session.resolve_finished.connect(self.on_resolved)

    def start(self):
        self.session.scan_paths(self.opts['sources'])

    def on_progress(self, percent, message):
        print(f"[{percent:3d}%] {message}")

    def on_error(self, message):
        print(f"ERROR: {message}"); self.app.exit(1)

    def on_scanned(self, files):
        if not files:
            print("Nothing to ingest."); self.app.exit(1); return
        print(f"Found {len(files)} files.")
        self.session.process_ingest(files, self.opts['destination'], self.metadata)

    def on_ingested(self, result):
        conflicts = result['conflicts']
        if conflicts and self.opts['action']:
            print(f"{len(conflicts)} files already exist, applying '{self.opts['action']}'.")
            self.session.resolve_conflicts(self.opts['action'])
            return
        self.finish()

    def on_resolved(self, _):
        self.finish()

    def finish(self):
        res = self.session.current_result
        print(f"Copied: {len(res['copied'])}  Skipped: {len(res['skipped'])}  Failed: {len(res['failed'])}  Conflicts: {len(res['conflicts'])}")
        for f in res['failed']: print(f"  FAILED {f['display_name']}: {f['error']}")
        for c in res['conflicts']: print(f"  EXISTS {c['display_name']}")
        stats = get_dir_stats(self.opts['destination'])
        print(f"Destination now holds {stats['files']} files ({stats['size'] / (1024**3):.2f} GB)")
        info_log(f"Headless ingest finished, log id {res.get('log_id')}")
        self.app.exit(2 if res['failed'] else 0)

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try: opts = parse_args(argv)
    except ValueError as e:
        print(f"{e}\n{USAGE}"); return 2
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName(AppConfig.APP_NAME); app.setOrganizationName(AppConfig.ORG_NAME)
    if opts["debug"]: AppConfig.set_debug_mode(True)
    else: AppConfig.load_debug_mode()
    AppLogger.init_log()
    runner = HeadlessIngest(app, opts)
    QTimer.singleShot(0, runner.start)
    return app.exec()

if __name__ == "__main__":
    sys.exit(main())
