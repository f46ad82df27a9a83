import os
import sys
import platform
from datetime import datetime
from PyQt6.QtCore import QStandardPaths, QSettings

# Global Flags
DEBUG_MODE = False
GUI_LOG_QUEUE = []

class AppConfig:
    """Centralized configuration for paths, settings and OS standards."""
    APP_NAME = "hatch-ingest"
    ORG_NAME = "Hatch"
    SETTINGS_NAME = "HatchIngest"
    LOGS_KEY = "ingestLogs"

    @staticmethod
    def get_data_dir():
        # Linux: ~/.local/share, Windows: AppData/Local
        path = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
        if not path:
            path = os.path.join(os.path.expanduser("~"), ".hatch-ingest")
        return path

    @staticmethod
    def get_log_path():
        return os.path.join(AppConfig.get_data_dir(), "logs", "hatch.log")

    @staticmethod
    def get_settings():
        return QSettings(AppConfig.ORG_NAME, AppConfig.SETTINGS_NAME)

    @staticmethod
    def get_verify_checksum():
        return AppConfig.get_settings().value("verify_checksum", False, type=bool)

    @staticmethod
    def set_debug_mode(enabled):
        global DEBUG_MODE
        DEBUG_MODE = bool(enabled)

    @staticmethod
    def load_debug_mode():
        global DEBUG_MODE
        DEBUG_MODE = AppConfig.get_settings().value("debug_mode", False, type=bool)
        return DEBUG_MODE

class AppLogger:
    """Writes the ingest log file and feeds the bounded GUI queue."""
    _log_path = ""
    QUEUE_LIMIT = 500

    @staticmethod
    def init_log():
        """Creates the log directory and opens a session block with the run environment."""
        AppLogger._log_path = AppConfig.get_log_path()
        settings = AppConfig.get_settings()
        header = [
            f"HATCH INGEST SESSION {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"  platform   {platform.system()} {platform.release()} / Python {sys.version.split()[0]}",
            f"  data dir   {AppConfig.get_data_dir()}",
            f"  settings   {settings.fileName()} [{AppConfig.LOGS_KEY}]",
            f"  checksums  {'on' if AppConfig.get_verify_checksum() else 'off'}   debug {'on' if DEBUG_MODE else 'off'}",
        ]
        try:
            os.makedirs(os.path.dirname(AppLogger._log_path), exist_ok=True)
            with open(AppLogger._log_path, "a") as f:
                f.write("\n" + "-" * 72 + "\n" + "\n".join(header) + "\n" + "-" * 72 + "\n")
        except OSError as e:
            print(f"CRITICAL: Could not initialize log file: {e}")

    @staticmethod
    def log(msg, level="DEBUG"):
        now = datetime.now()
        line = f"{now.strftime('%H:%M:%S')} {level:<5} {msg}"

        if AppLogger._log_path:
            try:
                with open(AppLogger._log_path, "a") as f:
                    f.write(f"{now.strftime('%Y-%m-%d')} {line}\n")
            except OSError: pass

        if DEBUG_MODE or level in ("INFO", "ERROR"):
            print(line)
            GUI_LOG_QUEUE.append(line)
            del GUI_LOG_QUEUE[:-AppLogger.QUEUE_LIMIT]

def debug_log(msg): AppLogger.log(msg, "DEBUG")
def info_log(msg): AppLogger.log(msg, "INFO")
def error_log(msg): AppLogger.log(msg, "ERROR")
