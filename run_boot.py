# run_boot.py
"""
Launcher for the planner (source checkout or frozen EXE).

Everything printed by the app ("[Tag] ..." lines) goes to logs/boot.log
next to the EXE; the previous run is kept as logs/boot.prev.log. Saved
scenarios and plan defaults are resolved relative to the same folder.
"""
import os, sys, traceback, datetime

if getattr(sys, "frozen", False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

LOG_DIR = os.path.join(BASE_DIR, "logs")
LOG_PATH = os.path.join(LOG_DIR, "boot.log")


def open_boot_log():
    """Rotate the last boot log and send stdout/stderr to a fresh one."""
    os.makedirs(LOG_DIR, exist_ok=True)
    if os.path.exists(LOG_PATH):
        os.replace(LOG_PATH, os.path.join(LOG_DIR, "boot.prev.log"))
    log_f = open(LOG_PATH, "w", encoding="utf-8", buffering=1, errors="replace")
    sys.stdout = log_f
    sys.stderr = log_f
    return log_f


def report_environment():
    print(f"[BOOT] starting at {datetime.datetime.now().isoformat()}")
    print(f"[BOOT] BASE_DIR={BASE_DIR} python={sys.version.split()[0]}")
    for mod in ("numpy", "pandas", "matplotlib"):
        try:
            m = __import__(mod)
            print(f"[BOOT] {mod} {m.__version__}")
        except ImportError as e:
            print(f"[BOOT] {mod} missing: {e}")


def prepare_data_dirs():
    """data/ (defaults, scenarios) lives next to the EXE."""
    os.chdir(BASE_DIR)
    from retireplan.core import store
    from retireplan.core.assumptions import DEFAULTS_PATH
    os.makedirs(store.DATA_DIR, exist_ok=True)
    state = "found" if os.path.exists(DEFAULTS_PATH) else "absent, using built-ins"
    print(f"[BOOT] scenarios in {os.path.abspath(store.DATA_DIR)}; defaults {state}")


def write_crash_file(exctype, value, tb) -> str:
    ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    crash_file = os.path.join(LOG_DIR, f"crash_{ts}.log")
    with open(crash_file, "w", encoding="utf-8") as f:
        traceback.print_exception(exctype, value, tb, file=f)
    print(f"[BOOT] Uncaught exception logged to {crash_file}")
    return crash_file


def show_crash_popup(crash_file: str):
    # Qt is already a dependency; reuse it for the error box
    try:
        from PyQt6.QtWidgets import QApplication, QMessageBox
        app = QApplication.instance() or QApplication(sys.argv)
        QMessageBox.critical(None, "Retirement Planner", f"An error occurred.\nSee log:\n{crash_file}")
    except Exception as e:
        print(f"[BOOT] failed to show error popup: {e}")


def main():
    log_f = open_boot_log()
    try:
        import faulthandler
        faulthandler.enable(log_f)
    except (ImportError, RuntimeError) as e:
        print(f"[BOOT] faulthandler failed: {e}")
    sys.excepthook = write_crash_file

    report_environment()
    try:
        prepare_data_dirs()
        print("[BOOT] importing app and launching...")
        from retireplan.app import launch_app
        launch_app()
    except SystemExit as e:
        print(f"[BOOT] app exited with code {e.code}")
        raise
    except Exception:
        show_crash_popup(write_crash_file(*sys.exc_info()))
        sys.exit(1)
    finally:
        log_f.flush()
        log_f.close()


if __name__ == "__main__":
    main()
