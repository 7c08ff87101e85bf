import argparse
import json
import logging
import os
import signal
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.commands import scan_directory, start_kugou_api_server
from core.state import AppState
from server.api_client import KugouApiClient
from server.config import DEFAULT_PORT
from server.supervisor import install_shutdown_hook

logger = logging.getLogger("kugou_player")

def configure_logging() -> None:
    level = logging.DEBUG if os.getenv("KUGOU_DEBUG") == "1" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

def run_scan(path: str) -> int:
    result = scan_directory(path)
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    print(json.dumps(result.value, ensure_ascii=False, indent=2))
    return 0

def run_serve(port: int, wait_ready: bool) -> int:
    app = QCoreApplication(sys.argv)
    app_state = AppState()
    install_shutdown_hook(app, app_state.server)

    result = start_kugou_api_server(app_state, port)
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    logger.info(result.value)

    if wait_ready:
        client = KugouApiClient.for_port(port)
        try:
            if not client.wait_until_ready(timeout_s=15.0):
                logger.warning("Kugou API server did not answer on port %s", port)
        finally:
            client.close()

    signal.signal(signal.SIGINT, lambda *_: app.quit())
    signal.signal(signal.SIGTERM, lambda *_: app.quit())
    # Give the interpreter a chance to run signal handlers while Qt owns the loop
    ticker = QTimer()
    ticker.timeout.connect(lambda: None)
    ticker.start(200)

    return app.exec()

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Kugou player core services")
    sub = parser.add_subparsers(dest="command", required=True)

    scan_p = sub.add_parser("scan", help="Scan a music directory and print the songs as JSON")
    scan_p.add_argument("path")

    serve_p = sub.add_parser("serve", help="Run the Kugou API server until interrupted")
    serve_p.add_argument("--port", type=int, default=DEFAULT_PORT)
    serve_p.add_argument("--wait-ready", action="store_true", help="Poll the server until it answers")

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "scan":
        return run_scan(args.path)
    return run_serve(args.port, args.wait_ready)

if __name__ == "__main__":
    raise SystemExit(main())
