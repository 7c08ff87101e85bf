import os
import socket
import sys
import textwrap
import time
from pathlib import Path

import pytest

# Ensure Qt runs headless in CI/CLI environments without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from server.config import ServerConfig

SLEEPER = """
import time
time.sleep(120)
"""

HTTP_SERVER = """
import http.server
import json
import os


class Handler(http.server.BaseHTTPRequestHandler):
    def do_GET(self):
        body = json.dumps({"message": "running", "cwd": os.getcwd()}).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


http.server.HTTPServer(("127.0.0.1", int(os.environ["PORT"])), Handler).serve_forever()
"""

FORKING = """
import subprocess
import sys
import time

child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(120)"])
with open("grandchild.pid", "w") as f:
    f.write(str(child.pid))
time.sleep(120)
"""


ORPHANING = """
import subprocess
import sys

child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(120)"])
with open("grandchild.pid", "w") as f:
    f.write(str(child.pid))
"""


def make_server_config(resource_dir: Path, script: str) -> ServerConfig:
    server_dir = resource_dir / "kugou_api_service"
    server_dir.mkdir(parents=True, exist_ok=True)
    (server_dir / "app.py").write_text(textwrap.dedent(script), encoding="utf-8")
    return ServerConfig(
        command=[sys.executable, "app.py"],
        resource_dir=str(resource_dir),
        kill_timeout_s=10.0,
    )


@pytest.fixture()
def sleeper_config(tmp_path: Path) -> ServerConfig:
    return make_server_config(tmp_path, SLEEPER)


@pytest.fixture()
def http_server_config(tmp_path: Path) -> ServerConfig:
    return make_server_config(tmp_path, HTTP_SERVER)


@pytest.fixture()
def forking_config(tmp_path: Path) -> ServerConfig:
    return make_server_config(tmp_path, FORKING)


@pytest.fixture()
def orphaning_config(tmp_path: Path) -> ServerConfig:
    return make_server_config(tmp_path, ORPHANING)


@pytest.fixture()
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    # A killed orphan may linger as a zombie when nothing reaps it
    status = Path(f"/proc/{pid}/status")
    if status.exists():
        try:
            for line in status.read_text().splitlines():
                if line.startswith("State:"):
                    return "Z" not in line.split(":", 1)[1]
        except OSError:
            return False
    return True


def wait_for(predicate, timeout_s: float = 10.0, interval_s: float = 0.05) -> bool:
    deadline = time.time() + timeout_s
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval_s)
    return predicate()
