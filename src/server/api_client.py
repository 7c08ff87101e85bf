from __future__ import annotations

import time

import requests

from .config import DEFAULT_PORT


class KugouApiClient:
    """Readiness probe for the local Kugou API server; start() does not wait for the bind."""

    def __init__(self, base_url: str | None = None, user_agent: str = "kugou-player-core/0.1"):
        self.base_url = (base_url or f"http://127.0.0.1:{DEFAULT_PORT}").rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def for_port(cls, port: int) -> "KugouApiClient":
        return cls(base_url=f"http://127.0.0.1:{port}")

    def ping(self, timeout_s: float = 2.0) -> bool:
        # GET / answers {"message": ...} once the server listens
        try:
            r = self.session.get(f"{self.base_url}/", timeout=timeout_s)
        except requests.RequestException:
            return False
        return r.status_code == 200

    def wait_until_ready(self, timeout_s: float = 10.0, interval_s: float = 0.2) -> bool:
        deadline = time.time() + timeout_s
        while True:
            if self.ping(timeout_s=min(2.0, max(interval_s, 0.1))):
                return True
            if time.time() >= deadline:
                return False
            time.sleep(interval_s)

    def close(self) -> None:
        self.session.close()
