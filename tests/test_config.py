import os
import sys

from server.config import ServerConfig, resolve_resource_dir, resolve_server_dir


def test_defaults() -> None:
    cfg = ServerConfig()

    assert cfg.command == ["node", "app.js"]
    assert cfg.server_dir_name == "kugou_api_service"
    assert cfg.port_env_var == "PORT"


def test_from_env_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("KUGOU_API_COMMAND", "node server.js --quiet")
    monkeypatch.setenv("KUGOU_RESOURCE_DIR", str(tmp_path))

    cfg = ServerConfig.from_env()

    assert cfg.command == ["node", "server.js", "--quiet"]
    assert cfg.resource_dir == str(tmp_path)
    assert resolve_server_dir(cfg) == os.path.join(str(tmp_path), "kugou_api_service")


def test_from_env_without_overrides(monkeypatch) -> None:
    monkeypatch.delenv("KUGOU_API_COMMAND", raising=False)
    monkeypatch.delenv("KUGOU_RESOURCE_DIR", raising=False)

    assert ServerConfig.from_env() == ServerConfig()


def test_frozen_bundle_uses_meipass(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "_MEIPASS", str(tmp_path), raising=False)

    assert resolve_resource_dir(ServerConfig()) == str(tmp_path)


def test_frozen_executable_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.delattr(sys, "_MEIPASS", raising=False)
    monkeypatch.setattr(sys, "executable", str(tmp_path / "player.exe"))

    assert resolve_resource_dir(ServerConfig()) == str(tmp_path)


def test_main_script_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.delattr(sys, "frozen", raising=False)
    monkeypatch.setattr(sys.modules["__main__"], "__file__", str(tmp_path / "main.py"), raising=False)

    assert resolve_resource_dir(ServerConfig()) == str(tmp_path)


def test_blank_command_override_keeps_default(monkeypatch) -> None:
    monkeypatch.setenv("KUGOU_API_COMMAND", "   ")

    assert ServerConfig.from_env().command == ["node", "app.js"]
