"""测试公共夹具

FakeExecutor 替换全局命令执行器，按 (命令, 参数前缀) 返回预设输出，
测试无需安装任何包管理器。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import depscope.core.config as cfgmod
from depscope.core.exceptions import ExecutionError
from depscope.services.container import reset_container
from depscope.utils.shell import CommandResult, get_executor, set_executor


class FakeExecutor:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], str]] = []
        self._responses: list[tuple[str, tuple[str, ...], CommandResult]] = []
        self._missing: set[str] = set()

    def add(
        self, command: str, args: tuple[str, ...] = (), *,
        stdout: str = "", stderr: str = "", returncode: int = 0,
    ) -> None:
        self._responses.append((command, args, CommandResult(returncode, stdout, stderr)))

    def missing(self, command: str) -> None:
        """模拟可执行文件不存在"""
        self._missing.add(command)

    def execute(self, command: str, args: list[str], *, cwd: str = ".") -> CommandResult:
        self.calls.append((command, list(args), cwd))
        if command in self._missing:
            raise ExecutionError(f"无法启动命令 '{command}'")
        best: CommandResult | None = None
        best_len = -1
        for cmd, prefix, result in self._responses:
            if cmd == command and tuple(args[:len(prefix)]) == prefix and len(prefix) > best_len:
                best, best_len = result, len(prefix)
        return best if best is not None else CommandResult(0, "", "")


@pytest.fixture()
def fake_executor():
    previous = get_executor()
    fake = FakeExecutor()
    set_executor(fake)
    yield fake
    set_executor(previous)


@pytest.fixture()
def write_manifest(tmp_path: Path):
    """在 tmp_path（或其子目录）写入 package.json，返回项目目录"""

    def _write(data: dict[str, Any], subdir: str = "") -> Path:
        project = tmp_path / subdir if subdir else tmp_path
        project.mkdir(parents=True, exist_ok=True)
        (project / "package.json").write_text(
            json.dumps(data, indent=2) + "\n", encoding="utf-8",
        )
        return project

    return _write


@pytest.fixture()
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """独立配置 + 全新服务容器，离线模式避免访问真实注册表"""
    cfg = cfgmod.Config(workspace_root=str(tmp_path), offline_mode=True)
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield cfg
    reset_container()
