"""外部命令执行: 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，测试时注入假执行器即可，
无需真实安装 npm / yarn / pnpm / bun。

约定:
  - 进程正常退出时总是返回 CommandResult，非零退出码是普通结果而不是异常
  - 只有进程无法启动（可执行文件不存在、无权限）才抛 ExecutionError
  - 不设置超时，外部工具挂起会一直阻塞调用方
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Protocol

from depscope.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议"""

    def execute(
        self,
        command: str,
        args: list[str],
        *,
        cwd: str = ".",
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地子进程
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）

    Windows 下 npm/yarn/pnpm 是 .cmd 脚本，需要经过 shell 才能找到。
    """

    def execute(
        self,
        command: str,
        args: list[str],
        *,
        cwd: str = ".",
    ) -> CommandResult:
        env = {**os.environ, "FORCE_COLOR": "0"}
        use_shell = os.name == "nt"
        argv: str | list[str] = (
            subprocess.list2cmdline([command, *args]) if use_shell
            else [command, *args]
        )
        try:
            r = subprocess.run(
                argv, capture_output=True, text=True, encoding="utf-8",
                errors="replace", cwd=cwd, env=env, shell=use_shell,  # nosec B602
                check=False,
            )
        except OSError as e:
            raise ExecutionError(f"无法启动命令 '{command}': {e}") from e
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


def run_command(command: str, args: list[str], cwd: str) -> CommandResult:
    """在 cwd 下执行 command args...，返回退出码与完整输出

    Raises:
        ExecutionError: 进程无法启动
    """
    logger.debug("执行: %s %s (cwd=%s)", command, " ".join(args), cwd)
    result = get_executor().execute(command, args, cwd=cwd)
    if not result.success:
        logger.debug(
            "命令退出码非零 (rc=%d): %s %s", result.returncode, command, args[:1],
        )
    return result
