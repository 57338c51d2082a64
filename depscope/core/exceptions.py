"""统一异常体系

所有业务异常继承 DepScopeError。CLI 层据此输出友好提示，
Web 层据此映射 HTTP 状态码。

读路径（list / outdated / 依赖树 / 注册表查询）不抛异常，
失败时降级为空结果；只有以下几类错误会传播给调用方。
"""

from __future__ import annotations


class DepScopeError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(DepScopeError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ExecutionError(DepScopeError):
    """外部命令无法启动（可执行文件不存在、无执行权限）"""

    code = "EXECUTION_ERROR"


class ManifestError(DepScopeError):
    """package.json 读写失败或结构不符合预期"""

    code = "MANIFEST_ERROR"


class PackageNotFoundError(ManifestError):
    """清单的指定依赖段中不存在该包"""

    code = "PACKAGE_NOT_FOUND"


class UnsupportedOperationError(DepScopeError):
    """当前包管理器不支持该操作"""

    code = "UNSUPPORTED_OPERATION"


class ValidationError(DepScopeError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
