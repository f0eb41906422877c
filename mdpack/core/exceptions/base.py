"""mdpack核心异常类."""

from typing import Any


class MdPackError(Exception):
    """mdpack基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class SourceIOError(MdPackError):
    """源文件或目录无法打开/读取."""

    def __init__(self, message: str, path: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["path"] = path
        super().__init__(message, "SOURCE_IO_ERROR", super_details)
        self.path = path


class FormatError(MdPackError):
    """记录行无法解析为数值字段."""

    def __init__(self, message: str, line: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if line is not None:
            super_details["line"] = line
        super().__init__(message, "FORMAT_ERROR", super_details)
        self.line = line


class OutputIOError(MdPackError):
    """输出归档文件无法创建或写入."""

    def __init__(self, message: str, path: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["path"] = path
        super().__init__(message, "OUTPUT_IO_ERROR", super_details)
        self.path = path


class ChecksumIOError(MdPackError):
    """收尾阶段无法读取归档文件计算校验和."""

    def __init__(self, message: str, path: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["path"] = path
        super().__init__(message, "CHECKSUM_IO_ERROR", super_details)
        self.path = path


class ConfigError(MdPackError):
    """配置文件无效."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "CONFIG_ERROR", details)


class UnsupportedResourceError(MdPackError):
    """未知的资源类型或交易所代码."""

    def __init__(self, message: str, resource_key: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["resource_key"] = resource_key
        super().__init__(message, "UNSUPPORTED_RESOURCE", super_details)
        self.resource_key = resource_key


class RegistryReleasedError(MdPackError):
    """归档句柄表已释放后仍被访问."""

    def __init__(self, message: str = "bucket registry has already been released"):
        super().__init__(message, "REGISTRY_RELEASED")
