"""配置管理模块 - 处理mdpack构建任务的配置"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from mdpack.core.exceptions import ConfigError, UnsupportedResourceError
from mdpack.core.policies import parse_resource_key
from mdpack.core.services.code_range import CodeRange


@dataclass
class FilterConfig:
    """证券代码过滤配置"""

    code_ranges: list[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class MdPackConfig:
    """mdpack主配置"""

    target_folder: str = str(Path.home() / ".mdpack" / "archives")
    build_time: int = 163000
    sources: dict[str, str] = field(default_factory=dict)
    filter: FilterConfig = field(default_factory=FilterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """校验构建时间、资源键和代码区间"""

        hours, minutes, seconds = self.build_time // 10000, self.build_time // 100 % 100, self.build_time % 100
        if not (0 <= self.build_time and hours < 24 and minutes < 60 and seconds < 60):
            raise ConfigError(f"build_time must be HHMMSS, got {self.build_time}", details={"build_time": self.build_time})
        for key in self.sources:
            try:
                parse_resource_key(key)
            except UnsupportedResourceError as exc:
                raise ConfigError(exc.message, details={"resource_key": key}) from exc
        for value in self.filter.code_ranges:
            CodeRange.parse(value)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "MdPackConfig":
        """从字典创建配置"""
        try:
            filter_config = FilterConfig(**config_dict.get("filter", {}))
            logging_config = LoggingConfig(**config_dict.get("logging", {}))
            kwargs: dict[str, Any] = {
                "sources": {str(k).lower(): str(v) for k, v in config_dict.get("sources", {}).items()},
                "filter": filter_config,
                "logging": logging_config,
            }
            if "target_folder" in config_dict:
                kwargs["target_folder"] = str(config_dict["target_folder"])
            if "build_time" in config_dict:
                kwargs["build_time"] = int(config_dict["build_time"])
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return asdict(self)


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, environ: Mapping[str, str] | None = None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            environ: 环境变量来源，默认为 ``os.environ``
        """
        self.config_path = config_path or Path.home() / ".mdpack" / "config.toml"
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()

    def _load_config(self) -> MdPackConfig:
        """加载配置，环境变量覆盖文件中的值"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(
                    f"Failed to load config from {self.config_path}: {e}",
                    details={"path": str(self.config_path)},
                ) from e

        deep_update(config_dict, load_config_from_env(self.environ))
        return MdPackConfig.from_dict(config_dict)

    def get_config(self) -> MdPackConfig:
        """获取当前配置"""
        return self.config


def deep_update(d: dict[str, Any], u: Mapping[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, Mapping):
            d[k] = deep_update(dict(d.get(k, {})), v)
        else:
            d[k] = v
    return d


def load_config_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """从环境变量加载配置"""
    env = os.environ if environ is None else environ
    config: dict[str, Any] = {}

    target_folder = env.get("MDPACK_TARGET_FOLDER")
    if target_folder:
        config["target_folder"] = target_folder
    build_time = env.get("MDPACK_BUILD_TIME")
    if build_time:
        try:
            config["build_time"] = int(build_time)
        except ValueError as exc:
            raise ConfigError(f"MDPACK_BUILD_TIME must be HHMMSS, got {build_time!r}") from exc

    # 日志配置
    logging_config: dict[str, Any] = {}
    logging_level = env.get("MDPACK_LOGGING_LEVEL")
    if logging_level is not None:
        logging_config["level"] = logging_level
    logging_file = env.get("MDPACK_LOGGING_FILE")
    if logging_file is not None:
        logging_config["file"] = logging_file

    if logging_config:
        config["logging"] = logging_config

    return config


def get_default_config() -> MdPackConfig:
    """获取默认配置"""
    return MdPackConfig()
