"""统一配置管理模块

支持环境变量覆盖, 运行时修改, 最后回落到 schema 默认值。

使用示例：
    from navdeck.config import config

    # 获取配置
    home = config.get('tabs.home_path')

    # 设置配置
    config.set('routes.unknown_label', '未知页面')

    # 环境变量覆盖: NAVDECK_NOTICES_CACHE_MAX_LEN=50
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_SCHEMA = {
    "tabs": {
        "home_path": {"type": "string", "default": "/", "description": "首页标签的路由, 不可被关闭最后一个标签的操作移除"},
    },
    "routes": {
        "unknown_label": {"type": "string", "default": "unknown page", "description": "未登记路由的显示名称"},
    },
    "notices": {
        "cannot_close_last_tab": {"type": "string", "default": "cannot close the last tab", "description": "关闭最后一个标签时的提示"},
        "nothing_to_close": {"type": "string", "default": "nothing to close", "description": "没有其他标签可关闭时的提示"},
        "cache_max_len": {"type": "int", "default": 20, "description": "提示缓存最大长度"},
        "cache_max_age_seconds": {"type": "int", "default": 5, "description": "提示缓存保留秒数"},
    },
    "log": {
        "level": {"type": "string", "default": "INFO", "description": "日志级别"},
    },
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _coerce(value: Any, typ: str) -> Any:
    """按 schema 类型转换环境变量中的字符串"""
    if not isinstance(value, str):
        return value
    if typ == "int":
        return int(value)
    if typ == "bool":
        return value.strip().lower() in _TRUE_VALUES
    return value


class ConfigManager:
    """配置管理器

    优先级：环境变量 > 运行时设置 > schema 默认值
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._values: Dict[str, Any] = {}
        self._env_prefix = "NAVDECK_"

    def _get_env_key(self, path: str) -> str:
        """将配置路径转换为环境变量名"""
        return self._env_prefix + path.upper().replace('.', '_')

    def _schema_entry(self, path: str) -> Dict[str, Any]:
        category, _, key = path.partition('.')
        return DEFAULT_CONFIG_SCHEMA.get(category, {}).get(key, {})

    def get(self, path: str, default: Any = None) -> Any:
        """获取配置值

        Args:
            path: 配置路径，如 'notices.cache_max_len'
            default: schema 中也没有时的默认值
        """
        entry = self._schema_entry(path)
        env_value = os.getenv(self._get_env_key(path))
        if env_value is not None:
            try:
                return _coerce(env_value, entry.get("type", "string"))
            except ValueError:
                logger.warning(f"忽略无效的环境变量 {self._get_env_key(path)}={env_value!r}")

        if path in self._values:
            return self._values[path]

        if "default" in entry:
            return entry["default"]
        return default

    def set(self, path: str, value: Any) -> None:
        self._values[path] = value

    def update(self, path: str, values: Dict[str, Any]) -> None:
        """批量更新配置

        Args:
            path: 配置路径前缀，如 'notices'
            values: 配置字典
        """
        for key, value in values.items():
            self.set(f"{path}.{key}", value)

    def delete(self, path: str) -> None:
        self._values.pop(path, None)

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        """按分类返回所有生效的配置"""
        result: Dict[str, Dict[str, Any]] = {}
        for category, schema in DEFAULT_CONFIG_SCHEMA.items():
            result[category] = {
                key: self.get(f"{category}.{key}") for key in schema
            }
        for path in self._values:
            category, _, key = path.partition('.')
            result.setdefault(category, {})[key] = self.get(path)
        return result

    def get_notice_config(self) -> Dict[str, Any]:
        """获取提示相关配置"""
        return {
            "cannot_close_last_tab": self.get("notices.cannot_close_last_tab"),
            "nothing_to_close": self.get("notices.nothing_to_close"),
            "cache_max_len": int(self.get("notices.cache_max_len")),
            "cache_max_age_seconds": int(self.get("notices.cache_max_age_seconds")),
        }


config = ConfigManager()


def get_config() -> ConfigManager:
    """获取配置管理器实例"""
    return config


__all__ = [
    "config",
    "get_config",
    "ConfigManager",
    "DEFAULT_CONFIG_SCHEMA",
]
