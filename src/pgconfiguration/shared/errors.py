"""
异常定义

所有异常的 args[0] 为面向用户的错误信息，底层原因通过 `raise ... from e` 保留。
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base class for configuration store errors (user-facing message in args[0])."""


class ConfigurationReadError(ConfigurationError):
    """Raised when postgresql.json or a bundled resource cannot be read."""


class ConfigurationFormatError(ConfigurationError):
    """Raised when a configuration document is not valid JSON or has the wrong shape."""


class ConfigurationBootstrapError(ConfigurationError):
    """Raised when the first-run default document cannot be written to disk."""


class PersistenceError(ConfigurationError):
    """Raised when writing the configuration document to disk fails."""


class ServerSettingsError(Exception):
    """Service settings (YAML) error with user-facing message in args[0]."""
