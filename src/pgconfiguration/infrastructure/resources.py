"""
内置资源读取（随包发布的 pgconfiguration.json / postgresql.conf.header）
"""

from __future__ import annotations

from importlib import resources

from pgconfiguration.shared.constants import RESOURCES_PACKAGE


def read_resource_text(name: str, *, package: str = RESOURCES_PACKAGE) -> str:
    """
    Read a bundled text resource.

    Raises:
        OSError: resource missing or unreadable (FileNotFoundError included).
    """
    return resources.files(package).joinpath(name).read_text(encoding="utf-8")
