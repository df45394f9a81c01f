"""
命令行入口

    pgconfiguration serve                       启动 HTTP 服务
    pgconfiguration list [--category C]         列出参数名 / 某分类下的参数名
    pgconfiguration categories                  列出分类
    pgconfiguration get NAME                    查看参数
    pgconfiguration set NAME VALUE              修改参数并持久化
    pgconfiguration export [-o FILE]            导出 postgresql.conf
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pgconfiguration.application.configuration_store import ConfigurationStore
from pgconfiguration.infrastructure.config.config_manager import ConfigManager
from pgconfiguration.infrastructure.config.server_settings import (
    ServerSettings,
    load_server_settings,
)
from pgconfiguration.infrastructure.storage.atomic_writer import AtomicFileWriter
from pgconfiguration.shared.constants import LOG_LEVELS
from pgconfiguration.shared.errors import (
    ConfigurationError,
    PersistenceError,
    ServerSettingsError,
)
from pgconfiguration.shared.logger import set_global_log_level

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PostgreSQL 配置管理服务")
    parser.add_argument("--data-dir", type=Path, help="数据目录（存放 postgresql.json）")
    parser.add_argument("--config", type=Path, help="服务配置文件（YAML）")
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        help="设置日志级别，默认取配置文件中的 server.log_level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="启动 HTTP 服务")
    serve.add_argument("--host", help="监听地址")
    serve.add_argument("--port", type=int, help="监听端口")

    list_cmd = sub.add_parser("list", help="列出参数名")
    list_cmd.add_argument("--category", help="只列出该分类下的参数")

    sub.add_parser("categories", help="列出分类")

    get_cmd = sub.add_parser("get", help="查看参数")
    get_cmd.add_argument("name")

    set_cmd = sub.add_parser("set", help="修改参数并持久化")
    set_cmd.add_argument("name")
    set_cmd.add_argument("value")

    export = sub.add_parser("export", help="导出 postgresql.conf")
    export.add_argument("-o", "--output", type=Path, help="输出文件，默认打印到标准输出")

    return parser


def _serve(store: ConfigurationStore, settings: ServerSettings, args: argparse.Namespace) -> int:
    import uvicorn

    from pgconfiguration.interfaces.http.app import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"启动 HTTP 服务: http://{host}:{port}（数据目录 {store.get_data_dir_path()}）")
    uvicorn.run(create_app(store), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def run_command(store: ConfigurationStore, args: argparse.Namespace) -> int:
    if args.command == "list":
        if args.category is None:
            names = sorted(store.get_param_names())
        else:
            names = store.get_param_names_by_category(args.category)
            if names is None:
                print(f"分类不存在：{args.category}", file=sys.stderr)
                return 1
        for name in names:
            print(name)
        return 0

    if args.command == "categories":
        for category in sorted(store.get_categories()):
            print(category)
        return 0

    if args.command == "get":
        param = store.get_param(args.name)
        if param is None:
            print(f"参数不存在：{args.name}", file=sys.stderr)
            return 1
        print(f"{param.name} = {param.value}  # {param.category}")
        return 0

    if args.command == "set":
        previous = store.set_param(args.name, args.value)
        if previous is None:
            print(f"参数不存在：{args.name}", file=sys.stderr)
            return 1
        print(f"{args.name}: {previous.value} -> {args.value}")
        return 0

    if args.command == "export":
        text = store.to_key_value_text()
        if args.output is None:
            sys.stdout.write(text)
        else:
            AtomicFileWriter().write_text(args.output, text)
            logger.info(f"已导出到 {args.output}")
        return 0

    raise ValueError(f"未知命令：{args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_server_settings(
            data_dir=args.data_dir,
            config_manager=ConfigManager(args.config) if args.config else None,
        )
    except ServerSettingsError as e:
        parser.error(str(e))

    set_global_log_level(args.log_level or settings.log_level)

    try:
        store = ConfigurationStore(settings.data_dir)
    except ConfigurationError as e:
        logger.critical(f"配置加载失败，终止启动: {str(e)}")
        return 2

    if args.command == "serve":
        return _serve(store, settings, args)

    try:
        return run_command(store, args)
    except PersistenceError as e:
        logger.error(f"持久化失败: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
