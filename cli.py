"""
[V1.0] 命令行界面 (Interface) 层
"""
import argparse
import json
import logging
import os
from typing import List, Optional

import config_manager
import git_utils
from config import GlobalConfig
from context import RunContext
from errors import ConfigIOError
from models import SubmitConfig
from orchestrator import RunStatus, SubmitOrchestrator, apply_overrides

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    (V1.0) 负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        prog=GlobalConfig.APP_NAME,
        description="将基线之后的本地提交生成补丁，标记第一封邮件的主题，并通过 git send-email 提交。",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="指定配置文件路径。\n"
        "(默认: $LABSUBMIT_CONFIG 或平台默认的用户配置目录)",
    )
    parser.add_argument(
        "--configure",
        action="store_true",
        help="运行交互式配置向导后退出。",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="显示配置文件路径及本次运行的有效配置后退出。",
    )
    parser.add_argument(
        "-r",
        "--repo-path",
        type=str,
        default=None,
        help="在指定的 Git 仓库中运行 (默认: 当前目录)。",
    )

    # --- 覆盖参数 (仅本次运行) ---
    parser.add_argument("--lab", type=int, default=None, help="(覆盖) 实验编号")
    parser.add_argument("--task", type=int, default=None, help="(覆盖) 任务编号")
    parser.add_argument("--to", type=str, default=None, help="(覆盖) 收件人地址")
    parser.add_argument(
        "--base",
        type=str,
        default=None,
        help="(覆盖) 基线 tag 或 commit，只提交其之后的提交",
    )

    # --- 标志 (Flags) ---
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="生成补丁并调用 git send-email --dry-run，不真正发送",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    return parser


def _validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace):
    for name in ("lab", "task"):
        value = getattr(args, name)
        if value is not None and value < 0:
            parser.error(f"--{name} must be a non-negative integer")


def show_config(context: RunContext) -> int:
    """打印配置文件路径和有效配置 (不会创建文件)"""
    print(f"config file: {context.config_path}")
    if os.path.exists(context.config_path):
        settings = config_manager.load_config(context.config_path)
    else:
        print("(config file does not exist yet, showing defaults)")
        settings = SubmitConfig()
    settings = apply_overrides(settings, context)
    print(json.dumps(config_manager.config_to_dict(settings), indent=4))
    return GlobalConfig.EXIT_OK


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    (V1.0) 主入口点，返回进程退出码。
    """
    parser = setup_parser()
    args = parser.parse_args(argv)
    _validate_args(parser, args)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config_path = config_manager.get_config_path(args.config)

    # --configure
    if args.configure:
        logger.info(f"⚙️ 启动交互式配置向导: {config_path}")
        try:
            config_manager.run_interactive_config_wizard(config_path)
        except ConfigIOError as e:
            logger.error(f"❌ failed to configure: {e}")
            return GlobalConfig.EXIT_FAILURE
        return GlobalConfig.EXIT_OK

    repo_path: Optional[str] = None
    if args.repo_path:
        repo_path = os.path.abspath(args.repo_path)
        if not git_utils.is_git_repository(repo_path):
            logger.error(f"❌ 指定路径不是 Git 仓库: {repo_path}")
            return GlobalConfig.EXIT_FAILURE

    run_context = RunContext(
        config_path=config_path,
        repo_path=repo_path,
        lab=args.lab,
        task=args.task,
        mail_to=args.to,
        root_commit=args.base,
        dry_run=args.dry_run,
        global_config=GlobalConfig(),
    )

    if args.show_config:
        try:
            return show_config(run_context)
        except ConfigIOError as e:
            logger.error(f"❌ failed to load config: {e}")
            return GlobalConfig.EXIT_FAILURE

    result = SubmitOrchestrator(run_context).run()

    if result.status == RunStatus.CONFIG_CREATED:
        logger.warning(f"⚠️ Please configure {config_path} and retry")
        return GlobalConfig.EXIT_CONFIG_CREATED
    if result.status == RunStatus.FAILED:
        return GlobalConfig.EXIT_FAILURE
    return GlobalConfig.EXIT_OK
