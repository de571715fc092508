# git_utils.py
import subprocess
import logging
from typing import Optional, Sequence

from config import GlobalConfig
from errors import ExternalCommandFailed

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str], capture_output: bool = False, cwd: Optional[str] = None
) -> str:
    """
    (V1.0) 统一的外部命令执行函数
    - 执行前总是打印命令行
    - capture_output=False: stdout 直接输出到终端，返回空字符串
    - capture_output=True: 缓存 stdout，执行完成后打印并返回
    - 非零退出码抛出 ExternalCommandFailed (附带 stderr)
    - cwd=None 时继承当前工作目录
    """
    args = list(args)
    logger.info(f"run: {' '.join(args)}")
    try:
        result = subprocess.run(
            args,
            stdout=subprocess.PIPE if capture_output else None,
            stderr=subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise ExternalCommandFailed(args, None, str(e)) from e

    stderr = (result.stderr or b"").decode("utf-8", errors="replace")
    if result.returncode != 0:
        raise ExternalCommandFailed(args, result.returncode, stderr)

    if not capture_output:
        return ""
    stdout = (result.stdout or b"").decode("utf-8", errors="replace")
    logger.info(stdout.rstrip("\n"))
    return stdout


def git_command(*args: str) -> list:
    """在参数前加上配置的 git 可执行文件"""
    return [GlobalConfig.GIT_EXECUTABLE, *args]


def is_git_repository(repo_path: Optional[str] = None) -> bool:
    """检查指定路径 (默认当前目录) 是否为Git仓库"""
    try:
        result = subprocess.run(
            git_command("rev-parse", "--is-inside-work-tree"),
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        return result.returncode == 0
    except OSError:
        return False
