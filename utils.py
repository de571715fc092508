import logging
import sys
import os
from typing import Optional


ACCENT_START = "\033[1;32m"
ACCENT_END = "\033[0m"


# 将日志配置移到这里，作为一个可被调用的函数
def setup_logging(verbose: bool = False):
    """配置全局日志"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def use_color(stream=None) -> bool:
    """NO_COLOR 已设置或输出不是终端时不使用颜色"""
    if os.getenv("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def accent(text: str, color: Optional[bool] = None) -> str:
    """阶段标题：粗体绿色 (纯格式化，无全局状态)"""
    if color is None:
        color = use_color()
    if not color:
        return text
    return f"{ACCENT_START}{text}{ACCENT_END}"
