"""
[V1.0] 运行时配置的数据模型
"""
from dataclasses import dataclass, field
from typing import Optional
from config import GlobalConfig


@dataclass
class RunContext:
    """
    (V1.0) 封装一次运行所需的所有配置和状态。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    # --- 核心路径 ---
    config_path: str
    # None: 在当前工作目录执行 git
    repo_path: Optional[str] = None

    # --- 命令行覆盖 (仅本次运行有效，不写回配置文件) ---
    lab: Optional[int] = None
    task: Optional[int] = None
    mail_to: Optional[str] = None
    root_commit: Optional[str] = None

    # --- 标志 ---
    dry_run: bool = False

    # --- 全局配置 ---
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
