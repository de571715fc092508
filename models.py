from dataclasses import dataclass, field
from typing import Any, Dict, List

from config import GlobalConfig


@dataclass(frozen=True)
class TaskTag:
    """实验/任务编号，写入第一封邮件的主题"""

    lab: int = GlobalConfig.DEFAULT_LAB
    task: int = GlobalConfig.DEFAULT_TASK

    @property
    def label(self) -> str:
        return f"lab{self.lab}: task{self.task}:"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class MailTarget:
    """邮件接收配置"""

    to: str = GlobalConfig.DEFAULT_MAIL_TO
    suppress_cc: bool = GlobalConfig.DEFAULT_SUPPRESS_CC


@dataclass(frozen=True)
class BaselineRef:
    """提交范围的起点 (tag 或 commit)，不包含在提交范围内"""

    root_commit: str = GlobalConfig.DEFAULT_ROOT_COMMIT


@dataclass
class SubmitConfig:
    """
    用户配置 (config.json) 的内存模型。
    extras 保存文件中未知的键，写回时原样保留。
    """

    task: TaskTag = field(default_factory=TaskTag)
    mail: MailTarget = field(default_factory=MailTarget)
    git: BaselineRef = field(default_factory=BaselineRef)
    extras: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


# 按提交顺序 (最旧的在前) 排列的补丁文件绝对路径
PatchSet = List[str]
