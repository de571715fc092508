"""
[V1.0] 提交流程中的异常类型
"""
from typing import List, Optional, Sequence


class SubmitError(Exception):
    """所有提交流程错误的基类"""


class ConfigIOError(SubmitError):
    """配置文件读取、写入或解析失败"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ExternalCommandFailed(SubmitError):
    """外部命令以非零状态退出 (或无法启动)"""

    def __init__(
        self, command: Sequence[str], returncode: Optional[int], stderr: str
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"failed to execute: {' '.join(self.command)}"
        if returncode is not None:
            message += f" (exit status {returncode})"
        if stderr.strip():
            message += f"\n{stderr.rstrip()}"
        super().__init__(message)


class MalformedCountOutput(SubmitError):
    """git rev-list --count 的输出不是数字"""

    def __init__(self, output: str):
        super().__init__(f"{output!r} is not a number")
        self.output = output


class PatchGenerationError(SubmitError):
    """git format-patch 生成的补丁数量与提交数量不一致"""


class FirstPatchNotFound(SubmitError):
    """找不到第一个补丁文件 (0001-*.patch)"""

    def __init__(self, patch_files: List[str]):
        listing = "\n".join(f"  {f}" for f in patch_files) or "  (empty)"
        super().__init__(
            "failed to find first patch file (0001-*.patch). "
            f"available patch files:\n{listing}"
        )
        self.patch_files = list(patch_files)


class NoCommitsToSubmit(SubmitError):
    """
    不是真正的错误：基线之后没有新的提交。
    编排器将其转换为成功的 no-op 退出。
    """

    def __init__(self, root_commit: str):
        super().__init__(f"no commits between {root_commit} and HEAD")
        self.root_commit = root_commit
