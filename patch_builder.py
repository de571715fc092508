"""
[V1.0] 补丁生成
- 统计基线之后的提交数量
- 调用 git format-patch 将这些提交写入临时目录
"""
import logging
import os
from typing import Optional

from config import GlobalConfig
from errors import MalformedCountOutput, NoCommitsToSubmit, PatchGenerationError
from git_utils import git_command, run_command
from models import BaselineRef, PatchSet

logger = logging.getLogger(__name__)


def count_commits(baseline: BaselineRef, cwd: Optional[str] = None) -> int:
    """基线 (不含) 到 HEAD (含) 之间的提交数量"""
    output = run_command(
        git_command("rev-list", "--count", f"{baseline.root_commit}..HEAD"),
        capture_output=True,
        cwd=cwd,
    )
    text = output.strip()
    # 只允许 ASCII 数字 ("+3"、"²" 等都不接受)
    if not (text.isascii() and text.isdigit()):
        raise MalformedCountOutput(output)
    return int(text)


def list_patch_files(scratch_dir: str) -> PatchSet:
    """按文件名排序 (0001-, 0002-, ...) 返回目录中的补丁文件"""
    names = sorted(
        name
        for name in os.listdir(scratch_dir)
        if name.endswith(GlobalConfig.PATCH_SUFFIX)
    )
    return [os.path.abspath(os.path.join(scratch_dir, name)) for name in names]


def create_patches(
    scratch_dir: str, baseline: BaselineRef, cwd: Optional[str] = None
) -> PatchSet:
    """
    生成补丁文件并返回其绝对路径 (最旧的提交在前)。
    没有新提交时抛出 NoCommitsToSubmit。
    """
    count = count_commits(baseline, cwd=cwd)
    if count == 0:
        logger.info("nothing to submit")
        raise NoCommitsToSubmit(baseline.root_commit)

    logger.info(f"{count} 个提交位于 {baseline.root_commit} 之后")
    # --numbered: 只有一个提交时主题也是 [PATCH 1/1]
    run_command(
        git_command(
            "format-patch",
            "--numbered",
            "--output-directory",
            scratch_dir,
            f"-{count}",
        ),
        cwd=cwd,
    )

    patch_files = list_patch_files(scratch_dir)
    if len(patch_files) != count:
        raise PatchGenerationError(
            f"expected {count} patch files in {scratch_dir}, found {len(patch_files)}"
        )
    return patch_files
