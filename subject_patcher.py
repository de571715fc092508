"""
[V1.0] 修改第一封邮件的主题，让 CI 知道提交的是哪个任务
- 不做完整的邮件头解析，只按行处理
"""
import logging
import os
from typing import List, Tuple

from config import GlobalConfig
from errors import FirstPatchNotFound, SubmitError
from models import PatchSet, TaskTag

logger = logging.getLogger(__name__)


def is_first_patch(path: str) -> bool:
    name = os.path.basename(path)
    return name.startswith(GlobalConfig.FIRST_PATCH_PREFIX) and name.endswith(
        GlobalConfig.PATCH_SUFFIX
    )


def find_first_patch(patch_files: PatchSet) -> str:
    for path in patch_files:
        if is_first_patch(path):
            return path
    raise FirstPatchNotFound(patch_files)


def tag_subject_line(line: str, tag: TaskTag) -> str:
    """
    'Subject: [PATCH 1/3] Fix bug' -> 'Subject: [PATCH 1/3] lab3: task2: Fix bug'
    不匹配前缀或没有 ']' 的行原样返回。
    """
    if not line.startswith(GlobalConfig.SUBJECT_PREFIX):
        return line
    left, sep, right = line.partition("]")
    if not sep:
        logger.warning(f"⚠️ 主题行中没有 ']'，保持不变: {line.rstrip()}")
        return line
    # 标签两侧各一个空格
    if right.startswith(" "):
        right = right[1:]
    return f"{left}] {tag.label} {right}"


def tag_patch_text(text: str, tag: TaskTag) -> Tuple[str, bool]:
    """只改写第一个主题行，其余内容 (包括换行符) 保持不变"""
    lines: List[str] = text.splitlines(keepends=True)
    for i, line in enumerate(lines):
        if not line.startswith(GlobalConfig.SUBJECT_PREFIX):
            continue
        body = line.rstrip("\r\n")
        ending = line[len(body):]
        tagged = tag_subject_line(body, tag)
        if tagged == body:
            return text, False
        lines[i] = tagged + ending
        return "".join(lines), True
    return text, False


def patch_first_mail(patch_files: PatchSet, tag: TaskTag) -> str:
    """找到第一个补丁并就地改写其主题行，返回该文件路径"""
    first_patch = find_first_patch(patch_files)

    # surrogateescape: 非 UTF-8 字节原样写回
    try:
        with open(first_patch, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            patch = f.read()
    except OSError as e:
        raise SubmitError(f"failed to read {first_patch}: {e}") from e

    new_patch, changed = tag_patch_text(patch, tag)
    if not changed:
        logger.warning(f"⚠️ 未在 {first_patch} 中找到可修改的主题行，未添加标签")
        return first_patch

    try:
        with open(first_patch, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(new_patch)
    except OSError as e:
        raise SubmitError(f"failed to write {first_patch}: {e}") from e

    logger.info(f"✅ 已为 {os.path.basename(first_patch)} 添加标签: {tag.label}")
    return first_patch
