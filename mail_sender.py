import logging
from typing import List, Optional

from errors import SubmitError
from git_utils import git_command, run_command
from models import MailTarget, PatchSet

logger = logging.getLogger(__name__)


def build_send_command(
    patch_files: PatchSet, mail: MailTarget, dry_run: bool = False
) -> List[str]:
    cmd = git_command("send-email", "--to", mail.to, "--confirm=never")
    if mail.suppress_cc:
        cmd.append("--suppress-cc=all")
    if dry_run:
        cmd.append("--dry-run")
    cmd.extend(patch_files)
    return cmd


def send_patches(
    patch_files: PatchSet,
    mail: MailTarget,
    dry_run: bool = False,
    cwd: Optional[str] = None,
) -> None:
    """(V1.0) 使用 git send-email 发送补丁系列 (只尝试一次，不重试)"""
    if not patch_files:
        raise SubmitError("refusing to send an empty patch series")

    logger.info(f"📬 正在发送 {len(patch_files)} 个补丁至: {mail.to}")
    run_command(build_send_command(patch_files, mail, dry_run), cwd=cwd)
    logger.info(f"✅ 邮件已发送至 {mail.to}" + (" (dry-run)" if dry_run else ""))
