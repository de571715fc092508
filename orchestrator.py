"""
[V1.0] 业务逻辑编排器
- 加载配置 -> 临时目录 -> 生成补丁 -> 修改第一封邮件主题 -> 发送
- 任何阶段失败都直接结束，并带上阶段名称
- 临时目录在所有退出路径上都会被删除
"""
import logging
import tempfile
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from context import RunContext
from errors import NoCommitsToSubmit, SubmitError
from models import PatchSet, SubmitConfig
import config_manager
import mail_sender
import patch_builder
import subject_patcher
from utils import accent

logger = logging.getLogger(__name__)


class Stage(Enum):
    LOADING_CONFIG = "load config"
    ACQUIRING_SCRATCH = "create scratch directory"
    GENERATING_PATCHES = "create patches"
    ANNOTATING_SUBJECT = "patch first mail subject"
    DISPATCHING = "send patches per mail"
    DONE = "done"


class RunStatus(Enum):
    SUBMITTED = "submitted"
    NOTHING_TO_SUBMIT = "nothing to submit"
    CONFIG_CREATED = "config created"
    FAILED = "failed"


@dataclass
class RunResult:
    status: RunStatus
    stage: Stage
    error: Optional[SubmitError] = None
    patch_files: PatchSet = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.FAILED

    @property
    def message(self) -> str:
        if self.error is None:
            return self.status.value
        return f"failed to {self.stage.value}: {self.error}"


def apply_overrides(config: SubmitConfig, context: RunContext) -> SubmitConfig:
    """命令行参数覆盖配置文件中的值 (只影响本次运行)"""
    task = config.task
    if context.lab is not None:
        task = replace(task, lab=context.lab)
    if context.task is not None:
        task = replace(task, task=context.task)
    mail = config.mail
    if context.mail_to:
        mail = replace(mail, to=context.mail_to)
    git = config.git
    if context.root_commit:
        git = replace(git, root_commit=context.root_commit)
    return replace(config, task=task, mail=mail, git=git)


class SubmitOrchestrator:
    """
    (V1.0) 负责执行提交流程的核心业务逻辑。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config
        self.stage = Stage.LOADING_CONFIG

    def _enter(self, stage: Stage, heading: str):
        self.stage = stage
        logger.info(accent(heading))

    def _failed(self, error: SubmitError, patch_files: Optional[PatchSet] = None) -> RunResult:
        result = RunResult(RunStatus.FAILED, self.stage, error, list(patch_files or []))
        logger.error(f"❌ {result.message}")
        return result

    def run(self) -> RunResult:
        """
        (V1.0) 执行核心业务流程。
        """
        # --- 1. 加载配置 ---
        self._enter(Stage.LOADING_CONFIG, "load config:")
        try:
            loaded = config_manager.load_or_bootstrap(self.context.config_path)
        except SubmitError as e:
            return self._failed(e)
        if loaded.created:
            return RunResult(RunStatus.CONFIG_CREATED, self.stage)
        settings = apply_overrides(loaded.config, self.context)
        logger.info(
            f"   [任务]: {settings.task.label}  [收件人]: {settings.mail.to}  "
            f"[基线]: {settings.git.root_commit}"
        )

        # --- 2. 临时目录 ---
        self.stage = Stage.ACQUIRING_SCRATCH
        try:
            scratch = tempfile.TemporaryDirectory(
                prefix=self.global_config.SCRATCH_DIR_PREFIX
            )
        except OSError as e:
            return self._failed(SubmitError(f"failed to create scratch directory: {e}"))

        patch_files: PatchSet = []
        with scratch as scratch_dir:
            logger.debug(f"scratch directory: {scratch_dir}")
            try:
                # --- 3. 生成补丁 ---
                self._enter(Stage.GENERATING_PATCHES, "create patches:")
                patch_files = patch_builder.create_patches(
                    scratch_dir, settings.git, cwd=self.context.repo_path
                )

                # --- 4. 修改第一封邮件主题 ---
                self._enter(Stage.ANNOTATING_SUBJECT, "modify first patch subject:")
                subject_patcher.patch_first_mail(patch_files, settings.task)

                # --- 5. 发送 ---
                self._enter(Stage.DISPATCHING, "send mails:")
                mail_sender.send_patches(
                    patch_files,
                    settings.mail,
                    dry_run=self.context.dry_run,
                    cwd=self.context.repo_path,
                )
            except NoCommitsToSubmit:
                return RunResult(RunStatus.NOTHING_TO_SUBMIT, self.stage)
            except SubmitError as e:
                return self._failed(e, patch_files)

        self.stage = Stage.DONE
        logger.info(accent("submit successful"))
        return RunResult(RunStatus.SUBMITTED, self.stage, patch_files=patch_files)
