"""
[V1.0] 配置管理器
- 负责用户配置文件 (config.json) 的定位、读取与写回
- 首次运行时写入默认配置 (load_or_bootstrap)
- 包含一个交互式向导 (run_interactive_config_wizard)
"""

import copy
import os
import sys
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from config import GlobalConfig
from errors import ConfigIOError
from models import BaselineRef, MailTarget, SubmitConfig, TaskTag

logger = logging.getLogger(__name__)

LEGACY_TASK_GROUP = "test"


@dataclass
class LoadResult:
    config: SubmitConfig
    # True: 配置文件刚刚以默认值创建，需要用户编辑后重试
    created: bool = False


def get_config_dir(
    platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """按平台惯例返回每用户配置目录"""
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    home = environ.get("HOME") or os.path.expanduser("~")
    cfg = GlobalConfig

    if platform.startswith("win"):
        base = environ.get("APPDATA") or os.path.join(home, "AppData", "Roaming")
        return os.path.join(base, cfg.APP_ORGANIZATION, cfg.APP_NAME, "config")
    if platform == "darwin":
        return os.path.join(
            home,
            "Library",
            "Application Support",
            f"{cfg.APP_QUALIFIER}.{cfg.APP_ORGANIZATION}.{cfg.APP_NAME}",
        )
    base = environ.get("XDG_CONFIG_HOME") or os.path.join(home, ".config")
    return os.path.join(base, cfg.APP_NAME)


def get_config_path(override: Optional[str] = None) -> str:
    """优先级: --config > LABSUBMIT_CONFIG (.env) > 平台默认位置"""
    if override:
        return os.path.abspath(os.path.expanduser(override))
    if GlobalConfig.CONFIG_PATH_OVERRIDE:
        return os.path.abspath(os.path.expanduser(GlobalConfig.CONFIG_PATH_OVERRIDE))
    return os.path.join(get_config_dir(), GlobalConfig.CONFIG_FILE_NAME)


def _group(data: Dict[str, Any], name: str, path: Optional[str]) -> Dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigIOError(f"[{name}] in {path} must be an object", path)
    return value


def _int_field(group: Dict[str, Any], key: str, default: int, path: Optional[str]) -> int:
    value = group.get(key, default)
    # bool 是 int 的子类，需要单独排除
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigIOError(f"{key} in {path} must be a non-negative integer, got {value!r}", path)
    return value


def _bool_field(group: Dict[str, Any], key: str, default: bool, path: Optional[str]) -> bool:
    value = group.get(key, default)
    if not isinstance(value, bool):
        raise ConfigIOError(f"{key} in {path} must be true or false, got {value!r}", path)
    return value


def _str_field(group: Dict[str, Any], key: str, default: str, path: Optional[str]) -> str:
    value = group.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigIOError(f"{key} in {path} must be a non-empty string, got {value!r}", path)
    return value


def config_from_dict(data: Dict[str, Any], path: Optional[str] = None) -> SubmitConfig:
    """缺失的字段使用默认值，未知的键保存在 extras 中"""
    if not isinstance(data, dict):
        raise ConfigIOError(f"{path} must contain a JSON object", path)
    defaults = SubmitConfig()

    extras = copy.deepcopy(data)
    # 旧版配置把实验/任务写在 [test] 下，迁移到 [task]
    if LEGACY_TASK_GROUP in extras and "task" not in extras:
        extras["task"] = extras.pop(LEGACY_TASK_GROUP)
        logger.info(f"配置项 [{LEGACY_TASK_GROUP}] 已迁移为 [task]: {path}")

    task = _group(extras, "task", path)
    mail = _group(extras, "mail", path)
    git = _group(extras, "git", path)

    return SubmitConfig(
        task=TaskTag(
            lab=_int_field(task, "lab", defaults.task.lab, path),
            task=_int_field(task, "task", defaults.task.task, path),
        ),
        mail=MailTarget(
            to=_str_field(mail, "to", defaults.mail.to, path),
            suppress_cc=_bool_field(mail, "suppress_cc", defaults.mail.suppress_cc, path),
        ),
        git=BaselineRef(
            root_commit=_str_field(git, "root_commit", defaults.git.root_commit, path),
        ),
        extras=extras,
    )


def config_to_dict(config: SubmitConfig) -> Dict[str, Any]:
    """已知字段覆盖在原始数据之上，未知的键原样保留"""
    data = copy.deepcopy(config.extras)
    data.setdefault("task", {}).update(lab=config.task.lab, task=config.task.task)
    data.setdefault("mail", {}).update(
        to=config.mail.to, suppress_cc=config.mail.suppress_cc
    )
    data.setdefault("git", {}).update(root_commit=config.git.root_commit)
    return data


def load_config(config_path: str) -> SubmitConfig:
    """读取配置文件"""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigIOError(f"failed to read {config_path}: {e}", config_path) from e
    except ValueError as e:
        # JSONDecodeError 与 UnicodeDecodeError 都是 ValueError
        raise ConfigIOError(
            f"failed to deserialize config of file {config_path}: {e}", config_path
        ) from e
    return config_from_dict(data, config_path)


def save_config(config_path: str, config: SubmitConfig):
    """写回配置文件 (必要时创建目录)"""
    config_dir = os.path.dirname(config_path)
    try:
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(config), f, indent=4)
            f.write("\n")
    except OSError as e:
        raise ConfigIOError(f"failed to write {config_path}: {e}", config_path) from e


def load_or_bootstrap(config_path: str) -> LoadResult:
    """
    (V1.0) 加载配置。
    - 文件不存在：写入默认配置，created=True
    - 文件存在：加载后立即写回，使新增的配置项也出现在文件中
    """
    logger.info(f"load config from {config_path}")
    if not os.path.exists(config_path):
        config = SubmitConfig()
        save_config(config_path, config)
        logger.warning("⚠️ 配置文件不存在，已创建默认配置。")
        logger.warning(f"   请编辑 {config_path} 后重试。")
        return LoadResult(config=config, created=True)

    config = load_config(config_path)
    save_config(config_path, config)
    return LoadResult(config=config, created=False)


def _input_with_default(prompt: str, default: str) -> str:
    """辅助函数：获取带默认值的用户输入"""
    return input(f"{prompt} [{default}]: ").strip() or default


def _input_int(prompt: str, default: int) -> int:
    while True:
        value = _input_with_default(prompt, str(default))
        if value.isascii() and value.isdigit():
            return int(value)
        print(f"  '{value}' 不是有效的非负整数，请重新输入。")


def _input_bool(prompt: str, default: bool) -> bool:
    while True:
        value = _input_with_default(prompt, "y" if default else "n").lower()
        if value in ("y", "yes"):
            return True
        if value in ("n", "no"):
            return False
        print("  请输入 y 或 n。")


def run_interactive_config_wizard(config_path: str) -> SubmitConfig:
    """
    (V1.0) 运行交互式配置向导
    """
    logger.info("--- 🚀 欢迎使用 labsubmit 配置向导 ---")
    logger.info(f"  [配置文件]: {config_path}")

    if os.path.exists(config_path):
        current = load_config(config_path)
    else:
        current = SubmitConfig()

    print("\n--- 1. 实验/任务 ---")
    print("  (提示：保留默认值或直接按 Enter 键跳过)")
    lab = _input_int("  实验编号 (lab)", current.task.lab)
    task = _input_int("  任务编号 (task)", current.task.task)

    print("\n--- 2. 邮件 ---")
    to = _input_with_default("  收件人", current.mail.to)
    suppress_cc = _input_bool("  不抄送补丁中出现的地址 (y/n)", current.mail.suppress_cc)

    print("\n--- 3. Git ---")
    root_commit = _input_with_default("  基线 (tag 或 commit)", current.git.root_commit)

    config = SubmitConfig(
        task=TaskTag(lab=lab, task=task),
        mail=MailTarget(to=to, suppress_cc=suppress_cc),
        git=BaselineRef(root_commit=root_commit),
        extras=current.extras,
    )
    save_config(config_path, config)
    logger.info(f"✅ 配置已保存至 {config_path}")

    print("\n--- ✅ 配置完成！ ---")
    print("  现在你可以使用 'labsubmit' 来提交补丁。")
    return config
