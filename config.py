"""
[V1.0] 全局配置
- 应用名称、配置文件位置、git 可执行文件
- 用户配置 (config.json) 中各字段的默认值
"""
import os
from dotenv import load_dotenv


# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
else:
    load_dotenv()


class GlobalConfig:
    """
    (V1.0) labsubmit 的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    APP_NAME: str = "labsubmit"
    APP_ORGANIZATION: str = "luckyturtle"
    APP_QUALIFIER: str = "dev"
    CONFIG_FILE_NAME: str = "config.json"

    # 覆盖用户配置文件位置 (也可写在 .env 中)
    CONFIG_PATH_OVERRIDE: str = os.getenv("LABSUBMIT_CONFIG", "")

    # --- Git 命令 ---
    GIT_EXECUTABLE: str = os.getenv("LABSUBMIT_GIT", "git")
    FIRST_PATCH_PREFIX: str = "0001-"
    PATCH_SUFFIX: str = ".patch"
    SUBJECT_PREFIX: str = "Subject: [PATCH "

    # --- 临时目录 ---
    SCRATCH_DIR_PREFIX: str = "labsubmit-"

    # =================================================================
    # --- 用户配置默认值 ---
    # =================================================================
    DEFAULT_LAB: int = 3
    DEFAULT_TASK: int = 2
    DEFAULT_MAIL_TO: str = "lkp-maintainers@os.rwth-aachen.de"
    DEFAULT_SUPPRESS_CC: bool = True
    DEFAULT_ROOT_COMMIT: str = "v6.5.7"

    # =================================================================
    # --- 退出码 ---
    # =================================================================
    EXIT_OK: int = 0
    EXIT_FAILURE: int = 1
    # 首次运行：已写入默认配置，需要用户编辑后重试
    EXIT_CONFIG_CREATED: int = 3
