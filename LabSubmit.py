"""
实验补丁提交工具 (V1.0)
- cli.py: 负责命令行界面和配置组装
- context.py: 负责运行时配置模型
- orchestrator.py: 负责核心业务逻辑
- LabSubmit.py: 仅作为主入口启动器
"""

import logging
import sys

# 1. 初始化日志 (必须在所有模块导入之前完成)
import utils

utils.setup_logging()

logger = logging.getLogger(__name__)


def main():
    try:
        # 延迟导入 cli 模块，确保日志已配置
        import cli

        sys.exit(cli.run_cli())

    except KeyboardInterrupt:
        logger.error("❌ 已中断")
        sys.exit(130)
    except Exception as e:
        # 捕获所有未处理的全局异常
        logger.error(f"❌ 发生未处理的全局异常: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
