"""配置常量模块 -- 可通过环境变量覆盖

评分与升级阶段的阈值是领域规则，固定在 scoring 模块中，不开放配置。
"""

import os

# get_top_priority_tasks 默认返回数量
TOP_PRIORITY_DEFAULT_COUNT: int = int(
    os.environ.get("NEVERFORGET_TOP_PRIORITY_COUNT", "3")
)
