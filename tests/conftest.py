from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# 确保项目根目录在 sys.path 中，便于在 pytest 下稳定导入 `block_engine`、`block_app` 包。
PROJECT_ROOT = Path(__file__).resolve().parents[1]
PROJECT_ROOT_STR = str(PROJECT_ROOT)
if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

# UI 冒烟测试在无显示环境下运行
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from block_engine.configs.settings import settings  # noqa: E402
from block_engine.tree.tree_config import BlockTreeConfig  # noqa: E402

settings.set_config_path(PROJECT_ROOT)


@pytest.fixture(autouse=True)
def _strict_tree_settings(monkeypatch):
    """测试期间始终打开积木树不变量校验，并屏蔽用户本地设置文件的影响。"""
    monkeypatch.setattr(settings, "BLOCK_TREE_VALIDATE_AFTER_EDIT", True)
    monkeypatch.setattr(settings, "BLOCK_TREE_VERBOSE", False)
    monkeypatch.setattr(settings, "LOG_VERBOSE", False)


@pytest.fixture
def tree_config() -> BlockTreeConfig:
    return BlockTreeConfig(block_width=140.0, block_height=90.0, snap_tolerance=12.0)
