"""
积木编辑器启动入口

使用示例（在项目根目录执行）：
  python -X utf8 -m block_app.run_app
  python -X utf8 -m block_app.run_app --definitions-dir Json_files --debug
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from block_engine.configs.settings import settings
from block_engine.tree.block_tree_engine import BlockTreeEngine
from block_engine.utils.logging.logger import log_info, log_warn


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Blocks for Arduino 积木编辑器")
    parser.add_argument(
        "--workspace",
        type=Path,
        default=Path.cwd(),
        help="工作区根目录（默认当前目录）",
    )
    parser.add_argument(
        "--definitions-dir",
        type=Path,
        default=None,
        help="积木定义 JSON 目录（默认使用设置项 BLOCK_DEFINITIONS_DIR）",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="启用详细日志与积木树不变量校验",
    )
    return parser.parse_args(argv)


def build_engine(workspace: Path, definitions_dir: Optional[Path] = None) -> BlockTreeEngine:
    """按设置初始化引擎并加载调色板积木。"""
    settings.set_config_path(workspace)
    settings.load()

    engine = BlockTreeEngine()
    directory = definitions_dir if definitions_dir is not None else settings.resolve_definitions_dir()
    loaded = engine.load_definitions_from_dir(directory)
    if not loaded:
        log_warn("[BOOT] 没有加载到任何积木定义（目录：{}）", directory)
    log_info("[BOOT] 调色板积木数量：{}", len(loaded))
    return engine


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.debug:
        settings.enable_debug_mode()

    engine = build_engine(args.workspace.resolve(), args.definitions_dir)

    from PyQt6 import QtWidgets
    from block_app.ui.main_window import BlocksMainWindow

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
    window = BlocksMainWindow(engine)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
