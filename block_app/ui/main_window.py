from __future__ import annotations

from PyQt6 import QtWidgets

from block_engine.tree.block_tree_engine import BlockTreeEngine
from block_engine.utils.logging.logger import log_info
from block_app.ui.canvas.block_canvas import BlockCanvas

APP_TITLE = "Blocks for Arduino"
DEFAULT_WINDOW_SIZE = (1000, 650)


class BlocksMainWindow(QtWidgets.QMainWindow):
    """主窗口：只负责装配画布，不承载积木树逻辑。"""

    def __init__(self, engine: BlockTreeEngine, parent=None):
        super().__init__(parent)
        self.setWindowTitle(APP_TITLE)
        self.resize(*DEFAULT_WINDOW_SIZE)

        self.engine = engine
        self.canvas = BlockCanvas(engine, self)
        self.setCentralWidget(self.canvas)
        log_info("[BOOT][MainWindow] 初始化完成，积木数量={}", len(engine))
