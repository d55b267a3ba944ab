"""
积木画布 - 左侧积木区（调色板）+ 右侧代码区
"""

from __future__ import annotations

from typing import List

from PyQt6 import QtCore, QtGui, QtWidgets

from block_engine.models.block_model import BlockRecord
from block_engine.tree.block_tree_engine import BlockTreeEngine
from block_engine.utils.logging.logger import log_info
from .block_item import BlockGraphicsItem

PALETTE_TITLE = "Block section"
CODE_TITLE = "Code section"
TITLE_Y = 10.0
PALETTE_TITLE_X = 10.0


class BlockCanvas(QtWidgets.QGraphicsView):
    """积木画布

    场景坐标与引擎坐标一一对应（不缩放、不平移）。结构变化（生成/删除/吸附）后整体重建图形项，
    拖拽过程中只同步位置。生成与删除被推迟到当前鼠标事件处理完之后再执行，
    避免在图形项自己的事件回调里销毁该图形项。
    """

    # 信号：积木树结构发生变化（生成、删除、吸附）
    blocks_changed = QtCore.pyqtSignal()

    def __init__(self, engine: BlockTreeEngine, parent=None):
        super().__init__(parent)
        self.engine = engine

        self.scene = QtWidgets.QGraphicsScene(self)
        self.setScene(self.scene)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignLeft | QtCore.Qt.AlignmentFlag.AlignTop)
        self.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
        self.setViewportUpdateMode(QtWidgets.QGraphicsView.ViewportUpdateMode.FullViewportUpdate)

        self.block_items: List[BlockGraphicsItem] = []
        self.rebuild_items()

    # -------- 场景构建 --------
    def _draw_sections(self) -> None:
        heading_font = QtGui.QFont(self.font())
        heading_font.setPointSizeF(heading_font.pointSizeF() * 1.4)
        heading_font.setBold(True)

        palette_title = self.scene.addText(PALETTE_TITLE, heading_font)
        palette_title.setPos(PALETTE_TITLE_X, TITLE_Y)
        code_title = self.scene.addText(CODE_TITLE, heading_font)
        code_title.setPos(self.engine.config.canvas_origin_x, TITLE_Y)

        boundary_x = self.engine.config.palette_boundary_x
        divider_pen = QtGui.QPen(self.palette().color(QtGui.QPalette.ColorRole.Mid), 1)
        self.scene.addLine(boundary_x, 0.0, boundary_x, self._scene_height(), divider_pen)

    def _scene_height(self) -> float:
        lowest = max((record.pos[1] for record in self.engine.records()), default=0.0)
        return max(float(self.viewport().height()), lowest + self.engine.config.block_height * 2)

    def rebuild_items(self) -> None:
        self.scene.clear()
        self.block_items = []
        self._draw_sections()
        for index, record in enumerate(self.engine.records()):
            item = BlockGraphicsItem(index, record, self)
            self.scene.addItem(item)
            self.block_items.append(item)
        log_info("[CANVAS] 重建图形项，共 {} 个积木", len(self.block_items))

    def sync_positions(self) -> None:
        for item in self.block_items:
            item.sync_from_record()

    # -------- 交互转发 --------
    def handle_drag_delta(self, index: int, dx: float, dy: float) -> bool:
        moved = self.engine.on_drag_delta(index, dx, dy)
        if moved:
            self.sync_positions()
        return moved

    def handle_drag_released(self, index: int) -> None:
        parent_index = self.engine.on_drag_released(index)
        self.sync_positions()
        if parent_index is not None:
            self.blocks_changed.emit()

    def handle_input_text_changed(self, index: int, input_name: str, text: str) -> None:
        self.engine.on_input_text_changed(index, input_name, text)

    def request_spawn(self, index: int) -> None:
        QtCore.QTimer.singleShot(0, lambda: self.apply_spawn(index))

    def request_delete(self, index: int) -> None:
        # 记住记录本身而不是下标：执行前若有其他删除，下标可能已被重编号
        record = self.engine.arena[index]
        QtCore.QTimer.singleShot(0, lambda: self.apply_delete_record(record))

    def apply_spawn(self, index: int) -> None:
        if self.engine.on_palette_clicked(index) is None:
            return
        self.rebuild_items()
        self.blocks_changed.emit()

    def apply_delete_record(self, record: BlockRecord) -> None:
        index = self.engine.arena.index_of(record)
        if index is None:
            log_info("[CANVAS] 待删除的积木已随父积木一起删除，忽略")
            return
        self.apply_delete(index)

    def apply_delete(self, index: int) -> None:
        if not self.engine.on_secondary_clicked(index):
            return
        self.rebuild_items()
        self.blocks_changed.emit()
