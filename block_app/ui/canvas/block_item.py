from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from block_engine.models.block_model import BlockRecord
from .colour_utils import resolve_block_colour

if TYPE_CHECKING:
    from .block_canvas import BlockCanvas

LABEL_OFFSET = QtCore.QPointF(10.0, 8.0)
INPUT_FIRST_ROW_Y = 26.0
INPUT_ROW_HEIGHT = 22.0
INPUT_WIDTH = 100.0
INPUT_HEIGHT = 15.0
CORNER_RADIUS = 6.0


class BlockGraphicsItem(QtWidgets.QGraphicsItem):
    """单个积木的图形项。

    积木位置的唯一真源是引擎中的 BlockRecord：本图形项不开启 ItemIsMovable，
    而是把鼠标增量转发给画布，由引擎更新位置后再同步回来。
    """

    def __init__(self, index: int, record: BlockRecord, canvas: "BlockCanvas", parent=None):
        super().__init__(parent)
        self.index = index
        self.record = record
        self.canvas = canvas
        self._last_scene_pos: Optional[QtCore.QPointF] = None
        self._dragged = False
        self._input_edits: Dict[str, QtWidgets.QLineEdit] = {}

        self.setAcceptedMouseButtons(
            QtCore.Qt.MouseButton.LeftButton | QtCore.Qt.MouseButton.RightButton
        )
        self.setCacheMode(QtWidgets.QGraphicsItem.CacheMode.NoCache)
        self.setPos(record.pos[0], record.pos[1])
        self._build_input_edits()

    def _build_input_edits(self) -> None:
        y_offset = INPUT_FIRST_ROW_Y
        for slot in self.record.input_slots:
            line_edit = QtWidgets.QLineEdit()
            line_edit.setPlaceholderText(slot.name)
            line_edit.setText(self.record.input_values.get(slot.name, ""))
            line_edit.setFixedSize(int(INPUT_WIDTH), int(INPUT_HEIGHT))
            line_edit.textEdited.connect(
                lambda text, name=slot.name: self.canvas.handle_input_text_changed(self.index, name, text)
            )
            proxy = QtWidgets.QGraphicsProxyWidget(self)
            proxy.setWidget(line_edit)
            proxy.setPos(LABEL_OFFSET.x(), y_offset)
            self._input_edits[slot.name] = line_edit
            y_offset += INPUT_ROW_HEIGHT

    def input_edit(self, input_name: str) -> Optional[QtWidgets.QLineEdit]:
        return self._input_edits.get(input_name)

    def sync_from_record(self) -> None:
        self.setPos(self.record.pos[0], self.record.pos[1])

    def boundingRect(self) -> QtCore.QRectF:  # type: ignore[override]
        width, height = self.canvas.engine.config.block_size
        return QtCore.QRectF(0.0, 0.0, width, height)

    def paint(self, painter: QtGui.QPainter, option, widget=None) -> None:  # type: ignore[override]
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
        painter.setPen(QtCore.Qt.PenStyle.NoPen)
        painter.setBrush(QtGui.QBrush(resolve_block_colour(self.record.colour)))
        painter.drawRoundedRect(self.boundingRect(), CORNER_RADIUS, CORNER_RADIUS)

        painter.setPen(self.canvas.palette().color(QtGui.QPalette.ColorRole.Text))
        metrics = QtGui.QFontMetricsF(painter.font())
        painter.drawText(LABEL_OFFSET + QtCore.QPointF(0.0, metrics.ascent()), self.record.label)

    def mousePressEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:  # type: ignore[override]
        if event.button() == QtCore.Qt.MouseButton.RightButton:
            self.canvas.request_delete(self.index)
            event.accept()
            return
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            self.canvas.engine.update_pointer_state(True)
            self._last_scene_pos = event.scenePos()
            self._dragged = False
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:  # type: ignore[override]
        if self._last_scene_pos is None:
            super().mouseMoveEvent(event)
            return
        delta = event.scenePos() - self._last_scene_pos
        self._last_scene_pos = event.scenePos()
        if self.canvas.handle_drag_delta(self.index, delta.x(), delta.y()):
            self._dragged = True
        event.accept()

    def mouseReleaseEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        released = self.canvas.engine.update_pointer_state(False)
        self._last_scene_pos = None
        if released:
            if self._dragged:
                self.canvas.handle_drag_released(self.index)
            else:
                self.canvas.request_spawn(self.index)
        self._dragged = False
        event.accept()
