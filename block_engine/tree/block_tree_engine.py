"""积木树引擎 - 交互事件入口

引擎独占积木仓库，对外只做两件事：
- 按顺序暴露当前积木列表（供绘制层读取）；
- 接收已经由交互层解析好的事件（拖拽增量、拖拽释放、点击调色板、右键、输入框文本变化）。

引擎本身不做任何绘制、命中测试或文本编辑。

调色板与代码区：积木 X 坐标小于 `palette_boundary_x` 时视为调色板模板。
- 点击调色板模板会在代码区生成一个副本；
- 调色板模板不能被拖拽、删除，也不会作为用户拖拽释放时的吸附父积木；
- 代码区积木（连同其子树）拖不回分界线左侧，也不会吸附到分界线左侧的挂载点。

拖拽策略：已挂载的积木在收到第一个拖拽增量时先从父积木上摘下，
释放时再重新进行吸附判定。
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from block_engine.configs.settings import settings
from block_engine.definitions.block_definition_loader import (
    load_block_definition_file,
    load_block_definitions_from_dir,
)
from block_engine.models.block_model import BlockDefinition, BlockRecord
from block_engine.utils.logging.logger import log_info
from .block_arena import BlockArena
from .deletion_engine import DeletionEngine
from .snap_resolver import SnapResolver
from .subtree_traversal import collect_subtree_preorder
from .subtree_repositioner import SubtreeRepositioner
from .tree_config import BlockTreeConfig, debug
from .tree_invariants import validate_tree


class BlockTreeEngine:
    def __init__(self, config: Optional[BlockTreeConfig] = None) -> None:
        self.config = config if config is not None else BlockTreeConfig.from_settings()
        self.arena = BlockArena()
        self.snap_resolver = SnapResolver(self.arena, self.config.block_size, self.config.snap_tolerance)
        self.repositioner = SubtreeRepositioner(self.arena, self.config.block_size)
        self.deletion_engine = DeletionEngine(self.arena)
        # 上一帧主键是否按下（用于边沿触发的释放判定）
        self.was_primary_down: bool = False
        self._palette_count = 0
        # 单调递增的生成计数：删除积木后也不会复用旧坐标
        self._spawn_count = 0

    # -------- 读取 --------
    def __len__(self) -> int:
        return len(self.arena)

    def records(self) -> List[BlockRecord]:
        return self.arena.records()

    def is_palette(self, index: int) -> bool:
        return self.arena[index].pos[0] < self.config.palette_boundary_x

    # -------- 加载与生成 --------
    def load_definition(self, definition: BlockDefinition) -> int:
        """把积木定义加入调色板，返回新积木下标。"""
        pos = (
            self.config.palette_origin_x,
            self.config.stack_origin_y + self._palette_count * self.config.stack_spacing_y,
        )
        self._palette_count += 1
        index = self.arena.append(definition.to_record(pos))
        log_info("[BLOCKS] 调色板新增积木 {} -> 下标 {}", definition.id, index)
        return index

    def load_definition_file(self, path: Path) -> Optional[int]:
        """加载单个定义文件；加载失败时返回 None，引擎状态不变。"""
        definition = load_block_definition_file(path)
        if definition is None:
            return None
        return self.load_definition(definition)

    def load_definitions_from_dir(self, directory: Path) -> List[int]:
        return [self.load_definition(definition) for definition in load_block_definitions_from_dir(directory)]

    def spawn_block(self, source_index: int) -> int:
        """以 source_index 的静态字段生成一个位于代码区的新根积木，返回其下标。"""
        pos = (
            self.config.canvas_origin_x,
            self.config.stack_origin_y + self._spawn_count * self.config.stack_spacing_y,
        )
        self._spawn_count += 1
        index = self.arena.append(self.arena[source_index].spawn_copy(pos))
        debug("由积木 {} 生成新积木 {}，位置 {}", source_index, index, pos)
        self._after_edit()
        return index

    # -------- 交互事件 --------
    def update_pointer_state(self, primary_down: bool) -> bool:
        """记录本帧主键状态，仅在“按下 → 松开”的那一帧返回 True。"""
        released = self.was_primary_down and not primary_down
        self.was_primary_down = primary_down
        return released

    def on_drag_delta(self, index: int, dx: float, dy: float) -> bool:
        if self.is_palette(index):
            return False
        block = self.arena[index]
        if block.attached_to is not None:
            self.detach(index)
        dx = self._clamp_drag_dx(index, dx)
        block.pos = (block.pos[0] + dx, block.pos[1] + dy)
        self.repositioner.move_children(index)
        self._after_edit()
        return True

    def on_drag_released(self, index: int) -> Optional[int]:
        if self.is_palette(index):
            return None
        parent_index = self.snap_resolver.try_snap(
            index,
            candidate_filter=lambda candidate: self._accepts_snap_parent(index, candidate),
        )
        if parent_index is not None:
            # 吸附会微调积木位置，其子树需要跟随
            self.repositioner.move_children(index)
        self._after_edit()
        return parent_index

    def _subtree_left_reach(self, index: int) -> float:
        """子树最左侧积木相对 index 自身 X 坐标向左伸出的距离（不小于 0）。"""
        own_x = self.arena[index].pos[0]
        leftmost_x = min(self.arena[i].pos[0] for i in collect_subtree_preorder(self.arena, index))
        return own_x - leftmost_x

    def _clamp_drag_dx(self, index: int, dx: float) -> float:
        leftmost_x = self.arena[index].pos[0] - self._subtree_left_reach(index)
        min_dx = min(self.config.palette_boundary_x - leftmost_x, 0.0)
        if dx < min_dx:
            debug("积木 {} 的水平位移 {} 被限制为 {}（不能越过调色板分界线）", index, dx, min_dx)
            return min_dx
        return dx

    def _accepts_snap_parent(self, index: int, candidate_index: int) -> bool:
        if self.is_palette(candidate_index):
            return False
        anchor_x = self.arena[candidate_index].child_anchor(self.config.block_height)[0]
        return anchor_x - self._subtree_left_reach(index) >= self.config.palette_boundary_x

    def on_palette_clicked(self, index: int) -> Optional[int]:
        if not self.is_palette(index):
            return None
        return self.spawn_block(index)

    def on_secondary_clicked(self, index: int) -> List[int]:
        if self.is_palette(index):
            return []
        return self.delete_block(index)

    def on_input_text_changed(self, index: int, input_name: str, new_text: str) -> None:
        block = self.arena[index]
        if input_name not in block.input_values:
            raise KeyError(f"积木 {index}（{block.id}）没有名为 '{input_name}' 的输入")
        block.input_values[input_name] = new_text

    # -------- 结构操作 --------
    def detach(self, index: int) -> Optional[int]:
        """把积木从父积木上摘下，返回原父积木下标（本来就是根积木时返回 None）。"""
        block = self.arena[index]
        parent_index = block.attached_to
        if parent_index is None:
            return None
        parent = self.arena[parent_index]
        parent.children = [child for child in parent.children if child != index]
        block.attached_to = None
        debug("积木 {} 已从积木 {} 上摘下", index, parent_index)
        return parent_index

    def delete_block(self, index: int) -> List[int]:
        removed = self.deletion_engine.delete_block(index)
        self._after_edit()
        return removed

    def _after_edit(self) -> None:
        if settings.BLOCK_TREE_VALIDATE_AFTER_EDIT:
            validate_tree(self.arena)
