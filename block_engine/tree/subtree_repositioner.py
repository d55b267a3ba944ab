from __future__ import annotations

from typing import List, Set, Tuple

from .block_arena import BlockArena
from .tree_config import debug
from .tree_errors import CyclicAttachmentError


class SubtreeRepositioner:
    """子树级联定位器

    父积木位置变化后，重新计算其全部后代的位置：
    - 第一个子积木放在父积木的子挂载点（父位置 + 子偏移，Y 方向再下移一个积木高度）；
    - 之后的兄弟积木依次再下移一个积木高度（兄弟纵向堆叠，而不是横向排列）；
    - 每个子积木再以自身为父继续向下级联（先序、深度优先）。
    """

    def __init__(self, arena: BlockArena, block_size: Tuple[float, float]) -> None:
        self.arena = arena
        self.block_size = block_size

    def move_children(self, parent_index: int) -> int:
        """级联更新 parent_index 全部后代的位置，返回被移动的积木数量。"""
        self.arena.check_index(parent_index)
        block_height = self.block_size[1]
        visited: Set[int] = {parent_index}
        stack: List[int] = [parent_index]
        moved_count = 0

        while stack:
            current_index = stack.pop()
            current = self.arena[current_index]
            anchor_x, anchor_y = current.child_anchor(block_height)

            for slot, child_index in enumerate(current.children):
                if child_index in visited:
                    raise CyclicAttachmentError(child_index)
                visited.add(child_index)
                self.arena[child_index].pos = (anchor_x, anchor_y + slot * block_height)
                moved_count += 1

            stack.extend(reversed(current.children))

        if moved_count:
            debug("积木 {} 的 {} 个后代已跟随移动", parent_index, moved_count)
        return moved_count
