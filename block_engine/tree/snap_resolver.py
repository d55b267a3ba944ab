"""
吸附判定器

拖拽释放时决定被拖拽的积木是否挂到某个积木下方：
- 按仓库下标从小到大扫描候选父积木，首个命中即采用（不比较距离远近）；
- 命中条件：积木左上角与候选父积木的子挂载点在 X、Y 两个方向上的距离都小于容差；
- 命中后积木位置精确对齐到挂载点，并建立双向父子引用。
"""

from __future__ import annotations

from typing import Callable, Optional, Set, Tuple

from .block_arena import BlockArena
from .subtree_traversal import collect_subtree_preorder
from .tree_config import debug

CandidateFilter = Callable[[int], bool]


class SnapResolver:
    """吸附判定器"""

    def __init__(
        self,
        arena: BlockArena,
        block_size: Tuple[float, float],
        snap_tolerance: float,
    ) -> None:
        self.arena = arena
        self.block_size = block_size
        self.snap_tolerance = snap_tolerance

    def find_snap_target(
        self,
        index: int,
        candidate_filter: Optional[CandidateFilter] = None,
    ) -> Optional[Tuple[int, Tuple[float, float]]]:
        """查找首个命中的候选父积木。

        Args:
            index: 刚释放的积木下标
            candidate_filter: 可选过滤器，返回 False 的候选下标会被跳过

        Returns:
            (父积木下标, 吸附目标点)；没有命中时返回 None
        """
        block = self.arena[index]
        my_x, my_y = block.pos
        # 自身子树中的积木不能作为父积木，否则会形成循环挂载
        own_subtree: Set[int] = set(collect_subtree_preorder(self.arena, index))

        for candidate_index in self.arena.indices():
            if candidate_index in own_subtree:
                continue
            if candidate_filter is not None and not candidate_filter(candidate_index):
                continue

            target_x, target_y = self.arena[candidate_index].child_anchor(self.block_size[1])
            if (
                abs(my_y - target_y) < self.snap_tolerance
                and abs(my_x - target_x) < self.snap_tolerance
            ):
                return candidate_index, (target_x, target_y)
        return None

    def try_snap(
        self,
        index: int,
        candidate_filter: Optional[CandidateFilter] = None,
    ) -> Optional[int]:
        """尝试把积木吸附到候选父积木下方。

        Returns:
            新父积木下标；未命中时返回 None，积木保持在释放位置
        """
        match = self.find_snap_target(index, candidate_filter)
        if match is None:
            debug("积木 {} 释放于 {}，未命中任何挂载点", index, self.arena[index].pos)
            return None

        parent_index, target = match
        block = self.arena[index]
        block.pos = target

        previous_parent = block.attached_to
        if previous_parent is not None and previous_parent != parent_index:
            siblings = self.arena[previous_parent].children
            self.arena[previous_parent].children = [child for child in siblings if child != index]

        block.attached_to = parent_index
        parent_children = self.arena[parent_index].children
        if index not in parent_children:
            parent_children.append(index)

        debug("积木 {} 吸附到积木 {} 下方，位置 {}", index, parent_index, target)
        return parent_index
