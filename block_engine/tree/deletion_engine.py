"""
级联删除引擎

删除一个积木及其整棵子树，并保持仓库中所有下标引用一致。步骤（顺序固定）：
1. 从父积木的 children 中摘除目标积木；
2. 先序收集目标积木及其全部后代；
3. 按下标降序排列；
4. 从高到低逐个物理删除（先删高下标不会让同批次中更低的待删下标失效）；
5. 对剩余积木的 attached_to / children 重新编号：
   引用值 r 减去“被删除且小于 r 的下标个数”；等于被删下标的引用直接丢弃。
"""

from __future__ import annotations

from bisect import bisect_left
from typing import List, Optional, Set

from block_engine.utils.logging.logger import log_warn
from .block_arena import BlockArena
from .subtree_traversal import collect_subtree_preorder
from .tree_config import debug


class DeletionEngine:
    """级联删除引擎"""

    def __init__(self, arena: BlockArena) -> None:
        self.arena = arena

    def delete_block(self, index: int) -> List[int]:
        """删除积木 index 及其全部后代。

        Returns:
            实际删除的下标列表（降序）
        """
        # 越界属于调用方错误：在任何修改发生之前抛出
        target = self.arena[index]
        # 先完成收集再修改结构，遍历失败（循环挂载）时仓库保持原状
        to_delete = collect_subtree_preorder(self.arena, index)

        parent_index = target.attached_to
        if parent_index is not None and self.arena.contains_index(parent_index):
            parent = self.arena[parent_index]
            parent.children = [child for child in parent.children if child != index]

        to_delete.sort(reverse=True)
        for removed_index in to_delete:
            self.arena.remove(removed_index)

        self._renumber(sorted(to_delete))
        debug("删除积木 {}，共移除 {} 个积木：{}", index, len(to_delete), to_delete)
        return to_delete

    def _renumber(self, removed_ascending: List[int]) -> None:
        removed_set: Set[int] = set(removed_ascending)

        def _shift(ref: int) -> int:
            return ref - bisect_left(removed_ascending, ref)

        for survivor_index, record in enumerate(self.arena):
            parent_ref: Optional[int] = record.attached_to
            if parent_ref is not None:
                if parent_ref in removed_set:
                    log_warn(
                        "[TREE] 积木 {} 的父引用 {} 指向已删除的积木，已置空",
                        survivor_index,
                        parent_ref,
                    )
                    record.attached_to = None
                else:
                    record.attached_to = _shift(parent_ref)

            kept_children: List[int] = []
            for child_ref in record.children:
                if child_ref in removed_set:
                    log_warn(
                        "[TREE] 积木 {} 的子引用 {} 指向已删除的积木，已丢弃",
                        survivor_index,
                        child_ref,
                    )
                    continue
                kept_children.append(_shift(child_ref))
            record.children = kept_children
