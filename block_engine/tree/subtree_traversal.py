"""
子树遍历工具

以显式栈实现先序遍历，替代递归：
- 与递归版本访问顺序一致（父先于子，兄弟按 children 列表顺序）；
- 每个积木最多访问一次，重复访问即视为循环挂载并抛出 CyclicAttachmentError，
  保证数据损坏时不会陷入无限循环。
"""

from __future__ import annotations

from typing import List, Set

from .block_arena import BlockArena
from .tree_errors import CyclicAttachmentError


def collect_subtree_preorder(arena: BlockArena, root_index: int) -> List[int]:
    """返回 root_index 及其全部后代的下标（先序）。"""
    arena.check_index(root_index)
    visited: Set[int] = set()
    ordered: List[int] = []
    stack: List[int] = [root_index]
    while stack:
        index = stack.pop()
        if index in visited:
            raise CyclicAttachmentError(index)
        visited.add(index)
        ordered.append(index)
        # 逆序入栈，出栈时即为 children 原顺序
        stack.extend(reversed(arena[index].children))
    return ordered