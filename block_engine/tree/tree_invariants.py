from __future__ import annotations

from typing import List

from .block_arena import BlockArena
from .tree_errors import TreeInvariantError


def collect_invariant_problems(arena: BlockArena) -> List[str]:
    """检查积木仓库的结构不变量，返回问题描述列表（空列表表示一致）。

    检查项：
    - attached_to / children 中的下标都在仓库范围内；
    - 同一 children 列表内没有重复下标；
    - j ∈ arena[i].children  ⇔  arena[j].attached_to == i；
    - 挂载关系构成森林（沿 attached_to 向上走不会回到自身）。
    """
    problems: List[str] = []
    size = len(arena)

    for index, record in enumerate(arena):
        parent_ref = record.attached_to
        if parent_ref is not None:
            if not arena.contains_index(parent_ref):
                problems.append(f"积木 {index} 的父引用 {parent_ref} 越界")
            elif index not in arena[parent_ref].children:
                problems.append(f"积木 {index} 挂在 {parent_ref} 下，但 {parent_ref} 的 children 中没有它")

        if len(set(record.children)) != len(record.children):
            problems.append(f"积木 {index} 的 children 存在重复下标: {record.children}")

        for child_ref in record.children:
            if not arena.contains_index(child_ref):
                problems.append(f"积木 {index} 的子引用 {child_ref} 越界")
            elif arena[child_ref].attached_to != index:
                problems.append(
                    f"积木 {child_ref} 在 {index} 的 children 中，但其父引用为 {arena[child_ref].attached_to}"
                )

    if problems:
        return problems

    for index in range(size):
        steps = 0
        cursor = arena[index].attached_to
        while cursor is not None:
            if cursor == index or steps > size:
                problems.append(f"积木 {index} 处于循环挂载中")
                break
            cursor = arena[cursor].attached_to
            steps += 1

    return problems


def validate_tree(arena: BlockArena) -> None:
    """校验不变量，失败时抛出 TreeInvariantError。"""
    problems = collect_invariant_problems(arena)
    if problems:
        raise TreeInvariantError(problems)
